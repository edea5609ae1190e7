from pydantic import BaseModel, Field, conint
from typing import List, Optional

from rollout.models import Feature

TeamID = conint(ge=-(2**63), le=2**63 - 1)


class FeatureOut(BaseModel):
    name: str
    percentage: int
    team_ids: List[int] = Field(default_factory=list, description="explicit team overrides, ascending")
    active: bool

    @classmethod
    def from_feature(cls, feature: Feature) -> "FeatureOut":
        return cls(
            name=feature.name,
            percentage=feature.percentage,
            team_ids=sorted(feature.team_ids),
            active=feature.is_active(),
        )


class PercentageUpdate(BaseModel):
    percentage: conint(ge=0, le=100)


class EvaluationResult(BaseModel):
    key: str
    team_id: Optional[int] = None
    enabled: bool


class MultiEvaluationRequest(BaseModel):
    team_id: Optional[TeamID] = None
    features: List[str] = Field(..., description="feature names, evaluated in order")


class MultiEvaluationResult(BaseModel):
    team_id: Optional[int] = None
    results: List[EvaluationResult]
