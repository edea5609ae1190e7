import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from rollout.dependencies import get_manager
from rollout.manager import Manager
from rollout.metrics import EVALS, MUTATIONS
from rollout.models import Feature
from rollout.schemas import (
    EvaluationResult,
    FeatureOut,
    MultiEvaluationRequest,
    MultiEvaluationResult,
    PercentageUpdate,
    TeamID,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["flags"])


def _mutated(manager: Manager, feature: Feature, action: str) -> FeatureOut:
    MUTATIONS.labels(action).inc()
    logger.info("%s %s", action, manager.key_name(feature))
    return FeatureOut.from_feature(feature)


@router.get("/flags", response_model=List[FeatureOut])
def list_flags(manager: Manager = Depends(get_manager)):
    return [FeatureOut.from_feature(f) for f in manager.list_features()]


@router.get("/flags/{name}", response_model=FeatureOut)
def get_flag(name: str, manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    manager.get(feature)
    return FeatureOut.from_feature(feature)


@router.put("/flags/{name}/activate", response_model=FeatureOut)
def activate_flag(name: str, manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    manager.activate(feature)
    return _mutated(manager, feature, "activate")


@router.put("/flags/{name}/deactivate", response_model=FeatureOut)
def deactivate_flag(name: str, manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    manager.deactivate(feature)
    return _mutated(manager, feature, "deactivate")


@router.put("/flags/{name}/percentage", response_model=FeatureOut)
def rollout_flag(name: str, payload: PercentageUpdate, manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    manager.activate_percentage(feature, payload.percentage)
    return _mutated(manager, feature, "rollout")


@router.put("/flags/{name}/teams/{team_id}", response_model=FeatureOut)
def activate_team(name: str, team_id: int, manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    manager.activate_team(team_id, feature)
    return _mutated(manager, feature, "activate-team")


@router.delete("/flags/{name}/teams/{team_id}", response_model=FeatureOut)
def deactivate_team(name: str, team_id: int, manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    manager.deactivate_team(team_id, feature)
    return _mutated(manager, feature, "deactivate-team")


@router.delete("/flags/{name}", status_code=204)
def delete_flag(name: str, manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    if manager.delete(feature) == 0:
        raise HTTPException(status_code=404, detail="flag not found")
    MUTATIONS.labels("delete").inc()
    logger.info("delete %s", manager.key_name(feature))
    return


@router.get("/evaluate/{name}", response_model=EvaluationResult)
def evaluate(name: str, team_id: Optional[TeamID] = Query(None), manager: Manager = Depends(get_manager)):
    feature = Feature(name)
    if team_id is None:
        enabled = manager.is_active(feature)
    else:
        enabled = manager.is_team_active(team_id, feature)
    EVALS.labels(name, str(enabled)).inc()
    return {"key": name, "team_id": team_id, "enabled": enabled}


@router.post("/evaluate", response_model=MultiEvaluationResult)
def evaluate_multi(payload: MultiEvaluationRequest, manager: Manager = Depends(get_manager)):
    features = [Feature(name) for name in payload.features]
    if payload.team_id is None:
        results = manager.is_active_multi(*features)
    else:
        results = manager.is_team_active_multi(payload.team_id, *features)
    for name, enabled in zip(payload.features, results):
        EVALS.labels(name, str(enabled)).inc()
    return {
        "team_id": payload.team_id,
        "results": [
            {"key": name, "team_id": payload.team_id, "enabled": enabled}
            for name, enabled in zip(payload.features, results)
        ],
    }
