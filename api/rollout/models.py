import threading
from dataclasses import dataclass, field
from typing import Set

from rollout.services.bucketing import in_rollout


@dataclass
class Feature:
    """A feature toggle as stored under ``<prefix>:<name>``.

    The name is never serialized; it is supplied by the caller and mapped onto
    the store key. ``lock`` guards the record while the manager hydrates and
    mutates it.
    """

    name: str
    percentage: int = 0
    team_ids: Set[int] = field(default_factory=set)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def activate(self) -> None:
        self.percentage = 100

    def deactivate(self) -> None:
        self.percentage = 0
        self.team_ids = set()

    def activate_percentage(self, percentage: int) -> None:
        self.percentage = percentage

    def activate_team(self, team_id: int) -> None:
        self.team_ids.add(team_id)

    def deactivate_team(self, team_id: int) -> None:
        self.team_ids.discard(team_id)

    def is_active(self) -> bool:
        return self.percentage == 100

    def is_team_active(self, team_id: int, randomize: bool = False) -> bool:
        if self.percentage == 100:
            return True
        if in_rollout(self.name, team_id, self.percentage, randomize):
            return True
        return team_id in self.team_ids
