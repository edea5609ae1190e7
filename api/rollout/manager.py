"""Persistence of feature toggles.

Nothing is cached: every call reads the record from the store, and every
mutation writes it back. The read-modify-write cycle is not atomic with respect
to the store; two processes changing the same feature at once can lose one of
the updates (last writer wins). Callers that need strict ordering must
serialize mutations themselves.
"""

import logging
from contextlib import ExitStack
from typing import Callable, List

from rollout import codec
from rollout.errors import DecodeError, InvalidFeatureName, InvalidPercentage, InvalidTeamID
from rollout.models import Feature
from rollout.store import Absent, Malformed, Payload

logger = logging.getLogger(__name__)


def _check_team_id(team_id: int) -> None:
    if isinstance(team_id, bool) or not isinstance(team_id, int) or not codec.INT64_MIN <= team_id <= codec.INT64_MAX:
        raise InvalidTeamID(team_id)


class Manager:
    """Reads and writes features in the store.

    ``randomize_percentage`` selects how every team evaluation made through this
    manager runs the percentage test: a stable per-team checksum (the default)
    or a fresh random draw per call.
    """

    def __init__(self, store, key_prefix: str = "dealsff", randomize_percentage: bool = False):
        self.store = store
        self.key_prefix = key_prefix
        self.randomize_percentage = randomize_percentage

    def key_name(self, feature: Feature) -> str:
        if not feature.name or ":" in feature.name:
            raise InvalidFeatureName(feature.name)
        return f"{self.key_prefix}:{feature.name}"

    def _load(self, feature: Feature) -> None:
        # caller holds feature.lock
        data = self.store.get(self.key_name(feature))
        if data is None:
            # not in the store, so inactive
            feature.deactivate()
            return
        codec.decode(data, feature)

    def get(self, feature: Feature) -> None:
        """Align ``feature`` with the value currently in the store."""
        with feature.lock:
            self._load(feature)

    def _update(self, feature: Feature, mutate: Callable[[Feature], None]) -> None:
        key = self.key_name(feature)
        with feature.lock:
            self._load(feature)
            mutate(feature)
            data = codec.encode(feature)
            percentage, teams = feature.percentage, len(feature.team_ids)
        self.store.set(key, data)
        logger.debug("wrote %s percentage=%d teams=%d", key, percentage, teams)

    def activate(self, feature: Feature) -> None:
        self._update(feature, Feature.activate)

    def deactivate(self, feature: Feature) -> None:
        self._update(feature, Feature.deactivate)

    def activate_percentage(self, feature: Feature, percentage: int) -> None:
        if isinstance(percentage, bool) or not isinstance(percentage, int) or not 0 <= percentage <= 100:
            raise InvalidPercentage(percentage)
        self._update(feature, lambda f: f.activate_percentage(percentage))

    def activate_team(self, team_id: int, feature: Feature) -> None:
        _check_team_id(team_id)
        self._update(feature, lambda f: f.activate_team(team_id))

    def deactivate_team(self, team_id: int, feature: Feature) -> None:
        _check_team_id(team_id)
        self._update(feature, lambda f: f.deactivate_team(team_id))

    def is_active(self, feature: Feature) -> bool:
        with feature.lock:
            self._load(feature)
            return feature.is_active()

    def is_team_active(self, team_id: int, feature: Feature) -> bool:
        _check_team_id(team_id)
        with feature.lock:
            self._load(feature)
            return feature.is_team_active(team_id, self.randomize_percentage)

    def _evaluate_multi(self, features, evaluate: Callable[[Feature], bool]) -> List[bool]:
        if not features:
            return []

        entries = self.store.multi_get([self.key_name(f) for f in features])

        with ExitStack() as stack:
            # one global order (and each lock once) so concurrent batches can't deadlock
            for f in sorted({id(f): f for f in features}.values(), key=id):
                stack.enter_context(f.lock)

            results = []
            for feature, entry in zip(features, entries):
                if entry is Absent:
                    feature.deactivate()
                    results.append(False)
                elif isinstance(entry, Payload):
                    codec.decode(entry.data, feature)
                    results.append(evaluate(feature))
                elif isinstance(entry, Malformed):
                    raise DecodeError(f"unexpected value for {self.key_name(feature)}: {entry.value!r}")
            return results

    def is_active_multi(self, *features: Feature) -> List[bool]:
        return self._evaluate_multi(features, Feature.is_active)

    def is_team_active_multi(self, team_id: int, *features: Feature) -> List[bool]:
        _check_team_id(team_id)
        return self._evaluate_multi(features, lambda f: f.is_team_active(team_id, self.randomize_percentage))

    def delete(self, feature: Feature) -> int:
        """Remove the feature from the store, returning the number of keys deleted."""
        return self.store.delete(self.key_name(feature))

    def list_features(self) -> List[Feature]:
        prefix = f"{self.key_prefix}:"
        # names never contain ":", so longer keys belong to a longer prefix
        keys = [k for k in self.store.scan_keys(prefix + "*") if ":" not in k[len(prefix):]]
        if not keys:
            return []

        features = []
        for key, entry in zip(keys, self.store.multi_get(keys)):
            if entry is Absent:
                # removed between scan and read
                continue
            if isinstance(entry, Malformed):
                raise DecodeError(f"unexpected value for {key}: {entry.value!r}")
            features.append(codec.decode(entry.data, Feature(name=key[len(prefix):])))
        return features
