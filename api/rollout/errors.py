class RolloutError(Exception):
    """Base class for every error raised by the rollout package."""


class StoreError(RolloutError):
    """The store could not be reached or answered with a protocol error."""


class DecodeError(RolloutError, ValueError):
    """Persisted bytes are not a valid feature record."""


class InvalidPercentage(RolloutError, ValueError):
    def __init__(self, percentage):
        super().__init__(f"percentage must be between 0 and 100, got {percentage}")
        self.percentage = percentage


class InvalidTeamID(RolloutError, ValueError):
    def __init__(self, team_id):
        super().__init__(f"team id must be a signed 64-bit integer, got {team_id}")
        self.team_id = team_id


class InvalidFeatureName(RolloutError, ValueError):
    def __init__(self, name):
        super().__init__(f"feature name must be non-empty and contain no ':', got {name!r}")
        self.name = name
