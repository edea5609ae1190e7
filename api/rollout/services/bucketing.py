import random
import zlib

# width of one percentage point in the 32-bit checksum space
BUCKET_SIZE = (2**32 - 1) // 100


def team_checksum(name: str, team_id: int) -> int:
    # IEEE CRC-32, identical across processes and runs
    return zlib.crc32(f"{name}{team_id}".encode("utf-8"))


def in_rollout(name: str, team_id: int, percentage: int, randomize: bool = False) -> bool:
    """Percentage test for a single team.

    The deterministic test places every team in a fixed bucket, so raising the
    percentage only ever adds teams. The randomized test ignores the team and
    draws again on every call.
    """
    if randomize:
        return random.randrange(100) < percentage
    return team_checksum(name, team_id) < BUCKET_SIZE * percentage
