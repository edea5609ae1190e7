"""msgpack encoding of a feature record.

A record is the array ``[percentage, [team_id, ...]]``. Encoders always write
both elements, with team ids in ascending order. Decoders also accept the
partial forms ``[]``, ``[percentage]`` and ``[[team_id, ...]]`` as well as a
nil override list; missing fields default to 0 and the empty set. Records
written as a bare percentage followed by the override list, without the
wrapping array, are read as well.
"""

from typing import Any, Optional, Set

import msgpack

from rollout.errors import DecodeError
from rollout.models import Feature

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def encode(feature: Feature) -> bytes:
    return msgpack.packb([feature.percentage, sorted(feature.team_ids)], use_bin_type=True)


def decode(data: bytes, feature: Optional[Feature] = None) -> Feature:
    """Decode ``data`` into ``feature`` (or a new unnamed Feature) and return it.

    The target is only touched once the whole record has been validated.
    """
    record = _unpack(data)
    if _is_int(record):
        # a lone percentage, written without the wrapping array
        record = [record]
    if not isinstance(record, list) or len(record) > 2:
        raise DecodeError(f"expected an array of at most two elements, got {record!r}")

    percentage = 0
    team_ids: Set[int] = set()
    rest = list(record)
    if rest and _is_int(rest[0]):
        percentage = _percentage(rest.pop(0))
    if rest:
        team_ids = _team_ids(rest.pop(0))
    if rest:
        raise DecodeError(f"unexpected element {rest[0]!r} in record")

    if feature is None:
        feature = Feature(name="")
    feature.percentage = percentage
    feature.team_ids = team_ids
    return feature


def _unpack(data: bytes) -> Any:
    """Unpack a single record. Older writers stored the percentage and the
    override list as two values back to back; those come back as ``[p, ids]``.
    """
    try:
        return msgpack.unpackb(data, raw=False)
    except msgpack.exceptions.ExtraData as e:
        first, extra = e.unpacked, e.extra
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as e:
        raise DecodeError(f"invalid msgpack record: {e}") from e

    try:
        second = msgpack.unpackb(extra, raw=False)
    except (ValueError, TypeError, msgpack.exceptions.UnpackException) as e:
        raise DecodeError(f"invalid msgpack record: {e}") from e
    if not _is_int(first) or not (second is None or isinstance(second, list)):
        raise DecodeError(f"unexpected data after record {first!r}")
    return [first, second]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _percentage(value: int) -> int:
    if not 0 <= value <= 100:
        raise DecodeError(f"percentage out of range: {value}")
    return value


def _team_ids(value: Any) -> Set[int]:
    if value is None:
        return set()
    if not isinstance(value, list):
        raise DecodeError(f"expected an array of team ids, got {value!r}")
    team_ids = set()
    for team_id in value:
        if not _is_int(team_id) or not INT64_MIN <= team_id <= INT64_MAX:
            raise DecodeError(f"invalid team id: {team_id!r}")
        team_ids.add(team_id)
    return team_ids
