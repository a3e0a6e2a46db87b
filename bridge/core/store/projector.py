import math
import struct
from typing import Any, Dict, Optional, Union

from bridge.core.store.values import Row, TypedValue, ValueKind


GenericValue = Optional[Union[int, float, str]]
ProjectedRow = Dict[str, GenericValue]


def _to_single_precision(value: float) -> float:
    # Round-trip through an IEEE-754 binary32 to drop the extra precision
    return struct.unpack("f", struct.pack("f", value))[0]


def _finite_or_none(value: float) -> Optional[float]:
    # JSON has no NaN / Infinity
    return value if math.isfinite(value) else None


def project_value(value: TypedValue) -> GenericValue:
    """Convert one cell into its generic (JSON-compatible) value. Never raises."""
    kind = value.kind

    if kind in (ValueKind.INTEGER, ValueKind.UNSIGNED_INTEGER):
        return int(value.payload)

    if kind == ValueKind.FLOAT32:
        as_float = float(value.payload)
        if not math.isfinite(as_float):
            return None
        try:
            return _finite_or_none(_to_single_precision(as_float))
        except OverflowError:
            # Too large for binary32
            return None

    if kind == ValueKind.FLOAT64:
        return _finite_or_none(float(value.payload))

    if kind == ValueKind.BYTES:
        return bytes(value.payload).decode("utf-8", errors="replace")

    # NULL and UNSUPPORTED both degrade to null
    return None


def project(row: Row) -> ProjectedRow:
    """
    Project one row into an ordered mapping of column name -> generic value.

    Columns are visited in store order. A repeated column name overwrites the
    earlier value (last write wins) while keeping the position of its first
    occurrence.

    Example:
        [(id, Integer(7)), (label, Bytes(b"abc")), (note, Null), (score, Float64(1.5))]
        -> {"id": 7, "label": "abc", "note": None, "score": 1.5}
    """
    projected: ProjectedRow = {}
    for column, value in row:
        projected[column.name] = project_value(value)
    return projected
