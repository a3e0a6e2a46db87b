"""
Native cell values as reported by the store driver.

Every cell of a result row is classified into exactly one TypedValue variant
before projection. The classification mirrors what the MySQL text protocol
hands back: numbers stay numbers, text and binary columns are raw bytes, and
DECIMAL / temporal columns arrive as their textual form.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Sequence, Tuple
from uuid import UUID


INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MAX = 2**64 - 1

# Cursor description type codes of single precision float columns, per dialect
SINGLE_PRECISION_TYPE_CODES = {
    "mysql": {4},  # FIELD_TYPE.FLOAT
    "mariadb": {4},
    "postgresql": {700},  # float4 OID
}

# Driver-decoded values that the text protocol would have sent as bytes
_TEXTUAL_TYPES = (Decimal, datetime, date, time, timedelta, UUID)


class ValueKind(str, Enum):
    INTEGER = "integer"
    UNSIGNED_INTEGER = "unsigned_integer"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BYTES = "bytes"
    NULL = "null"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class TypedValue:
    """One cell: the active variant plus its payload (None for NULL/UNSUPPORTED)."""

    kind: ValueKind
    payload: Any = None

    @classmethod
    def integer(cls, value: int) -> "TypedValue":
        return cls(ValueKind.INTEGER, value)

    @classmethod
    def unsigned_integer(cls, value: int) -> "TypedValue":
        return cls(ValueKind.UNSIGNED_INTEGER, value)

    @classmethod
    def float32(cls, value: float) -> "TypedValue":
        return cls(ValueKind.FLOAT32, value)

    @classmethod
    def float64(cls, value: float) -> "TypedValue":
        return cls(ValueKind.FLOAT64, value)

    @classmethod
    def bytes_(cls, value: bytes) -> "TypedValue":
        return cls(ValueKind.BYTES, bytes(value))


NULL = TypedValue(ValueKind.NULL)
UNSUPPORTED = TypedValue(ValueKind.UNSUPPORTED)


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    single_precision: bool = False


# A row is the ordered (column, cell) pairs in store-reported order
Cell = Tuple[ColumnDescriptor, TypedValue]
Row = Tuple[Cell, ...]


def classify(value: Any, single_precision: bool = False) -> TypedValue:
    """
    Map a DBAPI value onto its TypedValue variant.

    Args:
        value: Python value handed back by the driver for one cell
        single_precision: True when the cursor reported a FLOAT (not DOUBLE) column

    Returns:
        The matching TypedValue. Values with no variant of their own become UNSUPPORTED.
    """
    if value is None:
        return NULL

    # bool is an int subclass; MySQL sends BOOL as TINYINT anyway
    if isinstance(value, bool):
        return TypedValue.integer(int(value))

    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return TypedValue.integer(value)
        if INT64_MAX < value <= UINT64_MAX:
            return TypedValue.unsigned_integer(value)
        return UNSUPPORTED

    if isinstance(value, float):
        if single_precision:
            return TypedValue.float32(value)
        return TypedValue.float64(value)

    if isinstance(value, (bytes, bytearray, memoryview)):
        return TypedValue.bytes_(bytes(value))

    if isinstance(value, str):
        return TypedValue.bytes_(value.encode("utf-8", errors="surrogatepass"))

    if isinstance(value, _TEXTUAL_TYPES):
        return TypedValue.bytes_(str(value).encode("utf-8"))

    return UNSUPPORTED


def build_row(columns: Sequence[ColumnDescriptor], values: Sequence[Any]) -> Row:
    """Pair every driver value with its column, keeping positions (duplicates included)."""
    if len(columns) != len(values):
        raise ValueError(
            f"Row has {len(values)} values but the cursor reported {len(columns)} columns"
        )
    return tuple(
        (column, classify(value, column.single_precision))
        for column, value in zip(columns, values)
    )


def is_single_precision(dialect_name: str, type_code: Optional[Any]) -> bool:
    return type_code in SINGLE_PRECISION_TYPE_CODES.get(dialect_name, set())
