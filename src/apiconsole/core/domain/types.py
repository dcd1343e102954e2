"""Width-annotated scalar aliases for operation signatures.

Python has a single `int` and a single `float`; catalog operations use these
aliases to declare the exact width/precision an argument is coerced into.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated


class TypeKind(str, Enum):
    """Destination kind of an operation parameter."""

    STRING = "str"
    BOOLEAN = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DECIMAL = "decimal"
    OBJECT = "object"
    FILE = "file"
    OTHER = "other"

    @property
    def is_integer(self) -> bool:
        return self in INTEGER_RANGES

    @property
    def is_numeric(self) -> bool:
        return self.is_integer or self in (TypeKind.FLOAT32, TypeKind.FLOAT64, TypeKind.DECIMAL)


INTEGER_RANGES: dict[TypeKind, tuple[int, int]] = {
    TypeKind.INT8: (-(2**7), 2**7 - 1),
    TypeKind.INT16: (-(2**15), 2**15 - 1),
    TypeKind.INT32: (-(2**31), 2**31 - 1),
    TypeKind.INT64: (-(2**63), 2**63 - 1),
    TypeKind.UINT8: (0, 2**8 - 1),
    TypeKind.UINT16: (0, 2**16 - 1),
    TypeKind.UINT32: (0, 2**32 - 1),
    TypeKind.UINT64: (0, 2**64 - 1),
}

Int8 = Annotated[int, TypeKind.INT8]
Int16 = Annotated[int, TypeKind.INT16]
Int32 = Annotated[int, TypeKind.INT32]
Int64 = Annotated[int, TypeKind.INT64]
UInt8 = Annotated[int, TypeKind.UINT8]
UInt16 = Annotated[int, TypeKind.UINT16]
UInt32 = Annotated[int, TypeKind.UINT32]
UInt64 = Annotated[int, TypeKind.UINT64]
Float32 = Annotated[float, TypeKind.FLOAT32]
Float64 = Annotated[float, TypeKind.FLOAT64]

# Plain annotations map to the widest kind.
SCALAR_KINDS: dict[type, TypeKind] = {
    str: TypeKind.STRING,
    bool: TypeKind.BOOLEAN,
    int: TypeKind.INT64,
    float: TypeKind.FLOAT64,
    Decimal: TypeKind.DECIMAL,
}
