"""Pydantic schema modeling for schemaborsh.

This module provides the parsed type constructors, links and display hints,
plus the Schema catalogue loaded from a rollup schema descriptor.
"""

from __future__ import annotations

from .schema import (
    ChainData,
    ContainerSerdeMetadata,
    KnownTypeId,
    Schema,
    SchemaDescriptor,
)
from .types import (
    ArrayType,
    BooleanType,
    ByIndex,
    ByteArrayType,
    ByteDisplay,
    ByteDisplayMode,
    ByteVecType,
    EnumType,
    EnumVariant,
    Float32Type,
    Float64Type,
    Immediate,
    IndexedPlaceholder,
    IntegerDisplay,
    IntegerType,
    IntKind,
    Link,
    MapType,
    NamedField,
    OptionType,
    Placeholder,
    Primitive,
    SkipType,
    StringType,
    StructType,
    TupleType,
    Ty,
    UnnamedField,
    VecType,
)

__all__ = [
    # Catalogue
    "Schema",
    "SchemaDescriptor",
    "KnownTypeId",
    "ChainData",
    "ContainerSerdeMetadata",
    # Type constructors
    "Ty",
    "Primitive",
    "EnumType",
    "EnumVariant",
    "StructType",
    "NamedField",
    "TupleType",
    "UnnamedField",
    "OptionType",
    "IntegerType",
    "IntKind",
    "ByteArrayType",
    "ByteVecType",
    "ArrayType",
    "VecType",
    "MapType",
    "SkipType",
    "Float32Type",
    "Float64Type",
    "StringType",
    "BooleanType",
    # Links
    "Link",
    "ByIndex",
    "Immediate",
    "Placeholder",
    "IndexedPlaceholder",
    # Display hints
    "ByteDisplay",
    "ByteDisplayMode",
    "IntegerDisplay",
]
