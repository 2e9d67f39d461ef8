"""Type definitions for rollup schemas.

The schema descriptor encodes every type constructor in serde's externally
tagged JSON form (``{"Struct": {...}}``, ``{"ByIndex": 3}``, ``"String"``).
This module models each constructor as a frozen pydantic model and groups
them into closed discriminated unions:

- ``Ty``: every type constructor a schema can declare
- ``Primitive``: the subset that may be carried inline by an Immediate link
- ``Link``: a reference from a container to another type

Example:
    >>> from pydantic import TypeAdapter
    >>> ty = TypeAdapter(Ty).validate_python({"Integer": ["u64", "Decimal"]})
    >>> ty.kind.bits, ty.kind.signed
    (64, False)
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, model_validator


class FrozenModel(BaseModel):
    """Immutable base for every parsed schema element."""

    model_config = ConfigDict(
        frozen=True,
        # Unknown descriptor keys (display hints, newer metadata) are ignored
        extra="ignore",
        populate_by_name=True,
    )


class TaggedModel(FrozenModel):
    """Base for constructors written as ``{"<tag>": payload}`` or ``"<tag>"``."""

    tag: ClassVar[str]

    @model_validator(mode="before")
    @classmethod
    def _unwrap_tag(cls, data: Any) -> Any:
        if isinstance(data, str) and data == cls.tag:
            return cls._fields_from_payload(None)
        if isinstance(data, dict) and len(data) == 1 and cls.tag in data:
            return cls._fields_from_payload(data[cls.tag])
        return data

    @classmethod
    def _fields_from_payload(cls, payload: Any) -> Any:
        return {} if payload is None else payload

    def label(self) -> str:
        """Short human-readable description used by tooling."""
        return self.tag


def _external_tag(data: Any) -> Optional[str]:
    if isinstance(data, TaggedModel):
        return data.tag
    if isinstance(data, str):
        return data
    if isinstance(data, dict) and len(data) == 1:
        return next(iter(data))
    return None


# ---------------------------------------------------------------------------
# Display hints
# ---------------------------------------------------------------------------


class ByteDisplayMode(str, enum.Enum):
    """Textual representations accepted for byte arrays and vectors."""

    HEX = "Hex"
    DECIMAL = "Decimal"
    BECH32 = "Bech32"
    BECH32M = "Bech32m"


class ByteDisplay(FrozenModel):
    """Display mode of a byte array/vector, with the Bech32 prefix if any."""

    mode: ByteDisplayMode
    prefix: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _parse_external(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"mode": data}
        if isinstance(data, dict) and len(data) == 1:
            ((mode, payload),) = data.items()
            if mode in (ByteDisplayMode.BECH32.value, ByteDisplayMode.BECH32M.value):
                if not isinstance(payload, dict) or "prefix" not in payload:
                    raise ValueError(f"{mode} display requires a prefix")
                return {"mode": mode, "prefix": payload["prefix"]}
        return data

    @model_validator(mode="after")
    def _check_prefix(self) -> ByteDisplay:
        if self.mode in (ByteDisplayMode.BECH32, ByteDisplayMode.BECH32M) and not self.prefix:
            raise ValueError(f"{self.mode.value} display requires a non-empty prefix")
        return self


class IntegerDisplay(FrozenModel):
    """Display hint of an integer.

    Kept for completeness; it has no influence on the binary encoding.
    """

    mode: Literal["Hex", "Decimal", "FixedPoint"]
    decimals: Optional[int] = None
    field_index: Optional[int] = None
    byte_offset: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _parse_external(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"mode": data}
        if isinstance(data, dict) and set(data) == {"FixedPoint"}:
            fixed = data["FixedPoint"]
            if isinstance(fixed, dict) and "Decimals" in fixed:
                return {"mode": "FixedPoint", "decimals": fixed["Decimals"]}
            if isinstance(fixed, dict) and isinstance(fixed.get("FromSiblingField"), dict):
                sibling = fixed["FromSiblingField"]
                return {
                    "mode": "FixedPoint",
                    "field_index": sibling.get("field_index"),
                    "byte_offset": sibling.get("byte_offset"),
                }
            raise ValueError("FixedPoint display must declare Decimals or FromSiblingField")
        return data


class IntKind(str, enum.Enum):
    """Fixed-width integer kinds."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"

    @property
    def bits(self) -> int:
        return int(self.value[1:])

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")


# ---------------------------------------------------------------------------
# Primitives (may appear inline in an Immediate link)
# ---------------------------------------------------------------------------


class Float32Type(TaggedModel):
    tag: ClassVar[str] = "Float32"


class Float64Type(TaggedModel):
    tag: ClassVar[str] = "Float64"


class StringType(TaggedModel):
    tag: ClassVar[str] = "String"


class BooleanType(TaggedModel):
    tag: ClassVar[str] = "Boolean"


class IntegerType(TaggedModel):
    """Sized integer, written as ``{"Integer": [kind, display]}``."""

    tag: ClassVar[str] = "Integer"

    kind: IntKind
    display: IntegerDisplay

    @classmethod
    def _fields_from_payload(cls, payload: Any) -> Any:
        if isinstance(payload, (list, tuple)):
            return dict(zip(("kind", "display"), payload))
        return super()._fields_from_payload(payload)

    def label(self) -> str:
        return f"Integer {self.kind.value}"


class ByteArrayType(TaggedModel):
    tag: ClassVar[str] = "ByteArray"

    length: int = Field(alias="len", ge=0)
    display: ByteDisplay

    def label(self) -> str:
        return f"ByteArray[{self.length}] ({self.display.mode.value})"


class ByteVecType(TaggedModel):
    tag: ClassVar[str] = "ByteVec"

    display: ByteDisplay

    def label(self) -> str:
        return f"ByteVec ({self.display.mode.value})"


class SkipType(TaggedModel):
    """Schema position with no wire representation."""

    tag: ClassVar[str] = "Skip"

    length: int = Field(alias="len", ge=0)


Primitive = Annotated[
    Union[
        Annotated[IntegerType, Tag("Integer")],
        Annotated[ByteArrayType, Tag("ByteArray")],
        Annotated[ByteVecType, Tag("ByteVec")],
        Annotated[Float32Type, Tag("Float32")],
        Annotated[Float64Type, Tag("Float64")],
        Annotated[StringType, Tag("String")],
        Annotated[BooleanType, Tag("Boolean")],
        Annotated[SkipType, Tag("Skip")],
    ],
    Discriminator(_external_tag),
]


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


class ByIndex(TaggedModel):
    """Reference to ``schema.types[index]``."""

    tag: ClassVar[str] = "ByIndex"

    index: int = Field(ge=0)

    @classmethod
    def _fields_from_payload(cls, payload: Any) -> Any:
        return {"index": payload}


class Immediate(TaggedModel):
    """Primitive carried inline instead of by index."""

    tag: ClassVar[str] = "Immediate"

    primitive: Primitive

    @classmethod
    def _fields_from_payload(cls, payload: Any) -> Any:
        return {"primitive": payload}


class Placeholder(TaggedModel):
    """Unresolved link; never valid in a finalized schema."""

    tag: ClassVar[str] = "Placeholder"


class IndexedPlaceholder(TaggedModel):
    """Unresolved link into a not-yet-finalized type table."""

    tag: ClassVar[str] = "IndexedPlaceholder"

    index: int

    @classmethod
    def _fields_from_payload(cls, payload: Any) -> Any:
        return {"index": payload}


Link = Annotated[
    Union[
        Annotated[ByIndex, Tag("ByIndex")],
        Annotated[Immediate, Tag("Immediate")],
        Annotated[Placeholder, Tag("Placeholder")],
        Annotated[IndexedPlaceholder, Tag("IndexedPlaceholder")],
    ],
    Discriminator(_external_tag),
]


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


class EnumVariant(FrozenModel):
    """Tagged-union variant.

    Attributes:
        name: Display name of the variant
        discriminant: Byte written on the wire (need not equal the position)
        template: Optional display template
        value: Link to the payload type, or None for unit variants
    """

    name: str
    discriminant: int = Field(ge=0, le=255)
    template: Optional[str] = None
    value: Optional[Link] = None


class EnumType(TaggedModel):
    tag: ClassVar[str] = "Enum"

    type_name: str
    variants: tuple[EnumVariant, ...]
    hide_tag: bool = False

    def label(self) -> str:
        return f"Enum {self.type_name} ({len(self.variants)} variants)"


class NamedField(FrozenModel):
    display_name: str
    value: Link
    silent: bool = False
    doc: str = ""


class UnnamedField(FrozenModel):
    value: Link
    silent: bool = False
    doc: str = ""


class StructType(TaggedModel):
    tag: ClassVar[str] = "Struct"

    type_name: str
    fields: tuple[NamedField, ...]
    template: Optional[str] = None
    peekable: bool = False

    def label(self) -> str:
        return f"Struct {self.type_name} ({len(self.fields)} fields)"


class TupleType(TaggedModel):
    tag: ClassVar[str] = "Tuple"

    fields: tuple[UnnamedField, ...]
    template: Optional[str] = None
    peekable: bool = False

    def label(self) -> str:
        return f"Tuple ({len(self.fields)} fields)"


class OptionType(TaggedModel):
    tag: ClassVar[str] = "Option"

    value: Link


class ArrayType(TaggedModel):
    tag: ClassVar[str] = "Array"

    length: int = Field(alias="len", ge=0)
    value: Link

    def label(self) -> str:
        return f"Array[{self.length}]"


class VecType(TaggedModel):
    tag: ClassVar[str] = "Vec"

    value: Link


class MapType(TaggedModel):
    tag: ClassVar[str] = "Map"

    key: Link
    value: Link


Ty = Annotated[
    Union[
        Annotated[EnumType, Tag("Enum")],
        Annotated[StructType, Tag("Struct")],
        Annotated[TupleType, Tag("Tuple")],
        Annotated[OptionType, Tag("Option")],
        Annotated[IntegerType, Tag("Integer")],
        Annotated[ByteArrayType, Tag("ByteArray")],
        Annotated[ByteVecType, Tag("ByteVec")],
        Annotated[ArrayType, Tag("Array")],
        Annotated[VecType, Tag("Vec")],
        Annotated[MapType, Tag("Map")],
        Annotated[SkipType, Tag("Skip")],
        Annotated[Float32Type, Tag("Float32")],
        Annotated[Float64Type, Tag("Float64")],
        Annotated[StringType, Tag("String")],
        Annotated[BooleanType, Tag("Boolean")],
    ],
    Discriminator(_external_tag),
]

NUMERIC_TYPES = (IntegerType, Float32Type, Float64Type)
