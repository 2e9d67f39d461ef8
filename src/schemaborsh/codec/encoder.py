"""Schema-directed Borsh encoder.

This module provides the encode() family of functions and the SchemaEncoder
visitor that walks a schema type graph together with a JSON-like input value.
Each type constructor has its own visit method; primitive writes go to a
BorshWriter and string-encoded byte values go through the byte display codec.

Encoding is canonical: fields and variants are written in schema order,
map entries in ascending key order, and nothing depends on the iteration
order of the input.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from operator import itemgetter
from typing import Any

from ..config import EncoderConfig
from ..exceptions import ErrorKind, SerializationError
from ..models.schema import Schema
from ..models.types import (
    NUMERIC_TYPES,
    ArrayType,
    BooleanType,
    ByIndex,
    ByteArrayType,
    ByteVecType,
    EnumType,
    Float32Type,
    Float64Type,
    IntegerType,
    Link,
    MapType,
    OptionType,
    SkipType,
    StringType,
    StructType,
    TupleType,
    Ty,
    VecType,
)
from . import byte_display
from .writer import U32_MAX, BorshWriter

logger = logging.getLogger(__name__)

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")
_NUMBER_TEXT = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def encode(
    schema: Schema, type_index: int, value: Any, config: EncoderConfig | None = None
) -> bytes:
    """Encode a JSON-like value against a schema type.

    Args:
        schema: Loaded schema
        type_index: Index of the root type in ``schema.types``
        value: Parsed JSON value (dicts, lists, strings, numbers, bools, None)
        config: Optional encoder limits

    Returns:
        Canonical Borsh bytes

    Raises:
        SerializationError: If the value cannot be encoded at some position;
            ``kind`` tells which check failed

    Examples:
        ```python
        from schemaborsh import Schema, encode

        schema = Schema.from_file("demo-rollup-schema.json")
        data = encode(schema, 2, {"bank": {"create_token": {...}}})
        ```
    """
    return SchemaEncoder(schema, config).encode(type_index, value)


def encode_hex(
    schema: Schema, type_index: int, value: Any, config: EncoderConfig | None = None
) -> str:
    """Like encode(), returning lowercase hex without a prefix."""
    return encode(schema, type_index, value, config).hex()


def encode_json(
    schema: Schema, type_index: int, document: str | bytes, config: EncoderConfig | None = None
) -> bytes:
    """Parse a JSON document and encode it.

    Raises:
        SerializationError: Json kind if the document is not valid JSON
    """
    return encode(schema, type_index, parse_document(document), config)


def parse_document(document: str | bytes) -> Any:
    """Parse a JSON document, rejecting NaN and Infinity constants."""
    try:
        return json.loads(document, parse_constant=_reject_constant)
    except ValueError as err:
        raise SerializationError(f"Invalid JSON: {err}", ErrorKind.JSON) from err


class SchemaEncoder:
    """Visitor encoding values against the types of one schema.

    The encoder holds no per-call state: every encode() call gets its own
    BorshWriter, so one instance may be shared freely.

    Example:
        >>> encoder = SchemaEncoder(schema)
        >>> encoder.encode(schema.role_index(KnownTypeId.RUNTIME_CALL), call)
    """

    def __init__(self, schema: Schema, config: EncoderConfig | None = None) -> None:
        self.schema = schema
        self.config = config or EncoderConfig()

    def encode(self, type_index: int, value: Any) -> bytes:
        """Encode ``value`` against ``schema.types[type_index]``.

        Raises:
            SerializationError: InvalidIndex for a bad root index, or any
                validation failure met while walking the value
        """
        ty = self.schema.type_at(type_index)
        writer = BorshWriter()
        try:
            self._visit(writer, ty, value, ByIndex(index=type_index), 0)
        except RecursionError as err:
            # Interpreter stack ran out before max_depth was reached
            raise _recursion_limit(self.config.max_depth) from err
        logger.debug("Encoded type %d into %d bytes", type_index, len(writer))
        return writer.to_bytes()

    def _visit(self, writer: BorshWriter, ty: Ty, value: Any, link: Link, depth: int) -> None:
        """Dispatch on the type constructor.

        ``link`` is the link through which ``ty`` was reached; container
        metadata is looked up through it.
        """
        if depth > self.config.max_depth:
            raise _recursion_limit(self.config.max_depth)

        if isinstance(ty, EnumType):
            self._visit_enum(writer, ty, value, link, depth)
        elif isinstance(ty, StructType):
            self._visit_struct(writer, ty, value, link, depth)
        elif isinstance(ty, TupleType):
            self._visit_tuple(writer, ty, value, depth)
        elif isinstance(ty, OptionType):
            self._visit_option(writer, ty, value, depth)
        elif isinstance(ty, IntegerType):
            self._visit_integer(writer, ty, value)
        elif isinstance(ty, ByteArrayType):
            data = self._byte_values(ty, value, "byte array")
            if len(data) != ty.length:
                raise _wrong_length(ty.length, len(data))
            writer.write_bytes(data)
        elif isinstance(ty, ByteVecType):
            data = self._byte_values(ty, value, "byte vector")
            _check_length(len(data))
            writer.write_u32(len(data))
            writer.write_bytes(data)
        elif isinstance(ty, ArrayType):
            self._visit_array(writer, ty, value, depth)
        elif isinstance(ty, VecType):
            self._visit_vec(writer, ty, value, depth)
        elif isinstance(ty, MapType):
            self._visit_map(writer, ty, value, depth)
        elif isinstance(ty, SkipType):
            return
        elif isinstance(ty, Float32Type):
            writer.write_f32(_float_value(value, "f32"))
        elif isinstance(ty, Float64Type):
            writer.write_f64(_float_value(value, "f64"))
        elif isinstance(ty, StringType):
            if not isinstance(value, str):
                raise _invalid("String", value)
            writer.write_string(value)
        elif isinstance(ty, BooleanType):
            writer.write_bool(_bool_value(value))
        else:
            raise SerializationError(f"Unknown type: {ty!r}", ErrorKind.INVALID_TYPE)

    def _visit_link(self, writer: BorshWriter, link: Link, value: Any, depth: int) -> None:
        self._visit(writer, self.schema.resolve(link), value, link, depth + 1)

    def _visit_enum(
        self, writer: BorshWriter, ty: EnumType, value: Any, link: Link, depth: int
    ) -> None:
        if isinstance(value, str):
            name, inner = value, None
        elif isinstance(value, Mapping):
            if len(value) != 1:
                raise SerializationError(
                    f"Invalid enum encoding: expected single variant, "
                    f"found object with {len(value)} JSON properties",
                    ErrorKind.MALFORMED_ENUM,
                )
            ((name, inner),) = value.items()
        else:
            raise _invalid(f"enum {ty.type_name}", value)

        positions = self.schema.variant_positions(link)
        if positions is None:
            raise _missing_metadata(ty.type_name)
        position = positions.get(name)
        if position is None or position >= len(ty.variants):
            raise SerializationError(
                f"Invalid discriminant `{name}` for {ty.type_name}",
                ErrorKind.INVALID_DISCRIMINANT,
            )

        variant = ty.variants[position]
        writer.write_u8(variant.discriminant)

        if variant.value is not None:
            if inner is None:
                raise SerializationError(
                    f"Expected type or field {ty.type_name}.{variant.name} data, "
                    f"but it was not present",
                    ErrorKind.MISSING_TYPE,
                )
            self._visit_link(writer, variant.value, inner, depth)
        elif inner is not None:
            raise _unused(inner)

    def _visit_struct(
        self, writer: BorshWriter, ty: StructType, value: Any, link: Link, depth: int
    ) -> None:
        if not isinstance(value, Mapping):
            raise _invalid(f"{ty.type_name} struct", value)

        names = self.schema.field_names(link)
        if names is None:
            raise _missing_metadata(ty.type_name)
        if len(names) < len(ty.fields):
            raise SerializationError(
                f"Type {ty.type_name} serde metadata lists {len(names)} fields "
                f"but the schema declares {len(ty.fields)}",
                ErrorKind.MISSING_METADATA,
            )

        remaining = dict(value)
        for field, name in zip(ty.fields, names):
            if name not in remaining:
                raise SerializationError(
                    f"Expected type or field {ty.type_name}.{field.display_name}, "
                    f"but it was not present",
                    ErrorKind.MISSING_TYPE,
                )
            self._visit_link(writer, field.value, remaining.pop(name), depth)

        if remaining:
            raise _unused(remaining)

    def _visit_tuple(self, writer: BorshWriter, ty: TupleType, value: Any, depth: int) -> None:
        # Single-field tuples are not wrapped in the input
        if len(ty.fields) == 1:
            self._visit_link(writer, ty.fields[0].value, value, depth)
            return

        if not _is_sequence(value):
            raise _invalid("array", value)
        if len(value) != len(ty.fields):
            raise _wrong_length(len(ty.fields), len(value))
        for field, item in zip(ty.fields, value):
            self._visit_link(writer, field.value, item, depth)

    def _visit_option(self, writer: BorshWriter, ty: OptionType, value: Any, depth: int) -> None:
        if value is None:
            writer.write_u8(0)
            return
        writer.write_u8(1)
        self._visit_link(writer, ty.value, value, depth)

    def _visit_integer(self, writer: BorshWriter, ty: IntegerType, value: Any) -> None:
        kind = ty.kind
        if isinstance(value, bool):
            raise _invalid(kind.value, value)
        if isinstance(value, str):
            text = value.strip()
            if not _NUMBER_TEXT.fullmatch(text):
                raise _invalid(kind.value, value)
            try:
                # Text with a fraction or exponent is checked as a float
                number: int | float = int(text) if _INTEGER_TEXT.fullmatch(text) else float(text)
            except ValueError:
                # Exceeds the interpreter's integer string conversion limit
                raise _invalid(kind.value, value) from None
        elif isinstance(value, (int, float)):
            number = value
        else:
            raise _invalid(kind.value, value)

        if kind.signed:
            writer.write_int(number, kind.bits)
        else:
            writer.write_uint(number, kind.bits)

    def _byte_values(self, ty: ByteArrayType | ByteVecType, value: Any, expected: str) -> bytes:
        """Collect the bytes of a byte array/vector input.

        Strings are decoded with the display declared on the position's type;
        for an Immediate link that type is the link's own inline primitive.
        """
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, str):
            return byte_display.parse(
                ty.display, value, max_length=self.config.max_bech32_length
            )
        if _is_sequence(value):
            for item in value:
                if isinstance(item, bool) or not isinstance(item, int) or not 0 <= item <= 255:
                    raise _invalid("byte", item)
            return bytes(value)
        raise _invalid(expected, value)

    def _visit_array(self, writer: BorshWriter, ty: ArrayType, value: Any, depth: int) -> None:
        if not _is_sequence(value):
            raise _invalid("array", value)
        if len(value) != ty.length:
            raise _wrong_length(ty.length, len(value))

        element = self.schema.resolve(ty.value)
        for item in value:
            self._visit(writer, element, item, ty.value, depth + 1)

    def _visit_vec(self, writer: BorshWriter, ty: VecType, value: Any, depth: int) -> None:
        if not _is_sequence(value):
            raise _invalid("vector", value)
        _check_length(len(value))

        element = self.schema.resolve(ty.value)
        writer.write_vec(value, lambda item: self._visit(writer, element, item, ty.value, depth + 1))

    def _visit_map(self, writer: BorshWriter, ty: MapType, value: Any, depth: int) -> None:
        if not isinstance(value, Mapping):
            raise _invalid("map", value)
        _check_length(len(value))

        key_ty = self.schema.resolve(ty.key)
        value_ty = self.schema.resolve(ty.value)
        numeric_keys = isinstance(key_ty, NUMERIC_TYPES)

        # Canonical order: ascending by the key's textual form
        entries = sorted(((_key_text(key), item) for key, item in value.items()), key=itemgetter(0))
        writer.write_u32(len(entries))
        for text, item in entries:
            key = _numeric_key(text) if numeric_keys else text
            self._visit(writer, key_ty, key, ty.key, depth + 1)
            self._visit(writer, value_ty, item, ty.value, depth + 1)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str)


def _float_value(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise _invalid(name, value)
    if isinstance(value, str) and not _NUMBER_TEXT.fullmatch(value.strip()):
        raise _invalid(name, value)
    try:
        number = float(value)
    except (ValueError, OverflowError):
        raise _invalid(name, value) from None
    if not math.isfinite(number):
        raise _invalid(name, value)
    return number


def _bool_value(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    raise _invalid("bool", value)


def _key_text(key: Any) -> str:
    # JSON object keys are always strings; render anything else as JSON
    return key if isinstance(key, str) else render_value(key)


def _numeric_key(text: str) -> int | float:
    stripped = text.strip()
    try:
        if _INTEGER_TEXT.fullmatch(stripped):
            return int(stripped)
        if _NUMBER_TEXT.fullmatch(stripped):
            return float(stripped)
    except ValueError:
        pass
    raise SerializationError(f"Invalid JSON: {text}", ErrorKind.JSON)


def _check_length(count: int) -> None:
    if count > U32_MAX:
        raise SerializationError(
            f"Only array sizes that fit into u32 are supported; input contained size {count}",
            ErrorKind.INVALID_VEC_LENGTH,
        )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


def render_value(value: Any) -> str:
    """Render a value as compact JSON for error messages."""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=repr)
    except (TypeError, ValueError):
        return repr(value)


def _invalid(expected: str, value: Any) -> SerializationError:
    return SerializationError(
        f"Expected {expected}, encountered invalid JSON value {render_value(value)}",
        ErrorKind.INVALID_TYPE,
    )


def _wrong_length(expected: int, actual: int) -> SerializationError:
    return SerializationError(
        f"Expected an array of size {expected}, but only found {actual} elements in the JSON",
        ErrorKind.WRONG_ARRAY_LENGTH,
    )


def _unused(value: Any) -> SerializationError:
    return SerializationError(
        f"The JSON contained an unexpected extra value: {render_value(value)}",
        ErrorKind.UNUSED_INPUT,
    )


def _missing_metadata(type_name: str) -> SerializationError:
    return SerializationError(
        f"Type {type_name} did not have serde metadata present in the schema",
        ErrorKind.MISSING_METADATA,
    )


def _recursion_limit(max_depth: int) -> SerializationError:
    return SerializationError(
        f"Maximum nesting depth of {max_depth} exceeded; "
        f"the schema may contain a reference cycle",
        ErrorKind.RECURSION_LIMIT,
    )
