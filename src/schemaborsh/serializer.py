"""High-level serializer bound to one rollup schema.

The Serializer loads a schema once and exposes encode entry points by type
index and by well-known role (transaction, unsigned transaction, runtime
call).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, Union

from .codec.encoder import encode, parse_document
from .config import EncoderConfig
from .models.schema import KnownTypeId, Schema
from .utils.buffers import byte_buffers_to_lists

logger = logging.getLogger(__name__)

SchemaSource = Union[Schema, Mapping[str, Any], str, bytes, os.PathLike]


class Serializer:
    """Encodes JSON-like values against a loaded schema.

    Instances hold only the immutable schema and config, so one serializer
    can be shared between threads.

    Example:
        >>> serializer = Serializer(Path("demo-rollup-schema.json"))
        >>> serializer.serialize_runtime_call(
        ...     {"value_setter": {"set_value": {"value": 5, "gas": None}}}
        ... ).hex()
        '01000500000000'
    """

    def __init__(self, schema: SchemaSource, config: EncoderConfig | None = None) -> None:
        """Initialize the serializer.

        Args:
            schema: A Schema, a parsed descriptor mapping, descriptor JSON
                text, or a path to a descriptor file
            config: Optional encoder limits

        Raises:
            SchemaError: If the descriptor cannot be loaded
        """
        self._schema = _load_schema(schema)
        self._config = config

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def raw_schema(self) -> dict[str, Any]:
        """Deep copy of the schema descriptor document."""
        return self._schema.raw

    def serialize(self, value: Any, index: int) -> bytes:
        """Encode ``value`` against ``schema.types[index]``.

        Byte buffers anywhere inside the value are accepted and treated as
        lists of byte values.

        Raises:
            SerializationError: If the value does not match the type
        """
        return encode(self._schema, index, byte_buffers_to_lists(value), self._config)

    def serialize_hex(self, value: Any, index: int) -> str:
        return self.serialize(value, index).hex()

    def serialize_json(self, document: str | bytes, index: int) -> bytes:
        """Parse a JSON document and encode it against ``schema.types[index]``."""
        return encode(self._schema, index, parse_document(document), self._config)

    def serialize_runtime_call(self, value: Any) -> bytes:
        return self.serialize(value, self.type_index(KnownTypeId.RUNTIME_CALL))

    def serialize_unsigned_tx(self, value: Any) -> bytes:
        return self.serialize(value, self.type_index(KnownTypeId.UNSIGNED_TRANSACTION))

    def serialize_tx(self, value: Any) -> bytes:
        return self.serialize(value, self.type_index(KnownTypeId.TRANSACTION))

    def type_index(self, role: KnownTypeId) -> int:
        """Return the type index registered for a well-known role.

        Raises:
            SerializationError: InvalidIndex if the schema has no such role
        """
        index = self._schema.role_index(role)
        logger.debug("Resolved role %s to type index %d", KnownTypeId(role).name, index)
        return index


def _load_schema(source: SchemaSource) -> Schema:
    if isinstance(source, Schema):
        return source
    if isinstance(source, Mapping):
        return Schema.from_dict(source)
    if isinstance(source, (str, bytes)):
        return Schema.from_json(source)
    if isinstance(source, os.PathLike):
        return Schema.from_file(source)
    raise TypeError(f"Unsupported schema source: {type(source).__name__}")
