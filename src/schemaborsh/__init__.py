"""schemaborsh: Schema-driven canonical Borsh encoder

A Python library that turns JSON-like values into canonical Borsh bytes,
guided by a rollup schema descriptor instead of compiled-in types. Given
the same schema and the same value it always produces the same bytes.

Key Features:
- Pydantic-validated schema descriptors (structs, enums, tuples, options,
  sized integers, byte arrays, vectors, maps and more)
- Byte values as lists, hex strings, decimal lists or Bech32/Bech32m
  addresses, as declared by the schema
- Canonical map ordering and exact 128-bit integer range checks
- Stable error kinds naming the failed check and its position

Quick Start:
    >>> from schemaborsh import Serializer
    >>>
    >>> serializer = Serializer(Path("demo-rollup-schema.json"))
    >>> call = {"value_setter": {"set_value": {"value": 5, "gas": None}}}
    >>> data = serializer.serialize_runtime_call(call)
    >>> data.hex()
    '01000500000000'
"""

from __future__ import annotations

from .codec import BorshWriter, SchemaEncoder, byte_display, encode, encode_hex, encode_json
from .config import EncoderConfig
from .exceptions import (
    ByteDisplayError,
    ErrorKind,
    SchemaborshError,
    SchemaError,
    SerializationError,
)
from .models import ByteDisplay, ByteDisplayMode, KnownTypeId, Schema
from .serializer import Serializer
from .utils import byte_buffers_to_lists

__version__ = "0.1.0"

__all__ = [
    # Core API
    "Serializer",
    "Schema",
    "KnownTypeId",
    "encode",
    "encode_hex",
    "encode_json",
    "SchemaEncoder",
    "EncoderConfig",
    # Building blocks
    "BorshWriter",
    "byte_display",
    "ByteDisplay",
    "ByteDisplayMode",
    "byte_buffers_to_lists",
    # Exceptions
    "SchemaborshError",
    "SchemaError",
    "SerializationError",
    "ByteDisplayError",
    "ErrorKind",
    # Version
    "__version__",
]
