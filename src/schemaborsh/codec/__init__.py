"""Borsh codec for schemaborsh.

This module provides the schema-directed encoder together with its building
blocks: the primitive byte writer and the textual byte display codec.
"""

from __future__ import annotations

from . import byte_display
from .encoder import SchemaEncoder, encode, encode_hex, encode_json
from .writer import BorshWriter

__all__ = [
    "encode",
    "encode_hex",
    "encode_json",
    "SchemaEncoder",
    "BorshWriter",
    "byte_display",
]
