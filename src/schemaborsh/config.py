"""Configuration for the schema-driven encoder.

This module provides the EncoderConfig dataclass shared by SchemaEncoder,
the module-level encode helpers and the Serializer facade.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_DEPTH = 256
DEFAULT_MAX_BECH32_LENGTH = 90


@dataclass(frozen=True)
class EncoderConfig:
    """Tunable limits for a single encode call.

    Attributes:
        max_depth: Maximum nesting depth of the type walk (default 256).
            Schemas are expected to be acyclic; a reference cycle is reported
            as a RecursionLimit error once this depth is exceeded instead of
            exhausting the interpreter stack.

        max_bech32_length: Longest accepted Bech32/Bech32m string (default 90,
            the BIP-173 limit).

    Examples:
        ```python
        from schemaborsh import EncoderConfig, Serializer

        serializer = Serializer(schema, config=EncoderConfig(max_depth=64))
        ```
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    max_bech32_length: int = DEFAULT_MAX_BECH32_LENGTH

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be > 0, got {self.max_depth}")

        if self.max_bech32_length < 8:
            raise ValueError(f"max_bech32_length must be >= 8, got {self.max_bech32_length}")
