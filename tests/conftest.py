"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import pytest

from schemaborsh import Schema, Serializer

FIXTURES = Path(__file__).parent / "fixtures"

DEMO_ADDRESS = "sov1lzkjgdaz08su3yevqu6ceywufl35se9f33kztu5cu2spja5hyyf"
DEMO_ADDRESS_BYTES = bytes.fromhex("f8ad2437a279e1c8932c07358c91dc4fe34864a98c6c25f298e2a019")


def build_schema(
    types: list[Any],
    names: Optional[dict[int, list[str]]] = None,
    root_type_indices: Optional[list[int]] = None,
) -> Schema:
    """Build a schema from descriptor types and per-index container names."""
    names = names or {}
    metadata = [
        {"name": f"T{index}", "fields_or_variants": [{"name": n} for n in names.get(index, [])]}
        for index in range(len(types))
    ]
    return Schema.from_dict(
        {
            "types": types,
            "root_type_indices": root_type_indices or [],
            "serde_metadata": metadata,
        }
    )


@pytest.fixture
def demo_schema_path() -> Path:
    """Path to the demo rollup schema descriptor."""
    return FIXTURES / "demo_rollup_schema.json"


@pytest.fixture
def demo_schema(demo_schema_path: Path) -> Schema:
    """Demo rollup schema with bank and value-setter modules."""
    return Schema.from_file(demo_schema_path)


@pytest.fixture
def demo_serializer(demo_schema: Schema) -> Serializer:
    """Serializer bound to the demo rollup schema."""
    return Serializer(demo_schema)


@pytest.fixture
def make_schema() -> Callable[..., Schema]:
    """Factory building small schemas inline."""
    return build_schema


@pytest.fixture
def demo_address() -> str:
    """Bech32m address with the ``sov`` prefix."""
    return DEMO_ADDRESS


@pytest.fixture
def demo_address_bytes() -> bytes:
    """The 28 bytes encoded by ``demo_address``."""
    return DEMO_ADDRESS_BYTES
