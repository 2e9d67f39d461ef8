"""Parsed rollup schema and its lookup tables.

This module loads a schema descriptor once, validates it with pydantic, and
precomputes the index-based tables the encoder needs on its hot path:
container index -> ordered external field/variant names, and
container index -> {variant name: position}.
"""

from __future__ import annotations

import copy
import enum
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ..exceptions import ErrorKind, SchemaError, SerializationError
from .types import ByIndex, FrozenModel, Immediate, Link, Ty

logger = logging.getLogger(__name__)


class KnownTypeId(enum.IntEnum):
    """Well-known roles, as positions in ``root_type_indices``."""

    TRANSACTION = 0
    UNSIGNED_TRANSACTION = 1
    RUNTIME_CALL = 2


class ChainData(FrozenModel):
    chain_id: int
    chain_name: str


class FieldOrVariantMetadata(FrozenModel):
    name: str


class ContainerSerdeMetadata(FrozenModel):
    """External (serde) names of a container's fields or variants, in wire order."""

    name: str
    fields_or_variants: tuple[FieldOrVariantMetadata, ...]


class SchemaDescriptor(FrozenModel):
    """Validated form of the schema JSON document."""

    types: tuple[Ty, ...]
    root_type_indices: tuple[int, ...]
    serde_metadata: tuple[ContainerSerdeMetadata, ...]
    chain_data: Optional[ChainData] = None
    templates: tuple[dict[str, Any], ...] = ()


class Schema:
    """Read-only type catalogue shared by any number of encode calls.

    Example:
        >>> schema = Schema.from_file("demo-rollup-schema.json")
        >>> schema.role_index(KnownTypeId.RUNTIME_CALL)
        2
        >>> schema.field_names(ByIndex(index=4))
        ('token_name', 'token_decimals', ...)
    """

    def __init__(self, descriptor: SchemaDescriptor, raw: Mapping[str, Any]) -> None:
        """Initialize from an already validated descriptor.

        Args:
            descriptor: Validated schema descriptor
            raw: Source document, kept so it can be handed back to callers
        """
        self._descriptor = descriptor
        self._raw = copy.deepcopy(dict(raw))

        names: list[tuple[str, ...]] = []
        positions: list[dict[str, int]] = []
        for metadata in descriptor.serde_metadata:
            ordered = tuple(entry.name for entry in metadata.fields_or_variants)
            lookup: dict[str, int] = {}
            for position, name in enumerate(ordered):
                # First declaration wins for duplicated names
                lookup.setdefault(name, position)
            names.append(ordered)
            positions.append(lookup)
        self._names = tuple(names)
        self._positions = tuple(positions)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Schema:
        """Create a schema from a parsed descriptor document.

        Args:
            raw: Descriptor with ``types``, ``root_type_indices`` and ``serde_metadata``

        Returns:
            Schema instance

        Raises:
            SchemaError: If a required field is missing or malformed
        """
        if not isinstance(raw, Mapping):
            raise SchemaError(
                f"Schema descriptor must be a JSON object, got {type(raw).__name__}"
            )
        try:
            descriptor = SchemaDescriptor.model_validate(dict(raw))
        except ValidationError as err:
            raise SchemaError(_describe_validation_error(err)) from err

        schema = cls(descriptor, raw)
        logger.debug(
            "Loaded schema with %d types, %d roles (chain: %s)",
            len(descriptor.types),
            len(descriptor.root_type_indices),
            descriptor.chain_data.chain_name if descriptor.chain_data else "unknown",
        )
        return schema

    @classmethod
    def from_json(cls, document: str | bytes) -> Schema:
        """Create a schema from JSON text."""
        try:
            raw = json.loads(document)
        except ValueError as err:
            raise SchemaError(f"Schema descriptor is not valid JSON: {err}") from err
        return cls.from_dict(raw)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Schema:
        """Create a schema from a JSON file."""
        return cls.from_json(Path(path).read_text(encoding="utf-8"))

    @property
    def types(self) -> tuple[Ty, ...]:
        return self._descriptor.types

    @property
    def root_type_indices(self) -> tuple[int, ...]:
        return self._descriptor.root_type_indices

    @property
    def chain_data(self) -> Optional[ChainData]:
        return self._descriptor.chain_data

    @property
    def raw(self) -> dict[str, Any]:
        """Deep copy of the source descriptor."""
        return copy.deepcopy(self._raw)

    def __len__(self) -> int:
        return len(self._descriptor.types)

    def type_at(self, index: int) -> Ty:
        """Return the type at a root index.

        Raises:
            SerializationError: InvalidIndex if the index is out of range
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self):
            raise SerializationError(f"Invalid type index: {index}", ErrorKind.INVALID_INDEX)
        return self._descriptor.types[index]

    def role_index(self, role: KnownTypeId) -> int:
        """Resolve a well-known role to its type index.

        Raises:
            SerializationError: InvalidIndex if the schema declares no type for the role
        """
        role = KnownTypeId(role)
        if role >= len(self.root_type_indices):
            raise SerializationError(
                f"Schema does not declare a root type for {role.name}", ErrorKind.INVALID_INDEX
            )
        return self.root_type_indices[role]

    def resolve(self, link: Link) -> Ty:
        """Follow a link to the type it references.

        Raises:
            SerializationError: UnresolvedType for placeholders and dangling indices
        """
        if isinstance(link, ByIndex):
            if link.index >= len(self):
                raise SerializationError(
                    f"Invalid type index: {link.index}", ErrorKind.UNRESOLVED_TYPE
                )
            return self._descriptor.types[link.index]
        if isinstance(link, Immediate):
            return link.primitive
        raise SerializationError(
            f"Unresolved placeholder link: {_describe_link(link)}", ErrorKind.UNRESOLVED_TYPE
        )

    def field_names(self, link: Link) -> Optional[tuple[str, ...]]:
        """External names of the container reached through ``link``, or None."""
        index = _metadata_index(link)
        if index is None or index >= len(self._names):
            return None
        return self._names[index]

    def variant_positions(self, link: Link) -> Optional[Mapping[str, int]]:
        """Variant name -> position table of the enum reached through ``link``, or None."""
        index = _metadata_index(link)
        if index is None or index >= len(self._positions):
            return None
        return self._positions[index]


def _metadata_index(link: Link) -> Optional[int]:
    # Only indexed types carry container metadata
    return link.index if isinstance(link, ByIndex) else None


def _describe_link(link: Link) -> str:
    index = getattr(link, "index", None)
    if index is None:
        return link.tag
    return json.dumps({link.tag: index})


def _describe_validation_error(err: ValidationError) -> str:
    errors = err.errors()
    first = errors[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    if first["type"] == "missing":
        message = f"Schema descriptor is missing required field `{location}`"
    else:
        message = f"Invalid schema descriptor at `{location}`: {first['msg']}"
    if len(errors) > 1:
        message += f" (and {len(errors) - 1} more errors)"
    return message
