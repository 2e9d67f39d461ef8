"""Unit tests for the Serializer facade."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from schemaborsh import (
    EncoderConfig,
    ErrorKind,
    KnownTypeId,
    Schema,
    SchemaError,
    SerializationError,
    Serializer,
    byte_buffers_to_lists,
)

SET_VALUE = {"value_setter": {"set_value": {"value": 5, "gas": None}}}
SET_VALUE_HEX = "0100" + "05000000" + "00"


class TestConstruction:
    """Test the accepted schema sources."""

    def test_from_schema(self, demo_schema: Schema) -> None:
        """Test an already loaded schema is used as-is."""
        assert Serializer(demo_schema).schema is demo_schema

    def test_from_path(self, demo_schema_path: Path) -> None:
        """Test loading from a file path."""
        assert Serializer(demo_schema_path).serialize_runtime_call(SET_VALUE).hex() == SET_VALUE_HEX

    def test_from_json_text(self, demo_schema_path: Path) -> None:
        """Test loading from descriptor JSON text."""
        serializer = Serializer(demo_schema_path.read_text())
        assert serializer.serialize_runtime_call(SET_VALUE).hex() == SET_VALUE_HEX

    def test_from_mapping(self, demo_schema_path: Path) -> None:
        """Test loading from a parsed descriptor."""
        serializer = Serializer(json.loads(demo_schema_path.read_text()))
        assert len(serializer.schema) == 18

    def test_invalid_descriptor(self) -> None:
        """Test broken descriptors raise SchemaError."""
        with pytest.raises(SchemaError):
            Serializer({"types": []})

    def test_unsupported_source(self) -> None:
        """Test values that are not schema sources."""
        with pytest.raises(TypeError):
            Serializer(42)  # type: ignore[arg-type]


class TestSerialize:
    """Test the serialize entry points."""

    def test_serialize_by_index(self, demo_serializer: Serializer) -> None:
        """Test encoding against an explicit type index."""
        assert demo_serializer.serialize([1, 2], 17) == bytes.fromhex("0100000000000000" + "0200000000000000")
        assert demo_serializer.serialize_hex(SET_VALUE, 2) == SET_VALUE_HEX

    def test_serialize_json(self, demo_serializer: Serializer) -> None:
        """Test encoding a JSON document."""
        document = json.dumps(SET_VALUE)
        assert demo_serializer.serialize_json(document, 2).hex() == SET_VALUE_HEX

    def test_byte_buffers_accepted(self, demo_serializer: Serializer) -> None:
        """Test bytes inside nested values are normalised."""
        call = {"value_setter": {"set_many_values": b"\x01\x02"}}
        assert demo_serializer.serialize_runtime_call(call).hex() == "0101" + "02000000" + "0102"

    def test_role_indices(self, demo_serializer: Serializer) -> None:
        """Test roles resolve through root_type_indices."""
        assert demo_serializer.type_index(KnownTypeId.TRANSACTION) == 0
        assert demo_serializer.type_index(KnownTypeId.UNSIGNED_TRANSACTION) == 1
        assert demo_serializer.type_index(KnownTypeId.RUNTIME_CALL) == 2

    def test_missing_role(self, demo_schema_path: Path) -> None:
        """Test schemas without a runtime call role."""
        raw = json.loads(demo_schema_path.read_text())
        raw["root_type_indices"] = [0]
        with pytest.raises(SerializationError) as exc_info:
            Serializer(raw).serialize_runtime_call(SET_VALUE)
        assert exc_info.value.kind is ErrorKind.INVALID_INDEX

    def test_errors_propagate(self, demo_serializer: Serializer) -> None:
        """Test encoding errors reach the caller unchanged."""
        with pytest.raises(SerializationError) as exc_info:
            demo_serializer.serialize_runtime_call({"value_setter": {"set_value": {"value": 5}}})
        assert exc_info.value.kind is ErrorKind.MISSING_TYPE
        assert "SetValue.gas" in exc_info.value.message

    def test_raw_schema_is_copy(self, demo_serializer: Serializer) -> None:
        """Test the raw schema can be modified without side effects."""
        raw = demo_serializer.raw_schema
        raw["root_type_indices"] = []
        assert demo_serializer.raw_schema["root_type_indices"] == [0, 1, 2]

    def test_config_is_applied(self, demo_schema: Schema) -> None:
        """Test encoder limits reach the encoder."""
        serializer = Serializer(demo_schema, config=EncoderConfig(max_depth=1))
        with pytest.raises(SerializationError) as exc_info:
            serializer.serialize_runtime_call(SET_VALUE)
        assert exc_info.value.kind is ErrorKind.RECURSION_LIMIT


class TestConfig:
    """Test EncoderConfig validation."""

    def test_defaults(self) -> None:
        """Test default limits."""
        config = EncoderConfig()
        assert config.max_depth == 256
        assert config.max_bech32_length == 90

    @pytest.mark.parametrize("kwargs", [{"max_depth": 0}, {"max_bech32_length": 7}])
    def test_invalid(self, kwargs: dict[str, int]) -> None:
        """Test out-of-range limits are rejected."""
        with pytest.raises(ValueError):
            EncoderConfig(**kwargs)


class TestByteBuffers:
    """Test byte buffer normalisation."""

    def test_nested(self) -> None:
        """Test buffers inside dicts, lists and tuples are converted."""
        value = {"a": b"\x01", "b": [bytearray(b"\x02\x03"), (memoryview(b"\x04"),)], "c": "text"}
        assert byte_buffers_to_lists(value) == {"a": [1], "b": [[2, 3], [[4]]], "c": "text"}

    def test_input_unchanged(self) -> None:
        """Test the input is not modified."""
        value = {"a": b"\x01"}
        byte_buffers_to_lists(value)
        assert value == {"a": b"\x01"}
