"""End-to-end integration tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from schemaborsh import ErrorKind, KnownTypeId, SerializationError, Serializer, encode_json

ADDRESS = "sov1lzkjgdaz08su3yevqu6ceywufl35se9f33kztu5cu2spja5hyyf"
ADDRESS_HEX = "f8ad2437a279e1c8932c07358c91dc4fe34864a98c6c25f298e2a019"

CREATE_TOKEN = {
    "bank": {
        "create_token": {
            "token_name": "token_1",
            "token_decimals": 12,
            "initial_balance": "20000",
            "supply_cap": "100000000000",
            "mint_to_address": {"Standard": ADDRESS},
            "admins": [{"Standard": ADDRESS}],
        }
    }
}

# Recorded byte-exact encoding of CREATE_TOKEN
CREATE_TOKEN_HEX = (
    "00"  # RuntimeCall::Bank
    "00"  # CallMessage::CreateToken
    "07000000746f6b656e5f31"  # token_name
    "010c"  # token_decimals: Some(12)
    "204e0000000000000000000000000000"  # initial_balance
    "00" + ADDRESS_HEX +  # mint_to_address: Standard
    "01000000"  # admins: one entry
    "00" + ADDRESS_HEX +
    "01"  # supply_cap: Some
    "00e87648170000000000000000000000"
)


# Unsigned transaction wrapping CREATE_TOKEN, with its recorded encoding
CREATE_TOKEN_TX = {
    "runtime_call": CREATE_TOKEN,
    "generation": 1,
    "details": {
        "max_priority_fee_bips": 0,
        "max_fee": 1000,
        "gas_limit": None,
        "chain_id": 1337,
    },
}

CREATE_TOKEN_TX_HEX = (
    "000007000000746f6b656e5f31010c204e000000000000000000000000000000"
    "f8ad2437a279e1c8932c07358c91dc4fe34864a98c6c25f298e2a01901000000"
    "00f8ad2437a279e1c8932c07358c91dc4fe34864a98c6c25f298e2a0190100e8"
    "764817000000000000000000000001000000000000000000000000000000e803"
    "0000000000000000000000000000003905000000000000"
)

UNSIGNED_TX = {
    "runtime_call": {"value_setter": {"set_value": {"value": 5, "gas": None}}},
    "generation": 1,
    "details": {
        "max_priority_fee_bips": 0,
        "max_fee": "100000000",
        "gas_limit": None,
        "chain_id": 4321,
    },
}

UNSIGNED_TX_HEX = (
    "0100"  # ValueSetter::SetValue
    "05000000"  # value
    "00"  # gas: None
    "0100000000000000"  # generation
    "0000000000000000"  # max_priority_fee_bips
    "00e1f505000000000000000000000000"  # max_fee
    "00"  # gas_limit: None
    "e110000000000000"  # chain_id
)


class TestDemoRollup:
    """Test full transactions against the demo rollup schema."""

    def test_create_token_runtime_call(self, demo_serializer: Serializer) -> None:
        """Test the recorded create_token vector."""
        assert demo_serializer.serialize_runtime_call(CREATE_TOKEN).hex() == CREATE_TOKEN_HEX

    def test_create_token_from_json(self, demo_serializer: Serializer) -> None:
        """Test the same vector through the JSON entry points."""
        document = json.dumps(CREATE_TOKEN)
        index = demo_serializer.type_index(KnownTypeId.RUNTIME_CALL)
        assert demo_serializer.serialize_json(document, index).hex() == CREATE_TOKEN_HEX
        assert encode_json(demo_serializer.schema, index, document).hex() == CREATE_TOKEN_HEX

    def test_create_token_key_order(self, demo_serializer: Serializer) -> None:
        """Test reordering the input keys leaves the bytes unchanged."""
        fields = CREATE_TOKEN["bank"]["create_token"]
        reordered = {"bank": {"create_token": dict(reversed(list(fields.items())))}}
        assert demo_serializer.serialize_runtime_call(reordered).hex() == CREATE_TOKEN_HEX

    def test_transfer(self, demo_serializer: Serializer) -> None:
        """Test a transfer with an address and a token id."""
        call = {
            "bank": {
                "transfer": {
                    "to": {"Vm": [0xAA] * 20},
                    "coins": {"amount": 1000, "token_id": "0x" + "cd" * 32},
                }
            }
        }
        expected = "0001" + "01" + "aa" * 20 + "e8030000000000000000000000000000" + "cd" * 32
        assert demo_serializer.serialize_runtime_call(call).hex() == expected

    def test_unsigned_transaction(self, demo_serializer: Serializer) -> None:
        """Test an unsigned transaction with optional fields left out."""
        assert demo_serializer.serialize_unsigned_tx(UNSIGNED_TX).hex() == UNSIGNED_TX_HEX

    def test_unsigned_create_token(self, demo_serializer: Serializer) -> None:
        """Test the recorded unsigned create_token transaction."""
        assert demo_serializer.serialize_unsigned_tx(CREATE_TOKEN_TX).hex() == CREATE_TOKEN_TX_HEX
        assert CREATE_TOKEN_TX_HEX.startswith(CREATE_TOKEN_HEX)

    @pytest.mark.parametrize("tag", ["standard", "STANDARD", "vm"])
    def test_address_variant_names_are_exact(self, demo_serializer: Serializer, tag: str) -> None:
        """Test address variant names must match the schema's casing."""
        call = json.loads(json.dumps(CREATE_TOKEN))
        call["bank"]["create_token"]["mint_to_address"] = {tag: ADDRESS}
        with pytest.raises(SerializationError) as exc_info:
            demo_serializer.serialize_runtime_call(call)
        assert exc_info.value.kind is ErrorKind.INVALID_DISCRIMINANT

    def test_unsigned_transaction_with_gas(self, demo_serializer: Serializer) -> None:
        """Test optional fixed-size gas arrays."""
        tx: dict[str, Any] = json.loads(json.dumps(UNSIGNED_TX))
        tx["details"]["gas_limit"] = [10, 20]
        expected = UNSIGNED_TX_HEX[:-18] + "01" + "0a00000000000000" + "1400000000000000" + "e110000000000000"
        assert demo_serializer.serialize_unsigned_tx(tx).hex() == expected

    def test_signed_transaction(self, demo_serializer: Serializer) -> None:
        """Test a signed transaction mixing hex strings and byte buffers."""
        tx = {
            "signature": "0x" + "11" * 64,
            "pub_key": b"\x22" * 32,
            "unsigned": UNSIGNED_TX,
        }
        expected = "11" * 64 + "22" * 32 + UNSIGNED_TX_HEX
        assert demo_serializer.serialize_tx(tx).hex() == expected

    @pytest.mark.parametrize(
        "mutate, kind",
        [
            (lambda call: call["bank"]["create_token"].pop("admins"), ErrorKind.MISSING_TYPE),
            (lambda call: call["bank"]["create_token"].update(extra=1), ErrorKind.UNUSED_INPUT),
            (lambda call: call["bank"]["create_token"].update(token_decimals=256), ErrorKind.OUT_OF_RANGE),
            (
                lambda call: call["bank"]["create_token"].update(mint_to_address={"Standard": "sov1xyz"}),
                ErrorKind.BYTE_DISPLAY,
            ),
            (lambda call: call["bank"].update(burn={}), ErrorKind.MALFORMED_ENUM),
        ],
    )
    def test_invalid_create_token(self, demo_serializer: Serializer, mutate: Any, kind: ErrorKind) -> None:
        """Test invalid variations of the create_token call."""
        call = json.loads(json.dumps(CREATE_TOKEN))
        mutate(call)
        with pytest.raises(SerializationError) as exc_info:
            demo_serializer.serialize_runtime_call(call)
        assert exc_info.value.kind is kind
