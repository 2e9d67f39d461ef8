#!/usr/bin/env python3
"""Basic usage example for schemaborsh.

This example demonstrates:
1. Loading a schema descriptor
2. Encoding a runtime call by role
3. Supplying byte values as hex strings and Bech32m addresses
4. Reading error kinds from a failed encode
"""

from __future__ import annotations

from schemaborsh import ErrorKind, KnownTypeId, SerializationError, Serializer

ADDRESS = "sov1lzkjgdaz08su3yevqu6ceywufl35se9f33kztu5cu2spja5hyyf"

# A minimal rollup schema: a runtime call with a single "transfer" variant
SCHEMA = {
    "types": [
        {
            "Enum": {
                "type_name": "RuntimeCall",
                "variants": [
                    {"name": "Transfer", "discriminant": 0, "template": None, "value": {"ByIndex": 1}}
                ],
            }
        },
        {
            "Struct": {
                "type_name": "Transfer",
                "fields": [
                    {
                        "display_name": "to",
                        "value": {"Immediate": {"ByteArray": {"len": 28, "display": {"Bech32m": {"prefix": "sov"}}}}},
                    },
                    {"display_name": "amount", "value": {"Immediate": {"Integer": ["u128", "Decimal"]}}},
                    {"display_name": "memo", "value": {"Immediate": {"ByteVec": {"display": "Hex"}}}},
                ],
            }
        },
    ],
    "root_type_indices": [0, 0, 0],
    "serde_metadata": [
        {"name": "RuntimeCall", "fields_or_variants": [{"name": "transfer"}]},
        {"name": "Transfer", "fields_or_variants": [{"name": "to"}, {"name": "amount"}, {"name": "memo"}]},
    ],
}


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("schemaborsh Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Loading the schema...")
    serializer = Serializer(SCHEMA)
    print(f"   Types: {len(serializer.schema)}")
    print(f"   Runtime call type index: {serializer.type_index(KnownTypeId.RUNTIME_CALL)}")
    print()

    print("2. Encoding a transfer...")
    call = {"transfer": {"to": ADDRESS, "amount": "1000000", "memo": "0xcafe"}}
    data = serializer.serialize_runtime_call(call)
    print(f"   {len(data)} bytes: {data.hex()}")
    print()

    print("3. Encoding an invalid transfer...")
    try:
        serializer.serialize_runtime_call({"transfer": {"to": ADDRESS, "amount": -1, "memo": []}})
    except SerializationError as e:
        assert e.kind is ErrorKind.OUT_OF_RANGE
        print(f"   [{e.kind}] {e.message}")
    print()


if __name__ == "__main__":
    main()
