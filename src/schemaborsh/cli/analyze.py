"""Schema analysis CLI command."""

from __future__ import annotations

from ..models.schema import KnownTypeId, Schema


def analyze_schema(schema: Schema) -> None:
    """Print the type catalogue and role table of a schema.

    Args:
        schema: Loaded schema
    """
    # Print header
    print("|" * 7, "schemaborsh: Schema-driven Borsh encoder", "|" * 7)
    print(f"{len(schema)} type{'s' if len(schema) != 1 else ''} loaded.")
    if schema.chain_data is not None:
        print(f"Chain: {schema.chain_data.chain_name} (id {schema.chain_data.chain_id})")
    print()

    print(f"{'-' * 27} Types {'-' * 27}")
    width = len(str(max(len(schema) - 1, 0)))
    for index, ty in enumerate(schema.types):
        print(f"{index:>{width}}. {ty.label()}")
    print()

    print(f"{'-' * 27} Roles {'-' * 27}")
    for role in KnownTypeId:
        name = role.name.lower().replace("_", "-")
        if role < len(schema.root_type_indices):
            index = schema.root_type_indices[role]
            dots = "." * max(1, 40 - len(name))
            print(f"{name}{dots}{index}")
        else:
            print(f"{name}{'.' * max(1, 40 - len(name))}(not declared)")
    print()
