"""Main CLI entry point for schemaborsh."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..cli.analyze import analyze_schema
from ..exceptions import SchemaborshError
from ..models.schema import KnownTypeId
from ..serializer import Serializer

ROLE_NAMES = {
    "transaction": KnownTypeId.TRANSACTION,
    "unsigned-transaction": KnownTypeId.UNSIGNED_TRANSACTION,
    "runtime-call": KnownTypeId.RUNTIME_CALL,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the schemaborsh CLI.

    Args:
        argv: Arguments to parse (defaults to ``sys.argv[1:]``)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="schemaborsh",
        description="schemaborsh: Schema-driven canonical Borsh encoder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schemaborsh --schema schema.json --analyze                          Show the type catalogue
  schemaborsh --schema schema.json --role runtime-call --input call.json
  echo '[1, 2]' | schemaborsh --schema schema.json --type 17         Read the value from stdin
        """,
    )

    parser.add_argument(
        "--schema",
        metavar="FILE",
        type=str,
        help="Schema descriptor JSON file",
    )

    parser.add_argument(
        "--analyze",
        action="store_true",
        help="List the schema's types and well-known roles",
    )

    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--type",
        metavar="INDEX",
        type=int,
        help="Encode against the type at this index",
    )
    target.add_argument(
        "--role",
        choices=sorted(ROLE_NAMES),
        help="Encode against the type registered for a well-known role",
    )

    parser.add_argument(
        "--input",
        metavar="FILE",
        type=str,
        help="JSON value to encode (default: read from stdin)",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"schemaborsh {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.schema:
        parser.print_help()
        return 0

    schema_path = Path(args.schema)
    if not schema_path.exists():
        print(f"Error: File not found: {schema_path}", file=sys.stderr)
        return 1

    try:
        serializer = Serializer(schema_path)

        # Handle --analyze
        if args.analyze:
            analyze_schema(serializer.schema)
            return 0

        if args.type is not None:
            index = args.type
        elif args.role is not None:
            index = serializer.type_index(ROLE_NAMES[args.role])
        else:
            print("Error: one of --analyze, --type or --role is required", file=sys.stderr)
            return 1

        if args.input:
            document = Path(args.input).read_text(encoding="utf-8")
        else:
            document = sys.stdin.read()

        print(serializer.serialize_json(document, index).hex())
        return 0
    except SchemaborshError as e:
        print(f"Error [{e.kind}]: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
