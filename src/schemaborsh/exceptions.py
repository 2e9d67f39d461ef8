"""Exception hierarchy for schemaborsh.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from SchemaborshError for easy catching of any
schemaborsh-specific error.

Every error carries a ``kind`` from the closed ErrorKind vocabulary plus a
human-readable message. Kind names are stable across releases, so callers
should compare on ``kind`` rather than on the exception class.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Closed set of failure kinds reported by the encoder."""

    INVALID_TYPE = "InvalidType"
    MISSING_TYPE = "MissingType"
    UNUSED_INPUT = "UnusedInput"
    MALFORMED_ENUM = "MalformedEnum"
    INVALID_DISCRIMINANT = "InvalidDiscriminant"
    WRONG_ARRAY_LENGTH = "WrongArrayLength"
    INVALID_VEC_LENGTH = "InvalidVecLength"
    UNRESOLVED_TYPE = "UnresolvedType"
    JSON = "Json"
    MISSING_METADATA = "MissingMetadata"
    INVALID_INDEX = "InvalidIndex"
    OUT_OF_RANGE = "OutOfRange"
    BYTE_DISPLAY = "ByteDisplay"
    RECURSION_LIMIT = "RecursionLimit"
    INVALID_SCHEMA = "InvalidSchema"

    def __str__(self) -> str:
        return self.value


class SchemaborshError(Exception):
    """Base exception for all schemaborsh errors.

    Attributes:
        message: Human-readable description naming the offending position
        kind: Failure kind from ErrorKind
    """

    default_kind: ErrorKind = ErrorKind.INVALID_TYPE

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind if kind is not None else self.default_kind

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class SchemaError(SchemaborshError):
    """Raised when a schema descriptor cannot be loaded.

    Examples:
        - A required field is missing from the descriptor
        - Unknown type constructor or link tag
        - Discriminant outside 0-255
    """

    default_kind = ErrorKind.INVALID_SCHEMA


class SerializationError(SchemaborshError):
    """Raised when a value cannot be encoded against a schema position.

    Covers both input validation failures (wrong type, out of range, wrong
    length, missing or unused fields) and schema integrity failures met while
    encoding (unresolved links, missing container metadata). The two are
    told apart only by ``kind``.
    """


class ByteDisplayError(SerializationError):
    """Raised when a textual byte representation cannot be decoded.

    Examples:
        - Odd number of hex digits
        - Bech32 checksum mismatch
        - Bech32 prefix differs from the schema-declared prefix
    """

    default_kind = ErrorKind.BYTE_DISPLAY
