"""Byte buffer normalisation for encoder inputs."""

from __future__ import annotations

from typing import Any


def byte_buffers_to_lists(obj: Any) -> Any:
    """Replace byte buffers inside a JSON-like value with lists of ints.

    Walks plain dicts, lists and tuples and converts every ``bytes``,
    ``bytearray`` or ``memoryview`` into a list of byte values, so the
    result can also be dumped with :func:`json.dumps`. Other values are
    returned unchanged; the input is never modified.

    Args:
        obj: Value to normalise

    Returns:
        Normalised copy of ``obj``

    Example:
        >>> byte_buffers_to_lists({"key": b"\\x01\\x02", "items": [bytearray(b"\\xff")]})
        {'key': [1, 2], 'items': [[255]]}
    """
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return list(bytes(obj))
    if isinstance(obj, dict):
        return {key: byte_buffers_to_lists(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [byte_buffers_to_lists(item) for item in obj]
    return obj
