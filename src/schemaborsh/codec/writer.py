"""Append-only Borsh byte writer.

This module provides the low-level primitive writers used by the encoder.
All multi-byte values are little-endian, and every numeric write is range
checked against its declared width before anything reaches the buffer.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from ..exceptions import ErrorKind, SerializationError

T = TypeVar("T")

U32_MAX = 0xFFFFFFFF


class BorshWriter:
    """Writes Borsh primitives into a growing byte buffer.

    Integers of 8 to 128 bits are supported in both signed and unsigned form.
    Python ints are arbitrary precision, so 64- and 128-bit values are exact.

    Example:
        >>> writer = BorshWriter()
        >>> writer.write_u8(7)
        >>> writer.write_string("hi")
        >>> writer.to_hex()
        '07020000006869'

    On error the buffer is left in an unspecified state; callers discard the
    whole writer.
    """

    def __init__(self) -> None:
        """Initialize an empty writer."""
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def write_uint(self, value: Any, num_bits: int) -> None:
        """Write an unsigned integer using the specified number of bits.

        Args:
            value: Integer (or integral float) to write
            num_bits: Width in bits (8, 16, 32, 64 or 128)

        Raises:
            SerializationError: If value is not integral or doesn't fit in num_bits
        """
        name = f"u{num_bits}"
        number = _integral(value, name)
        if number < 0 or number > (1 << num_bits) - 1:
            raise _out_of_range(name, value)
        self._buffer += number.to_bytes(num_bits // 8, "little")

    def write_int(self, value: Any, num_bits: int) -> None:
        """Write a signed integer using two's complement encoding.

        Args:
            value: Integer (or integral float) to write
            num_bits: Width in bits (8, 16, 32, 64 or 128)

        Raises:
            SerializationError: If value is not integral or doesn't fit in num_bits
        """
        name = f"i{num_bits}"
        number = _integral(value, name)
        min_value = -(1 << (num_bits - 1))
        max_value = (1 << (num_bits - 1)) - 1
        if number < min_value or number > max_value:
            raise _out_of_range(name, value)
        self._buffer += number.to_bytes(num_bits // 8, "little", signed=True)

    def write_u8(self, value: Any) -> None:
        self.write_uint(value, 8)

    def write_u16(self, value: Any) -> None:
        self.write_uint(value, 16)

    def write_u32(self, value: Any) -> None:
        self.write_uint(value, 32)

    def write_u64(self, value: Any) -> None:
        self.write_uint(value, 64)

    def write_u128(self, value: Any) -> None:
        self.write_uint(value, 128)

    def write_i8(self, value: Any) -> None:
        self.write_int(value, 8)

    def write_i16(self, value: Any) -> None:
        self.write_int(value, 16)

    def write_i32(self, value: Any) -> None:
        self.write_int(value, 32)

    def write_i64(self, value: Any) -> None:
        self.write_int(value, 64)

    def write_i128(self, value: Any) -> None:
        self.write_int(value, 128)

    def write_f32(self, value: float) -> None:
        """Write an IEEE-754 single precision float.

        Finite doubles beyond the f32 range round to infinity, matching a
        float64 -> float32 narrowing cast.
        """
        if not _finite(value):
            raise _out_of_range("f32", value)
        try:
            packed = struct.pack("<f", value)
        except OverflowError:
            packed = struct.pack("<f", math.copysign(math.inf, value))
        self._buffer += packed

    def write_f64(self, value: float) -> None:
        """Write an IEEE-754 double precision float."""
        if not _finite(value):
            raise _out_of_range("f64", value)
        self._buffer += struct.pack("<d", value)

    def write_bool(self, value: bool) -> None:
        self._buffer.append(1 if value else 0)

    def write_string(self, value: str) -> None:
        """Write a UTF-8 string preceded by its u32 byte count.

        Raises:
            SerializationError: If the string holds unpaired surrogates
        """
        try:
            encoded = value.encode("utf-8")
        except UnicodeEncodeError as err:
            raise SerializationError(
                f"String is not valid UTF-8: {err.reason}", ErrorKind.INVALID_TYPE
            ) from err
        self.write_u32(len(encoded))
        self._buffer += encoded

    def write_bytes(self, data: bytes | bytearray | Sequence[int]) -> None:
        """Write raw bytes without a length prefix."""
        self._buffer += bytes(data)

    def write_vec(self, items: Sequence[T], write_item: Callable[[T], None]) -> None:
        """Write a u32 element count followed by each item.

        Args:
            items: Items to write
            write_item: Callback writing a single item to this writer
        """
        self.write_u32(len(items))
        for item in items:
            write_item(item)

    def to_bytes(self) -> bytes:
        """Return the accumulated bytes."""
        return bytes(self._buffer)

    def to_hex(self) -> str:
        """Return the accumulated bytes as lowercase hex without a prefix."""
        return self._buffer.hex()


def _integral(value: Any, name: str) -> int:
    # bool is an int subclass but never a valid integer input
    if isinstance(value, bool):
        raise _out_of_range(name, value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    raise _out_of_range(name, value)


def _finite(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large to convert to float
        return False


def _out_of_range(name: str, value: Any) -> SerializationError:
    return SerializationError(f"Invalid {name} value: {value}", ErrorKind.OUT_OF_RANGE)
