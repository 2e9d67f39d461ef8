"""Textual representations of byte arrays.

Byte arrays and vectors may be supplied as strings instead of lists of byte
values. The schema declares which representation a position uses:

- Hex: optional ``0x`` prefix, two hex digits per byte
- Decimal: bracketed list of byte values, e.g. ``[2, 4, 5]``
- Bech32 / Bech32m: checksummed base32 (BIP-173 / BIP-350) whose prefix
  must equal the schema-declared prefix exactly

Bech32 primitives (charset, polymod, prefix expansion, bit regrouping) come
from the ``bech32`` package; the Bech32m variant differs only in the final
checksum constant.
"""

from __future__ import annotations

import re
import string

from bech32 import CHARSET, bech32_hrp_expand, bech32_polymod, convertbits

from ..config import DEFAULT_MAX_BECH32_LENGTH
from ..exceptions import ByteDisplayError
from ..models.types import ByteDisplay, ByteDisplayMode

BECH32_CONST = 1
BECH32M_CONST = 0x2BC830A3

_CHECKSUM_LENGTH = 6
_DECIMAL_LIST = re.compile(r"\s*\[(.*)\]\s*", re.DOTALL)
_DECIMAL_ITEM = re.compile(r"[0-9]+")


def parse(
    display: ByteDisplay, text: str, *, max_length: int = DEFAULT_MAX_BECH32_LENGTH
) -> bytes:
    """Decode ``text`` into bytes according to ``display``.

    Args:
        display: Display mode declared by the schema
        text: Human-readable representation
        max_length: Longest accepted Bech32/Bech32m string

    Returns:
        Decoded bytes

    Raises:
        ByteDisplayError: If the text is malformed for the declared mode

    Example:
        >>> parse(ByteDisplay(mode="Hex"), "0x0a0b")
        b'\\n\\x0b'
    """
    if display.mode is ByteDisplayMode.HEX:
        return _parse_hex(text)
    if display.mode is ByteDisplayMode.DECIMAL:
        return _parse_decimal(text)
    if display.mode is ByteDisplayMode.BECH32:
        return _parse_bech32(text, display.prefix, BECH32_CONST, "bech32", max_length)
    if display.mode is ByteDisplayMode.BECH32M:
        return _parse_bech32(text, display.prefix, BECH32M_CONST, "bech32m", max_length)
    raise ByteDisplayError(f"Unsupported byte display: {display.mode}")


def render(display: ByteDisplay, data: bytes) -> str:
    """Encode ``data`` in the textual form declared by ``display``.

    Hex output is ``0x``-prefixed lowercase; Decimal output is ``[1, 2, 3]``.
    """
    if display.mode is ByteDisplayMode.HEX:
        return "0x" + bytes(data).hex()
    if display.mode is ByteDisplayMode.DECIMAL:
        return "[" + ", ".join(str(byte) for byte in data) + "]"
    if display.mode is ByteDisplayMode.BECH32:
        return _render_bech32(display.prefix, data, BECH32_CONST)
    if display.mode is ByteDisplayMode.BECH32M:
        return _render_bech32(display.prefix, data, BECH32M_CONST)
    raise ByteDisplayError(f"Unsupported byte display: {display.mode}")


def _parse_hex(text: str) -> bytes:
    digits = text[2:] if text.startswith("0x") else text
    if len(digits) % 2:
        raise ByteDisplayError("Invalid hex string: Odd number of digits")
    for position, char in enumerate(digits):
        if char not in string.hexdigits:
            raise ByteDisplayError(
                f"Invalid hex string: Invalid character {char!r} at position {position}"
            )
    return bytes.fromhex(digits)


def _parse_decimal(text: str) -> bytes:
    match = _DECIMAL_LIST.fullmatch(text)
    if match is None:
        raise ByteDisplayError(
            f"Invalid decimal byte list {text!r}: expected a bracketed list such as [1, 2, 3]"
        )
    body = match.group(1)
    if not body.strip():
        return b""

    values = []
    for item in body.split(","):
        item = item.strip()
        if not _DECIMAL_ITEM.fullmatch(item):
            raise ByteDisplayError(f"Invalid decimal byte list {text!r}: {item!r} is not a byte")
        value = int(item)
        if value > 255:
            raise ByteDisplayError(f"Invalid decimal byte list {text!r}: {value} does not fit in a byte")
        values.append(value)
    return bytes(values)


def _parse_bech32(text: str, prefix: str | None, const: int, label: str, max_length: int) -> bytes:
    def fail(reason: str) -> ByteDisplayError:
        return ByteDisplayError(f"Failed to decode {label}: {reason}")

    # Same checks as bech32.bech32_decode, run one at a time so each failure
    # gets its own message. bech32_decode returns (None, None) on any failure,
    # accepts only the Bech32 constant and caps input at 90 characters.
    if len(text) > max_length:
        raise fail("Exceeds length limit")
    if text.lower() != text and text.upper() != text:
        raise fail(f"Mixed-case string {text}")

    lowered = text.lower()
    separator = lowered.rfind("1")
    if separator == -1:
        raise fail(f"No separator character for {text}")
    if separator == 0:
        raise fail(f"Missing prefix for {text}")

    hrp = lowered[:separator]
    if any(ord(char) < 33 or ord(char) > 126 for char in hrp):
        raise fail(f"Invalid prefix for {text}")
    data_part = lowered[separator + 1 :]
    if len(data_part) < _CHECKSUM_LENGTH:
        raise fail("Data too short")

    words = []
    for char in data_part:
        word = CHARSET.find(char)
        if word == -1:
            raise fail(f"Unknown character {char}")
        words.append(word)

    if bech32_polymod(bech32_hrp_expand(hrp) + words) != const:
        raise fail(f"Invalid checksum for {text}")

    if hrp != prefix:
        raise fail(f"Expected prefix '{prefix}' but got '{hrp}'")

    converted = convertbits(words[:-_CHECKSUM_LENGTH], 5, 8, False)
    if converted is None:
        raise fail("Excess padding")
    return bytes(converted)


def _render_bech32(prefix: str | None, data: bytes, const: int) -> str:
    if not prefix:
        raise ByteDisplayError("Bech32 display requires a prefix")
    words = convertbits(list(data), 8, 5, True)
    polymod = bech32_polymod(bech32_hrp_expand(prefix) + words + [0] * _CHECKSUM_LENGTH) ^ const
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(_CHECKSUM_LENGTH)]
    return prefix + "1" + "".join(CHARSET[word] for word in words + checksum)
