"""
Numeric and digest encoding utilities.

Chain configuration files and conformance fixtures carry every number as
either a JSON integer, a decimal string (``"1150000"``) or a ``0x``-prefixed
hex string (``"0x118c30"``). This module turns all three into Python ints and
converts 32-byte digests between their hex and raw forms.

Python ints are arbitrary precision, so difficulty values that long ago
outgrew 64 bits need no special handling. What we *do* enforce is the same
upper bound every deployed client places on header quantities: 256 bits.
"""

from __future__ import annotations

from typing import Union

from eth_utils import decode_hex, encode_hex, is_0x_prefixed, to_int

MAX_QUANTITY_BITS = 256
"""Header quantities (difficulty, number, timestamp) must fit in 256 bits."""

DIGEST_LENGTH = 32
"""Length in bytes of a Keccak-256 digest such as the uncles hash."""


# ---------------------------------------------------------------------------
# Quantities
# ---------------------------------------------------------------------------

def parse_quantity(value: Union[int, str], bits: int = MAX_QUANTITY_BITS) -> int:
    """
    Parse a non-negative integer from a JSON value.

    Accepts plain ints, decimal strings and ``0x``-prefixed hex strings.
    Booleans are rejected even though ``bool`` is a subclass of ``int``:
    a ``true`` where a block number belongs is a broken file, not the
    number one.

    Args:
        value: The raw JSON value.
        bits: Maximum bit length of the result (default 256).

    Returns:
        The parsed integer.

    Raises:
        ValueError: If the value is not a number, is negative, or does not
            fit in ``bits`` bits.

    Examples:
        >>> parse_quantity("0x118c30")
        1150000
        >>> parse_quantity("131072")
        131072
        >>> parse_quantity(42)
        42
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got boolean {value!r}")

    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Expected a number, got an empty string")
        if is_0x_prefixed(text):
            if len(text) == 2:
                raise ValueError(f"Hex quantity {value!r} has no digits")
            result = to_int(hexstr=text)
        elif text.isdigit():
            result = int(text, 10)
        else:
            raise ValueError(f"Cannot parse {value!r} as a decimal or hex number")
    else:
        raise ValueError(f"Expected a number, got {type(value).__name__}")

    if result < 0:
        raise ValueError(f"Quantity cannot be negative: {result}")
    if result.bit_length() > bits:
        raise ValueError(
            f"Quantity {result:#x} exceeds {bits} bits "
            f"({result.bit_length()} bits)"
        )
    return result


def format_quantity(value: int) -> str:
    """Render an int as a ``0x``-prefixed hex quantity (``0`` -> ``"0x0"``)."""
    return hex(value)


# ---------------------------------------------------------------------------
# Digests
# ---------------------------------------------------------------------------

def digest_from_hex(hex_string: str) -> bytes:
    """
    Decode a 32-byte digest from hex (with or without ``0x`` prefix).

    Raises:
        ValueError: If the string is not hex or is not exactly 32 bytes.
    """
    try:
        digest = decode_hex(hex_string)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid digest hex {hex_string!r}: {e}") from e
    if len(digest) != DIGEST_LENGTH:
        raise ValueError(
            f"Digest must be {DIGEST_LENGTH} bytes, got {len(digest)}"
        )
    return digest


def digest_to_hex(digest: bytes) -> str:
    """Encode a digest as a ``0x``-prefixed lowercase hex string."""
    return encode_hex(digest)
