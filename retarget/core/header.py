"""
Parent header view.

The difficulty calculation reads four fields from the parent block: its
number, its timestamp, its difficulty, and the digest of its uncle list.
``BlockHeader`` carries exactly those fields. Everything else a full
Ethereum header holds (state root, gas, PoW nonce and mix hash) belongs to
other collaborators and is deliberately absent.

Uncle presence:
---------------
Headers do not store an uncle count, only ``uncles_hash``, the Keccak-256
of the RLP-encoded uncle list. A header has uncles exactly when that digest
differs from the digest of the empty list, ``EMPTY_UNCLE_HASH``.
"""

from __future__ import annotations

import rlp
from eth_utils import keccak

from retarget.utils.encoding import digest_from_hex, digest_to_hex, parse_quantity


EMPTY_UNCLE_HASH = keccak(rlp.encode([]))
"""keccak256(rlp([])) = 0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"""

PLACEHOLDER_UNCLE_HASH = keccak(rlp.encode([b""]))
"""Digest of a one-entry placeholder list, used when only the uncle count is known."""


def uncles_hash_for_count(uncle_count: int) -> bytes:
    """
    Digest standing in for an uncle list of ``uncle_count`` entries.

    Zero gives ``EMPTY_UNCLE_HASH``; any other count gives
    ``PLACEHOLDER_UNCLE_HASH``. Only presence matters to difficulty, so the
    count itself is not encoded.
    """
    if uncle_count < 0:
        raise ValueError(f"Uncle count cannot be negative: {uncle_count}")
    return EMPTY_UNCLE_HASH if uncle_count == 0 else PLACEHOLDER_UNCLE_HASH


class BlockHeader:
    """
    The parent-header fields consumed by the difficulty calculation.

    Attributes:
        number: Block height (genesis is 0).
        timestamp: Unix timestamp in seconds.
        difficulty: Proof-of-work difficulty of this block.
        uncles_hash: 32-byte digest of the RLP-encoded uncle list.
    """

    def __init__(
        self,
        number: int,
        timestamp: int,
        difficulty: int,
        uncles_hash: bytes = EMPTY_UNCLE_HASH,
    ) -> None:
        """
        Initialize a header view.

        Args:
            number: Block height.
            timestamp: Unix timestamp in seconds.
            difficulty: Block difficulty.
            uncles_hash: Uncle-list digest (default: empty list).
        """
        self.number = number
        self.timestamp = timestamp
        self.difficulty = difficulty
        self.uncles_hash = uncles_hash

    @property
    def has_uncles(self) -> bool:
        """True if this block referenced at least one uncle."""
        return self.uncles_hash != EMPTY_UNCLE_HASH

    @classmethod
    def with_uncle_count(
        cls, number: int, timestamp: int, difficulty: int, uncle_count: int
    ) -> BlockHeader:
        """
        Build a header when only the number of uncles is known.

        Some fixture formats record ``parentUncles`` as a count rather than a
        digest. Any non-zero count maps to ``PLACEHOLDER_UNCLE_HASH``: only
        (in)equality with ``EMPTY_UNCLE_HASH`` matters to difficulty.
        """
        return cls(number, timestamp, difficulty, uncles_hash_for_count(uncle_count))

    def to_dict(self) -> dict:
        """
        Convert this header to a JSON-serializable dictionary.

        Numbers are rendered as decimal strings so that difficulties beyond
        the 53-bit range of JSON doubles survive a round trip through other
        tools.
        """
        return {
            'number': str(self.number),
            'timestamp': str(self.timestamp),
            'difficulty': str(self.difficulty),
            'uncles_hash': digest_to_hex(self.uncles_hash),
        }

    @classmethod
    def from_dict(cls, data: dict) -> BlockHeader:
        """
        Reconstruct a header from a dictionary.

        Numbers may be ints, decimal strings or hex strings.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If a number or digest cannot be parsed.
        """
        uncles_hash = data.get('uncles_hash')
        return cls(
            number=parse_quantity(data['number']),
            timestamp=parse_quantity(data['timestamp']),
            difficulty=parse_quantity(data['difficulty']),
            uncles_hash=(
                digest_from_hex(uncles_hash) if uncles_hash is not None else EMPTY_UNCLE_HASH
            ),
        )

    def __repr__(self) -> str:
        return (
            f"BlockHeader(number={self.number}, "
            f"timestamp={self.timestamp}, "
            f"difficulty={self.difficulty}, "
            f"uncles={self.has_uncles})"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, BlockHeader):
            return NotImplemented
        return (
            self.number == other.number
            and self.timestamp == other.timestamp
            and self.difficulty == other.difficulty
            and self.uncles_hash == other.uncles_hash
        )

    def __hash__(self) -> int:
        return hash((self.number, self.timestamp, self.difficulty, self.uncles_hash))
