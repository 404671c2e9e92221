"""
Ethash Difficulty Calculation
==============================

This module combines the two halves of the Ethash retargeting algorithm
into the difficulty a child block must carry.

How the difficulty of block N+1 is derived from block N:
--------------------------------------------------------
1. **Base adjustment.** The newest timestamp rule active at N+1 turns the
   time since the parent into a signed number of adjustment units, each
   ``parent_difficulty // 2048``. See ``base_adjustment``.

2. **Minimum.** The adjusted difficulty is never allowed below
   ``MINIMUM_DIFFICULTY`` (131,072).

3. **Bomb.** The exponential ice-age term for N+1 is added on top. It is
   never negative, so the final value stays at or above the minimum. See
   ``bomb_adjustment``.

Every node on a lineage must arrive at the same integer. All arithmetic is
on Python ints with floor division, so there is no rounding mode to get
wrong and no width to overflow.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from retarget.consensus.base_adjustment import base_adjustment
from retarget.consensus.bomb import bomb_adjustment
from retarget.exceptions import DifficultyMismatchError

if TYPE_CHECKING:
    from retarget.consensus.forks import ForkSchedule
    from retarget.core.header import BlockHeader

logger = logging.getLogger(__name__)


MINIMUM_DIFFICULTY = 131_072
"""Protocol floor for block difficulty (2**17)."""


def calc_difficulty(
    schedule: 'ForkSchedule',
    child_timestamp: int,
    parent_header: 'BlockHeader',
) -> int:
    """
    Compute the difficulty the child of ``parent_header`` must carry.

    Args:
        schedule: Fork schedule of the lineage being followed.
        child_timestamp: Timestamp of the child block, in seconds.
        parent_header: The already-validated parent header.

    Returns:
        The child difficulty, always ``>= MINIMUM_DIFFICULTY``.

    Example:
        >>> from retarget.consensus.forks import ForkSchedule
        >>> from retarget.core.header import BlockHeader
        >>> parent = BlockHeader(number=0, timestamp=0, difficulty=1_000_000_000)
        >>> calc_difficulty(ForkSchedule(), 13, parent)
        999511719
    """
    child_height = parent_header.number + 1
    timestamp_delta = child_timestamp - parent_header.timestamp

    base = base_adjustment(
        child_height,
        timestamp_delta,
        parent_header.has_uncles,
        parent_header.difficulty,
        schedule,
    )
    adjusted = max(parent_header.difficulty + base, MINIMUM_DIFFICULTY)
    bomb = bomb_adjustment(child_height, schedule)
    difficulty = adjusted + bomb

    logger.debug(
        "Difficulty for block %d on %s: parent=%d delta=%ds base=%+d bomb=%d -> %d",
        child_height, schedule.name, parent_header.difficulty,
        timestamp_delta, base, bomb, difficulty,
    )
    return difficulty


def verify_difficulty(claimed: int, expected: int) -> bool:
    """
    Check that a header's difficulty equals the independently computed one.

    Args:
        claimed: The difficulty field of the header under validation.
        expected: The value returned by ``calc_difficulty``.

    Returns:
        True if the values match.

    Raises:
        DifficultyMismatchError: If they differ, with both values and the
            signed gap in the message.
    """
    if claimed != expected:
        raise DifficultyMismatchError(
            f"Invalid difficulty: header has {claimed}, expected {expected} "
            f"(off by {claimed - expected:+d})"
        )
    return True


class DifficultyCalculator:
    """
    A difficulty calculator bound to one lineage's schedule.

    Holds nothing but the (immutable) schedule, so one instance can serve
    any number of threads validating headers in any order.

    Attributes:
        schedule: The lineage's fork schedule.
    """

    def __init__(self, schedule: 'ForkSchedule') -> None:
        self.schedule = schedule

    def calc(self, child_timestamp: int, parent_header: 'BlockHeader') -> int:
        """Same as ``calc_difficulty(self.schedule, child_timestamp, parent_header)``."""
        return calc_difficulty(self.schedule, child_timestamp, parent_header)

    def verify(self, child_timestamp: int, claimed: int, parent_header: 'BlockHeader') -> bool:
        """
        Validate a child header's claimed difficulty.

        Raises:
            DifficultyMismatchError: If ``claimed`` is not the computed value.
        """
        return verify_difficulty(claimed, self.calc(child_timestamp, parent_header))

    def __repr__(self) -> str:
        return f"DifficultyCalculator(schedule={self.schedule.name!r})"
