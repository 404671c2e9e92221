"""
Base Difficulty Adjustment
===========================

Every Ethash block nudges the difficulty up or down by a multiple of
``parent_difficulty // 2048`` depending on how long the parent took to be
followed. The multiple (the "sign") is chosen by whichever rule set is the
newest one active at the child's height:

- **Frontier** (no upgrade): +1 if the block came in under 13 seconds,
  otherwise -1.
- **Homestead** (``eip2``): ``max(1 - delta // 10, -99)``. Blocks under ten
  seconds still raise the difficulty by one unit, 10-19 seconds leaves it
  unchanged, and each further ten seconds lowers it by one more unit, down
  to -99.
- **Byzantium** (``eip100``): ``max((2 if parent had uncles else 1) - delta // 9, -99)``.
  Counting uncles keeps the rate of *all* valid blocks on target, which
  removes the incentive to withhold uncles.

The rule table is ordered newest first, so a future rule change is one more
row at the top.
"""

from __future__ import annotations

from typing import Callable, Optional

from retarget.consensus.forks import EIP100, EIP2, ForkSchedule


DIFFICULTY_BOUND_DIVISOR = 2048
"""One adjustment unit is ``parent_difficulty // 2048`` (about 0.05%)."""

DURATION_LIMIT = 13
"""Frontier: blocks faster than this many seconds raise the difficulty."""

HOMESTEAD_ADJUSTMENT_CUTOFF = 10
"""Homestead: width in seconds of each adjustment bucket."""

BYZANTIUM_ADJUSTMENT_CUTOFF = 9
"""Byzantium: width in seconds of each adjustment bucket."""

MAX_DOWNWARD_STEPS = -99
"""Lower bound on the sign for the linear rules."""


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def frontier_sign(timestamp_delta: int, parent_has_uncles: bool) -> int:
    """+1 if the block was faster than ``DURATION_LIMIT`` seconds, else -1."""
    return 1 if timestamp_delta < DURATION_LIMIT else -1


def homestead_sign(timestamp_delta: int, parent_has_uncles: bool) -> int:
    """
    EIP-2 linear adjustment.

    Examples:
        >>> homestead_sign(9, False), homestead_sign(10, False), homestead_sign(25, False)
        (1, 0, -1)
        >>> homestead_sign(10_000, False)
        -99
    """
    return max(1 - timestamp_delta // HOMESTEAD_ADJUSTMENT_CUTOFF, MAX_DOWNWARD_STEPS)


def byzantium_sign(timestamp_delta: int, parent_has_uncles: bool) -> int:
    """
    EIP-100 uncle-aware linear adjustment.

    Examples:
        >>> byzantium_sign(0, True), byzantium_sign(0, False)
        (2, 1)
        >>> byzantium_sign(18, True)
        0
    """
    base = 2 if parent_has_uncles else 1
    return max(base - timestamp_delta // BYZANTIUM_ADJUSTMENT_CUTOFF, MAX_DOWNWARD_STEPS)


SignRule = Callable[[int, bool], int]

RULES: tuple[tuple[Optional[str], SignRule], ...] = (
    (EIP100, byzantium_sign),
    (EIP2, homestead_sign),
    (None, frontier_sign),
)
"""``(upgrade, rule)`` pairs, newest first. ``None`` always applies."""


def select_rule(schedule: ForkSchedule, child_height: int) -> SignRule:
    """
    Return the newest sign rule active at ``child_height``.

    The last row of ``RULES`` has no upgrade and therefore always matches,
    so this never falls off the end of the table.
    """
    for upgrade, rule in RULES:
        if upgrade is None or schedule.is_active(upgrade, child_height):
            return rule
    raise AssertionError("RULES must end with an unconditional rule")


# ---------------------------------------------------------------------------
# Adjustment
# ---------------------------------------------------------------------------

def base_adjustment(
    child_height: int,
    timestamp_delta: int,
    parent_has_uncles: bool,
    parent_difficulty: int,
    schedule: ForkSchedule,
) -> int:
    """
    Compute the signed change the timestamp rule applies to the parent difficulty.

    Args:
        child_height: Height of the block being built (parent height + 1).
        timestamp_delta: ``child_timestamp - parent_timestamp`` in seconds.
        parent_has_uncles: Whether the parent header referenced any uncles.
        parent_difficulty: The parent block's difficulty.
        schedule: The lineage's fork schedule.

    Returns:
        ``sign * (parent_difficulty // DIFFICULTY_BOUND_DIVISOR)``. May be
        negative. The caller clamps the sum to the protocol minimum.

    Example:
        >>> from retarget.consensus.forks import ForkSchedule
        >>> base_adjustment(1, 13, False, 1_000_000_000, ForkSchedule())
        -488281
    """
    rule = select_rule(schedule, child_height)
    sign = rule(timestamp_delta, parent_has_uncles)
    return sign * (parent_difficulty // DIFFICULTY_BOUND_DIVISOR)
