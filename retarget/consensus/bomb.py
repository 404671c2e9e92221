"""
Difficulty Bomb (Ice Age)
==========================

On top of the timestamp-driven adjustment, Ethash adds an exponentially
growing term::

    2 ** (fake_height // 100000 - 2)

once ``fake_height // 100000`` reaches 2. Left alone it doubles every
100,000 blocks until blocks become impractically slow, which forces the
network to adopt a new protocol.

Both lineages intervened, in different ways, by lying to the formula about
the current height:

Ethereum (delays):
------------------
Each delay upgrade subtracts a fixed block count from the height. The
offsets are cumulative: Byzantium moved the bomb back 3,000,000 blocks,
Constantinople by a further 2,000,000 (5,000,000 in total), Muir Glacier to
9,000,000, London to 9,700,000, Arrow Glacier to 10,700,000 and Gray
Glacier to 11,400,000.

Ethereum Classic (pause, continue, disposal):
---------------------------------------------
ECIP-1010 froze the height at the pause block, then resumed counting at the
continue block *net of the paused interval*. ECIP-1041 later removed the
bomb outright.

Nothing is cached: the term is recomputed from the height and schedule on
every call, so results do not depend on call order.
"""

from __future__ import annotations

from retarget.consensus.forks import (
    ECIP1010_CONTINUE,
    ECIP1010_PAUSE,
    ECIP1041,
    EIP649,
    EIP1234,
    EIP2384,
    EIP3554,
    EIP4345,
    EIP5133,
    ForkSchedule,
)


EXP_DIFF_PERIOD = 100_000
"""Blocks per bomb period; the exponent grows by one each period."""

FREE_PERIODS = 2
"""The first two periods contribute nothing."""

DELAY_OFFSETS = {
    EIP649: 3_000_000,
    EIP1234: 2_000_000,
    EIP2384: 4_000_000,
    EIP3554: 700_000,
    EIP4345: 1_000_000,
    EIP5133: 700_000,
}
"""Blocks each delay upgrade subtracts, on top of the delays before it."""


def fake_block_number(child_height: int, schedule: ForkSchedule) -> int:
    """
    Return the height the bomb formula is evaluated at.

    Does not handle disposal; callers check ``ecip1041`` first.

    Examples:
        >>> s = ForkSchedule({"ecip1010_pause": 3_000_000, "ecip1010_continue": 5_000_000})
        >>> fake_block_number(4_000_000, s)
        3000000
        >>> fake_block_number(5_000_001, s)
        3000001
    """
    pause = schedule.activation_height(ECIP1010_PAUSE)
    resume = schedule.activation_height(ECIP1010_CONTINUE)

    if schedule.is_active(ECIP1010_PAUSE, child_height) and not schedule.is_active(
        ECIP1010_CONTINUE, child_height
    ):
        return pause
    if schedule.is_active(ECIP1010_CONTINUE, child_height):
        return child_height - (resume - pause)

    fake = child_height
    for upgrade in schedule.active_upgrades(child_height):
        fake -= DELAY_OFFSETS.get(upgrade, 0)
    return max(fake, 0)


def bomb_adjustment(child_height: int, schedule: ForkSchedule) -> int:
    """
    Compute the exponential bomb term for the block at ``child_height``.

    Args:
        child_height: Height of the block being built.
        schedule: The lineage's fork schedule.

    Returns:
        ``2 ** (period_count - 2)`` once ``period_count >= 2``, otherwise 0.
        Always 0 once ``ecip1041`` is active. The result is an exact Python
        int however large the exponent grows.

    Examples:
        >>> bomb_adjustment(199_999, ForkSchedule())
        0
        >>> bomb_adjustment(200_000, ForkSchedule())
        1
        >>> bomb_adjustment(4_370_000, ForkSchedule({"eip649": 4_370_000}))
        2048
    """
    if schedule.is_active(ECIP1041, child_height):
        return 0

    period_count = fake_block_number(child_height, schedule) // EXP_DIFF_PERIOD
    if period_count < FREE_PERIODS:
        return 0
    return 2 ** (period_count - FREE_PERIODS)
