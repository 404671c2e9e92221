"""
Protocol Upgrade Schedule
==========================

A fork schedule records the block height at which each protocol upgrade
("fork") activates on one chain lineage. Difficulty rules are selected by
asking the schedule which upgrades are active at the child block's height.

Upgrades that touch difficulty:
-------------------------------
- ``eip2``: Homestead. Replaces the Frontier step function with a linear
  adjustment in ten-second buckets.
- ``ecip1010_pause`` / ``ecip1010_continue``: Ethereum Classic froze the
  difficulty bomb at block 3,000,000 and resumed it 2,000,000 blocks later,
  net of the paused interval.
- ``ecip1041``: Ethereum Classic removed the bomb permanently.
- ``eip100``: Byzantium. Targets a rate of blocks *including* uncles by
  crediting a parent that references uncles.
- ``eip649``, ``eip1234``, ``eip2384``, ``eip3554``, ``eip4345``,
  ``eip5133``: the successive bomb delays of the Ethereum lineage.

Two lineages that share history up to a fork point are two separate
``ForkSchedule`` values. A schedule is immutable once built, so it can be
shared between any number of threads without locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from retarget.exceptions import ScheduleError


# ---------------------------------------------------------------------------
# Upgrade names
# ---------------------------------------------------------------------------

EIP2 = "eip2"
ECIP1010_PAUSE = "ecip1010_pause"
ECIP1010_CONTINUE = "ecip1010_continue"
ECIP1041 = "ecip1041"
EIP100 = "eip100"
EIP649 = "eip649"
EIP1234 = "eip1234"
EIP2384 = "eip2384"
EIP3554 = "eip3554"
EIP4345 = "eip4345"
EIP5133 = "eip5133"

CANONICAL_ORDER = (
    EIP2,
    ECIP1010_PAUSE,
    ECIP1010_CONTINUE,
    ECIP1041,
    EIP100,
    EIP649,
    EIP1234,
    EIP2384,
    EIP3554,
    EIP4345,
    EIP5133,
)
"""Every known upgrade, in the order lineages deploy them.
Within one schedule, defined activation heights never decrease along
this order."""


# ---------------------------------------------------------------------------
# ForkSchedule
# ---------------------------------------------------------------------------

class ForkSchedule:
    """
    Immutable mapping from upgrade name to activation height.

    Every name in ``CANONICAL_ORDER`` has an entry; upgrades that never
    activate on this lineage map to ``None``.

    Attributes:
        name: Human-readable lineage label, e.g. ``"mainnet"``.
    """

    def __init__(
        self,
        heights: Optional[Mapping[str, Optional[int]]] = None,
        name: str = "custom",
    ) -> None:
        """
        Build and validate a schedule.

        Args:
            heights: Activation height per upgrade name. Names left out never
                activate.
            name: Lineage label used in logs and reprs.

        Raises:
            ScheduleError: If a name is unknown, a height is not a
                non-negative int, heights decrease in canonical order, or
                ``ecip1010_continue`` is set without ``ecip1010_pause``.
        """
        heights = dict(heights or {})

        unknown = sorted(set(heights) - set(CANONICAL_ORDER))
        if unknown:
            raise ScheduleError(f"Unknown upgrade name(s): {', '.join(unknown)}")

        resolved: dict[str, Optional[int]] = {}
        previous_name = None
        previous_height = 0
        for upgrade in CANONICAL_ORDER:
            height = heights.get(upgrade)
            if height is not None:
                if isinstance(height, bool) or not isinstance(height, int):
                    raise ScheduleError(
                        f"Activation height for {upgrade} must be an int, "
                        f"got {type(height).__name__}"
                    )
                if height < 0:
                    raise ScheduleError(
                        f"Activation height for {upgrade} cannot be negative: {height}"
                    )
                if height < previous_height:
                    raise ScheduleError(
                        f"{upgrade} activates at {height}, before {previous_name} "
                        f"at {previous_height}"
                    )
                previous_name, previous_height = upgrade, height
            resolved[upgrade] = height

        if resolved[ECIP1010_CONTINUE] is not None and resolved[ECIP1010_PAUSE] is None:
            raise ScheduleError(
                f"{ECIP1010_CONTINUE} is set but {ECIP1010_PAUSE} is not"
            )

        self._name = name
        self._heights = MappingProxyType(resolved)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def activation_height(self, name: str) -> Optional[int]:
        """
        Return the activation height of ``name``, or None if it never activates.

        Raises:
            KeyError: If ``name`` is not a known upgrade. Asking for an
                upgrade that does not exist is a bug in the caller.
        """
        return self._heights[name]

    def is_active(self, name: str, height: int) -> bool:
        """
        True iff ``name`` has an activation height and ``height`` has reached it.

        Examples:
            >>> s = ForkSchedule({EIP2: 1_150_000})
            >>> s.is_active(EIP2, 1_149_999), s.is_active(EIP2, 1_150_000)
            (False, True)
            >>> s.is_active(EIP100, 10**9)
            False
        """
        activation = self._heights[name]
        return activation is not None and height >= activation

    def active_upgrades(self, height: int) -> list[str]:
        """Names active at ``height``, ascending by activation height."""
        active = [u for u in CANONICAL_ORDER if self.is_active(u, height)]
        return sorted(active, key=lambda u: self._heights[u])

    def interesting_heights(self) -> list[int]:
        """Sorted, de-duplicated activation heights defined on this schedule."""
        return sorted({h for h in self._heights.values() if h is not None})

    @property
    def name(self) -> str:
        """Lineage label, fixed at construction."""
        return self._name

    @property
    def heights(self) -> Mapping[str, Optional[int]]:
        """Read-only view of every upgrade's activation height."""
        return self._heights

    # ------------------------------------------------------------------
    # Derivation and serialization
    # ------------------------------------------------------------------

    def derive(self, name: str, **changes: Optional[int]) -> ForkSchedule:
        """
        Return a new schedule that differs from this one in ``changes``.

        This is how a lineage that diverges at some upgrade is expressed:
        the original schedule is left untouched.

        Example:
            >>> base = ForkSchedule({EIP2: 0}, name="base")
            >>> fork = base.derive("fork", eip100=10)
            >>> base.activation_height(EIP100), fork.activation_height(EIP100)
            (None, 10)
        """
        heights = dict(self._heights)
        heights.update(changes)
        return ForkSchedule(heights, name=name)

    def to_dict(self) -> dict:
        """Defined activation heights keyed by upgrade name."""
        return {u: h for u, h in self._heights.items() if h is not None}

    @classmethod
    def from_dict(cls, data: Mapping[str, Optional[int]], name: str = "custom") -> ForkSchedule:
        """Inverse of ``to_dict()``."""
        return cls(data, name=name)

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Optional[int]]], name: str = "custom") -> ForkSchedule:
        """Build a schedule from ``(upgrade, height)`` pairs."""
        return cls(dict(pairs), name=name)

    def __repr__(self) -> str:
        defined = ", ".join(f"{u}={h}" for u, h in self.to_dict().items())
        return f"ForkSchedule(name={self.name!r}, {defined})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, ForkSchedule):
            return NotImplemented
        return dict(self._heights) == dict(other._heights)

    def __hash__(self) -> int:
        return hash(tuple(self._heights.items()))
