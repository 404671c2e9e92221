"""
Built-in chain lineages.

Each preset is a separate immutable ``ForkSchedule`` built once at import
time and shared read-only by every caller.

- ``MAINNET``: the Ethereum lineage. Proof-of-work ended at the merge
  (block 15,537,394); heights past that point are computed with the
  last proof-of-work rules, which is what historical re-validation needs.
- ``CLASSIC``: the Ethereum Classic lineage. It shares Frontier and
  Homestead with mainnet, then diverges: the bomb is paused, resumed and
  finally disposed of, and uncle-aware adjustment arrives only with
  Atlantis.
- ``TEST``: every mainnet-lineage upgrade active from genesis.
- ``HOMESTEAD_ONLY``: Homestead at 1,150,000 and nothing else. This is the
  configuration assumed by conformance fixtures that carry no chain
  configuration of their own.
"""

from __future__ import annotations

from retarget.consensus.forks import (
    ECIP1010_CONTINUE,
    ECIP1010_PAUSE,
    ECIP1041,
    EIP100,
    EIP1234,
    EIP2,
    EIP2384,
    EIP3554,
    EIP4345,
    EIP5133,
    EIP649,
    ForkSchedule,
)


HOMESTEAD_BLOCK = 1_150_000
"""Homestead activation height, shared by both lineages."""

MAINNET = ForkSchedule(
    {
        EIP2: HOMESTEAD_BLOCK,
        EIP100: 4_370_000,    # Byzantium
        EIP649: 4_370_000,    # Byzantium
        EIP1234: 7_280_000,   # Constantinople
        EIP2384: 9_200_000,   # Muir Glacier
        EIP3554: 12_965_000,  # London
        EIP4345: 13_773_000,  # Arrow Glacier
        EIP5133: 15_050_000,  # Gray Glacier
    },
    name="mainnet",
)

CLASSIC = ForkSchedule(
    {
        EIP2: HOMESTEAD_BLOCK,
        ECIP1010_PAUSE: 3_000_000,
        ECIP1010_CONTINUE: 5_000_000,
        ECIP1041: 5_900_000,  # Defuse Difficulty Bomb
        EIP100: 8_772_000,    # Atlantis
    },
    name="classic",
)

TEST = ForkSchedule(
    {
        EIP2: 0,
        EIP100: 0,
        EIP649: 0,
        EIP1234: 0,
        EIP2384: 0,
        EIP3554: 0,
        EIP4345: 0,
        EIP5133: 0,
    },
    name="test",
)

HOMESTEAD_ONLY = ForkSchedule({EIP2: HOMESTEAD_BLOCK}, name="homestead")

PRESETS = {
    schedule.name: schedule
    for schedule in (MAINNET, CLASSIC, TEST, HOMESTEAD_ONLY)
}
"""Built-in schedules keyed by lineage name."""
