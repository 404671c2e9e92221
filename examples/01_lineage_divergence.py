"""
Example 01: Lineage Divergence
================================

This example walks one parent block across the fork heights of the two
built-in lineages and shows where their difficulty rules part ways:

1. Frontier -> Homestead: both lineages switch to the linear timestamp rule
   at block 1,150,000.
2. Byzantium (mainnet only, block 4,370,000): uncle-aware adjustment and a
   3,000,000-block bomb delay.
3. ECIP-1010 (classic only, blocks 3,000,000-5,000,000): the bomb freezes,
   then resumes net of the pause.
4. ECIP-1041 (classic only, block 5,900,000): the bomb is removed.

Each row prints the base adjustment, the bomb term, and the resulting
difficulty for a parent with difficulty 10^14 and a 14-second block time.

Usage:
    python -m examples.01_lineage_divergence
"""

import logging
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


PARENT_DIFFICULTY = 10**14
BLOCK_TIME = 14

HEIGHTS = [
    1_149_999, 1_150_000,
    2_999_999, 3_000_000,
    4_369_999, 4_370_000,
    5_000_000, 5_899_999, 5_900_000,
    9_200_000, 15_050_000,
]


def main():
    try:
        from retarget import CLASSIC, MAINNET, BlockHeader, calc_difficulty
        from retarget.consensus.base_adjustment import base_adjustment
        from retarget.consensus.bomb import bomb_adjustment
    except ImportError as e:
        print(f"Import error: {e}")
        print("Install the package first:  pip install -e .")
        return

    logging.basicConfig(level=logging.WARNING)

    print("=" * 72)
    print("Ethash Difficulty - Lineage Divergence Example")
    print("=" * 72)
    print(f"\nParent difficulty: {PARENT_DIFFICULTY:,}   block time: {BLOCK_TIME}s\n")

    header = f"{'block':>12} | {'lineage':<8} | {'base':>14} | {'bomb':>18} | {'difficulty':>20}"
    print(header)
    print("-" * len(header))

    for height in HEIGHTS:
        parent = BlockHeader(number=height - 1, timestamp=0, difficulty=PARENT_DIFFICULTY)
        for schedule in (MAINNET, CLASSIC):
            base = base_adjustment(height, BLOCK_TIME, False, PARENT_DIFFICULTY, schedule)
            bomb = bomb_adjustment(height, schedule)
            difficulty = calc_difficulty(schedule, BLOCK_TIME, parent)
            print(
                f"{height:>12,} | {schedule.name:<8} | {base:>+14,} | "
                f"{bomb:>18,} | {difficulty:>20,}"
            )
        print()

    print("Note how the bomb term drops on mainnet at every delay and stays")
    print("at zero on classic from block 5,900,000 onwards.")


if __name__ == "__main__":
    main()
