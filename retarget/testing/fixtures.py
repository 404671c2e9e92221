"""
Difficulty conformance fixtures.

The shared client test suites describe difficulty vectors as JSON objects
keyed by test name::

    {
      "homesteadSlowBlock": {
        "parentTimestamp": "0x55ba4",
        "parentDifficulty": "0x2000000",
        "currentTimestamp": "0x55bb1",
        "currentBlockNumber": "0x118c30",
        "currentDifficulty": "0x2000200"
      }
    }

Numbers are decimal or ``0x`` hex strings. Optional members:

- ``parentUnclesHash``: digest of the parent's uncle list, or
  ``parentUncles``: the parent's uncle count.
- ``chainConfig``: a chain configuration object for this vector only.
  Vectors without one use the Homestead-only schedule.

Member names are matched case-insensitively: both ``currentBlockNumber``
and ``currentBlocknumber`` appear in published files.

``generate_fixtures`` writes new vectors around every activation height of
the given schedules, which is how the published vectors were produced.
"""

from __future__ import annotations

import json
import logging
import random
from typing import Any, Iterable, Mapping, Optional

from retarget.config.chains import HOMESTEAD_ONLY
from retarget.config.loader import schedule_from_chain_config, schedule_to_chain_config
from retarget.consensus.difficulty import calc_difficulty, verify_difficulty
from retarget.consensus.forks import ForkSchedule
from retarget.core.header import EMPTY_UNCLE_HASH, BlockHeader, uncles_hash_for_count
from retarget.exceptions import ConfigurationError, FixtureError
from retarget.utils.encoding import digest_from_hex, digest_to_hex, parse_quantity

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = (
    "parentTimestamp",
    "parentDifficulty",
    "currentTimestamp",
    "currentBlockNumber",
    "currentDifficulty",
)

EXTRA_HEIGHTS = (4_200_000, 9_999_999, 10_000_000)
"""Heights added to every generated schedule besides its activation heights."""

MAX_UNCLE_COUNT_BITS = 64
"""Bit width accepted for a ``parentUncles`` count."""

MAX_TIME = 999_999_999
MAX_TIME_DELTA = 42


# ---------------------------------------------------------------------------
# DifficultyFixture
# ---------------------------------------------------------------------------

class DifficultyFixture:
    """
    One difficulty test vector.

    Attributes:
        name: Test-case name.
        parent_timestamp: Parent block timestamp.
        parent_difficulty: Parent block difficulty.
        current_timestamp: Child block timestamp.
        current_block_number: Child block height (at least 1).
        current_difficulty: Expected child difficulty.
        parent_uncles_hash: Parent uncle-list digest.
        schedule: Fork schedule the vector is evaluated under.
        has_chain_config: Whether the vector carried its own chain config.
    """

    def __init__(
        self,
        name: str,
        parent_timestamp: int,
        parent_difficulty: int,
        current_timestamp: int,
        current_block_number: int,
        current_difficulty: int,
        parent_uncles_hash: bytes = EMPTY_UNCLE_HASH,
        schedule: Optional[ForkSchedule] = None,
    ) -> None:
        if current_block_number < 1:
            raise FixtureError(
                f"{name}: currentBlockNumber must be at least 1, got {current_block_number}"
            )
        self.name = name
        self.parent_timestamp = parent_timestamp
        self.parent_difficulty = parent_difficulty
        self.current_timestamp = current_timestamp
        self.current_block_number = current_block_number
        self.current_difficulty = current_difficulty
        self.parent_uncles_hash = parent_uncles_hash
        self.has_chain_config = schedule is not None
        self.schedule = schedule if schedule is not None else HOMESTEAD_ONLY

    def parent_header(self) -> BlockHeader:
        """The parent header implied by this vector."""
        return BlockHeader(
            number=self.current_block_number - 1,
            timestamp=self.parent_timestamp,
            difficulty=self.parent_difficulty,
            uncles_hash=self.parent_uncles_hash,
        )

    def compute(self) -> int:
        """Run the calculator on this vector's inputs."""
        return calc_difficulty(self.schedule, self.current_timestamp, self.parent_header())

    def check(self) -> bool:
        """
        Verify the calculator reproduces ``current_difficulty``.

        Raises:
            DifficultyMismatchError: If it does not.
        """
        return verify_difficulty(self.current_difficulty, self.compute())

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> DifficultyFixture:
        """
        Parse one vector.

        Raises:
            FixtureError: If a required member is missing, a number or digest
                cannot be parsed, or the embedded chain config is invalid.
        """
        if not isinstance(data, Mapping):
            raise FixtureError(f"{name}: expected an object, got {type(data).__name__}")

        fields = {str(k).lower(): v for k, v in data.items()}

        def number(field: str) -> int:
            try:
                raw = fields[field.lower()]
            except KeyError:
                raise FixtureError(f"{name}: missing required field {field!r}") from None
            try:
                return parse_quantity(raw)
            except ValueError as e:
                raise FixtureError(f"{name}: bad {field}: {e}") from e

        values = {field: number(field) for field in REQUIRED_FIELDS}

        uncles_hash = EMPTY_UNCLE_HASH
        try:
            if fields.get("parentuncleshash") is not None:
                uncles_hash = digest_from_hex(fields["parentuncleshash"])
            elif fields.get("parentuncles") is not None:
                uncles_hash = uncles_hash_for_count(
                    parse_quantity(fields["parentuncles"], bits=MAX_UNCLE_COUNT_BITS)
                )
        except ValueError as e:
            raise FixtureError(f"{name}: bad parent uncles: {e}") from e

        schedule = None
        if fields.get("chainconfig") is not None:
            try:
                schedule = schedule_from_chain_config(fields["chainconfig"], name=name)
            except ConfigurationError as e:
                raise FixtureError(f"{name}: bad chainConfig: {e}") from e

        return cls(
            name=name,
            parent_timestamp=values["parentTimestamp"],
            parent_difficulty=values["parentDifficulty"],
            current_timestamp=values["currentTimestamp"],
            current_block_number=values["currentBlockNumber"],
            current_difficulty=values["currentDifficulty"],
            parent_uncles_hash=uncles_hash,
            schedule=schedule,
        )

    def to_dict(self) -> dict:
        """Serialize with decimal-string numbers, the generator's output format."""
        data = {
            "parentTimestamp": str(self.parent_timestamp),
            "currentTimestamp": str(self.current_timestamp),
            "parentDifficulty": str(self.parent_difficulty),
            "currentDifficulty": str(self.current_difficulty),
            "parentUnclesHash": digest_to_hex(self.parent_uncles_hash),
            "currentBlockNumber": str(self.current_block_number),
        }
        if self.has_chain_config:
            data["chainConfig"] = schedule_to_chain_config(self.schedule)
        return data

    def __repr__(self) -> str:
        return (
            f"DifficultyFixture(name={self.name!r}, "
            f"block={self.current_block_number}, "
            f"schedule={self.schedule.name!r})"
        )


# ---------------------------------------------------------------------------
# Loading and generation
# ---------------------------------------------------------------------------

def parse_fixtures(data: Mapping[str, Any]) -> dict[str, DifficultyFixture]:
    """Parse a name -> vector mapping."""
    if not isinstance(data, Mapping):
        raise FixtureError(f"Fixture file must hold an object, got {type(data).__name__}")
    return {name: DifficultyFixture.from_dict(name, case) for name, case in data.items()}


def load_fixtures(path: str) -> dict[str, DifficultyFixture]:
    """
    Load every vector from a fixture file.

    Raises:
        FixtureError: If the file cannot be read, is not JSON, or holds a
            malformed vector.
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as e:
        raise FixtureError(f"Cannot read fixture file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise FixtureError(f"Fixture file {path} is not valid JSON: {e}") from e

    fixtures = parse_fixtures(data)
    logger.info("Loaded %d difficulty fixtures from %s", len(fixtures), path)
    return fixtures


def with_surrounding_heights(heights: Iterable[Optional[int]]) -> list[int]:
    """
    Expand each height ``h`` into ``h``, ``h + 1`` and (if positive) ``h - 1``.

    Example:
        >>> with_surrounding_heights([0, None, 5])
        [0, 1, 5, 6, 4]
    """
    out = []
    for height in heights:
        if height is None:
            continue
        out.append(height)
        out.append(height + 1)
        if height > 0:
            out.append(height - 1)
    return out


def generate_fixtures(
    schedules: Iterable[ForkSchedule],
    rng: Optional[random.Random] = None,
) -> dict[str, DifficultyFixture]:
    """
    Generate vectors around every activation height of each schedule.

    For every schedule, each activation height ``h`` yields vectors at
    ``h - 1``, ``h`` and ``h + 1``; ``EXTRA_HEIGHTS`` are added as well.
    Block number 0 is skipped since it has no parent. Timestamps, time
    deltas (0-41 s) and parent difficulties are random; the expected
    difficulty is whatever ``calc_difficulty`` returns, so these vectors pin
    the current behaviour for regression and for other implementations.

    Args:
        schedules: Lineages to cover.
        rng: Random source; pass a seeded ``random.Random`` for reproducible
            output.

    Returns:
        Vectors keyed by their running index as a string.
    """
    rng = rng or random.Random()
    fixtures: dict[str, DifficultyFixture] = {}

    for schedule in schedules:
        heights = with_surrounding_heights(schedule.interesting_heights())
        heights.extend(EXTRA_HEIGHTS)
        for block_number in heights:
            if block_number == 0:
                continue
            parent_timestamp = rng.randrange(MAX_TIME)
            current_timestamp = parent_timestamp + rng.randrange(MAX_TIME_DELTA)
            parent_difficulty = rng.randrange(1, MAX_TIME)
            name = str(len(fixtures))
            fixture = DifficultyFixture(
                name=name,
                parent_timestamp=parent_timestamp,
                parent_difficulty=parent_difficulty,
                current_timestamp=current_timestamp,
                current_block_number=block_number,
                current_difficulty=0,
                schedule=schedule,
            )
            fixture.current_difficulty = fixture.compute()
            fixtures[name] = fixture

    logger.debug("Generated %d difficulty fixtures", len(fixtures))
    return fixtures


def dump_fixtures(fixtures: Mapping[str, DifficultyFixture], path: str) -> None:
    """Write vectors to ``path`` as indented JSON."""
    data = {name: fixture.to_dict() for name, fixture in fixtures.items()}
    with open(path, "w") as f:
        json.dump(data, f, indent=4)
    logger.info("Wrote %d difficulty fixtures to %s", len(data), path)
