"""
Chain configuration loader.

Builds ``ForkSchedule`` values from the ``config`` object of a geth-style
genesis file, e.g.::

    {
      "config": {
        "chainId": 61,
        "homesteadBlock": 1150000,
        "ecip1010PauseBlock": 3000000,
        "ecip1010Length": 2000000,
        "disposalBlock": 5900000,
        "eip100FBlock": 8772000
      }
    }

Two vocabularies are understood. Named forks (``byzantiumBlock``,
``constantinopleBlock``, ...) switch on every difficulty-relevant EIP they
bundled. Per-feature keys (``eip100FBlock``, ``eip649FBlock``, ...) name a
single EIP and take precedence, which is how a lineage adopts part of a
fork without the rest. Keys are matched case-insensitively. Keys with no
bearing on difficulty (``chainId``, ``eip155Block``, ...) are ignored, and
any key not recognized at all is ignored with a warning.

Every failure raises ``ConfigurationError``; a failed load has no effect on
schedules that already exist.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

from retarget.config.chains import PRESETS
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
from retarget.exceptions import ConfigurationError
from retarget.utils.encoding import parse_quantity

logger = logging.getLogger(__name__)


NAMED_FORK_KEYS = {
    "homesteadblock": (EIP2,),
    "byzantiumblock": (EIP100, EIP649),
    "constantinopleblock": (EIP1234,),
    "muirglacierblock": (EIP2384,),
    "londonblock": (EIP3554,),
    "arrowglacierblock": (EIP4345,),
    "grayglacierblock": (EIP5133,),
}
"""Lower-cased named-fork keys and the upgrades each one implies."""

FEATURE_KEYS = {
    "eip2fblock": EIP2,
    "eip100fblock": EIP100,
    "eip649fblock": EIP649,
    "eip1234fblock": EIP1234,
    "eip2384fblock": EIP2384,
    "eip3554fblock": EIP3554,
    "eip4345fblock": EIP4345,
    "eip5133fblock": EIP5133,
    "ecip1010pauseblock": ECIP1010_PAUSE,
    "disposalblock": ECIP1041,
    "ecip1041block": ECIP1041,
}
"""Lower-cased per-feature keys. These override named forks."""

ECIP1010_LENGTH_KEY = "ecip1010length"

KNOWN_IRRELEVANT_KEYS = frozenset({
    "chainid",
    "daoforkblock",
    "daoforksupport",
    "eip150block",
    "eip150hash",
    "eip155block",
    "eip158block",
    "petersburgblock",
    "istanbulblock",
    "berlinblock",
    "mergenetsplitblock",
    "shanghaitime",
    "cancuntime",
    "terminaltotaldifficulty",
    "terminaltotaldifficultypassed",
    "ethash",
    "clique",
})
"""Lower-cased keys that are known to have no effect on difficulty."""


def _parse_height(key: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return parse_quantity(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {key!r}: {e}") from e


def schedule_from_chain_config(
    config: Mapping[str, Any],
    name: str = "custom",
) -> ForkSchedule:
    """
    Build a fork schedule from a geth-style chain configuration object.

    Args:
        config: The ``config`` object of a genesis file.
        name: Lineage label for the resulting schedule.

    Returns:
        A new, validated ``ForkSchedule``.

    Raises:
        ConfigurationError: If the object is not a mapping, a height cannot be
            parsed, ``ecip1010Length`` is given without a pause block, or the
            resulting schedule is invalid (``ScheduleError``).
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            f"Chain config must be an object, got {type(config).__name__}"
        )

    named: dict[str, Optional[int]] = {}
    features: dict[str, Optional[int]] = {}
    pause_length: Optional[int] = None

    for key, value in config.items():
        lowered = str(key).lower()
        if lowered in NAMED_FORK_KEYS:
            height = _parse_height(key, value)
            for upgrade in NAMED_FORK_KEYS[lowered]:
                named[upgrade] = height
        elif lowered in FEATURE_KEYS:
            features[FEATURE_KEYS[lowered]] = _parse_height(key, value)
        elif lowered == ECIP1010_LENGTH_KEY:
            pause_length = _parse_height(key, value)
        elif lowered in KNOWN_IRRELEVANT_KEYS:
            logger.debug("Ignoring chain config key %r (no effect on difficulty)", key)
        else:
            logger.warning("Ignoring unrecognized chain config key %r", key)

    heights = dict(named)
    heights.update(features)

    if pause_length is not None:
        pause = heights.get(ECIP1010_PAUSE)
        if pause is None:
            raise ConfigurationError(
                "ecip1010Length is set but ecip1010PauseBlock is not"
            )
        heights[ECIP1010_CONTINUE] = pause + pause_length

    schedule = ForkSchedule(heights, name=name)
    logger.debug("Built fork schedule %r: %s", name, schedule.to_dict())
    return schedule


def schedule_to_chain_config(schedule: ForkSchedule) -> dict:
    """
    Render a schedule as a chain configuration object using per-feature keys.

    The output loads back into an equal schedule through
    ``schedule_from_chain_config``. The ECIP-1010 continue height is
    expressed as ``ecip1010Length``, as chain configs do.
    """
    config: dict[str, int] = {}
    for upgrade, height in schedule.to_dict().items():
        if upgrade == ECIP1010_CONTINUE:
            config["ecip1010Length"] = height - schedule.activation_height(ECIP1010_PAUSE)
        elif upgrade == ECIP1041:
            config["disposalBlock"] = height
        elif upgrade == ECIP1010_PAUSE:
            config["ecip1010PauseBlock"] = height
        else:
            config[f"{upgrade}FBlock"] = height
    return config


def load_genesis(path: str, name: Optional[str] = None) -> ForkSchedule:
    """
    Load a fork schedule from a genesis JSON file.

    The file may be a full genesis (with a ``config`` member) or a bare
    chain configuration object. A ``config`` member that is present must be
    an object.

    Args:
        path: Path to the JSON file.
        name: Lineage label; defaults to the file path.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or holds
            an invalid configuration.
    """
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read chain config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Chain config {path} is not valid JSON: {e}") from e

    if isinstance(data, Mapping) and "config" in data:
        data = data["config"]
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Genesis file {path} has a config member that is not an object"
            )
    schedule = schedule_from_chain_config(data, name=name or path)
    logger.info("Loaded fork schedule %r from %s", schedule.name, path)
    return schedule


def get_schedule(source: Union[str, ForkSchedule, Mapping[str, Any]]) -> ForkSchedule:
    """
    Resolve a schedule from a preset name, a chain config object or a schedule.

    Examples:
        >>> get_schedule("classic").name
        'classic'
        >>> get_schedule({"homesteadBlock": 0}).activation_height("eip2")
        0

    Raises:
        ConfigurationError: For unknown preset names or invalid configs.
    """
    if isinstance(source, ForkSchedule):
        return source
    if isinstance(source, str):
        try:
            return PRESETS[source]
        except KeyError:
            raise ConfigurationError(
                f"Unknown chain {source!r}; expected one of {', '.join(sorted(PRESETS))}"
            ) from None
    return schedule_from_chain_config(source)
