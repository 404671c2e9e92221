# Ethash difficulty retargeting

from .consensus.difficulty import (
    MINIMUM_DIFFICULTY,
    DifficultyCalculator,
    calc_difficulty,
    verify_difficulty,
)
from .consensus.forks import ForkSchedule
from .core.header import EMPTY_UNCLE_HASH, BlockHeader
from .config.chains import CLASSIC, MAINNET, TEST
from .config.loader import get_schedule, load_genesis, schedule_from_chain_config
from .exceptions import (
    ConfigurationError,
    DifficultyMismatchError,
    FixtureError,
    ScheduleError,
)

__version__ = "0.1.0"

__all__ = [
    # Calculation
    'calc_difficulty',
    'verify_difficulty',
    'DifficultyCalculator',
    'MINIMUM_DIFFICULTY',
    # Inputs
    'ForkSchedule',
    'BlockHeader',
    'EMPTY_UNCLE_HASH',
    # Chain configuration
    'MAINNET',
    'CLASSIC',
    'TEST',
    'get_schedule',
    'load_genesis',
    'schedule_from_chain_config',
    # Errors
    'ConfigurationError',
    'ScheduleError',
    'FixtureError',
    'DifficultyMismatchError',
]
