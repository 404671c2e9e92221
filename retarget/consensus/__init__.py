# Difficulty rules: fork schedule, base adjustment, bomb, calculator

from .forks import CANONICAL_ORDER, ForkSchedule
from .base_adjustment import base_adjustment
from .bomb import bomb_adjustment
from .difficulty import MINIMUM_DIFFICULTY, DifficultyCalculator, calc_difficulty, verify_difficulty

__all__ = [
    'CANONICAL_ORDER',
    'ForkSchedule',
    'base_adjustment',
    'bomb_adjustment',
    'MINIMUM_DIFFICULTY',
    'DifficultyCalculator',
    'calc_difficulty',
    'verify_difficulty',
]
