from typing import Dict, NamedTuple

from .errors import InvalidDifficulty


GRID_SIZE = 12
MAX_PLAYERS = 8
POINTS_PER_WORD = 10
PLACEMENT_MAX_ATTEMPTS = 100
DEFAULT_DIFFICULTY = 'medium'

PLAYER_COLORS = [
    '#3B82F6',  # blue
    '#EF4444',  # red
    '#10B981',  # green
    '#F59E0B',  # amber
    '#8B5CF6',  # violet
    '#EC4899',  # pink
    '#06B6D4',  # cyan
    '#F97316',  # orange
]


class Difficulty(NamedTuple):
    name: str
    word_count: int
    duration_seconds: int
    grid_size: int


DIFFICULTY_CONFIGS: Dict[str, Difficulty] = {
    'easy': Difficulty('easy', word_count=8, duration_seconds=120, grid_size=GRID_SIZE),
    'medium': Difficulty('medium', word_count=12, duration_seconds=90, grid_size=GRID_SIZE),
    'hard': Difficulty('hard', word_count=15, duration_seconds=60, grid_size=GRID_SIZE),
}


def get_difficulty(name=None) -> Difficulty:
    key = str(name or DEFAULT_DIFFICULTY).strip().lower()
    if key not in DIFFICULTY_CONFIGS:
        raise InvalidDifficulty(f'Unknown difficulty: {name}')
    return DIFFICULTY_CONFIGS[key]


def color_for(index: int) -> str:
    """Palette colour for the player joining at position ``index``."""
    return PLAYER_COLORS[index % len(PLAYER_COLORS)]
