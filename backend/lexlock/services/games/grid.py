"""Word-search grid generation.

Words are placed longest first at random anchors in one of three forward
directions. Each word gets a bounded number of attempts; a word that does
not fit is dropped with a warning and the game goes ahead with fewer words.
Crossings are allowed when the shared letter matches. Remaining cells are
filled with random letters.
"""

import logging
import random
import string
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Sequence

from .rules import GRID_SIZE, PLACEMENT_MAX_ATTEMPTS
from .vocabulary import Vocabulary, WordEntry


logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase


class GridCoordinate(NamedTuple):
    row: int
    col: int

    def to_dict(self):
        return {'row': self.row, 'col': self.col}

    @classmethod
    def from_dict(cls, data) -> 'GridCoordinate':
        return cls(int(data['row']), int(data['col']))


class Direction(NamedTuple):
    name: str
    dr: int
    dc: int


DIRECTIONS: List[Direction] = [
    Direction('horizontal', 0, 1),
    Direction('vertical', 1, 0),
    Direction('diagonal', 1, 1),
]
DIRECTIONS_BY_NAME: Dict[str, Direction] = {d.name: d for d in DIRECTIONS}


@dataclass(frozen=True)
class PlacedWord:
    word: str
    clue: str
    start: GridCoordinate
    end: GridCoordinate
    direction: str

    def cells(self) -> List[GridCoordinate]:
        d = DIRECTIONS_BY_NAME[self.direction]
        return [GridCoordinate(self.start.row + i * d.dr, self.start.col + i * d.dc) for i in range(len(self.word))]

    def to_dict(self):
        return {
            'word': self.word,
            'clue': self.clue,
            'start': self.start.to_dict(),
            'end': self.end.to_dict(),
            'direction': self.direction,
        }

    @classmethod
    def from_dict(cls, data) -> 'PlacedWord':
        return cls(
            word=data['word'],
            clue=data.get('clue', ''),
            start=GridCoordinate.from_dict(data['start']),
            end=GridCoordinate.from_dict(data['end']),
            direction=data['direction'],
        )


@dataclass
class WordSearchGrid:
    grid: List[List[str]]
    placed_words: List[PlacedWord]

    @property
    def size(self) -> int:
        return len(self.grid)


def can_place_word(grid: List[List[str]], word: str, row: int, col: int, direction: Direction) -> bool:
    size = len(grid)
    end_row = row + (len(word) - 1) * direction.dr
    end_col = col + (len(word) - 1) * direction.dc
    if not (0 <= row < size and 0 <= col < size):
        return False
    if not (0 <= end_row < size and 0 <= end_col < size):
        return False
    for i, ch in enumerate(word):
        cell = grid[row + i * direction.dr][col + i * direction.dc]
        if cell and cell != ch:
            return False
    return True


def _write_word(grid: List[List[str]], word: str, row: int, col: int, direction: Direction) -> None:
    for i, ch in enumerate(word):
        grid[row + i * direction.dr][col + i * direction.dc] = ch


def place_words(
    entries: Sequence[WordEntry],
    grid_size: int = GRID_SIZE,
    max_attempts: int = PLACEMENT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> WordSearchGrid:
    """Place ``entries`` on an empty ``grid_size`` square grid and fill the rest.

    The returned placed words are a subset of ``entries``; the grid is
    always fully populated.
    """
    rng = rng or random.Random()
    grid: List[List[str]] = [['' for _ in range(grid_size)] for _ in range(grid_size)]
    placed: List[PlacedWord] = []

    ordered = sorted(entries, key=lambda e: len(e.word), reverse=True)
    for entry in ordered:
        word = entry.word.upper()
        for _ in range(max_attempts):
            direction = rng.choice(DIRECTIONS)
            row = rng.randrange(grid_size)
            col = rng.randrange(grid_size)
            if can_place_word(grid, word, row, col, direction):
                _write_word(grid, word, row, col, direction)
                end = GridCoordinate(row + (len(word) - 1) * direction.dr, col + (len(word) - 1) * direction.dc)
                placed.append(PlacedWord(word, entry.clue, GridCoordinate(row, col), end, direction.name))
                break
        else:
            logger.warning(f"[grid-drop] could not place word={word} after {max_attempts} attempts")

    for r in range(grid_size):
        for c in range(grid_size):
            if not grid[r][c]:
                grid[r][c] = rng.choice(ALPHABET)

    return WordSearchGrid(grid=grid, placed_words=placed)


class GridGenerator:
    def __init__(
        self,
        vocabulary: Optional[Vocabulary] = None,
        grid_size: int = GRID_SIZE,
        max_attempts: int = PLACEMENT_MAX_ATTEMPTS,
        rng: Optional[random.Random] = None,
    ):
        self.vocabulary = vocabulary or Vocabulary()
        self.grid_size = grid_size
        self.max_attempts = max_attempts
        self.rng = rng or random.Random()

    def generate(self, word_count: int, grid_size: Optional[int] = None) -> WordSearchGrid:
        size = grid_size or self.grid_size
        entries = self.vocabulary.sample(word_count)
        result = place_words(entries, size, self.max_attempts, self.rng)
        if len(result.placed_words) < len(entries):
            logger.warning(
                f"[grid-degraded] placed {len(result.placed_words)} of {len(entries)} words on {size}x{size} grid"
            )
        return result
