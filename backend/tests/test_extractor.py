import random

import pytest

from lexlock.services.games.extractor import extract_word, is_straight_line, word_cells
from lexlock.services.games.grid import GridCoordinate as C, place_words
from lexlock.services.games.vocabulary import BUSINESS_WORDS_POOL


GRID = [
    list('CATS'),
    list('OXRE'),
    list('DOGE'),
    list('EYEN'),
]


def test_horizontal_vertical_and_diagonal():
    assert extract_word(GRID, C(0, 0), C(0, 3)) == 'CATS'
    assert extract_word(GRID, C(0, 0), C(3, 0)) == 'CODE'
    assert extract_word(GRID, C(0, 0), C(3, 3)) == 'CXGN'


def test_reverse_and_anti_diagonal_walks():
    assert extract_word(GRID, C(0, 3), C(0, 0)) == 'STAC'
    assert extract_word(GRID, C(3, 0), C(0, 3)) == 'EORS'


def test_single_cell():
    assert extract_word(GRID, C(2, 1), C(2, 1)) == 'O'
    assert word_cells(C(2, 1), C(2, 1)) == [C(2, 1)]


def test_non_straight_pair_yields_nothing():
    assert not is_straight_line(C(0, 0), C(1, 3))
    assert word_cells(C(0, 0), C(1, 3)) == []
    assert extract_word(GRID, C(0, 0), C(1, 3)) == ''


@pytest.mark.parametrize('seed', range(10))
def test_extraction_matches_every_placed_word(seed):
    board = place_words(BUSINESS_WORDS_POOL, 12, rng=random.Random(seed))
    for placed in board.placed_words:
        assert extract_word(board.grid, placed.start, placed.end) == placed.word
        assert extract_word(board.grid, placed.end, placed.start) == placed.word[::-1]
        assert word_cells(placed.start, placed.end) == placed.cells()
