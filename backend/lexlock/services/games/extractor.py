from typing import List, Sequence

from .grid import GridCoordinate


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def is_straight_line(start: GridCoordinate, end: GridCoordinate) -> bool:
    dr = end.row - start.row
    dc = end.col - start.col
    return dr == 0 or dc == 0 or abs(dr) == abs(dc)


def word_cells(start: GridCoordinate, end: GridCoordinate) -> List[GridCoordinate]:
    """Cells walked from ``start`` to ``end`` inclusive.

    Pairs that are not on a common row, column or diagonal yield no cells.
    """
    if not is_straight_line(start, end):
        return []
    dr = end.row - start.row
    dc = end.col - start.col
    step_r, step_c = _sign(dr), _sign(dc)
    length = max(abs(dr), abs(dc)) + 1
    return [GridCoordinate(start.row + i * step_r, start.col + i * step_c) for i in range(length)]


def in_bounds(grid: Sequence[Sequence[str]], coord: GridCoordinate) -> bool:
    return 0 <= coord.row < len(grid) and 0 <= coord.col < len(grid[coord.row])


def extract_word(grid: Sequence[Sequence[str]], start: GridCoordinate, end: GridCoordinate) -> str:
    return ''.join(grid[c.row][c.col] for c in word_cells(start, end) if in_bounds(grid, c)).upper()
