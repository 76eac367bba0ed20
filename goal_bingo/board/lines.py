"""Bingo line detection."""

from typing import NamedTuple, Sequence


class Line(NamedTuple):
    """A row, column or diagonal of the grid."""

    kind: str  # "row", "column", "diagonal", "anti_diagonal"
    position: int
    indices: tuple[int, ...]


def max_lines(size: int) -> int:
    """Number of lines on a size x size board."""
    return 2 * size + 2


def board_lines(size: int) -> list[Line]:
    """
    List every line of a size x size board.

    Rows first, then columns, then the main diagonal (top-left to
    bottom-right) and the anti-diagonal (top-right to bottom-left).
    """
    lines = []

    for r in range(size):
        lines.append(Line("row", r, tuple(r * size + c for c in range(size))))

    for c in range(size):
        lines.append(Line("column", c, tuple(r * size + c for r in range(size))))

    lines.append(Line("diagonal", 0, tuple(i * size + i for i in range(size))))
    lines.append(
        Line("anti_diagonal", 0, tuple(i * size + (size - 1 - i) for i in range(size)))
    )

    return lines


def completed_lines(size: int, flags: Sequence[bool]) -> list[Line]:
    """
    Return the lines whose cells are all completed.

    Args:
        size: Grid size
        flags: Completion flag per cell, row by row (size * size entries)

    Raises:
        ValueError: If flags does not cover the grid exactly
    """
    if size < 1:
        raise ValueError(f"Grid size must be positive, got {size}")
    if len(flags) != size * size:
        raise ValueError(
            f"Expected {size * size} completion flags for a {size}x{size} board, "
            f"got {len(flags)}"
        )

    return [line for line in board_lines(size) if all(flags[i] for i in line.indices)]


def count_completed_lines(size: int, flags: Sequence[bool]) -> int:
    """Count completed rows, columns and diagonals (0 to 2 * size + 2)."""
    return len(completed_lines(size, flags))
