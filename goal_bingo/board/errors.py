"""Errors raised by the bingo board core."""


class BingoError(Exception):
    """Base class for all board errors."""


class ValidationError(BingoError):
    """User input that cannot be applied to the board."""


class IncompleteBoard(ValidationError):
    """Raised when the board is started while some cells have no title."""

    def __init__(self, blank_cells: list[int]):
        self.blank_cells = blank_cells
        super().__init__(
            f"Fill all cells before starting ({len(blank_cells)} still blank)"
        )


class InvalidRange(ValidationError):
    """Start date falls after end date."""


class InvalidDate(ValidationError):
    """Date key is not an ISO date (YYYY-MM-DD)."""


class GoalTypeMismatch(ValidationError):
    """Action does not apply to this kind of goal."""


class InvalidTransition(ValidationError):
    """Action is not allowed in the current stage."""


class PersistenceError(BingoError):
    """Saved snapshot cannot be read."""


class CorruptSnapshot(PersistenceError):
    """Saved snapshot was read but cannot be decoded."""
