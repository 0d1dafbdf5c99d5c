"""
Error types
===========

Row-level problems (bad date, bad coordinate, too few columns) are
`ValueError` subclasses: the loader catches them, counts them and moves on.

`InsufficientData` is the one analytical error that reaches the caller,
because no forecast can be made from a single year.
"""

from __future__ import annotations
from typing import Optional


class FocosError(Exception):
    """Base class for every error raised by this package."""


class UnparseableDate(FocosError, ValueError):
    def __init__(self, raw: Optional[str]) -> None:
        super().__init__(f"Could not parse date: {raw!r}")
        self.raw = raw


class InvalidCoordinate(FocosError, ValueError):
    def __init__(self, message: str, *, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class MalformedRow(FocosError, ValueError):
    def __init__(self, n_columns: int, expected: int) -> None:
        super().__init__(f"Row has {n_columns} columns, expected at least {expected}")
        self.n_columns = n_columns
        self.expected = expected


class InsufficientData(FocosError):
    """Raised when a regression is asked for with fewer than 2 distinct years."""


class NoSourceFiles(FocosError):
    """Raised when the source directory holds no candidate CSV files."""
