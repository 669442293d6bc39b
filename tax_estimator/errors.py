"""Exception hierarchy for the tax estimator.

Every failure in the engine is deterministic for a given input, so none of
these are retried. Callers either fix the data or the call site.

    EstimaterError
    ├── UserError
    ├── ParsingError
    ├── FileError
    ├── ServerError
    │   └── TabulationError
    └── BracketError
        ├── TaxRateError
        ├── RangeError
        ├── OverlapError
        ├── SmallIncomeError
        └── LargeIncomeError
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tax_estimator.tax.brackets import BracketInfo


class EstimaterError(Exception):
    """Base class for all tax estimator errors."""


class UserError(EstimaterError):
    """Exception raised for malformed caller input."""


class ParsingError(EstimaterError):
    """Exception raised when a schedule or config file cannot be deserialized."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        errors: list[str] | None = None,
    ):
        """Initialize ParsingError.

        Args:
            message: Human-readable error message
            source: Name of the file or stream being parsed
            errors: List of specific validation errors
        """
        self.source = source
        self.errors = errors or []
        super().__init__(message)


class FileError(EstimaterError):
    """Exception raised when a data source does not exist."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


class ServerError(EstimaterError):
    """Exception raised when a tax computation fails internally."""


class TabulationError(ServerError):
    """Supplied cumulative tax disagrees with the value derived from lower brackets."""

    def __init__(self, message: str, bracket: BracketInfo, expected: object):
        self.bracket = bracket
        self.expected = expected
        super().__init__(message)


class BracketError(EstimaterError):
    """Exception raised for invalid brackets or incomes outside a schedule."""

    def __init__(self, message: str, brackets: Sequence[BracketInfo] = ()):
        """Initialize BracketError.

        Args:
            message: Human-readable error message
            brackets: The offending bracket(s), if any
        """
        self.brackets = tuple(brackets)
        super().__init__(message)


class TaxRateError(BracketError):
    """Tax rate not within [0, 1]."""


class RangeError(BracketError):
    """Bracket minimum is not below its maximum."""


class OverlapError(BracketError):
    """Two brackets' inclusive spans intersect."""


class SmallIncomeError(BracketError):
    """Income is below the minimum of every bracket."""


class LargeIncomeError(BracketError):
    """Income exceeds the top bracket or falls in a gap between brackets."""
