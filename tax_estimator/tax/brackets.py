"""Progressive tax brackets. Usable for both state and federal income taxes.

A schedule is a list of brackets, each taxing the income inside its inclusive
``[bracket_min, bracket_max]`` span at a flat rate. Every bracket also carries
the tax owed on all income below it (``cumulative_previous_tax``), so a lookup
only needs the bracket that contains the income:

    tax = cumulative_previous_tax + tax_rate * (income - previous.bracket_max)

Schedules come from external data and are never trusted as-is. They are
sorted, their cumulative totals are recomputed and cross-checked, and every
bracket is validated before the first lookup.

Example:
    >>> schedule = TaxBracketSchedule.from_brackets([
    ...     BracketInfo.create(1, 10275, "0.10", "0"),
    ...     BracketInfo.create(10276, 41775, "0.12", "1027.50"),
    ... ])
    >>> schedule.calculate_tax_amount(30000)
    Decimal('3394.50')
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import TYPE_CHECKING

from tax_estimator.errors import (
    BracketError,
    LargeIncomeError,
    OverlapError,
    RangeError,
    ServerError,
    SmallIncomeError,
    TabulationError,
    TaxRateError,
)
from tax_estimator.tax.rounding import ZERO, Number, round_to_hundredths, to_decimal

if TYPE_CHECKING:
    from tax_estimator.tax.models import ScheduleDocument


# =============================================================================
# Single Bracket
# =============================================================================


@dataclass(frozen=True)
class BracketInfo:
    """An individual tax bracket.

    Brackets order by ``bracket_min`` only. Two brackets are equal when all four
    fields match, which is what makes repeated loads of the same data compare
    element-wise equal.

    Attributes:
        bracket_min: Lower limit (inclusive). Cannot overlap the previous bracket.
        bracket_max: Upper limit (inclusive). Cannot overlap the next bracket.
        tax_rate: Fraction of the income within this bracket that is taxed, 0 <= rate <= 1.
        cumulative_previous_tax: Tax owed through all lower brackets, excluding
            this one. ``None`` until the schedule has been tabulated.
    """

    bracket_min: int
    bracket_max: int
    tax_rate: Decimal
    cumulative_previous_tax: Decimal | None = None

    @classmethod
    def create(
        cls,
        bracket_min: int,
        bracket_max: int,
        tax_rate: Number,
        cumulative_previous_tax: Number | None = None,
    ) -> BracketInfo:
        """Build a bracket after validating its bounds and rate.

        Raises:
            TaxRateError: If the rate is not a number within [0, 1].
            RangeError: If bracket_min >= bracket_max.
        """
        rate = to_decimal(tax_rate)
        cls.validate_new_bracket(bracket_min, bracket_max, rate)
        cumulative = None if cumulative_previous_tax is None else to_decimal(cumulative_previous_tax)
        return cls(
            bracket_min=bracket_min,
            bracket_max=bracket_max,
            tax_rate=rate,
            cumulative_previous_tax=cumulative,
        )

    @staticmethod
    def validate_new_bracket(bracket_min: int, bracket_max: int, tax_rate: Number) -> None:
        """Validate the bounds and rate of a bracket.

        Raises:
            TaxRateError: If the rate is outside [0, 1].
            RangeError: If bracket_min >= bracket_max.
        """
        rate = to_decimal(tax_rate)
        if not rate.is_finite() or not Decimal("0") <= rate <= Decimal("1"):
            raise TaxRateError(f"Tax rate {rate} not within [0, 1]")
        if bracket_min >= bracket_max:
            raise RangeError(
                f"Bracket minimum {bracket_min} is >= bracket maximum ({bracket_max})"
            )

    def check_for_bracket_overlap(self, other: BracketInfo) -> bool:
        """Check whether two brackets' inclusive spans intersect.

        Overlap is found when the min or max of one bracket lies between the
        min and max of the other. Both directions are checked so a bracket
        fully containing the other is caught too.
        """
        return self._has_bound_within(other) or other._has_bound_within(self)

    def _has_bound_within(self, other: BracketInfo) -> bool:
        is_min_within_other = other.bracket_min <= self.bracket_min <= other.bracket_max
        is_max_within_other = other.bracket_min <= self.bracket_max <= other.bracket_max
        return is_min_within_other or is_max_within_other

    def contains(self, income: Decimal) -> bool:
        """Whether the income lies within this bracket's inclusive span."""
        return self.bracket_min <= income <= self.bracket_max

    def calculate_bracket_taxes(
        self, taxable_income: Number, previous: BracketInfo | None = None
    ) -> Decimal:
        """Total tax owed at an income that falls in this bracket.

        Args:
            taxable_income: Income to tax; expected to lie within this bracket.
            previous: The bracket immediately below this one, if any.

        Returns:
            This bracket's share of the income times its rate, plus the tax
            owed through all lower brackets, rounded to the cent.
        """
        income = to_decimal(taxable_income)
        if previous is None:
            own_tax = self.tax_rate * income
        else:
            own_tax = self.tax_rate * (income - previous.bracket_max)
        baseline = self.cumulative_previous_tax if self.cumulative_previous_tax is not None else ZERO
        return round_to_hundredths(own_tax + baseline)

    def calculate_prev_bracket_max(self, previous: BracketInfo | None) -> Decimal:
        """Compute what this bracket's cumulative_previous_tax should be.

        Args:
            previous: The bracket immediately below this one, already tabulated.

        Returns:
            The previous bracket's cumulative tax plus the tax on everything from
            its minimum up to this bracket's minimum. Zero for the first bracket.

        Raises:
            ServerError: If the previous bracket has not been tabulated.
        """
        if previous is None:
            return round_to_hundredths(ZERO)
        if previous.cumulative_previous_tax is None:
            raise ServerError(f"Previous bracket has not been tabulated: {previous}")
        span_tax = round_to_hundredths(
            (self.bracket_min - previous.bracket_min) * previous.tax_rate
        )
        return round_to_hundredths(previous.cumulative_previous_tax + span_tax)

    @property
    def sort_key(self) -> int:
        return self.bracket_min

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BracketInfo):
            return NotImplemented
        return self.bracket_min < other.bracket_min

    def __str__(self) -> str:
        text = (
            f"bracket_min = {self.bracket_min}. "
            f"bracket_max = {self.bracket_max}. "
            f"tax_rate = {self.tax_rate}."
        )
        if self.cumulative_previous_tax is not None:
            text += f" cumulative_previous_tax = {self.cumulative_previous_tax}."
        return text


# =============================================================================
# Bracket Schedule
# =============================================================================


class TaxBracketSchedule:
    """All tax brackets of one progressive schedule.

    Build schedules with :meth:`from_brackets` or :meth:`from_document`, which
    run sort, tabulation and validation in that order. The lower-level steps are
    public so each can be exercised on its own; a validated schedule is only
    read afterwards and is safe to share between computations.
    """

    def __init__(self, brackets: Iterable[BracketInfo] = ()):
        self._brackets: list[BracketInfo] = list(brackets)

    @classmethod
    def from_brackets(cls, brackets: Iterable[BracketInfo]) -> TaxBracketSchedule:
        """Sort, tabulate and validate a set of brackets.

        Raises:
            TabulationError: If a supplied cumulative total is inconsistent.
            BracketError: If a bracket is invalid or overlaps its predecessor.
        """
        schedule = cls(brackets)
        schedule.sort_brackets()
        schedule.tabulate_cumulative_taxes()
        schedule.validate_all_brackets()
        return schedule

    @classmethod
    def from_document(cls, document: ScheduleDocument) -> TaxBracketSchedule:
        """Build a validated schedule from its deserialized external shape."""
        return cls.from_brackets(
            BracketInfo(
                bracket_min=record.bracket_min,
                bracket_max=record.bracket_max,
                tax_rate=record.tax_rate,
                cumulative_previous_tax=record.cumulative_previous_tax,
            )
            for record in document.brackets
        )

    @property
    def brackets(self) -> tuple[BracketInfo, ...]:
        return tuple(self._brackets)

    def sort_brackets(self) -> None:
        """Stable-sort the brackets by their minimum."""
        self._brackets.sort(key=lambda bracket: bracket.sort_key)

    def tabulate_cumulative_taxes(self) -> None:
        """Recompute every bracket's cumulative total and cross-check supplied ones.

        Brackets without a supplied total get the computed one. A supplied total
        that disagrees is never corrected: the data is inconsistent and the
        schedule is unusable.

        Precondition:
            The brackets are sorted.

        Raises:
            TabulationError: If a supplied total differs from the computed one.
        """
        previous: BracketInfo | None = None
        tabulated: list[BracketInfo] = []

        for bracket in self._brackets:
            expected = bracket.calculate_prev_bracket_max(previous)
            supplied = bracket.cumulative_previous_tax
            if supplied is not None and supplied != expected:
                raise TabulationError(
                    f"Tabulating bracket costs failed. Cumulative given: {supplied}, "
                    f"calculated = {expected}. For bracket {bracket}",
                    bracket=bracket,
                    expected=expected,
                )
            if supplied is None:
                bracket = replace(bracket, cumulative_previous_tax=expected)
            tabulated.append(bracket)
            previous = bracket

        self._brackets = tabulated

    def validate_all_brackets(self) -> None:
        """Validate every bracket and check neighbours for overlap.

        Only adjacent brackets are compared, so overlap between brackets that
        are not neighbours after sorting goes undetected.

        Precondition:
            The brackets are sorted.

        Raises:
            TaxRateError: If a bracket's rate is outside [0, 1].
            RangeError: If a bracket's minimum is not below its maximum.
            OverlapError: If a bracket overlaps the one before it.
        """
        for bracket_idx, bracket in enumerate(self._brackets):
            try:
                BracketInfo.validate_new_bracket(
                    bracket.bracket_min, bracket.bracket_max, bracket.tax_rate
                )
            except BracketError as exc:
                raise type(exc)(f"{exc}. For bracket {bracket}", brackets=[bracket]) from exc

            if bracket_idx == 0:
                continue
            previous = self._brackets[bracket_idx - 1]
            if bracket.check_for_bracket_overlap(previous):
                raise OverlapError(
                    f"Overlap of bracket {bracket} and {previous}",
                    brackets=[previous, bracket],
                )

    def determine_correct_bracket(self, taxable_income: Number) -> int:
        """Find the index of the bracket containing an income.

        Returns:
            Index of the first bracket whose span contains the income.

        Raises:
            SmallIncomeError: If the income is below the lowest bracket.
            LargeIncomeError: If the income is above the top bracket, in a gap,
                or not a finite number.
        """
        income = to_decimal(taxable_income)
        if not income.is_finite():
            raise LargeIncomeError(
                f"The income {income} does not fit in ANY tax bracket",
                brackets=self._brackets[-1:],
            )
        for index, bracket in enumerate(self._brackets):
            if bracket.contains(income):
                return index

        if self._brackets and income < self._brackets[0].bracket_min:
            raise SmallIncomeError(
                f"The income {income} is below the minimum of every tax bracket",
                brackets=self._brackets[:1],
            )
        raise LargeIncomeError(
            f"The income {income} does not fit in ANY tax bracket",
            brackets=self._brackets[-1:],
        )

    def calculate_tax_amount(self, taxable_income: Number) -> Decimal:
        """Calculate the total tax owed on a taxable income.

        Args:
            taxable_income: Income after pre-tax deductions.

        Returns:
            The tax owed, rounded to the cent. Zero income owes zero tax even
            when no bracket starts at zero.

        Raises:
            SmallIncomeError: If the income is below the lowest bracket.
            LargeIncomeError: If no bracket contains the income.
        """
        income = to_decimal(taxable_income)
        if income.is_finite() and income == ZERO:
            return round_to_hundredths(ZERO)

        index = self.determine_correct_bracket(income)
        previous = self._brackets[index - 1] if index > 0 else None
        return self._brackets[index].calculate_bracket_taxes(income, previous)

    def __iter__(self) -> Iterator[BracketInfo]:
        return iter(self.brackets)

    def __len__(self) -> int:
        return len(self._brackets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaxBracketSchedule):
            return NotImplemented
        return self._brackets == other._brackets

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "\n".join(str(bracket) for bracket in self._brackets)
