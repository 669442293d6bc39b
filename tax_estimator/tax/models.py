"""Pydantic models for the external shape of a bracket schedule.

These models only check types and signs. Bracket semantics (rate range,
bounds, overlap, cumulative totals) are enforced by
:class:`tax_estimator.tax.brackets.TaxBracketSchedule` so that bad data
surfaces as a bracket error rather than a parsing error.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from tax_estimator.tax.rounding import to_decimal


class BracketRecord(BaseModel):
    """One bracket as it appears in a schedule file."""

    model_config = ConfigDict(extra="forbid")

    bracket_min: NonNegativeInt = Field(..., description="Inclusive lower bound")
    bracket_max: NonNegativeInt = Field(..., description="Inclusive upper bound")
    tax_rate: Decimal = Field(..., description="Rate applied within the bracket (0-1)")
    cumulative_previous_tax: Decimal | None = Field(
        None,
        ge=0,
        description="Tax owed through all lower brackets; computed when omitted",
    )

    @field_validator("bracket_min", "bracket_max", mode="before")
    @classmethod
    def reject_fractional_bounds(cls, v: object) -> object:
        """Bounds are whole dollars; refuse floats and bools instead of truncating."""
        if isinstance(v, (bool, float)):
            raise ValueError(f"bracket bounds must be whole numbers, got {v!r}")
        return v

    @field_validator("tax_rate", "cumulative_previous_tax", mode="before")
    @classmethod
    def exact_decimal(cls, v: object) -> object:
        """Convert YAML floats without binary rounding noise."""
        if isinstance(v, float):
            return to_decimal(v)
        return v


class ScheduleDocument(BaseModel):
    """A complete schedule file: a mapping with a ``brackets`` list."""

    brackets: list[BracketRecord] = Field(..., description="Brackets in any order")
    description: str | None = Field(None, description="Free-form note about the schedule")
