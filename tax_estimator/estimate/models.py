"""Input and output records of a tax estimate."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationError,
    field_validator,
    model_validator,
)

from tax_estimator.errors import UserError
from tax_estimator.tax.rounding import to_decimal


class TaxInfo(BaseModel):
    """Everything needed to estimate one year of taxes.

    Config files may use the short names ``gross``, ``state``, ``federal`` and
    ``pre-tax-deductions`` as well as the full field names.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="forbid")

    gross_yearly_income: NonNegativeInt = Field(
        ...,
        validation_alias=AliasChoices("gross_yearly_income", "gross"),
        description="Gross yearly income in whole dollars",
    )
    state_tax_rate_percent: Decimal = Field(
        ...,
        ge=0,
        le=100,
        validation_alias=AliasChoices("state_tax_rate_percent", "state"),
        description="Flat state tax as a %",
    )
    pre_tax_deductions: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        validation_alias=AliasChoices(
            "pre_tax_deductions", "pre-tax-deductions", "deductions"
        ),
        description="Pre-tax deductions removed before any tax applies",
    )
    federal_brackets: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("federal_brackets", "federal"),
        description="Federal bracket schedule file; the configured default when unset",
    )

    @field_validator("state_tax_rate_percent", "pre_tax_deductions", mode="before")
    @classmethod
    def exact_decimal(cls, v: object) -> object:
        """Convert floats without binary rounding noise."""
        if isinstance(v, float):
            return to_decimal(v)
        return v

    @model_validator(mode="after")
    def deductions_within_income(self) -> TaxInfo:
        """Deductions larger than the income would leave a negative taxable income."""
        if self.pre_tax_deductions > self.gross_yearly_income:
            raise ValueError(
                f"Pre-tax deductions {self.pre_tax_deductions} exceed gross income "
                f"{self.gross_yearly_income}"
            )
        return self

    @property
    def taxable_income(self) -> Decimal:
        """Gross income minus pre-tax deductions."""
        return Decimal(self.gross_yearly_income) - self.pre_tax_deductions

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TaxInfo:
        """Validate caller input, raising UserError instead of ValidationError."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            messages = [
                f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
                for err in e.errors()
            ]
            raise UserError("Invalid tax info: " + "; ".join(messages)) from e

    def __str__(self) -> str:
        return (
            f"Tax info: gross income: {self.gross_yearly_income} "
            f"(deductions = {self.pre_tax_deductions}), "
            f"state tax: {self.state_tax_rate_percent}%, "
            f"federal brackets: {self.federal_brackets or 'default'}"
        )


@dataclass(frozen=True)
class TaxResults:
    """Result of estimating taxes.

    Attributes:
        federal_tax: Amount taken for federal taxes.
        state_tax: Amount taken for state taxes.
        net_income: Amount left over after taxes and pre-tax removals.
        taxable_income: Gross income minus pre-tax deductions.
    """

    federal_tax: Decimal
    state_tax: Decimal
    net_income: Decimal
    taxable_income: Decimal

    def to_dict(self) -> dict[str, str]:
        """Amounts as strings, keyed by field name."""
        return {
            "federal_tax": str(self.federal_tax),
            "state_tax": str(self.state_tax),
            "net_income": str(self.net_income),
            "taxable_income": str(self.taxable_income),
        }

    def __str__(self) -> str:
        return (
            f"Net Income: {self.net_income}\n"
            f"State Taxes: {self.state_tax}\n"
            f"Federal Taxes: {self.federal_tax}"
        )
