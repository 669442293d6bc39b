"""Tests for the tax estimate input and output records."""

from decimal import Decimal
from pathlib import Path

import pytest

from tax_estimator.errors import UserError
from tax_estimator.estimate.models import TaxInfo, TaxResults


class TestTaxInfo:
    """Tests for validating the input record."""

    def test_accepts_short_config_names(self) -> None:
        info = TaxInfo.from_mapping(
            {"gross": 50000, "state": 5, "pre-tax-deductions": 1500.25, "federal": "fed.json"}
        )

        assert info.gross_yearly_income == 50000
        assert info.state_tax_rate_percent == Decimal("5")
        assert info.pre_tax_deductions == Decimal("1500.25")
        assert info.federal_brackets == Path("fed.json")

    def test_defaults(self) -> None:
        info = TaxInfo.from_mapping({"gross_yearly_income": 1000, "state_tax_rate_percent": "3"})

        assert info.pre_tax_deductions == Decimal("0")
        assert info.federal_brackets is None

    def test_taxable_income(self) -> None:
        info = TaxInfo(
            gross_yearly_income=50000,
            state_tax_rate_percent=Decimal("5"),
            pre_tax_deductions=Decimal("2000.50"),
        )

        assert info.taxable_income == Decimal("47999.50")

    @pytest.mark.parametrize(
        "data",
        [
            {"state": 5},
            {"gross": -1, "state": 5},
            {"gross": 50000, "state": 101},
            {"gross": 50000, "state": -1},
            {"gross": 50000, "state": 5, "pre_tax_deductions": -10},
            {"gross": 50000, "state": 5, "bonus": 1},
        ],
    )
    def test_invalid_input_is_user_error(self, data: dict) -> None:
        with pytest.raises(UserError) as exc_info:
            TaxInfo.from_mapping(data)

        assert "Invalid tax info" in str(exc_info.value)

    def test_deductions_cannot_exceed_income(self) -> None:
        with pytest.raises(UserError) as exc_info:
            TaxInfo.from_mapping({"gross": 1000, "state": 5, "pre_tax_deductions": 1000.01})

        assert "exceed gross income" in str(exc_info.value)

    def test_str_mentions_default_brackets(self) -> None:
        info = TaxInfo(gross_yearly_income=1000, state_tax_rate_percent=Decimal("5"))

        assert "gross income: 1000" in str(info)
        assert "federal brackets: default" in str(info)


class TestTaxResults:
    """Tests for the output record."""

    def test_str_summary(self) -> None:
        results = TaxResults(
            federal_tax=Decimal("6617.00"),
            state_tax=Decimal("2500.00"),
            net_income=Decimal("40883.00"),
            taxable_income=Decimal("50000.00"),
        )

        assert str(results) == (
            "Net Income: 40883.00\nState Taxes: 2500.00\nFederal Taxes: 6617.00"
        )

    def test_to_dict_keeps_cents(self) -> None:
        results = TaxResults(
            federal_tax=Decimal("6617.00"),
            state_tax=Decimal("2500.00"),
            net_income=Decimal("40883.00"),
            taxable_income=Decimal("50000.00"),
        )

        assert results.to_dict()["federal_tax"] == "6617.00"
