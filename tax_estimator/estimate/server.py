"""Does the "hard" work of calculating taxes.

Federal tax comes from a progressive bracket schedule, state tax is a flat
percentage of the taxable income. Both apply after pre-tax deductions.
"""

from decimal import Decimal

from tax_estimator.core.logging import get_logger
from tax_estimator.errors import BracketError, ServerError
from tax_estimator.estimate.models import TaxInfo, TaxResults
from tax_estimator.tax.brackets import TaxBracketSchedule
from tax_estimator.tax.rounding import round_to_hundredths

logger = get_logger(__name__)

PERCENT = Decimal("100")


def calculate_state_tax(taxable_income: Decimal, state_tax_rate_percent: Decimal) -> Decimal:
    """Flat state tax on the whole taxable income, rounded to the cent."""
    return round_to_hundredths(taxable_income * (state_tax_rate_percent / PERCENT))


def calculate_taxes(input_info: TaxInfo, schedule: TaxBracketSchedule) -> TaxResults:
    """Estimate federal tax, state tax and net income.

    Args:
        input_info: Gross income, deductions and state rate.
        schedule: Validated federal bracket schedule.

    Returns:
        TaxResults with every amount rounded to the cent.

    Raises:
        ServerError: If the schedule cannot tax the income. The bracket error
            is chained as the cause.

    Example:
        >>> info = TaxInfo(gross=50000, state=5)
        >>> print(calculate_taxes(info, schedule))
        Net Income: 40883.00
        State Taxes: 2500.00
        Federal Taxes: 6617.00
    """
    taxable_income = input_info.taxable_income
    logger.debug("Calculating taxes", taxable_income=taxable_income)

    try:
        federal_tax = schedule.calculate_tax_amount(taxable_income)
    except BracketError as exc:
        raise ServerError(
            f"Federal tax could not be calculated for taxable income {taxable_income}: {exc}"
        ) from exc

    state_tax = calculate_state_tax(taxable_income, input_info.state_tax_rate_percent)
    net_income = round_to_hundredths(
        Decimal(input_info.gross_yearly_income) - federal_tax - state_tax
    )

    return TaxResults(
        federal_tax=federal_tax,
        state_tax=state_tax,
        net_income=net_income,
        taxable_income=round_to_hundredths(taxable_income),
    )


estimate = calculate_taxes
