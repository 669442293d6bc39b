"""Progressive tax-bracket engine and schedule loading."""

from tax_estimator.tax.brackets import BracketInfo, TaxBracketSchedule
from tax_estimator.tax.loader import (
    default_schedule_path,
    load_schedule,
    load_schedule_file,
)
from tax_estimator.tax.models import BracketRecord, ScheduleDocument
from tax_estimator.tax.rounding import round_to_hundredths, to_decimal

__all__ = [
    # Engine
    "BracketInfo",
    "TaxBracketSchedule",
    # Models
    "BracketRecord",
    "ScheduleDocument",
    # Loader
    "default_schedule_path",
    "load_schedule",
    "load_schedule_file",
    # Rounding
    "round_to_hundredths",
    "to_decimal",
]
