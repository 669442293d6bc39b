"""In-process client for the estimate server.

The client resolves which federal schedule a request refers to, loads and
validates it once, and hands the request to the server. Validated schedules
are read-only, so one loaded copy serves every later request for the same file.
"""

from pathlib import Path

from tax_estimator.core.config import Settings, settings as default_settings
from tax_estimator.core.logging import get_logger, schedule_source_ctx
from tax_estimator.errors import EstimaterError
from tax_estimator.estimate import server
from tax_estimator.estimate.models import TaxInfo, TaxResults
from tax_estimator.tax.brackets import TaxBracketSchedule
from tax_estimator.tax.loader import default_schedule_path, load_schedule_file

logger = get_logger(__name__)


class EstimateClient:
    """Computes taxes by calling the server with a loaded schedule."""

    def __init__(self, app_settings: Settings | None = None):
        """Initialize the client.

        Args:
            app_settings: Settings to read the default schedule path from.
                Defaults to the process-wide settings.
        """
        self._settings = app_settings or default_settings
        self._schedules: dict[Path, TaxBracketSchedule] = {}

    def resolve_schedule_path(self, info: TaxInfo) -> Path:
        """Schedule named by the request, else the configured one, else the bundled one."""
        if info.federal_brackets is not None:
            return info.federal_brackets
        if self._settings.federal_brackets_path is not None:
            return self._settings.federal_brackets_path
        return default_schedule_path()

    def get_schedule(self, path: Path) -> TaxBracketSchedule:
        """Load a schedule, reusing an earlier load of the same file.

        Raises:
            FileError: If the file does not exist
            ParsingError: If the file cannot be parsed
            TabulationError: If supplied cumulative totals are inconsistent
            BracketError: If a bracket is invalid or overlaps another
        """
        key = path.expanduser().resolve()
        schedule = self._schedules.get(key)
        if schedule is None:
            schedule = load_schedule_file(key)
            self._schedules[key] = schedule
            logger.info("Tax bracket schedule loaded", path=str(key), brackets=len(schedule))
        return schedule

    def calculate_taxes(self, info: TaxInfo) -> TaxResults:
        """Compute taxes given the needed info.

        Raises:
            EstimaterError: Any loading, validation or calculation failure.
        """
        path = self.resolve_schedule_path(info)
        token = schedule_source_ctx.set(str(path))
        try:
            schedule = self.get_schedule(path)
            results = server.calculate_taxes(info, schedule)
        except EstimaterError as exc:
            logger.error(
                "Tax estimate failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise
        finally:
            schedule_source_ctx.reset(token)

        logger.info(
            "Tax estimate complete",
            gross_yearly_income=info.gross_yearly_income,
            federal_tax=results.federal_tax,
            state_tax=results.state_tax,
        )
        return results
