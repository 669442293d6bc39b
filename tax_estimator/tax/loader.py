"""Schedule loader with JSON/YAML parsing and validation.

This module turns external bytes into a trusted
:class:`~tax_estimator.tax.brackets.TaxBracketSchedule`. Every schedule goes
through sort, tabulation and validation before it is returned.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from tax_estimator.core.logging import get_logger
from tax_estimator.errors import FileError, ParsingError
from tax_estimator.tax.brackets import TaxBracketSchedule
from tax_estimator.tax.models import ScheduleDocument

logger = get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_SCHEDULE_FILE = "federal_brackets_2022.json"

YAML_SUFFIXES = (".yaml", ".yml")


def default_schedule_path() -> Path:
    """Path of the bundled federal schedule (2022, single filer)."""
    return DATA_DIR / DEFAULT_SCHEDULE_FILE


def format_for_path(path: Path) -> str:
    """Pick the parser for a file from its suffix; anything not YAML is JSON."""
    return "yaml" if path.suffix.lower() in YAML_SUFFIXES else "json"


def parse_document(data: bytes | str, fmt: str = "json", source: str | None = None) -> dict[str, Any]:
    """Parse JSON or YAML bytes into a mapping.

    JSON numbers with a fraction become Decimal so rates and totals stay exact.

    Raises:
        ParsingError: If the bytes are not valid JSON/YAML or not a mapping.
    """
    if fmt not in ("json", "yaml"):
        raise ParsingError(f"Unsupported format: {fmt}", source=source)

    try:
        if fmt == "yaml":
            parsed = YAML(typ="safe").load(data)
        else:
            parsed = json.loads(data, parse_float=Decimal)
    except (json.JSONDecodeError, UnicodeDecodeError, YAMLError) as e:
        raise ParsingError(f"Failed to parse {fmt.upper()}: {e}", source=source) from e

    if parsed is None:
        raise ParsingError("Empty document", source=source)

    if not isinstance(parsed, dict):
        raise ParsingError(
            f"Document must be a mapping, got {type(parsed).__name__}",
            source=source,
        )

    return parsed


def load_schedule(
    data: bytes | str, *, fmt: str = "json", source: str | None = None
) -> TaxBracketSchedule:
    """Load a bracket schedule from raw bytes.

    Args:
        data: Serialized schedule
        fmt: Either "json" or "yaml"
        source: Optional name of the data source for error reporting

    Returns:
        Sorted, tabulated and validated schedule

    Raises:
        ParsingError: If the bytes or their shape are malformed
        TabulationError: If supplied cumulative totals are inconsistent
        BracketError: If a bracket is invalid or overlaps another
    """
    parsed = parse_document(data, fmt=fmt, source=source)

    try:
        document = ScheduleDocument.model_validate(parsed)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        ]
        raise ParsingError(
            f"Invalid bracket schedule: {errors[0]}",
            source=source,
            errors=errors,
        ) from e

    schedule = TaxBracketSchedule.from_document(document)
    logger.debug("Loaded tax bracket schedule", source=source, brackets=len(schedule))
    return schedule


def load_schedule_file(path: str | Path) -> TaxBracketSchedule:
    """Load a bracket schedule from a JSON or YAML file.

    Args:
        path: Path to the schedule file

    Returns:
        Sorted, tabulated and validated schedule

    Raises:
        FileError: If the file does not exist or cannot be read
        ParsingError: If the file cannot be parsed
        TabulationError: If supplied cumulative totals are inconsistent
        BracketError: If a bracket is invalid or overlaps another
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise FileError(f"The file {path} does not exist", path=path) from e
    except IsADirectoryError as e:
        raise FileError(f"The path {path} is a directory, not a file", path=path) from e
    except OSError as e:
        raise FileError(f"Cannot read {path}: {e.strerror or e}", path=path) from e

    return load_schedule(data, fmt=format_for_path(path), source=str(path))
