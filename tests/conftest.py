"""Pytest configuration and shared fixtures for tests."""

from collections.abc import Callable, Iterator
from decimal import Decimal
from pathlib import Path

import pytest
from structlog.testing import capture_logs

from tax_estimator.tax.brackets import BracketInfo, TaxBracketSchedule
from tax_estimator.tax.loader import load_schedule

THREE_BRACKET_JSON = b"""{
    "brackets": [
        {
            "bracket_min": 1,
            "bracket_max": 10275,
            "tax_rate": 0.10,
            "cumulative_previous_tax": 0.00
        },
        {
            "bracket_min": 10276,
            "bracket_max": 41775,
            "tax_rate": 0.12,
            "cumulative_previous_tax": 1027.50
        },
        {
            "bracket_min": 41776,
            "bracket_max": 89075,
            "tax_rate": 0.22,
            "cumulative_previous_tax": 4807.50
        }
    ]
}"""


def _unvalidated_bracket(
    bracket_min: int,
    bracket_max: int,
    tax_rate: str,
    cumulative_previous_tax: str | None = None,
) -> BracketInfo:
    return BracketInfo(
        bracket_min=bracket_min,
        bracket_max=bracket_max,
        tax_rate=Decimal(tax_rate),
        cumulative_previous_tax=(
            None if cumulative_previous_tax is None else Decimal(cumulative_previous_tax)
        ),
    )


@pytest.fixture
def three_bracket_json() -> bytes:
    """Serialized 2022 federal schedule truncated to three brackets.

    Returns:
        JSON bytes.
    """
    return THREE_BRACKET_JSON


@pytest.fixture
def three_bracket_schedule(three_bracket_json: bytes) -> TaxBracketSchedule:
    """Loaded and validated three-bracket schedule.

    Returns:
        TaxBracketSchedule instance.
    """
    return load_schedule(three_bracket_json, source="three_brackets.json")


@pytest.fixture
def three_bracket_file(tmp_path: Path, three_bracket_json: bytes) -> Path:
    """Three-bracket schedule written to a JSON file.

    Returns:
        Path to the file.
    """
    path = tmp_path / "federal.json"
    path.write_bytes(three_bracket_json)
    return path


@pytest.fixture
def make_bracket() -> Callable[..., BracketInfo]:
    """Factory for brackets that skip validation, the way deserialized data arrives.

    Returns:
        Callable taking (min, max, rate, cumulative) with rates as strings.
    """
    return _unvalidated_bracket


@pytest.fixture(autouse=True)
def captured_logs() -> Iterator[list[dict]]:
    """Capture structlog events instead of printing them.

    Returns:
        List of captured event dictionaries.
    """
    with capture_logs() as logs:
        yield logs
