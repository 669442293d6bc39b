"""Tests for structured logging configuration."""

import logging
from collections.abc import Iterator
from decimal import Decimal

import orjson
import pytest
import structlog

from tax_estimator.core.config import settings
from tax_estimator.core.logging import (
    _add_context_vars,
    _orjson_serializer,
    configure_logging,
    resolve_log_format,
    resolve_log_level,
    schedule_source_ctx,
)


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Put settings, structlog and the root logger level back after a test."""
    original = (settings.environment, settings.log_format, settings.debug)
    root_level = logging.getLogger().level
    try:
        yield
    finally:
        settings.environment, settings.log_format, settings.debug = original
        logging.getLogger().setLevel(root_level)
        structlog.reset_defaults()


class TestResolveLogFormat:
    """Tests for choosing between JSON and console rendering."""

    @pytest.mark.parametrize(
        ("environment", "configured", "override", "expected"),
        [
            ("development", None, None, "console"),
            ("production", None, None, "json"),
            ("development", "json", None, "json"),
            ("production", "console", None, "console"),
            ("production", "console", "json", "json"),
            ("development", None, "CONSOLE", "console"),
        ],
    )
    def test_precedence(
        self, restore_logging, environment, configured, override, expected
    ) -> None:
        """Argument beats settings, settings beat the environment default."""
        settings.environment = environment
        settings.log_format = configured

        assert resolve_log_format(override) == expected

    def test_unknown_override_rejected(self) -> None:
        with pytest.raises(ValueError):
            resolve_log_format("xml")


class TestResolveLogLevel:
    """Tests for the root log level."""

    @pytest.mark.parametrize(
        ("debug", "verbose", "expected"),
        [
            (False, None, logging.WARNING),
            (True, None, logging.DEBUG),
            (False, True, logging.DEBUG),
            (True, False, logging.WARNING),
        ],
    )
    def test_verbose_overrides_settings(self, restore_logging, debug, verbose, expected) -> None:
        settings.debug = debug

        assert resolve_log_level(verbose) == expected


class TestConfigureLogging:
    """Tests for the processor chain and root logger set up."""

    def test_json_chain(self, restore_logging) -> None:
        configure_logging(log_format="json")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert any(isinstance(p, structlog.processors.EventRenamer) for p in processors)
        assert _add_context_vars in processors

    def test_console_chain_has_no_timestamps(self, restore_logging) -> None:
        """Console output is read live in a terminal, so it skips timestamps."""
        configure_logging(log_format="console")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_verbose_lowers_root_level(self, restore_logging) -> None:
        configure_logging(verbose=True, log_format="console")
        assert logging.getLogger().level == logging.DEBUG

        configure_logging(verbose=False, log_format="console")
        assert logging.getLogger().level == logging.WARNING


def test_schedule_source_added_to_events() -> None:
    """The schedule in use is attached to every event while set."""
    token = schedule_source_ctx.set("federal.json")
    try:
        event = _add_context_vars(None, "info", {"event": "x"})  # type: ignore[arg-type]
        explicit = _add_context_vars(None, "info", {"event": "x", "schedule_source": "other"})  # type: ignore[arg-type]
    finally:
        schedule_source_ctx.reset(token)

    assert event["schedule_source"] == "federal.json"
    assert explicit["schedule_source"] == "other"
    assert "schedule_source" not in _add_context_vars(None, "info", {"event": "x"})  # type: ignore[arg-type]


def test_orjson_serializer_handles_decimal_amounts() -> None:
    payload = _orjson_serializer({"federal_tax": Decimal("6617.00")})

    assert orjson.loads(payload) == {"federal_tax": "6617.00"}
