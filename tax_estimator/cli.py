"""Command line interface for the tax estimator.

Usage:
    tax-estimate estimate --gross 50000 --state 5 --pre-tax-deductions 2000
    tax-estimate estimate --config taxes.yaml --json
    tax-estimate brackets [PATH]
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import orjson

from tax_estimator import __version__
from tax_estimator.core.config import settings
from tax_estimator.core.logging import LOG_FORMATS, configure_logging, get_logger
from tax_estimator.errors import EstimaterError, UserError
from tax_estimator.estimate.client import EstimateClient
from tax_estimator.estimate.models import TaxInfo
from tax_estimator.tax.loader import (
    default_schedule_path,
    format_for_path,
    load_schedule_file,
    parse_document,
)

logger = get_logger(__name__)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON config file into a mapping.

    Raises:
        UserError: If the path cannot be read
        ParsingError: If the contents are not a YAML/JSON mapping
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise UserError(f"Cannot read config file {path}: {e.strerror or e}") from e
    return parse_document(data, fmt=format_for_path(path), source=str(path))


def build_tax_info(args: argparse.Namespace) -> TaxInfo:
    """Merge the config file (if any) with command line flags; flags win."""
    values: dict[str, Any] = {}
    if args.config is not None:
        values.update(load_config_file(args.config))

    overrides = {
        "gross_yearly_income": args.gross,
        "state_tax_rate_percent": args.state,
        "pre_tax_deductions": args.pre_tax_deductions,
        "federal_brackets": args.brackets,
    }
    for name, value in overrides.items():
        if value is None:
            continue
        # Drop any short-name spelling from the config so the flag is the only source
        for alias in TaxInfo.model_fields[name].validation_alias.choices:
            values.pop(alias, None)
        values[name] = value

    return TaxInfo.from_mapping(values)


def run_estimate(args: argparse.Namespace) -> int:
    info = build_tax_info(args)
    results = EstimateClient(settings).calculate_taxes(info)
    if args.json:
        sys.stdout.write(
            orjson.dumps(results.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8") + "\n"
        )
    else:
        print(results)
    return 0


def run_brackets(args: argparse.Namespace) -> int:
    path = args.path or settings.federal_brackets_path or default_schedule_path()
    schedule = load_schedule_file(path)
    print(f"{path}: {len(schedule)} brackets")
    print(schedule)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tax-estimate",
        description="Estimate federal and state income tax",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Log debug events to stderr",
    )
    parser.add_argument(
        "--log-format", choices=LOG_FORMATS, help="Log renderer (default depends on environment)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    estimate = subparsers.add_parser("estimate", help="Estimate taxes for a yearly income")
    estimate.add_argument("--config", type=Path, help="YAML or JSON file with the tax info")
    estimate.add_argument("--gross", type=int, help="Gross yearly income in whole dollars")
    estimate.add_argument("--state", type=str, help="Flat state tax rate as a %%")
    estimate.add_argument(
        "-p",
        "--pre-tax-deductions",
        dest="pre_tax_deductions",
        type=str,
        help=(
            "Pre-tax deductions. Bracket bounds are whole dollars, so a taxable income "
            "with cents between one bracket's max and the next min (or below the "
            "first min) has no bracket and is rejected"
        ),
    )
    estimate.add_argument(
        "--brackets",
        "--federal",
        dest="brackets",
        type=Path,
        help=(
            "Federal bracket schedule (defaults to the bundled 2022 schedule, "
            "whose brackets start at $1 with inclusive whole-dollar bounds)"
        ),
    )
    estimate.add_argument("--json", action="store_true", help="Print the result as JSON")
    estimate.set_defaults(handler=run_estimate)

    brackets = subparsers.add_parser("brackets", help="Validate and print a bracket schedule")
    brackets.add_argument("path", nargs="?", type=Path, help="Schedule file (JSON or YAML)")
    brackets.set_defaults(handler=run_brackets)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, log_format=args.log_format)

    try:
        return args.handler(args)
    except EstimaterError as exc:
        logger.debug("Command failed", command=args.command, error_type=type(exc).__name__)
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
