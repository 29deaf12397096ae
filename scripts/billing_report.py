#!/usr/bin/env python3
"""
Generate a client invoice, payroll report or overview from the database.

Prints the rendered view (and, for documents, the output filename) as
JSON on stdout.  Core errors exit with status 1 and print the error code
on stderr.

Usage:
    python3 scripts/billing_report.py invoice --db sqlite:///billing.db \\
        --period monthly --value 2024-02 --house <house-id>
    python3 scripts/billing_report.py payroll --period weekly --value 2024-01-01
    python3 scripts/billing_report.py overview
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

DEFAULT_DB_URL = "sqlite:///billing.db"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate billing reports from timesheet data.",
    )
    parser.add_argument(
        "report",
        choices=("invoice", "payroll", "overview", "performance"),
        help="Report to generate",
    )
    parser.add_argument("--db", default=DEFAULT_DB_URL, help="SQLAlchemy database URL")
    parser.add_argument(
        "--period",
        default="all",
        help="all | monthly | weekly | biweekly",
    )
    parser.add_argument(
        "--value",
        default=None,
        help="YYYY-MM for monthly, YYYY-MM-DD start date for weekly/biweekly",
    )
    parser.add_argument("--house", default=None, help="House id, or 'all'")
    parser.add_argument("--config", default=None, help="Path to a billing config YAML")
    parser.add_argument("--verbose", action="store_true", help="Emit JSON logs on stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    from billing_config import get_active_config
    from billing_engines.formatting import render_to_dict
    from billing_engines.periods import ReportPeriod
    from billing_kernel.db.engine import (
        create_tables,
        init_engine_from_url,
        session_scope,
    )
    from billing_kernel.domain.clock import SystemClock
    from billing_kernel.exceptions import BillingKernelError
    from billing_kernel.logging_config import configure_logging
    from billing_services.report_service import ReportService

    if args.verbose:
        configure_logging(level=logging.DEBUG, stream=sys.stderr)
    else:
        logging.disable(logging.CRITICAL)

    try:
        period = ReportPeriod.from_selector(args.period, args.value)
        config = get_active_config(args.config)
        init_engine_from_url(args.db)
        create_tables()
        with session_scope() as session:
            service = ReportService(session, clock=SystemClock(), config=config)
            if args.report == "invoice":
                report = service.client_invoice(period, house_id=args.house)
                output = {"filename": report.filename, "view": render_to_dict(report.view)}
            elif args.report == "payroll":
                report = service.payroll_report(period, house_id=args.house)
                output = {"filename": report.filename, "view": render_to_dict(report.view)}
            elif args.report == "overview":
                output = render_to_dict(service.overview(period, house_id=args.house))
            else:
                output = render_to_dict(
                    service.employee_performance(period, house_id=args.house)
                )
    except BillingKernelError as exc:
        print(f"{exc.code}: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"INVALID_ARGUMENT: {exc}", file=sys.stderr)
        return 1
    finally:
        if not args.verbose:
            logging.disable(logging.NOTSET)

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
