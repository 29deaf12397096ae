"""
Tests for the billing_report command-line entry point.
"""

import json

import pytest

from billing_kernel.db.engine import reset_engine
from scripts.billing_report import main


@pytest.fixture(autouse=True)
def _reset_engine_after():
    yield
    reset_engine()


def test_overview_on_empty_database(capsys):
    assert main(["overview", "--db", "sqlite://"]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output["total_entries"] == 0
    assert output["total_revenue"] == {"amount": "0.00", "currency": "USD"}


def test_invoice_without_entries_exits_nonzero(capsys):
    code = main([
        "invoice", "--db", "sqlite://", "--period", "monthly", "--value", "2024-01",
    ])
    assert code == 1
    assert capsys.readouterr().err.startswith("NO_ENTRIES_FOR_PERIOD")


def test_weekly_without_start_date(capsys):
    assert main(["payroll", "--db", "sqlite://", "--period", "weekly"]) == 1
    assert "INCOMPLETE_FILTER_SPECIFICATION" in capsys.readouterr().err


def test_malformed_month(capsys):
    code = main(["invoice", "--db", "sqlite://", "--period", "monthly", "--value", "Jan"])
    assert code == 1
    assert capsys.readouterr().err.startswith("INVALID_ARGUMENT")
