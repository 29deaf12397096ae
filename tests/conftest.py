"""
Pytest fixtures for the billing test suite.

Provides:
- SQLite in-memory database sessions (fresh schema per test)
- Deterministic clock
- Service / selector fixtures wired to the session
- Structured-log capture
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from billing_config import get_active_config
from billing_config.bridges import build_default_rates, build_rate_table
from billing_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from billing_kernel.domain.clock import DeterministicClock
from billing_kernel.domain.records import InvoiceStyle
from billing_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from billing_kernel.selectors.timesheet_selector import TimesheetSelector
from billing_kernel.services.employee_service import EmployeeService
from billing_kernel.services.house_service import HouseService
from billing_services.report_service import ReportService
from billing_services.timesheet_service import TimesheetService

# Test actor ID for all test operations
TEST_ACTOR_ID = uuid4()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture billing_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, report_service):
            report_service.client_invoice(period)
            logs = captured_logs()
            assert any(r["message"] == "report_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("billing_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Session on a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite://")
    create_tables()
    sess = get_session()
    yield sess
    sess.rollback()
    sess.close()
    drop_tables()
    reset_engine()


@pytest.fixture
def actor_id():
    return TEST_ACTOR_ID


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 3, 15, 9, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def billing_config():
    return get_active_config()


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def house_service(session) -> HouseService:
    return HouseService(session)


@pytest.fixture
def employee_service(session) -> EmployeeService:
    return EmployeeService(session)


@pytest.fixture
def timesheet_service(session, billing_config) -> TimesheetService:
    return TimesheetService(
        session,
        rate_table=build_rate_table(billing_config),
        default_rates=build_default_rates(billing_config),
        currency=billing_config.currency,
    )


@pytest.fixture
def selector(session) -> TimesheetSelector:
    return TimesheetSelector(session)


@pytest.fixture
def report_service(session, deterministic_clock, billing_config) -> ReportService:
    return ReportService(session, clock=deterministic_clock, config=billing_config)


# =============================================================================
# Data fixtures
# =============================================================================


@pytest.fixture
def grouped_house(house_service, actor_id):
    """House paying 150/day, charging 200/day, grouped invoices."""
    return house_service.create_house(
        name="Maple House",
        employee_pay_per_day=Decimal("150"),
        client_charge_per_day=Decimal("200"),
        actor_id=actor_id,
        invoice_style=InvoiceStyle.GROUPED,
    )


@pytest.fixture
def daily_house(house_service, actor_id):
    """House paying 120/day, charging 180/day, daily invoices."""
    return house_service.create_house(
        name="Oak Cottage",
        employee_pay_per_day=Decimal("120"),
        client_charge_per_day=Decimal("180"),
        actor_id=actor_id,
        invoice_style=InvoiceStyle.DAILY,
    )


@pytest.fixture
def caregiver(employee_service, grouped_house, actor_id):
    return employee_service.create_employee(
        name="Jane Doe",
        email="jane@example.com",
        actor_id=actor_id,
        house_id=grouped_house.house_id,
    )
