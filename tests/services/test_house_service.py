"""Tests for HouseService."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from billing_kernel.domain.records import InvoiceStyle, PaymentFrequency, WorkQuantity
from billing_kernel.domain.values import Money
from billing_kernel.exceptions import HouseNotFoundError


class TestHouseService:

    def test_create_and_get(self, house_service, actor_id):
        house = house_service.create_house(
            name="Birch Lodge",
            employee_pay_per_day=Decimal("140"),
            client_charge_per_day=Decimal("210"),
            actor_id=actor_id,
            payment_frequency=PaymentFrequency.MONTHLY,
            invoice_style=InvoiceStyle.DAILY,
        )
        fetched = house_service.get_by_id(house.house_id)
        assert fetched.name == "Birch Lodge"
        assert fetched.client_charge_per_day == Decimal("210")
        assert fetched.payment_frequency == PaymentFrequency.MONTHLY
        assert fetched.invoice_style == InvoiceStyle.DAILY

    def test_negative_rate_rejected(self, house_service, actor_id):
        with pytest.raises(ValueError):
            house_service.create_house("Bad", Decimal("-1"), Decimal("10"), actor_id)

    def test_update_only_changes_given_fields(self, house_service, grouped_house, actor_id):
        updated = house_service.update_house(
            grouped_house.house_id,
            actor_id,
            client_charge_per_day=Decimal("220"),
        )
        assert updated.client_charge_per_day == Decimal("220")
        assert updated.employee_pay_per_day == Decimal("150")
        assert updated.name == "Maple House"

    def test_get_unknown_raises(self, house_service):
        with pytest.raises(HouseNotFoundError) as exc_info:
            house_service.get_by_id(uuid4())
        assert exc_info.value.code == "HOUSE_NOT_FOUND"

    def test_list_sorted_by_name(self, house_service, grouped_house, daily_house):
        assert [h.name for h in house_service.list_houses()] == ["Maple House", "Oak Cottage"]

    def test_delete_unassigns_employees_and_keeps_entries(
        self, house_service, employee_service, timesheet_service, selector,
        grouped_house, caregiver, actor_id,
    ):
        entry = timesheet_service.create_entry(
            caregiver.employee_id, date(2024, 1, 2), WorkQuantity.of_days(1), actor_id,
        )
        house_service.delete_house(grouped_house.house_id)

        assert employee_service.get_by_id(caregiver.employee_id).house_id is None
        kept = selector.get_entry(entry.entry_id)
        assert kept.house_id == grouped_house.house_id
        assert kept.client_charge == Money.of("200.00")

    def test_rate_change_does_not_touch_snapshots(
        self, house_service, timesheet_service, selector, grouped_house, caregiver, actor_id,
    ):
        entry = timesheet_service.create_entry(
            caregiver.employee_id, date(2024, 1, 2), WorkQuantity.of_days(1), actor_id,
        )
        house_service.update_house(
            grouped_house.house_id, actor_id, client_charge_per_day=Decimal("999"),
        )
        assert selector.get_entry(entry.entry_id).client_charge == Money.of("200.00")

    def test_logs_creation(self, house_service, actor_id, captured_logs):
        house = house_service.create_house("Elm", Decimal("1"), Decimal("2"), actor_id)
        records = [r for r in captured_logs() if r["message"] == "house_created"]
        assert records[0]["house_id"] == str(house.house_id)
