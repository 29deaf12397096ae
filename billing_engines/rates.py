"""
Rate Resolver (``billing_engines.rates``).

Responsibility
--------------
Computes the employee pay and client charge for a single timesheet entry
from its work quantity and its house's per-day rates, and classifies
hour counts into the payroll rate-type bands ("8-hour", "12-hour",
"extended").

Architecture position
---------------------
**Engines layer** -- pure functional core.  ZERO I/O, ZERO database,
ZERO clock reads.  Imports only from ``billing_kernel.domain`` and
``billing_kernel.exceptions``.

Rate rules
----------
* Day entries:   ``pay = days * employee_pay_per_day``,
                 ``charge = days * client_charge_per_day``.
* Hour entries:  ``pay = hours * (employee_pay_per_day / 8) * band.pay_multiplier``,
                 ``charge = hours * (client_charge_per_day / 8) * band.charge_multiplier``,
  where ``band`` is the first band in the rate table whose ``max_hours``
  is >= the hour count.
* All results are rounded to cents with ROUND_HALF_UP.

Failure modes
-------------
* No house and no default day rates -> ``MissingRateConfigurationError``.
* Rate table with no open-ended band -> ``ValueError`` at construction.

Usage:
    from billing_engines.rates import RateTable, resolve_rates

    resolved = resolve_rates(WorkQuantity.of_days(3), house)
    resolved.employee_pay, resolved.client_charge
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from billing_kernel.domain.records import (
    HOURS_PER_DAY,
    DayRates,
    House,
    TimesheetEntry,
    WorkQuantity,
)
from billing_kernel.domain.values import Money
from billing_kernel.exceptions import MissingRateConfigurationError
from billing_kernel.logging_config import get_logger

logger = get_logger("engines.rates")


class RateType(str, Enum):
    """Display classification of an entry's hour count."""

    EIGHT_HOUR = "8-hour"
    TWELVE_HOUR = "12-hour"
    EXTENDED = "extended"

    @property
    def short_code(self) -> str:
        """Compact label used in narrow payroll table columns."""
        return _SHORT_CODES[self]


_SHORT_CODES = {
    RateType.EIGHT_HOUR: "8hr",
    RateType.TWELVE_HOUR: "12hr",
    RateType.EXTENDED: "Ext",
}


# ============================================================================
# Rate table
# ============================================================================


@dataclass(frozen=True)
class RateBand:
    """
    One hourly band.

    Attributes:
        rate_type: Label for entries falling in this band.
        max_hours: Inclusive upper bound on the hour count, None = open.
        pay_multiplier: Applied to the pro-rata hourly employee pay.
        charge_multiplier: Applied to the pro-rata hourly client charge.
    """

    rate_type: RateType
    max_hours: Decimal | None
    pay_multiplier: Decimal = Decimal("1")
    charge_multiplier: Decimal = Decimal("1")

    def __post_init__(self) -> None:
        if self.max_hours is not None and self.max_hours <= 0:
            raise ValueError("max_hours must be positive")
        if self.pay_multiplier < 0 or self.charge_multiplier < 0:
            raise ValueError("band multipliers must be non-negative")

    def covers(self, hours: Decimal) -> bool:
        return self.max_hours is None or hours <= self.max_hours


@dataclass(frozen=True)
class RateTable:
    """Ordered hourly bands; the last band must be open-ended."""

    bands: tuple[RateBand, ...]

    def __post_init__(self) -> None:
        if not self.bands:
            raise ValueError("rate table requires at least one band")
        if self.bands[-1].max_hours is not None:
            raise ValueError("last rate band must be open-ended (max_hours=None)")
        bounds = [b.max_hours for b in self.bands[:-1]]
        if any(b is None for b in bounds):
            raise ValueError("only the last rate band may be open-ended")
        if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
            raise ValueError("rate band max_hours must be strictly ascending")

    @classmethod
    def standard(cls) -> RateTable:
        """8-hour / 12-hour / extended bands, all at the pro-rata day rate."""
        return cls(bands=(
            RateBand(RateType.EIGHT_HOUR, Decimal("8")),
            RateBand(RateType.TWELVE_HOUR, Decimal("12")),
            RateBand(RateType.EXTENDED, None),
        ))

    def band_for(self, hours: Decimal) -> RateBand:
        for band in self.bands:
            if band.covers(hours):
                return band
        # Unreachable: the last band is open-ended.
        return self.bands[-1]


_STANDARD_TABLE = RateTable.standard()


def classify_rate_type(hours: Decimal, rate_table: RateTable | None = None) -> RateType:
    """Classify an hour count into its rate-type label."""
    table = rate_table or _STANDARD_TABLE
    return table.band_for(Decimal(str(hours))).rate_type


def rate_type_for(quantity: WorkQuantity, rate_table: RateTable | None = None) -> RateType:
    """
    Rate-type label for a work quantity.

    Day entries are classified on one standard day (8 hours), whatever
    the number of days.
    """
    if quantity.is_days:
        return classify_rate_type(HOURS_PER_DAY, rate_table)
    return classify_rate_type(quantity.value, rate_table)


# ============================================================================
# Resolution
# ============================================================================


@dataclass(frozen=True)
class ResolvedRates:
    """Money amounts for one entry, ready to be snapshotted."""

    employee_pay: Money
    client_charge: Money
    rate_type: RateType

    @property
    def profit(self) -> Money:
        return self.client_charge - self.employee_pay


def resolve_rates(
    quantity: WorkQuantity,
    house: House | None,
    rate_table: RateTable | None = None,
    default_rates: DayRates | None = None,
    currency: str = "USD",
) -> ResolvedRates:
    """
    Compute employee pay and client charge for one entry.

    Pure function.

    Args:
        quantity: The entry's worked time.
        house: The entry's house; its day rates are used when present.
        rate_table: Hourly bands (standard table when omitted).
        default_rates: Fallback day rates when the entry has no house.
        currency: Currency of the resulting amounts.

    Returns:
        ResolvedRates with rounded pay and charge.

    Raises:
        MissingRateConfigurationError: No house and no default rates.
    """
    table = rate_table or _STANDARD_TABLE

    if house is not None:
        rates = house.day_rates
    elif default_rates is not None:
        rates = default_rates
    else:
        logger.warning("rate_resolution_failed", extra={
            "entry_type": quantity.entry_type.value,
            "quantity": str(quantity.value),
        })
        raise MissingRateConfigurationError(house_id=None)

    rate_type = rate_type_for(quantity, table)

    if quantity.is_days:
        pay = quantity.days * rates.employee_pay_per_day
        charge = quantity.days * rates.client_charge_per_day
    else:
        band = table.band_for(quantity.hours)
        pay = (
            quantity.hours * rates.employee_pay_per_day / HOURS_PER_DAY
            * band.pay_multiplier
        )
        charge = (
            quantity.hours * rates.client_charge_per_day / HOURS_PER_DAY
            * band.charge_multiplier
        )

    return ResolvedRates(
        employee_pay=Money.of(pay, currency).round(),
        client_charge=Money.of(charge, currency).round(),
        rate_type=rate_type,
    )


def reprice_entry(
    entry: TimesheetEntry,
    house: House | None,
    rate_table: RateTable | None = None,
    default_rates: DayRates | None = None,
) -> TimesheetEntry:
    """
    Recompute an entry's snapshot amounts from live rates.

    Returns a new entry; the input is unchanged.  Used when a report
    explicitly asks for current rates instead of the stored snapshot.
    """
    try:
        resolved = resolve_rates(
            entry.quantity,
            house,
            rate_table=rate_table,
            default_rates=default_rates,
            currency=entry.currency,
        )
    except MissingRateConfigurationError as exc:
        raise MissingRateConfigurationError(
            house_id=str(entry.house_id) if entry.house_id else None,
            entry_id=str(entry.entry_id),
        ) from exc
    return dataclasses.replace(
        entry,
        employee_pay=resolved.employee_pay,
        client_charge=resolved.client_charge,
    )
