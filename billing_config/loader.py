"""
Configuration Loader (``billing_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``billing_config.schema`` dataclasses.  Runtime callers go through
``billing_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required fields have no silent defaults.
* Hourly bands have strictly ascending bounds and end with exactly one
  open-ended band.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  configuration data.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from billing_config.schema import (
    BillingConfig,
    DayRateDef,
    HourlyBandDef,
    InvoiceSettings,
    PayrollSettings,
)

_RATE_TYPES = ("8-hour", "12-hour", "extended")
_INVOICE_STYLES = ("grouped", "daily")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, field_name: str) -> Decimal:
    """Parse a Decimal from a YAML scalar; floats go through ``str``."""
    if isinstance(value, bool):
        raise ValueError(f"{field_name}: expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{field_name}: expected a number, got {value!r}") from exc


def parse_hourly_band(data: dict[str, Any]) -> HourlyBandDef:
    """Parse one ``hourly_bands`` item."""
    rate_type = data["rate_type"]
    if rate_type not in _RATE_TYPES:
        raise ValueError(
            f"Unknown rate_type {rate_type!r}; expected one of {_RATE_TYPES}"
        )
    max_hours = data.get("max_hours")
    return HourlyBandDef(
        rate_type=rate_type,
        max_hours=parse_decimal(max_hours, "max_hours") if max_hours is not None else None,
        pay_multiplier=parse_decimal(data.get("pay_multiplier", 1), "pay_multiplier"),
        charge_multiplier=parse_decimal(data.get("charge_multiplier", 1), "charge_multiplier"),
    )


def validate_bands(bands: tuple[HourlyBandDef, ...]) -> None:
    """
    Check band ordering.

    Raises:
        ValueError: No bands, a bounded last band, an open band before
            the last, or bounds that do not strictly ascend.
    """
    if not bands:
        raise ValueError("hourly_bands must contain at least one band")
    if bands[-1].max_hours is not None:
        raise ValueError("the last hourly band must be open-ended (max_hours: null)")
    previous: Decimal | None = None
    for band in bands[:-1]:
        if band.max_hours is None:
            raise ValueError(
                f"band {band.rate_type!r} is open-ended but is not the last band"
            )
        if band.max_hours <= 0:
            raise ValueError(f"band {band.rate_type!r} max_hours must be positive")
        if previous is not None and band.max_hours <= previous:
            raise ValueError("hourly band max_hours must be strictly ascending")
        previous = band.max_hours


def parse_invoice_settings(data: dict[str, Any]) -> InvoiceSettings:
    style = data.get("default_style", "grouped")
    if style not in _INVOICE_STYLES:
        raise ValueError(
            f"Unknown invoice default_style {style!r}; expected one of {_INVOICE_STYLES}"
        )
    if "footer_lines" in data:
        return InvoiceSettings(
            default_style=style,
            footer_lines=tuple(str(line) for line in data["footer_lines"] or ()),
        )
    return InvoiceSettings(default_style=style)


def parse_payroll_settings(data: dict[str, Any]) -> PayrollSettings:
    rows_per_page = int(data.get("rows_per_page", 35))
    if rows_per_page < 1:
        raise ValueError("payroll rows_per_page must be at least 1")
    return PayrollSettings(
        rows_per_page=rows_per_page,
        repeat_header=bool(data.get("repeat_header", True)),
    )


def parse_default_rates(data: dict[str, Any] | None) -> DayRateDef | None:
    if not data:
        return None
    return DayRateDef(
        employee_pay_per_day=parse_decimal(
            data["employee_pay_per_day"], "employee_pay_per_day"
        ),
        client_charge_per_day=parse_decimal(
            data["client_charge_per_day"], "client_charge_per_day"
        ),
    )


def parse_config(data: dict[str, Any]) -> BillingConfig:
    """
    Parse a full ``BillingConfig`` from a loaded YAML dict.

    Raises:
        KeyError: ``config_id`` or ``hourly_bands`` missing.
        ValueError: Invalid values or band ordering.
    """
    bands = tuple(parse_hourly_band(b) for b in data["hourly_bands"])
    validate_bands(bands)

    return BillingConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        checksum=compute_checksum(data),
        currency=data.get("currency", "USD"),
        company_name=data.get("company_name", ""),
        hourly_bands=bands,
        invoice=parse_invoice_settings(data.get("invoice") or {}),
        payroll=parse_payroll_settings(data.get("payroll") or {}),
        default_rates=parse_default_rates(data.get("default_rates")),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
