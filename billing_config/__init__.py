"""
billing_config -- single public entrypoint for billing configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``BillingConfig``.  YAML
    loading is internal tooling and not called by services directly.

Architecture position:
    Configuration -- sits above ``billing_kernel`` / ``billing_engines``
    and below ``billing_services``.  Engines MUST NEVER import from
    ``billing_config``; ``bridges`` translates config into engine inputs.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Hourly bands are validated before a config is returned.
    - Deterministic checksum: the same YAML always yields the same checksum.

Failure modes:
    - ``FileNotFoundError`` -- configuration file missing.
    - ``KeyError`` / ``ValueError`` -- schema or band validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``BILLING_CONFIG_TRACE`` log entry with config_id, version and
    checksum, tying generated reports to the configuration in force.
"""

from __future__ import annotations

import logging
from pathlib import Path

from billing_config.loader import load_yaml_file, parse_config
from billing_config.schema import BillingConfig

_logger = logging.getLogger("billing_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | str | None = None) -> BillingConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: Override path to a YAML configuration file.  Defaults to
            billing_config/sets/default.yaml.

    Returns:
        BillingConfig -- frozen, validated.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If a required key is missing.
        ValueError: If configuration validation fails.
    """
    config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
    config = parse_config(load_yaml_file(config_path))

    _logger.info(
        "BILLING_CONFIG_TRACE",
        extra={
            "trace_type": "BILLING_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "currency": config.currency,
            "band_count": len(config.hourly_bands),
        },
    )
    return config


__all__ = ["BillingConfig", "get_active_config"]
