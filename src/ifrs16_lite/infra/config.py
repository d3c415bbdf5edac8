from __future__ import annotations

import logging
import os
from decimal import Decimal, InvalidOperation


DEFAULT_LOW_VALUE_THRESHOLDS: dict[str, Decimal] = {
    "BRL": Decimal("5000"),
    "USD": Decimal("1000"),
    "EUR": Decimal("1000"),
    "GBP": Decimal("1000"),
    "JPY": Decimal("100000"),
    "CAD": Decimal("1000"),
    "AUD": Decimal("1000"),
    "CHF": Decimal("1000"),
}
DEFAULT_LOW_VALUE_THRESHOLD = Decimal("1000")


def log_level() -> int:
    name = os.getenv("IFRS16_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)

    if not isinstance(level, int):
        raise RuntimeError(f"IFRS16_LOG_LEVEL is not a valid logging level: {name}")

    return level


def low_value_thresholds() -> dict[str, Decimal]:
    """
    Low-value asset thresholds per currency.

    IFRS16_LOW_VALUE_THRESHOLDS overrides or extends the defaults, e.g.
    ``BRL=6000,MXN=20000``.
    """
    thresholds = dict(DEFAULT_LOW_VALUE_THRESHOLDS)
    raw = os.getenv("IFRS16_LOW_VALUE_THRESHOLDS")

    if not raw:
        return thresholds

    for item in raw.split(","):
        if not item.strip():
            continue
        currency, sep, amount = item.partition("=")
        if not sep or not currency.strip():
            raise RuntimeError(f"IFRS16_LOW_VALUE_THRESHOLDS entry is malformed: {item!r}")
        try:
            thresholds[currency.strip().upper()] = Decimal(amount.strip())
        except InvalidOperation as exc:
            raise RuntimeError(
                f"IFRS16_LOW_VALUE_THRESHOLDS amount is not a decimal: {item!r}"
            ) from exc

    return thresholds
