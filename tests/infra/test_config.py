import logging
from decimal import Decimal

import pytest

from ifrs16_lite.infra.config import (
    DEFAULT_LOW_VALUE_THRESHOLDS,
    log_level,
    low_value_thresholds,
)


# ==============================================================================
# log_level()
# ==============================================================================


def test_log_level_defaults_to_info(monkeypatch) -> None:
    monkeypatch.delenv("IFRS16_LOG_LEVEL", raising=False)

    assert log_level() == logging.INFO


def test_log_level_is_case_insensitive(monkeypatch) -> None:
    monkeypatch.setenv("IFRS16_LOG_LEVEL", " debug ")

    assert log_level() == logging.DEBUG


def test_log_level_rejects_unknown_name(monkeypatch) -> None:
    monkeypatch.setenv("IFRS16_LOG_LEVEL", "LOUD")

    with pytest.raises(RuntimeError, match="not a valid logging level"):
        log_level()


# ==============================================================================
# low_value_thresholds()
# ==============================================================================


def test_thresholds_default_without_override(monkeypatch) -> None:
    monkeypatch.delenv("IFRS16_LOW_VALUE_THRESHOLDS", raising=False)

    thresholds = low_value_thresholds()

    assert thresholds == DEFAULT_LOW_VALUE_THRESHOLDS
    assert thresholds["BRL"] == Decimal("5000")
    assert thresholds["JPY"] == Decimal("100000")


def test_thresholds_override_and_extend_defaults(monkeypatch) -> None:
    monkeypatch.setenv("IFRS16_LOW_VALUE_THRESHOLDS", "brl=6000, MXN=20000,")

    thresholds = low_value_thresholds()

    assert thresholds["BRL"] == Decimal("6000")
    assert thresholds["MXN"] == Decimal("20000")
    assert thresholds["USD"] == Decimal("1000")


def test_thresholds_do_not_mutate_defaults(monkeypatch) -> None:
    monkeypatch.setenv("IFRS16_LOW_VALUE_THRESHOLDS", "BRL=1")

    low_value_thresholds()

    assert DEFAULT_LOW_VALUE_THRESHOLDS["BRL"] == Decimal("5000")


@pytest.mark.parametrize("raw", ["BRL", "=100", "BRL:100"])
def test_thresholds_reject_malformed_entries(monkeypatch, raw) -> None:
    monkeypatch.setenv("IFRS16_LOW_VALUE_THRESHOLDS", raw)

    with pytest.raises(RuntimeError, match="malformed"):
        low_value_thresholds()


def test_thresholds_reject_non_decimal_amount(monkeypatch) -> None:
    monkeypatch.setenv("IFRS16_LOW_VALUE_THRESHOLDS", "BRL=lots")

    with pytest.raises(RuntimeError, match="not a decimal"):
        low_value_thresholds()
