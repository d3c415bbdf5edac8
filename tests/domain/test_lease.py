from datetime import date
from decimal import Decimal

import pytest

from ifrs16_lite.domain.errors import InvalidTermError
from ifrs16_lite.domain.lease import (
    LeaseContractTerms,
    PaymentFrequency,
    PaymentTiming,
    ValidationResult,
    add_months,
    months_between,
)


def make_terms(**overrides) -> LeaseContractTerms:
    values = dict(
        lease_start_date=date(2024, 1, 1),
        lease_end_date=date(2026, 12, 31),
        lease_term_months=36,
        payment_amount=Decimal("1000"),
        discount_rate_annual=Decimal("8.5"),
    )
    values.update(overrides)
    return LeaseContractTerms(**values)


# ============================================================================
# PAYMENT FREQUENCY
# ============================================================================


@pytest.mark.parametrize(
    ("frequency", "months", "per_year"),
    [
        (PaymentFrequency.MONTHLY, 1, 12),
        (PaymentFrequency.QUARTERLY, 3, 4),
        (PaymentFrequency.SEMIANNUAL, 6, 2),
        (PaymentFrequency.ANNUAL, 12, 1),
    ],
)
def test_frequency_periods(frequency, months, per_year):
    assert frequency.months_per_period == months
    assert frequency.periods_per_year == per_year


@pytest.mark.parametrize("raw", ["semi-annual", "semiannual", "SEMI_ANNUAL", " Semi-Annual "])
def test_frequency_parse_accepts_hyphenated_spelling(raw):
    assert PaymentFrequency.parse(raw) is PaymentFrequency.SEMIANNUAL


def test_frequency_parse_rejects_unknown_value():
    with pytest.raises(ValueError):
        PaymentFrequency.parse("weekly")


def test_timing_values():
    assert PaymentTiming("beginning") is PaymentTiming.BEGINNING
    assert PaymentTiming("end") is PaymentTiming.END


# ============================================================================
# DATE HELPERS
# ============================================================================


def test_add_months_simple():
    assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)
    assert add_months(date(2024, 11, 1), 3) == date(2025, 2, 1)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)


def test_add_months_zero_is_identity():
    assert add_months(date(2024, 5, 20), 0) == date(2024, 5, 20)


def test_months_between_ignores_day_of_month():
    assert months_between(date(2024, 1, 1), date(2025, 1, 1)) == 12
    assert months_between(date(2024, 1, 31), date(2024, 2, 1)) == 1
    assert months_between(date(2024, 6, 1), date(2024, 1, 1)) == -5


# ============================================================================
# CONTRACT TERMS VALIDATION
# ============================================================================


def test_defaults():
    terms = make_terms()

    assert terms.payment_frequency is PaymentFrequency.MONTHLY
    assert terms.payment_timing is PaymentTiming.END
    assert terms.initial_payment == 0
    assert terms.guaranteed_residual_value == 0
    assert terms.currency_code == "BRL"
    assert terms.asset_fair_value is None
    assert terms.purchase_option_reasonably_certain is False


def test_valid_terms_pass_validation():
    make_terms().validate()


def test_terms_are_immutable():
    terms = make_terms()

    with pytest.raises(AttributeError):
        terms.lease_term_months = 12


@pytest.mark.parametrize("term", [0, -12])
def test_rejects_non_positive_term(term):
    with pytest.raises(InvalidTermError, match="lease_term_months must be > 0"):
        make_terms(lease_term_months=term).validate()


def test_rejects_negative_payment():
    with pytest.raises(InvalidTermError, match="payment_amount must be >= 0"):
        make_terms(payment_amount=Decimal("-1")).validate()


def test_rejects_negative_rate():
    with pytest.raises(InvalidTermError, match="discount_rate_annual must be >= 0"):
        make_terms(discount_rate_annual=Decimal("-0.5")).validate()


@pytest.mark.parametrize(
    "name",
    ["initial_payment", "guaranteed_residual_value", "initial_direct_costs", "lease_incentives"],
)
def test_rejects_negative_optional_amount(name):
    with pytest.raises(InvalidTermError, match=f"{name} must be >= 0"):
        make_terms(**{name: Decimal("-100")}).validate()


def test_rejects_end_date_not_after_start():
    with pytest.raises(InvalidTermError, match="lease_end_date must be after lease_start_date"):
        make_terms(lease_end_date=date(2024, 1, 1)).validate()


def test_validation_result_is_valid_without_errors():
    assert ValidationResult().is_valid
    assert not ValidationResult(errors=("bad",)).is_valid
