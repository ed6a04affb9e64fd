"""
Unit tests for the investment terms engine.
Validates durations, expected returns, installment splitting and payment dates.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from stratwealth.terms.engine import (
    PAYMENT_INTERVAL,
    DateOutOfRange,
    InvalidAmount,
    InvalidCategory,
    InvalidInstallmentCount,
    PlanCategory,
    TermsError,
    build_payment_schedule,
    calculate_expected_return,
    investment_terms,
    maturity_date,
    next_payment_date,
    resolve_duration_months,
    return_rate,
    split_into_installments,
)


@pytest.mark.parametrize("category, months", [
    (PlanCategory.SEMI_ANNUAL, 6),
    (PlanCategory.ANNUAL, 12),
    ("SEMI_ANNUAL", 6),
    ("ANNUAL", 12),
])
def test_duration_by_category(category, months: int):
    assert resolve_duration_months(category) == months


@pytest.mark.parametrize("category", ["QUARTERLY", "annual", "", None, 12])
def test_unknown_category_rejected(category):
    with pytest.raises(InvalidCategory):
        resolve_duration_months(category)
    with pytest.raises(InvalidCategory):
        calculate_expected_return(category, 1000)


def test_terms_errors_are_value_errors():
    """Callers catching ValueError also catch engine validation failures."""
    assert issubclass(TermsError, ValueError)
    for error in (InvalidCategory, InvalidAmount, InvalidInstallmentCount):
        assert issubclass(error, TermsError)


def test_return_rates():
    assert return_rate(PlanCategory.SEMI_ANNUAL) == Decimal("0.15")
    assert return_rate(PlanCategory.ANNUAL) == Decimal("0.30")


@pytest.mark.parametrize("category, principal, expected", [
    (PlanCategory.ANNUAL, 10000, Decimal("3000")),
    (PlanCategory.SEMI_ANNUAL, 5000, Decimal("750")),
    (PlanCategory.SEMI_ANNUAL, Decimal("300000"), Decimal("45000")),
    (PlanCategory.ANNUAL, "1500000.00", Decimal("450000")),
    (PlanCategory.SEMI_ANNUAL, Decimal("0.01"), Decimal("0.0015")),
])
def test_expected_return(category, principal, expected: Decimal):
    assert calculate_expected_return(category, principal) == expected


def test_expected_return_has_no_float_drift():
    """0.1 * 0.30 is exactly 0.03, not 0.030000000000000002."""
    assert calculate_expected_return(PlanCategory.ANNUAL, 0.1) == Decimal("0.03")


def test_expected_return_is_linear_in_principal():
    single = calculate_expected_return(PlanCategory.ANNUAL, Decimal("1234.56"))
    double = calculate_expected_return(PlanCategory.ANNUAL, Decimal("2469.12"))
    assert double == single * 2


@pytest.mark.parametrize("principal", [0, -1, Decimal("-0.01"), "abc", float("nan"), float("inf"), True, None])
def test_invalid_principal_rejected(principal):
    with pytest.raises(InvalidAmount):
        calculate_expected_return(PlanCategory.ANNUAL, principal)


def test_split_into_installments():
    assert split_into_installments(3000, 12) == Decimal("250")
    assert split_into_installments(Decimal("750"), 6) == Decimal("125")
    assert split_into_installments(100, 1) == Decimal("100")


def test_split_is_exact_quotient():
    """No rounding is applied: the caller decides the remainder policy."""
    share = split_into_installments(Decimal("1000"), 3)
    assert share == Decimal("1000") / 3
    assert share != Decimal("333.33")


@pytest.mark.parametrize("count", [0, -3, 1.5, "12", True, None])
def test_invalid_installment_count_rejected(count):
    with pytest.raises(InvalidInstallmentCount):
        split_into_installments(1000, count)


@pytest.mark.parametrize("total", [0, -100, "x"])
def test_invalid_installment_total_rejected(total):
    with pytest.raises(InvalidAmount):
        split_into_installments(total, 12)


def test_next_payment_date_naive():
    start = datetime(2024, 1, 1, 9, 30)
    due = next_payment_date(start)
    assert due == datetime(2024, 1, 31, 9, 30)
    assert due.tzinfo is None


def test_next_payment_date_is_exactly_2592000_seconds():
    start = datetime(2024, 5, 17, 23, 59, 59, tzinfo=timezone.utc)
    due = next_payment_date(start)
    assert (due - start).total_seconds() == 2592000
    assert PAYMENT_INTERVAL == timedelta(days=30)


def test_next_payment_date_crosses_year_boundary():
    start = datetime(2023, 12, 15, tzinfo=timezone.utc)
    assert next_payment_date(start) == datetime(2024, 1, 14, tzinfo=timezone.utc)


def test_next_payment_date_ignores_dst_transition():
    """A local-time start before a DST switch still advances by exactly 30 x 24h."""
    new_york = ZoneInfo("America/New_York")
    start = datetime(2024, 3, 1, 12, 0, tzinfo=new_york)  # EST, switch to EDT on March 10
    due = next_payment_date(start)

    assert due.tzinfo == timezone.utc
    assert due.timestamp() - start.timestamp() == 2592000
    assert due == datetime(2024, 3, 31, 17, 0, tzinfo=timezone.utc)


def test_next_payment_date_leap_day():
    start = datetime(2024, 2, 10, tzinfo=timezone.utc)
    assert next_payment_date(start) == datetime(2024, 3, 11, tzinfo=timezone.utc)


@pytest.mark.parametrize("start", [
    datetime(9999, 12, 15),
    datetime(9999, 12, 15, tzinfo=timezone.utc),
])
def test_next_payment_date_past_calendar_range(start: datetime):
    with pytest.raises(DateOutOfRange):
        next_payment_date(start)


def test_schedule_past_calendar_range_is_a_terms_error():
    with pytest.raises(TermsError):
        build_payment_schedule(Decimal("1000"), 3, datetime(9999, 11, 1, tzinfo=timezone.utc))


@pytest.mark.parametrize("category, days", [
    (PlanCategory.SEMI_ANNUAL, 180),
    (PlanCategory.ANNUAL, 360),
])
def test_maturity_date(category, days: int):
    start = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert maturity_date(start, category) - start == timedelta(days=days)


def test_investment_terms_annual_scenario():
    terms = investment_terms(PlanCategory.ANNUAL, 10000)

    assert terms.duration_months == 12
    assert terms.return_rate == Decimal("0.30")
    assert terms.expected_return == Decimal("3000")
    assert terms.principal == Decimal("10000")


def test_investment_terms_semi_annual_scenario():
    terms = investment_terms("SEMI_ANNUAL", 5000)

    assert terms.category == PlanCategory.SEMI_ANNUAL
    assert terms.duration_months == 6
    assert terms.expected_return == Decimal("750")


def test_payment_schedule_spacing_and_amounts():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    schedule = build_payment_schedule(Decimal("3000"), 12, start)

    assert len(schedule) == 12
    assert [p.sequence for p in schedule] == list(range(1, 13))
    assert schedule[0].due_date == start
    for previous, current in zip(schedule, schedule[1:]):
        assert current.due_date - previous.due_date == timedelta(days=30)
    assert all(p.amount == Decimal("250") for p in schedule)
    assert sum(p.amount for p in schedule) == Decimal("3000")


def test_payment_schedule_rejects_bad_count():
    with pytest.raises(InvalidInstallmentCount):
        build_payment_schedule(1000, 0, datetime(2024, 1, 1))
