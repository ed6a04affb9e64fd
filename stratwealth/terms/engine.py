"""
Investment terms engine.
Pure functions mapping a plan category and an amount to duration, return and
payment schedule. Functions here do no I/O and never log.
Currency math is done in Decimal end to end.
"""
import enum
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Union

from stratwealth.core.utils import to_decimal

Amount = Union[Decimal, int, float, str]

# Installment cadence: exactly 30 x 86400 seconds, never calendar aware
PAYMENT_INTERVAL = timedelta(seconds=30 * 24 * 60 * 60)


class PlanCategory(str, enum.Enum):
    """Investment term class chosen at creation time."""
    SEMI_ANNUAL = "SEMI_ANNUAL"
    ANNUAL = "ANNUAL"


DURATION_MONTHS: Dict[PlanCategory, int] = {
    PlanCategory.SEMI_ANNUAL: 6,
    PlanCategory.ANNUAL: 12,
}

RETURN_RATES: Dict[PlanCategory, Decimal] = {
    PlanCategory.SEMI_ANNUAL: Decimal("0.15"),
    PlanCategory.ANNUAL: Decimal("0.30"),
}


class TermsError(ValueError):
    """Base class for input validation failures of the terms engine."""


class InvalidCategory(TermsError):
    def __init__(self, category: Any):
        super().__init__(f"Invalid plan category: {category!r}")
        self.category = category


class InvalidAmount(TermsError):
    def __init__(self, amount: Any):
        super().__init__(f"Amount must be a positive number, got {amount!r}")
        self.amount = amount


class InvalidInstallmentCount(TermsError):
    def __init__(self, count: Any):
        super().__init__(f"Installment count must be a positive integer, got {count!r}")
        self.count = count


class DateOutOfRange(TermsError):
    def __init__(self, start: datetime):
        super().__init__(f"Payment dates after {start.isoformat()} exceed the supported calendar range")
        self.start = start


def _category(category: Any) -> PlanCategory:
    if isinstance(category, PlanCategory):
        return category
    try:
        return PlanCategory(category)
    except ValueError:
        raise InvalidCategory(category) from None


def _positive_amount(amount: Amount) -> Decimal:
    try:
        value = to_decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(amount) from None
    if not value.is_finite() or value <= 0:
        raise InvalidAmount(amount)
    return value


def resolve_duration_months(category: Any) -> int:
    """SEMI_ANNUAL -> 6, ANNUAL -> 12."""
    return DURATION_MONTHS[_category(category)]


def return_rate(category: Any) -> Decimal:
    """Payout rate as a decimal fraction (0.15 means 15%)."""
    return RETURN_RATES[_category(category)]


def calculate_expected_return(category: Any, principal: Amount) -> Decimal:
    """
    Expected payout for a principal: principal * rate.
    The product is exact; persisting it to a two-place column is the caller's concern.
    """
    rate = return_rate(category)
    return _positive_amount(principal) * rate


def split_into_installments(total: Amount, count: int) -> Decimal:
    """
    Exact total / count. No remainder allocation is applied here: callers that
    charge rounded installments decide which payment absorbs the difference.
    """
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidInstallmentCount(count)
    return _positive_amount(total) / count


def next_payment_date(start: datetime) -> datetime:
    """
    start + 2,592,000 seconds of elapsed time.
    Aware datetimes are advanced on the UTC timeline and returned in UTC, so DST
    transitions in the input's zone never shift the interval. Naive input stays naive.
    """
    try:
        if start.tzinfo is None:
            return start + PAYMENT_INTERVAL
        return start.astimezone(timezone.utc) + PAYMENT_INTERVAL
    except OverflowError:
        raise DateOutOfRange(start) from None


def maturity_date(start: datetime, category: Any) -> datetime:
    """End date of an investment: one 30-day period per month of duration."""
    due = start
    for _ in range(resolve_duration_months(category)):
        due = next_payment_date(due)
    return due


@dataclass(frozen=True)
class InvestmentTerms:
    category: PlanCategory
    principal: Decimal
    duration_months: int
    return_rate: Decimal
    expected_return: Decimal


def investment_terms(category: Any, principal: Amount) -> InvestmentTerms:
    """Bundles duration, rate and expected return for a (category, principal) pair."""
    plan = _category(category)
    return InvestmentTerms(
        category=plan,
        principal=_positive_amount(principal),
        duration_months=resolve_duration_months(plan),
        return_rate=return_rate(plan),
        expected_return=calculate_expected_return(plan, principal),
    )


@dataclass(frozen=True)
class ScheduledPayment:
    sequence: int
    due_date: datetime
    amount: Decimal


def build_payment_schedule(total: Amount, count: int, start: datetime) -> List[ScheduledPayment]:
    """
    Ordered installments of an amount. The first is due on `start`, each
    following one 30 days after the previous.
    """
    amount = split_into_installments(total, count)
    schedule: List[ScheduledPayment] = []
    due = start
    for sequence in range(1, count + 1):
        schedule.append(ScheduledPayment(sequence=sequence, due_date=due, amount=amount))
        due = next_payment_date(due)
    return schedule
