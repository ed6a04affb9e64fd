"""
Business logic for investments and market plans.
Duration, rate and expected return come from the terms engine; this module adds
the per-sector amount rules, wallet movements and notifications around it.
"""
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session

from stratwealth.core.errors import ConflictError, NotFoundError, ValidationError
from stratwealth.core.logger import logger, audit_log
from stratwealth.core.utils import format_money, quantize_money, utcnow
from stratwealth.investments.models import Investment, InvestmentSector, InvestmentStatus, MarketPlan
from stratwealth.investments.schemas import InvestmentCreate, MarketPlanCreate, MarketPlanUpdate
from stratwealth.notifications.models import NotificationType
from stratwealth.notifications.service import notify
from stratwealth.referrals.models import ReferralTransactionType
from stratwealth.referrals.service import process_referral_commission
from stratwealth.terms.engine import (
    PlanCategory,
    TermsError,
    investment_terms,
    maturity_date,
    resolve_duration_months,
    return_rate,
)
from stratwealth.wallet.models import WalletTransactionType
from stratwealth.wallet.service import credit, debit, get_wallet

HUNDRED = Decimal("100")

# Amount bounds for the fixed-plan sectors (REAL_ESTATE, GREEN_ENERGY)
FIXED_PLAN_BOUNDS: Dict[PlanCategory, Tuple[Decimal, Decimal]] = {
    PlanCategory.SEMI_ANNUAL: (Decimal("300000"), Decimal("700000")),
    PlanCategory.ANNUAL: (Decimal("1500000"), Decimal("2000000")),
}

REFERRAL_TYPES: Dict[InvestmentSector, ReferralTransactionType] = {
    InvestmentSector.REAL_ESTATE: ReferralTransactionType.REAL_ESTATE_INVESTMENT,
    InvestmentSector.GREEN_ENERGY: ReferralTransactionType.GREEN_ENERGY_INVESTMENT,
    InvestmentSector.MARKET: ReferralTransactionType.MARKET_INVESTMENT,
}

SECTOR_LABELS: Dict[InvestmentSector, str] = {
    InvestmentSector.REAL_ESTATE: "Real Estate",
    InvestmentSector.GREEN_ENERGY: "Green Energy",
    InvestmentSector.MARKET: "Market",
}


def _check_bounds(amount: Decimal, minimum: Decimal, maximum: Decimal) -> None:
    if amount < minimum or amount > maximum:
        raise ValidationError(
            f"Amount must be between {format_money(minimum)} and {format_money(maximum)}"
        )


def _market_plan_for(db: Session, plan_id: Optional[str], category: PlanCategory, amount: Decimal) -> MarketPlan:
    plan = db.query(MarketPlan).filter(MarketPlan.id == plan_id).first()
    if not plan:
        raise NotFoundError("Market plan", plan_id)
    if not plan.is_active:
        raise ValidationError("Market plan is not available")
    if plan.category != category:
        raise ValidationError(f"Market plan is a {plan.category.value} plan")
    _check_bounds(amount, plan.min_amount, plan.max_amount)
    return plan


def create_investment(db: Session, user_id: str, data: InvestmentCreate) -> Investment:
    """
    Commits a new investment: validates the amount for the sector, debits the
    wallet, fixes the terms and queues the referral commission.
    """
    try:
        terms = investment_terms(data.category, data.amount)
    except TermsError as e:
        raise ValidationError(str(e))

    plan = None
    if data.sector == InvestmentSector.MARKET:
        plan = _market_plan_for(db, data.plan_id, terms.category, terms.principal)
    else:
        minimum, maximum = FIXED_PLAN_BOUNDS[terms.category]
        _check_bounds(terms.principal, minimum, maximum)

    label = SECTOR_LABELS[data.sector]
    wallet = get_wallet(db, user_id)
    debit(
        db,
        wallet,
        terms.principal,
        WalletTransactionType.INVESTMENT,
        f"{label} investment ({terms.category.value})"
    )

    start = utcnow()
    investment = Investment(
        user_id=user_id,
        sector=data.sector,
        category=terms.category,
        plan_id=plan.id if plan else None,
        amount=quantize_money(terms.principal),
        expected_return=quantize_money(terms.expected_return),
        status=InvestmentStatus.ACTIVE,
        start_date=start,
        end_date=maturity_date(start, terms.category),
        reinvest=data.reinvest
    )
    db.add(investment)
    db.flush()

    process_referral_commission(db, user_id, terms.principal, REFERRAL_TYPES[data.sector], investment.id)
    notify(
        db,
        user_id,
        NotificationType.INVESTMENT_CREATED,
        "Investment Created",
        f"Your {label} investment of {format_money(terms.principal)} is active. "
        f"Expected return: {format_money(terms.expected_return)} after {terms.duration_months} months.",
        action_url=f"/investments/{investment.id}"
    )
    db.commit()
    db.refresh(investment)

    audit_log(
        action="investment_created",
        user=user_id,
        resource=f"investment_id={investment.id}",
        details={
            "sector": data.sector.value,
            "category": terms.category.value,
            "amount": str(investment.amount),
            "expected_return": str(investment.expected_return)
        }
    )
    logger.info(f"Investment created: id={investment.id}, sector={data.sector.value}, amount={investment.amount}")
    return investment


def list_investments(
    db: Session,
    user_id: Optional[str] = None,
    sector: Optional[InvestmentSector] = None,
    status: Optional[InvestmentStatus] = None
) -> List[Investment]:
    query = db.query(Investment)
    if user_id:
        query = query.filter(Investment.user_id == user_id)
    if sector:
        query = query.filter(Investment.sector == sector)
    if status:
        query = query.filter(Investment.status == status)
    return query.order_by(Investment.created_at.desc()).all()


def get_investment(
    db: Session,
    investment_id: str,
    user_id: Optional[str] = None,
    for_update: bool = False
) -> Investment:
    """
    Fetches an investment. With `user_id`, other users' investments are reported as missing.
    `for_update` locks the row until commit, for reads that gate a status change.
    """
    query = db.query(Investment).filter(Investment.id == investment_id)
    if user_id:
        query = query.filter(Investment.user_id == user_id)
    if for_update:
        query = query.with_for_update()
    investment = query.first()
    if not investment:
        raise NotFoundError("Investment", investment_id)
    return investment


def portfolio_summary(db: Session, user_id: str) -> Dict[str, object]:
    """Totals over investments still holding principal (ACTIVE or MATURED)."""
    held = [
        i for i in list_investments(db, user_id)
        if i.status in (InvestmentStatus.ACTIVE, InvestmentStatus.MATURED)
    ]
    return {
        "total_invested": sum((i.amount for i in held), Decimal("0.00")),
        "total_expected_return": sum((i.expected_return for i in held), Decimal("0.00")),
        "active_count": sum(1 for i in held if i.status == InvestmentStatus.ACTIVE),
        "matured_count": sum(1 for i in held if i.status == InvestmentStatus.MATURED),
    }


def withdraw_investment(db: Session, investment_id: str, user_id: str) -> Investment:
    """Pays out principal plus expected return of a matured investment."""
    investment = get_investment(db, investment_id, user_id, for_update=True)
    if investment.status != InvestmentStatus.MATURED:
        raise ConflictError(f"Only matured investments can be withdrawn (status={investment.status.value})")

    payout = investment.amount + investment.expected_return
    wallet = get_wallet(db, user_id)
    credit(
        db,
        wallet,
        payout,
        WalletTransactionType.RETURN,
        f"{SECTOR_LABELS[investment.sector]} investment payout"
    )
    investment.status = InvestmentStatus.WITHDRAWN
    investment.actual_return = investment.expected_return

    notify(
        db,
        user_id,
        NotificationType.WALLET_UPDATED,
        "Investment Withdrawn",
        f"{format_money(payout)} has been credited to your wallet.",
        action_url="/wallet"
    )
    db.commit()
    db.refresh(investment)

    audit_log(
        action="investment_withdrawn",
        user=user_id,
        resource=f"investment_id={investment.id}",
        details={"payout": str(payout)}
    )
    return investment


def _active_investment(db: Session, investment_id: str) -> Investment:
    investment = get_investment(db, investment_id, for_update=True)
    if investment.status != InvestmentStatus.ACTIVE:
        raise ConflictError(f"Investment is not active (status={investment.status.value})")
    return investment


def mature_investment(db: Session, investment_id: str, admin_id: str) -> Investment:
    investment = _active_investment(db, investment_id)
    investment.status = InvestmentStatus.MATURED

    notify(
        db,
        investment.user_id,
        NotificationType.INVESTMENT_MATURED,
        "Investment Matured",
        f"Your {SECTOR_LABELS[investment.sector]} investment has matured. "
        f"You can now withdraw {format_money(investment.amount + investment.expected_return)}.",
        action_url=f"/investments/{investment.id}"
    )
    db.commit()
    db.refresh(investment)

    audit_log(action="investment_matured", user=admin_id, resource=f"investment_id={investment.id}")
    return investment


def cancel_investment(db: Session, investment_id: str, admin_id: str) -> Investment:
    """Cancels an active investment and refunds the principal."""
    investment = _active_investment(db, investment_id)
    wallet = get_wallet(db, investment.user_id)
    credit(
        db,
        wallet,
        investment.amount,
        WalletTransactionType.REFUND,
        f"Refund of cancelled {SECTOR_LABELS[investment.sector]} investment"
    )
    investment.status = InvestmentStatus.CANCELLED

    notify(
        db,
        investment.user_id,
        NotificationType.INVESTMENT_CANCELLED,
        "Investment Cancelled",
        f"Your investment was cancelled and {format_money(investment.amount)} has been refunded to your wallet.",
        action_url="/wallet"
    )
    db.commit()
    db.refresh(investment)

    audit_log(
        action="investment_cancelled",
        user=admin_id,
        resource=f"investment_id={investment.id}",
        details={"refund": str(investment.amount)}
    )
    logger.info(f"Investment cancelled: id={investment.id}")
    return investment


def _check_plan_terms(category: PlanCategory, duration_months: int, rate_percent: Decimal) -> None:
    """A market plan may not advertise terms the engine would not honour for its category."""
    if duration_months != resolve_duration_months(category):
        raise ValidationError(
            f"{category.value} plans run for {resolve_duration_months(category)} months"
        )
    if rate_percent / HUNDRED != return_rate(category):
        raise ValidationError(
            f"{category.value} plans pay {return_rate(category) * HUNDRED:.2f}%"
        )


def list_market_plans(db: Session, active_only: bool = False) -> List[MarketPlan]:
    query = db.query(MarketPlan)
    if active_only:
        query = query.filter(MarketPlan.is_active.is_(True))
    return query.order_by(MarketPlan.min_amount).all()


def create_market_plan(db: Session, data: MarketPlanCreate, admin_id: str) -> MarketPlan:
    _check_plan_terms(data.category, data.duration_months, data.return_rate)
    plan = MarketPlan(**data.model_dump())
    db.add(plan)
    db.commit()
    db.refresh(plan)

    audit_log(action="market_plan_created", user=admin_id, resource=f"market_plan_id={plan.id}", details=data.model_dump())
    return plan


def update_market_plan(db: Session, plan_id: str, data: MarketPlanUpdate, admin_id: str) -> MarketPlan:
    plan = db.query(MarketPlan).filter(MarketPlan.id == plan_id).first()
    if not plan:
        raise NotFoundError("Market plan", plan_id)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    min_amount = changes.get("min_amount", plan.min_amount)
    max_amount = changes.get("max_amount", plan.max_amount)
    if min_amount > max_amount:
        raise ValidationError("min_amount must not exceed max_amount")

    for field, value in changes.items():
        setattr(plan, field, value)
    db.commit()
    db.refresh(plan)

    audit_log(action="market_plan_updated", user=admin_id, resource=f"market_plan_id={plan.id}", details=changes)
    return plan
