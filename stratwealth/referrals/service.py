"""
Business logic for referrals and commissions.
Commissions are computed as amount * rate / 100 and start out PENDING until an
administrator pays them into the referrer's wallet.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from stratwealth.auth.models import User
from stratwealth.core.errors import ConflictError, NotFoundError
from stratwealth.core.logger import logger, audit_log
from stratwealth.core.utils import format_money, quantize_money
from stratwealth.notifications.models import NotificationType
from stratwealth.notifications.service import notify
from stratwealth.referrals.models import (
    CommissionStatus,
    Referral,
    ReferralCommission,
    ReferralSettings,
    ReferralStatus,
    ReferralTransactionType,
)
from stratwealth.wallet.models import WalletTransactionType
from stratwealth.wallet.service import credit, get_wallet

HUNDRED = Decimal("100")


def link_referral(db: Session, referred: User, referral_code: Optional[str]) -> Optional[Referral]:
    """Attaches a newly registered user to the owner of the referral code, if any."""
    if not referral_code:
        return None

    referrer = db.query(User).filter(User.referral_code == referral_code.strip().upper()).first()
    if not referrer or referrer.id == referred.id:
        logger.warning(f"Ignoring unknown referral code for user {referred.id}")
        return None

    referral = Referral(referrer_id=referrer.id, referred_id=referred.id, status=ReferralStatus.COMPLETED)
    db.add(referral)
    return referral


def get_settings(db: Session) -> ReferralSettings:
    """Latest settings row; an unsaved all-zero instance when none was configured."""
    current = db.query(ReferralSettings).order_by(ReferralSettings.created_at.desc()).first()
    if current:
        return current
    return ReferralSettings(
        property_commission_rate=Decimal("0"),
        market_commission_rate=Decimal("0"),
        green_energy_commission_rate=Decimal("0")
    )


def update_settings(db: Session, rates: Dict[str, Decimal], admin_id: str) -> ReferralSettings:
    """Appends a new settings row so the history of rate changes is kept."""
    current = get_settings(db)
    new_settings = ReferralSettings(
        property_commission_rate=rates.get("property_commission_rate", current.property_commission_rate),
        market_commission_rate=rates.get("market_commission_rate", current.market_commission_rate),
        green_energy_commission_rate=rates.get("green_energy_commission_rate", current.green_energy_commission_rate)
    )
    db.add(new_settings)
    db.commit()
    db.refresh(new_settings)

    audit_log(action="referral_settings_updated", user=admin_id, resource=f"referral_settings_id={new_settings.id}", details=rates)
    return new_settings


def commission_rate(settings: ReferralSettings, transaction_type: ReferralTransactionType) -> Decimal:
    if transaction_type in (ReferralTransactionType.REAL_ESTATE_INVESTMENT, ReferralTransactionType.PROPERTY_PURCHASE):
        return Decimal(settings.property_commission_rate)
    if transaction_type == ReferralTransactionType.MARKET_INVESTMENT:
        return Decimal(settings.market_commission_rate)
    if transaction_type == ReferralTransactionType.GREEN_ENERGY_INVESTMENT:
        return Decimal(settings.green_energy_commission_rate)
    return Decimal("0")


def process_referral_commission(
    db: Session,
    user_id: str,
    amount: Decimal,
    transaction_type: ReferralTransactionType,
    source_id: str
) -> Optional[ReferralCommission]:
    """
    Creates a PENDING commission for whoever referred `user_id`.
    Runs inside the caller's unit of work and does not commit.
    """
    referral = db.query(Referral).filter(
        Referral.referred_id == user_id,
        Referral.status == ReferralStatus.COMPLETED
    ).first()
    if not referral:
        return None

    rate = commission_rate(get_settings(db), transaction_type)
    commission_amount = quantize_money(amount * rate / HUNDRED)
    if commission_amount <= 0:
        return None

    commission = ReferralCommission(
        referral_id=referral.id,
        user_id=referral.referrer_id,
        amount=commission_amount,
        status=CommissionStatus.PENDING,
        transaction_type=transaction_type,
        source_id=source_id
    )
    db.add(commission)
    notify(
        db,
        referral.referrer_id,
        NotificationType.COMMISSION_EARNED,
        "New Referral Commission",
        f"You've earned a {rate}% commission of {format_money(commission_amount)} from your referral's investment.",
        action_url="/profile/referrals"
    )
    logger.info(f"Referral commission queued: referrer={referral.referrer_id}, amount={commission_amount}")
    return commission


def referral_overview(db: Session, user: User) -> Dict[str, object]:
    referrals = db.query(Referral).filter(Referral.referrer_id == user.id).order_by(Referral.created_at.desc()).all()
    referred_ids = [r.referred_id for r in referrals]
    referred_users = db.query(User).filter(User.id.in_(referred_ids)).all() if referred_ids else []
    commissions = db.query(ReferralCommission).filter(
        ReferralCommission.user_id == user.id
    ).order_by(ReferralCommission.created_at.desc()).all()

    return {
        "referral_code": user.referral_code,
        "referred_users": referred_users,
        "commissions": commissions,
        "total_earned": sum((c.amount for c in commissions if c.status == CommissionStatus.PAID), Decimal("0.00")),
        "total_pending": sum((c.amount for c in commissions if c.status == CommissionStatus.PENDING), Decimal("0.00")),
    }


def list_commissions(db: Session, status: Optional[CommissionStatus] = None) -> List[ReferralCommission]:
    query = db.query(ReferralCommission)
    if status:
        query = query.filter(ReferralCommission.status == status)
    return query.order_by(ReferralCommission.created_at.desc()).all()


def pay_commission(db: Session, commission_id: str, admin_id: str) -> ReferralCommission:
    commission = db.query(ReferralCommission).filter(
        ReferralCommission.id == commission_id
    ).with_for_update().first()
    if not commission:
        raise NotFoundError("Commission", commission_id)
    if commission.status == CommissionStatus.PAID:
        raise ConflictError("Commission already paid")

    wallet = get_wallet(db, commission.user_id)
    credit(db, wallet, commission.amount, WalletTransactionType.COMMISSION, "Referral commission payout")
    commission.status = CommissionStatus.PAID
    commission.paid_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(commission)

    audit_log(
        action="referral_commission_paid",
        user=admin_id,
        resource=f"commission_id={commission.id}",
        details={"amount": commission.amount, "referrer": commission.user_id}
    )
    return commission
