"""
Back-office queries and user moderation.
"""
from decimal import Decimal
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from stratwealth.auth.models import Role, User
from stratwealth.core.errors import ConflictError, NotFoundError, ValidationError
from stratwealth.core.logger import logger, audit_log
from stratwealth.core.utils import utcnow
from stratwealth.investments.models import Investment, InvestmentStatus
from stratwealth.kyc.models import KycStatus, KycSubmission
from stratwealth.wallet.models import WalletTransaction, WalletTransactionStatus


def dashboard_stats(db: Session) -> Dict[str, object]:
    active = db.query(Investment).filter(Investment.status == InvestmentStatus.ACTIVE).all()

    return {
        "total_users": db.query(func.count(User.id)).scalar(),
        "pending_kyc": db.query(func.count(KycSubmission.id)).filter(
            KycSubmission.status == KycStatus.PENDING
        ).scalar(),
        "pending_wallet_transactions": db.query(func.count(WalletTransaction.id)).filter(
            WalletTransaction.status == WalletTransactionStatus.PENDING
        ).scalar(),
        "active_investments": len(active),
        "total_invested": sum((i.amount for i in active), Decimal("0.00")),
        "total_expected_returns": sum((i.expected_return for i in active), Decimal("0.00")),
    }


def list_users(db: Session, search: Optional[str] = None) -> List[User]:
    query = db.query(User)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            User.email.ilike(pattern) | User.first_name.ilike(pattern) | User.last_name.ilike(pattern)
        )
    return query.order_by(User.created_at.desc()).all()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User", user_id)
    return user


def set_banned(db: Session, user_id: str, banned: bool, admin_id: str) -> User:
    user = get_user(db, user_id)
    if banned and user.role == Role.ADMIN:
        raise ValidationError("Administrators cannot be banned")
    if user.is_banned == banned:
        raise ConflictError("User is already banned" if banned else "User is not banned")

    user.is_banned = banned
    db.commit()
    db.refresh(user)

    audit_log(action="user_banned" if banned else "user_unbanned", user=admin_id, resource=f"user_id={user.id}")
    logger.warning(f"User {'banned' if banned else 'unbanned'}: {user.id}")
    return user


def verify_email(db: Session, user_id: str, admin_id: str) -> User:
    user = get_user(db, user_id)
    if user.email_verified_at is None:
        user.email_verified_at = utcnow()
        db.commit()
        db.refresh(user)
        audit_log(action="user_email_verified", user=admin_id, resource=f"user_id={user.id}")
    return user
