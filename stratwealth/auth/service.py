"""
Account lifecycle: registration, credential checks and password changes.
"""
from datetime import timedelta
from typing import Tuple
from sqlalchemy.orm import Session
from stratwealth.auth.models import User
from stratwealth.auth.schemas import UserCreate
from stratwealth.core.config import settings
from stratwealth.core.errors import ConflictError, ForbiddenError, UnauthorizedError, ValidationError
from stratwealth.core.logger import logger, audit_log
from stratwealth.core.security import create_access_token, get_password_hash, verify_password
from stratwealth.referrals.service import link_referral
from stratwealth.wallet.service import create_wallet


def issue_token(user: User) -> str:
    return create_access_token(
        data={"sub": user.id, "role": user.role.value},
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def register_user(db: Session, data: UserCreate) -> Tuple[User, str]:
    """Creates the user together with an empty wallet and an optional referral link."""
    if db.query(User).filter(User.email == data.email).first():
        raise ConflictError("Email already registered")

    user = User(
        first_name=data.first_name,
        last_name=data.last_name,
        email=data.email,
        hashed_password=get_password_hash(data.password)
    )
    db.add(user)
    db.flush()

    create_wallet(db, user.id)
    referral = link_referral(db, user, data.referral_code)

    db.commit()
    db.refresh(user)

    audit_log(
        action="user_registered",
        user=user.id,
        resource=f"user_id={user.id}",
        details={"referred_by": referral.referrer_id if referral else None}
    )
    logger.info(f"New user registered: {user.id}")
    return user, issue_token(user)


def authenticate(db: Session, email: str, password: str) -> Tuple[User, str]:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        audit_log(action="auth_login_failed", user="anonymous", resource="auth", details={"email": email})
        raise UnauthorizedError("Invalid credentials")
    if user.is_banned:
        raise ForbiddenError("This account has been suspended")

    audit_log(action="auth_login", user=user.id, resource=f"user_id={user.id}")
    return user, issue_token(user)


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect")
    if current_password == new_password:
        raise ValidationError("New password must differ from the current one")

    user.hashed_password = get_password_hash(new_password)
    db.commit()
    audit_log(action="auth_password_changed", user=user.id, resource=f"user_id={user.id}")
