"""
FastAPI dependencies wiring the request session into the authorization gate.
Routes declare one of `require_user`, `require_admin` or `require_investor`
and receive the validated `Identity`.
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from stratwealth.auth.gate import Identity, authorize, enforce
from stratwealth.auth.models import Role, User
from stratwealth.core.database import get_db
from stratwealth.core.errors import UnauthorizedError
from stratwealth.core.security import decode_access_token
from stratwealth.kyc.models import KycStatus, KycSubmission

COOKIE_NAME = "access_token"


def _extract_token(request: Request) -> Optional[str]:
    """Reads the session token from the cookie, falling back to the Authorization header."""
    raw = request.cookies.get(COOKIE_NAME) or request.headers.get("Authorization")
    if not raw:
        return None
    # Token format: "Bearer <token>"
    scheme, _, param = raw.partition(" ")
    return param or scheme


def load_identity(db: Session, user: User) -> Identity:
    kyc = db.query(KycSubmission).filter(KycSubmission.user_id == user.id).first()
    return Identity(
        user_id=user.id,
        role=user.role,
        email_verified=user.email_verified_at is not None,
        kyc_status=kyc.status if kyc else KycStatus.NOT_SUBMITTED,
        is_banned=user.is_banned,
    )


def get_identity(request: Request, db: Session = Depends(get_db)) -> Optional[Identity]:
    """
    Session lookup. Returns None for a missing, expired, forged or orphaned token;
    the gate turns that into an Unauthenticated result.
    """
    token = _extract_token(request)
    if not token:
        return None

    payload = decode_access_token(token)
    user_id = payload.get("sub") if payload else None
    if not user_id or not isinstance(user_id, str):
        return None

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return None

    return load_identity(db, user)


def require_user(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    """Any signed-in, non-suspended account."""
    return enforce(authorize(identity))


def require_admin(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    """Back-office operations."""
    return enforce(authorize(identity, role=Role.ADMIN))


def require_investor(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    """Money-moving operations: verified email and approved KYC."""
    return enforce(authorize(identity, require_kyc=True, require_verified_email=True))


def get_current_user(identity: Identity = Depends(require_user), db: Session = Depends(get_db)) -> User:
    """Loads the full user record for profile endpoints."""
    user = db.query(User).filter(User.id == identity.user_id).first()
    if not user:
        raise UnauthorizedError("Could not validate credentials")
    return user
