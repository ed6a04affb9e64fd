"""
Authorization gate.
One place decides whether a caller may proceed: every protected route reaches
`authorize` through the dependencies in `stratwealth.auth.dependencies`, and
services receive the resulting `Identity` explicitly.

    Unauthenticated -> (session lookup) -> Authenticated | Unauthenticated
    Authenticated   -> (role / KYC check) -> Authorized | Forbidden
"""
import enum
from dataclasses import dataclass
from typing import Optional

from stratwealth.auth.models import Role
from stratwealth.core.errors import ForbiddenError, KycRequiredError, UnauthorizedError
from stratwealth.kyc.models import KycStatus


@dataclass(frozen=True)
class Identity:
    """Validated caller context, built from the session and the user record."""
    user_id: str
    role: Role
    email_verified: bool
    kyc_status: KycStatus
    is_banned: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class GateStatus(str, enum.Enum):
    AUTHENTICATED = "AUTHENTICATED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"


REASON_NO_SESSION = "no_session"
REASON_BANNED = "banned"
REASON_ROLE = "role_required"
REASON_KYC = "kyc_required"
REASON_EMAIL = "email_unverified"


@dataclass(frozen=True)
class GateResult:
    status: GateStatus
    identity: Optional[Identity] = None
    reason: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.status == GateStatus.AUTHENTICATED


def authorize(
    identity: Optional[Identity],
    role: Optional[Role] = None,
    require_kyc: bool = False,
    require_verified_email: bool = False,
) -> GateResult:
    """Pure decision: never touches the database and never raises."""
    if identity is None:
        return GateResult(GateStatus.UNAUTHENTICATED, reason=REASON_NO_SESSION)
    if identity.is_banned:
        return GateResult(GateStatus.FORBIDDEN, reason=REASON_BANNED)
    # ADMIN satisfies any role requirement
    if role is not None and identity.role != role and not identity.is_admin:
        return GateResult(GateStatus.FORBIDDEN, reason=REASON_ROLE)
    if require_verified_email and not identity.email_verified:
        return GateResult(GateStatus.FORBIDDEN, reason=REASON_EMAIL)
    if require_kyc and identity.kyc_status != KycStatus.APPROVED:
        return GateResult(GateStatus.FORBIDDEN, reason=REASON_KYC)
    return GateResult(GateStatus.AUTHENTICATED, identity=identity)


def enforce(result: GateResult) -> Identity:
    """Unwraps an allowed result or raises the matching 401/403 error."""
    if result.allowed and result.identity is not None:
        return result.identity
    if result.status == GateStatus.UNAUTHENTICATED:
        raise UnauthorizedError()
    if result.reason == REASON_KYC:
        raise KycRequiredError()
    if result.reason == REASON_BANNED:
        raise ForbiddenError("This account has been suspended")
    if result.reason == REASON_EMAIL:
        raise ForbiddenError("Email verification required")
    raise ForbiddenError()
