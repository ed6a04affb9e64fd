from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stratwealth.auth.dependencies import get_current_user, require_admin
from stratwealth.auth.gate import Identity
from stratwealth.auth.models import User
from stratwealth.core.database import get_db
from stratwealth.referrals.models import CommissionStatus
from stratwealth.referrals.schemas import (
    CommissionResponse,
    ReferralOverviewResponse,
    ReferralSettingsRequest,
    ReferralSettingsResponse,
)
from stratwealth.referrals.service import get_settings, list_commissions, pay_commission, referral_overview, update_settings

router = APIRouter()
admin_router = APIRouter()


@router.get("", response_model=ReferralOverviewResponse)
def my_referrals(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Own referral code, the users it brought in and the commissions earned."""
    return referral_overview(db, user)


@admin_router.get("/referral-settings", response_model=ReferralSettingsResponse)
def read_settings(db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return get_settings(db)


@admin_router.put("/referral-settings", response_model=ReferralSettingsResponse)
def write_settings(
    data: ReferralSettingsRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return update_settings(db, data.model_dump(exclude_none=True), identity.user_id)


@admin_router.get("/commissions", response_model=List[CommissionResponse])
def commissions(
    status: Optional[CommissionStatus] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return list_commissions(db, status)


@admin_router.post("/commissions/{commission_id}/pay", response_model=CommissionResponse)
def pay(commission_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return pay_commission(db, commission_id, identity.user_id)
