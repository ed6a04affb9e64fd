from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stratwealth.auth.dependencies import require_admin, require_user
from stratwealth.auth.gate import Identity
from stratwealth.core.database import get_db
from stratwealth.kyc.models import KycStatus
from stratwealth.kyc.schemas import KycRejectRequest, KycResponse, KycStatusResponse, KycSubmitRequest
from stratwealth.kyc.service import approve_kyc, get_submission, list_submissions, reject_kyc, submit_kyc

router = APIRouter()
admin_router = APIRouter()


@router.post("/submit", response_model=KycResponse, status_code=201)
def submit(data: KycSubmitRequest, db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    """Submits identity documents for review. Resubmitting replaces a rejected submission."""
    return submit_kyc(db, identity.user_id, data)


@router.get("/status", response_model=KycStatusResponse)
def status(db: Session = Depends(get_db), identity: Identity = Depends(require_user)) -> KycStatusResponse:
    submission = get_submission(db, identity.user_id)
    if not submission:
        return KycStatusResponse(status=KycStatus.NOT_SUBMITTED)
    return KycStatusResponse(status=submission.status, submission=KycResponse.model_validate(submission))


@admin_router.get("/kyc", response_model=List[KycResponse])
def review_queue(
    status: Optional[KycStatus] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return list_submissions(db, status)


@admin_router.post("/kyc/{kyc_id}/approve", response_model=KycResponse)
def approve(kyc_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return approve_kyc(db, kyc_id, identity.user_id)


@admin_router.post("/kyc/{kyc_id}/reject", response_model=KycResponse)
def reject(
    kyc_id: str,
    data: KycRejectRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return reject_kyc(db, kyc_id, identity.user_id, data.reason)
