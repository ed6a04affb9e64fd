"""
Business logic for KYC submissions and their review.
"""
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from stratwealth.core.errors import ConflictError, NotFoundError
from stratwealth.core.logger import logger, audit_log
from stratwealth.core.security import mask_sensitive_data
from stratwealth.kyc.models import KycStatus, KycSubmission
from stratwealth.kyc.schemas import KycSubmitRequest
from stratwealth.notifications.models import NotificationType
from stratwealth.notifications.service import notify


def get_submission(db: Session, user_id: str) -> Optional[KycSubmission]:
    return db.query(KycSubmission).filter(KycSubmission.user_id == user_id).first()


def submit_kyc(db: Session, user_id: str, data: KycSubmitRequest) -> KycSubmission:
    """Creates or replaces the user's submission and puts it back in the review queue."""
    submission = get_submission(db, user_id)
    if submission and submission.status == KycStatus.APPROVED:
        raise ConflictError("KYC already approved")

    if not submission:
        submission = KycSubmission(user_id=user_id)
        db.add(submission)

    submission.status = KycStatus.PENDING
    submission.country = data.country
    submission.document_type = data.document_type
    submission.document_number = data.document_number
    submission.document_image = data.document_image
    submission.submitted_at = datetime.now(timezone.utc)
    submission.reviewed_at = None
    submission.rejection_reason = None

    db.commit()
    db.refresh(submission)

    audit_log(
        action="kyc_submitted",
        user=user_id,
        resource=f"kyc_id={submission.id}",
        details={
            "document_type": data.document_type.value,
            "document_number": mask_sensitive_data(data.document_number),
            "country": data.country
        }
    )
    return submission


def list_submissions(db: Session, status: Optional[KycStatus] = None) -> List[KycSubmission]:
    query = db.query(KycSubmission)
    if status:
        query = query.filter(KycSubmission.status == status)
    return query.order_by(KycSubmission.submitted_at.desc()).all()


def _review(db: Session, kyc_id: str, admin_id: str, status: KycStatus, reason: Optional[str]) -> KycSubmission:
    submission = db.query(KycSubmission).filter(KycSubmission.id == kyc_id).first()
    if not submission:
        raise NotFoundError("KYC submission", kyc_id)
    if submission.status != KycStatus.PENDING:
        raise ConflictError(f"KYC submission already reviewed (status={submission.status.value})")

    submission.status = status
    submission.reviewed_at = datetime.now(timezone.utc)
    submission.rejection_reason = reason

    if status == KycStatus.APPROVED:
        notify(
            db,
            submission.user_id,
            NotificationType.KYC_UPDATED,
            "Identity Verified",
            "Your KYC verification has been approved. You can now invest.",
            action_url="/profile/kyc"
        )
    else:
        notify(
            db,
            submission.user_id,
            NotificationType.KYC_UPDATED,
            "Identity Verification Rejected",
            f"Your KYC verification was rejected: {reason}",
            action_url="/profile/kyc"
        )
    db.commit()
    db.refresh(submission)

    audit_log(
        action=f"kyc_{status.value.lower()}",
        user=admin_id,
        resource=f"kyc_id={submission.id}",
        details={"user_id": submission.user_id, "reason": reason}
    )
    logger.info(f"KYC {status.value}: id={submission.id}")
    return submission


def approve_kyc(db: Session, kyc_id: str, admin_id: str) -> KycSubmission:
    return _review(db, kyc_id, admin_id, KycStatus.APPROVED, None)


def reject_kyc(db: Session, kyc_id: str, admin_id: str, reason: str) -> KycSubmission:
    return _review(db, kyc_id, admin_id, KycStatus.REJECTED, reason)
