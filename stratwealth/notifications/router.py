from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stratwealth.auth.dependencies import require_user
from stratwealth.auth.gate import Identity
from stratwealth.core.database import get_db
from stratwealth.notifications.schemas import MarkAllReadResponse, NotificationListResponse, NotificationResponse
from stratwealth.notifications.service import count_unread, list_notifications, mark_all_read, mark_read

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    unread: bool = False,
    limit: int = 50,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user)
) -> NotificationListResponse:
    notifications = list_notifications(db, identity.user_id, unread_only=unread, limit=limit)
    unread_count = count_unread(db, identity.user_id)
    return NotificationListResponse(
        unread_count=unread_count,
        notifications=[NotificationResponse.model_validate(n) for n in notifications]
    )


@router.post("/read-all", response_model=MarkAllReadResponse)
def read_all(db: Session = Depends(get_db), identity: Identity = Depends(require_user)) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=mark_all_read(db, identity.user_id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def read_one(
    notification_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user)
):
    return mark_read(db, notification_id, identity.user_id)
