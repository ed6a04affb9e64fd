from typing import List, Optional
from sqlalchemy.orm import Session
from stratwealth.core.errors import NotFoundError
from stratwealth.notifications.models import Notification, NotificationType


def notify(
    db: Session,
    user_id: str,
    type: NotificationType,
    title: str,
    message: str,
    action_url: Optional[str] = None
) -> Notification:
    """Queues a notification in the caller's unit of work. The caller commits."""
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        action_url=action_url
    )
    db.add(notification)
    return notification


def list_notifications(db: Session, user_id: str, unread_only: bool = False, limit: int = 50) -> List[Notification]:
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.read.is_(False))
    return query.order_by(Notification.created_at.desc()).limit(limit).all()


def mark_read(db: Session, notification_id: str, user_id: str) -> Notification:
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).first()
    if not notification:
        raise NotFoundError("Notification", notification_id)

    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_read(db: Session, user_id: str) -> int:
    updated = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read.is_(False)
    ).update({Notification.read: True}, synchronize_session=False)
    db.commit()
    return updated


def count_unread(db: Session, user_id: str) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read.is_(False)
    ).count()
