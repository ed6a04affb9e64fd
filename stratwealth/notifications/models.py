import enum
from sqlalchemy import String, DateTime, Enum, ForeignKey, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
from stratwealth.core.database import Base, get_enum_values


class NotificationType(str, enum.Enum):
    INVESTMENT_CREATED = "INVESTMENT_CREATED"
    INVESTMENT_MATURED = "INVESTMENT_MATURED"
    INVESTMENT_CANCELLED = "INVESTMENT_CANCELLED"
    WALLET_UPDATED = "WALLET_UPDATED"
    KYC_UPDATED = "KYC_UPDATED"
    COMMISSION_EARNED = "COMMISSION_EARNED"
    PROPERTY_PURCHASED = "PROPERTY_PURCHASED"
    SYSTEM = "SYSTEM"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, values_callable=get_enum_values),
        nullable=False,
        default=NotificationType.SYSTEM
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    action_url: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
