"""
Data models for identity verification (know your customer).
One submission per user; resubmission replaces the previous document.
"""
import enum
from sqlalchemy import String, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
from stratwealth.core.database import Base, get_enum_values


class KycStatus(str, enum.Enum):
    NOT_SUBMITTED = "NOT_SUBMITTED"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DocumentType(str, enum.Enum):
    PASSPORT = "PASSPORT"
    DRIVING_LICENSE = "DRIVING_LICENSE"
    NATIONAL_ID = "NATIONAL_ID"


class KycSubmission(Base):
    __tablename__ = "kyc_submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    status: Mapped[KycStatus] = mapped_column(
        Enum(KycStatus, values_callable=get_enum_values),
        nullable=False,
        default=KycStatus.PENDING,
        index=True
    )
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    document_type: Mapped[DocumentType] = mapped_column(
        Enum(DocumentType, values_callable=get_enum_values),
        nullable=False
    )
    document_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # Object-storage key or URL of the already uploaded document image
    document_image: Mapped[str] = mapped_column(String(500), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<KycSubmission(id={self.id}, user_id={self.user_id}, status={self.status})>"
