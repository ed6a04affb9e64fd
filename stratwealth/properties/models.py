"""
Data models for the property catalogue and property purchases.
"""
import enum
from decimal import Decimal
from sqlalchemy import String, DateTime, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
from stratwealth.core.database import Base, Money, get_enum_values


class PropertyStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    SOLD = "SOLD"


class PurchaseType(str, enum.Enum):
    FULL = "FULL"
    INSTALLMENT = "INSTALLMENT"


class PropertyTransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    price: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus, values_callable=get_enum_values),
        nullable=False,
        default=PropertyStatus.AVAILABLE,
        index=True
    )
    main_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<Property(id={self.id}, name={self.name}, status={self.status})>"


class PropertyTransaction(Base):
    """
    A purchase of a property. INSTALLMENT purchases stay PENDING until every
    installment is paid; `next_payment_due` is cleared on completion.
    """

    __tablename__ = "property_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    property_id: Mapped[str] = mapped_column(String(36), ForeignKey("properties.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[PurchaseType] = mapped_column(
        Enum(PurchaseType, values_callable=get_enum_values),
        nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    installments: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    installment_amount: Mapped[Optional[Decimal]] = mapped_column(Money(), nullable=True)
    paid_installments: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    amount_paid: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=Decimal("0.00"))
    next_payment_due: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[PropertyTransactionStatus] = mapped_column(
        Enum(PropertyTransactionStatus, values_callable=get_enum_values),
        nullable=False,
        default=PropertyTransactionStatus.PENDING,
        index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    @property
    def outstanding(self) -> Decimal:
        return self.amount - self.amount_paid

    def __repr__(self):
        return f"<PropertyTransaction(id={self.id}, type={self.type}, paid={self.amount_paid}/{self.amount})>"
