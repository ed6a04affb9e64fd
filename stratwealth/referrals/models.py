"""
Data models for the referral program.
Commission rates are percentages; the most recent settings row is authoritative.
"""
import enum
from decimal import Decimal
from sqlalchemy import String, DateTime, Enum, ForeignKey, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
from stratwealth.core.database import Base, Money, get_enum_values


class ReferralStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class CommissionStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class ReferralTransactionType(str, enum.Enum):
    REAL_ESTATE_INVESTMENT = "REAL_ESTATE_INVESTMENT"
    GREEN_ENERGY_INVESTMENT = "GREEN_ENERGY_INVESTMENT"
    MARKET_INVESTMENT = "MARKET_INVESTMENT"
    PROPERTY_PURCHASE = "PROPERTY_PURCHASE"


class Referral(Base):
    __tablename__ = "referrals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    referrer_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # A user can be referred only once
    referred_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    status: Mapped[ReferralStatus] = mapped_column(
        Enum(ReferralStatus, values_callable=get_enum_values),
        nullable=False,
        default=ReferralStatus.COMPLETED
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))


class ReferralSettings(Base):
    __tablename__ = "referral_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    property_commission_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    market_commission_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    green_energy_commission_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)


class ReferralCommission(Base):
    __tablename__ = "referral_commissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    referral_id: Mapped[str] = mapped_column(String(36), ForeignKey("referrals.id"), nullable=False, index=True)
    # The referrer who earns the commission
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    status: Mapped[CommissionStatus] = mapped_column(
        Enum(CommissionStatus, values_callable=get_enum_values),
        nullable=False,
        default=CommissionStatus.PENDING
    )
    transaction_type: Mapped[ReferralTransactionType] = mapped_column(
        Enum(ReferralTransactionType, values_callable=get_enum_values),
        nullable=False
    )
    source_id: Mapped[str] = mapped_column(String(36), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
