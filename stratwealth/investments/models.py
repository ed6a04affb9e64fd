"""
Data models for investments and admin-managed market plans.
"""
import enum
from decimal import Decimal
from sqlalchemy import String, DateTime, Enum, ForeignKey, Numeric, Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
from stratwealth.core.database import Base, Money, get_enum_values
from stratwealth.terms.engine import PlanCategory


class InvestmentSector(str, enum.Enum):
    REAL_ESTATE = "REAL_ESTATE"
    GREEN_ENERGY = "GREEN_ENERGY"
    MARKET = "MARKET"


class InvestmentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    MATURED = "MATURED"
    CANCELLED = "CANCELLED"
    WITHDRAWN = "WITHDRAWN"


class Investment(Base):
    """
    A committed investment. Principal, expected return and end date are fixed
    at creation from the plan category and never recomputed.
    """

    __tablename__ = "investments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    sector: Mapped[InvestmentSector] = mapped_column(
        Enum(InvestmentSector, values_callable=get_enum_values),
        nullable=False,
        index=True
    )
    category: Mapped[PlanCategory] = mapped_column(
        Enum(PlanCategory, values_callable=get_enum_values),
        nullable=False
    )
    plan_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("market_plans.id"), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    expected_return: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    actual_return: Mapped[Optional[Decimal]] = mapped_column(Money(), nullable=True)
    status: Mapped[InvestmentStatus] = mapped_column(
        Enum(InvestmentStatus, values_callable=get_enum_values),
        nullable=False,
        default=InvestmentStatus.ACTIVE,
        index=True
    )
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reinvest: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<Investment(id={self.id}, sector={self.sector}, amount={self.amount}, status={self.status})>"


class MarketPlan(Base):
    __tablename__ = "market_plans"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[PlanCategory] = mapped_column(
        Enum(PlanCategory, values_callable=get_enum_values),
        nullable=False
    )
    min_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    max_amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    # Percent, e.g. 15.00
    return_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    duration_months: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<MarketPlan(id={self.id}, name={self.name}, category={self.category})>"
