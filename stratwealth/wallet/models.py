"""
Data models for user wallets and their transaction ledger.
Balances and amounts are fixed-point Decimal values.
"""
import enum
from decimal import Decimal
from sqlalchemy import String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4
from stratwealth.core.database import Base, Money, get_enum_values


class WalletTransactionType(str, enum.Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    INVESTMENT = "INVESTMENT"
    RETURN = "RETURN"
    REFUND = "REFUND"
    COMMISSION = "COMMISSION"
    PROPERTY_PAYMENT = "PROPERTY_PAYMENT"


class WalletTransactionStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class CryptoType(str, enum.Enum):
    BTC = "BTC"
    USDT = "USDT"


class Wallet(Base):
    __tablename__ = "wallets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    balance: Mapped[Decimal] = mapped_column(Money(), nullable=False, default=Decimal("0.00"))
    btc_address: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    usdt_address: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<Wallet(id={self.id}, user_id={self.user_id}, balance={self.balance})>"


class WalletTransaction(Base):
    """Ledger row. PENDING rows have not touched the balance yet."""

    __tablename__ = "wallet_transactions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    wallet_id: Mapped[str] = mapped_column(String(36), ForeignKey("wallets.id"), nullable=False, index=True)
    type: Mapped[WalletTransactionType] = mapped_column(
        Enum(WalletTransactionType, values_callable=get_enum_values),
        nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Money(), nullable=False)
    status: Mapped[WalletTransactionStatus] = mapped_column(
        Enum(WalletTransactionStatus, values_callable=get_enum_values),
        nullable=False,
        default=WalletTransactionStatus.PENDING,
        index=True
    )
    crypto_type: Mapped[CryptoType] = mapped_column(
        Enum(CryptoType, values_callable=get_enum_values),
        nullable=False,
        default=CryptoType.USDT
    )
    tx_hash: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<WalletTransaction(id={self.id}, type={self.type}, amount={self.amount}, status={self.status})>"
