"""
Business logic for wallets.
Balance changes happen only through `credit` / `debit` (internal movements) or
through an admin review of a PENDING deposit/withdrawal request. None of these
commit: the calling service owns the unit of work.
"""
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from stratwealth.core.errors import ConflictError, InsufficientFundsError, NotFoundError, ValidationError
from stratwealth.core.logger import logger, audit_log
from stratwealth.core.security import mask_sensitive_data
from stratwealth.core.utils import format_money, quantize_money
from stratwealth.notifications.models import NotificationType
from stratwealth.notifications.service import notify
from stratwealth.wallet.models import (
    CryptoType,
    Wallet,
    WalletTransaction,
    WalletTransactionStatus,
    WalletTransactionType,
)


def create_wallet(db: Session, user_id: str) -> Wallet:
    wallet = Wallet(user_id=user_id, balance=Decimal("0.00"))
    db.add(wallet)
    return wallet


def get_wallet(db: Session, user_id: str) -> Wallet:
    wallet = db.query(Wallet).filter(Wallet.user_id == user_id).first()
    if not wallet:
        raise NotFoundError("Wallet")
    return wallet


def _record(
    db: Session,
    wallet: Wallet,
    type: WalletTransactionType,
    amount: Decimal,
    status: WalletTransactionStatus,
    description: str,
    crypto_type: CryptoType = CryptoType.USDT,
    tx_hash: Optional[str] = None
) -> WalletTransaction:
    transaction = WalletTransaction(
        wallet_id=wallet.id,
        type=type,
        amount=quantize_money(amount),
        status=status,
        crypto_type=crypto_type,
        tx_hash=tx_hash,
        description=description
    )
    db.add(transaction)
    return transaction


def credit(db: Session, wallet: Wallet, amount: Decimal, type: WalletTransactionType, description: str) -> WalletTransaction:
    """Adds funds and writes a COMPLETED ledger row."""
    amount = quantize_money(amount)
    if amount <= 0:
        raise ValidationError("Credit amount must be positive")
    wallet.balance = quantize_money(wallet.balance + amount)
    return _record(db, wallet, type, amount, WalletTransactionStatus.COMPLETED, description)


def debit(db: Session, wallet: Wallet, amount: Decimal, type: WalletTransactionType, description: str) -> WalletTransaction:
    """Removes funds and writes a COMPLETED ledger row. Never lets the balance go negative."""
    amount = quantize_money(amount)
    if amount <= 0:
        raise ValidationError("Debit amount must be positive")
    if wallet.balance < amount:
        raise InsufficientFundsError("Insufficient balance in your wallet")
    wallet.balance = quantize_money(wallet.balance - amount)
    return _record(db, wallet, type, amount, WalletTransactionStatus.COMPLETED, description)


def list_transactions(db: Session, wallet_id: str, limit: Optional[int] = None) -> List[WalletTransaction]:
    query = db.query(WalletTransaction).filter(
        WalletTransaction.wallet_id == wallet_id
    ).order_by(WalletTransaction.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def request_deposit(
    db: Session,
    user_id: str,
    amount: Decimal,
    crypto_type: CryptoType,
    tx_hash: Optional[str]
) -> WalletTransaction:
    """Records a PENDING deposit. Funds are credited when an admin approves it."""
    wallet = get_wallet(db, user_id)
    transaction = _record(
        db,
        wallet,
        WalletTransactionType.DEPOSIT,
        amount,
        WalletTransactionStatus.PENDING,
        f"Deposit of {format_money(amount)} via {crypto_type.value}",
        crypto_type=crypto_type,
        tx_hash=tx_hash
    )
    notify(
        db,
        user_id,
        NotificationType.WALLET_UPDATED,
        "Deposit Request Submitted",
        f"Your deposit request of {format_money(amount)} is awaiting confirmation.",
        action_url="/wallet"
    )
    db.commit()
    db.refresh(transaction)

    audit_log(
        action="wallet_deposit_requested",
        user=user_id,
        resource=f"wallet_transaction_id={transaction.id}",
        details={"amount": amount, "crypto_type": crypto_type.value, "tx_hash": mask_sensitive_data(tx_hash)}
    )
    return transaction


def request_withdrawal(db: Session, user_id: str, amount: Decimal, crypto_type: CryptoType) -> WalletTransaction:
    """Records a PENDING withdrawal after checking the current balance."""
    wallet = get_wallet(db, user_id)
    if wallet.balance < amount:
        raise InsufficientFundsError("Insufficient balance")

    transaction = _record(
        db,
        wallet,
        WalletTransactionType.WITHDRAWAL,
        amount,
        WalletTransactionStatus.PENDING,
        f"Withdrawal of {format_money(amount)} via {crypto_type.value}",
        crypto_type=crypto_type
    )
    notify(
        db,
        user_id,
        NotificationType.WALLET_UPDATED,
        "Withdrawal Request Submitted",
        f"Your withdrawal request of {format_money(amount)} is being processed.",
        action_url="/wallet"
    )
    db.commit()
    db.refresh(transaction)

    audit_log(
        action="wallet_withdrawal_requested",
        user=user_id,
        resource=f"wallet_transaction_id={transaction.id}",
        details={"amount": amount, "crypto_type": crypto_type.value}
    )
    return transaction


def list_all_wallets(db: Session) -> List[Wallet]:
    return db.query(Wallet).order_by(Wallet.updated_at.desc()).all()


def list_transactions_for_review(db: Session, status: Optional[WalletTransactionStatus] = None) -> List[WalletTransaction]:
    query = db.query(WalletTransaction)
    if status:
        query = query.filter(WalletTransaction.status == status)
    return query.order_by(WalletTransaction.created_at.desc()).all()


def _pending_request(db: Session, transaction_id: str) -> WalletTransaction:
    transaction = db.query(WalletTransaction).filter(
        WalletTransaction.id == transaction_id
    ).with_for_update().first()
    if not transaction:
        raise NotFoundError("Wallet transaction", transaction_id)
    if transaction.status != WalletTransactionStatus.PENDING:
        raise ConflictError(f"Transaction already reviewed (status={transaction.status.value})")
    if transaction.type not in (WalletTransactionType.DEPOSIT, WalletTransactionType.WITHDRAWAL):
        raise ValidationError("Only deposit and withdrawal requests can be reviewed")
    return transaction


def approve_transaction(db: Session, transaction_id: str, admin_id: str) -> WalletTransaction:
    """Applies a pending deposit/withdrawal to the balance and completes it."""
    transaction = _pending_request(db, transaction_id)
    wallet = db.query(Wallet).filter(Wallet.id == transaction.wallet_id).first()

    if transaction.type == WalletTransactionType.DEPOSIT:
        wallet.balance = quantize_money(wallet.balance + transaction.amount)
        title = "Deposit Confirmed"
    else:
        if wallet.balance < transaction.amount:
            raise InsufficientFundsError("Wallet balance no longer covers this withdrawal")
        wallet.balance = quantize_money(wallet.balance - transaction.amount)
        title = "Withdrawal Completed"

    transaction.status = WalletTransactionStatus.COMPLETED
    notify(
        db,
        wallet.user_id,
        NotificationType.WALLET_UPDATED,
        title,
        f"Your {transaction.type.value.lower()} of {format_money(transaction.amount)} has been processed.",
        action_url="/wallet"
    )
    db.commit()
    db.refresh(transaction)

    audit_log(
        action="wallet_transaction_approved",
        user=admin_id,
        resource=f"wallet_transaction_id={transaction.id}",
        details={"type": transaction.type.value, "amount": transaction.amount, "wallet_id": wallet.id}
    )
    logger.info(f"Wallet transaction approved: id={transaction.id}, new_balance={wallet.balance}")
    return transaction


def reject_transaction(db: Session, transaction_id: str, admin_id: str, reason: Optional[str] = None) -> WalletTransaction:
    transaction = _pending_request(db, transaction_id)
    wallet = db.query(Wallet).filter(Wallet.id == transaction.wallet_id).first()

    transaction.status = WalletTransactionStatus.FAILED
    message = f"Your {transaction.type.value.lower()} of {format_money(transaction.amount)} was rejected."
    if reason:
        message = f"{message} Reason: {reason}"
    notify(db, wallet.user_id, NotificationType.WALLET_UPDATED, "Wallet Request Rejected", message, action_url="/wallet")
    db.commit()
    db.refresh(transaction)

    audit_log(
        action="wallet_transaction_rejected",
        user=admin_id,
        resource=f"wallet_transaction_id={transaction.id}",
        details={"reason": reason}
    )
    return transaction
