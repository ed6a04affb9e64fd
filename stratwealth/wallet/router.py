"""
FastAPI routers for wallet endpoints.
`router` serves the account owner; `admin_router` is mounted under /admin.
"""
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from stratwealth.auth.dependencies import require_admin, require_user
from stratwealth.auth.gate import Identity
from stratwealth.core.database import get_db
from stratwealth.core.logger import get_logger_with_correlation
from stratwealth.wallet.models import WalletTransactionStatus
from stratwealth.wallet.schemas import (
    DepositRequest,
    ReviewRequest,
    WalletResponse,
    WalletTransactionResponse,
    WithdrawalRequest,
)
from stratwealth.wallet.service import (
    approve_transaction,
    get_wallet,
    list_all_wallets,
    list_transactions,
    list_transactions_for_review,
    reject_transaction,
    request_deposit,
    request_withdrawal,
)

router = APIRouter()
admin_router = APIRouter()


def build_wallet_response(db: Session, wallet, recent: int = 10) -> WalletResponse:
    return WalletResponse(
        id=wallet.id,
        user_id=wallet.user_id,
        balance=wallet.balance,
        btc_address=wallet.btc_address,
        usdt_address=wallet.usdt_address,
        recent_transactions=[
            WalletTransactionResponse.model_validate(t) for t in list_transactions(db, wallet.id, limit=recent)
        ]
    )


@router.get("", response_model=WalletResponse)
def my_wallet(db: Session = Depends(get_db), identity: Identity = Depends(require_user)) -> WalletResponse:
    """Balance and the ten most recent ledger entries."""
    return build_wallet_response(db, get_wallet(db, identity.user_id))


@router.get("/transactions", response_model=List[WalletTransactionResponse])
def my_transactions(db: Session = Depends(get_db), identity: Identity = Depends(require_user)):
    wallet = get_wallet(db, identity.user_id)
    return list_transactions(db, wallet.id)


@router.post("/deposit", response_model=WalletTransactionResponse, status_code=201)
def deposit(
    data: DepositRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
    x_correlation_id: str = Header(default=None)
):
    """
    Submits a deposit request. The balance is credited once an administrator
    confirms the transfer.
    """
    logger = get_logger_with_correlation(x_correlation_id or str(uuid4()))
    logger.info(f"Deposit request: user={identity.user_id}, amount={data.amount}")
    return request_deposit(db, identity.user_id, data.amount, data.crypto_type, data.tx_hash)


@router.post("/withdraw", response_model=WalletTransactionResponse, status_code=201)
def withdraw(
    data: WithdrawalRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_user),
    x_correlation_id: str = Header(default=None)
):
    logger = get_logger_with_correlation(x_correlation_id or str(uuid4()))
    logger.info(f"Withdrawal request: user={identity.user_id}, amount={data.amount}")
    return request_withdrawal(db, identity.user_id, data.amount, data.crypto_type)


@admin_router.get("/wallets", response_model=List[WalletResponse])
def all_wallets(db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return [build_wallet_response(db, w, recent=5) for w in list_all_wallets(db)]


@admin_router.get("/wallet-transactions", response_model=List[WalletTransactionResponse])
def wallet_transactions(
    status: Optional[WalletTransactionStatus] = None,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return list_transactions_for_review(db, status)


@admin_router.post("/wallet-transactions/{transaction_id}/approve", response_model=WalletTransactionResponse)
def approve(transaction_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    return approve_transaction(db, transaction_id, identity.user_id)


@admin_router.post("/wallet-transactions/{transaction_id}/reject", response_model=WalletTransactionResponse)
def reject(
    transaction_id: str,
    data: ReviewRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin)
):
    return reject_transaction(db, transaction_id, identity.user_id, data.reason)
