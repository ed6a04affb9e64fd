"""
Pydantic schemas for wallet requests and ledger views.
Amounts travel as decimal strings in responses.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from stratwealth.wallet.models import CryptoType, WalletTransactionStatus, WalletTransactionType


class DepositRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2, description="Amount in account currency")
    crypto_type: CryptoType = Field(default=CryptoType.USDT)
    tx_hash: Optional[str] = Field(None, max_length=200, description="On-chain transaction hash")


class WithdrawalRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    crypto_type: CryptoType = Field(default=CryptoType.USDT)


class ReviewRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class WalletTransactionResponse(BaseModel):
    id: str
    wallet_id: str
    type: WalletTransactionType
    amount: Decimal
    status: WalletTransactionStatus
    crypto_type: CryptoType
    tx_hash: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletResponse(BaseModel):
    id: str
    user_id: str
    balance: Decimal
    btc_address: Optional[str] = None
    usdt_address: Optional[str] = None
    recent_transactions: List[WalletTransactionResponse] = []

    model_config = ConfigDict(from_attributes=True)
