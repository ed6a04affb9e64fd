from decimal import Decimal
from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_users: int
    pending_kyc: int
    pending_wallet_transactions: int
    active_investments: int
    total_invested: Decimal
    total_expected_returns: Decimal
