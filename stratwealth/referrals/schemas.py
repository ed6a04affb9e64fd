from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from stratwealth.referrals.models import CommissionStatus, ReferralTransactionType


class ReferredUser(BaseModel):
    id: str
    first_name: str
    last_name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommissionResponse(BaseModel):
    id: str
    user_id: str
    amount: Decimal
    status: CommissionStatus
    transaction_type: ReferralTransactionType
    source_id: str
    created_at: datetime
    paid_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReferralOverviewResponse(BaseModel):
    referral_code: str
    referred_users: List[ReferredUser]
    commissions: List[CommissionResponse]
    total_earned: Decimal
    total_pending: Decimal


class ReferralSettingsRequest(BaseModel):
    """Commission percentages (5 means 5%). Omitted fields keep their current value."""
    property_commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    market_commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    green_energy_commission_rate: Optional[Decimal] = Field(None, ge=0, le=100)


class ReferralSettingsResponse(BaseModel):
    property_commission_rate: Decimal
    market_commission_rate: Decimal
    green_energy_commission_rate: Decimal

    model_config = ConfigDict(from_attributes=True)
