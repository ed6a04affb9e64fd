"""
Pydantic schemas for terms quotes and payment schedules.
Amounts are accepted as JSON numbers or strings and returned as decimal strings.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from stratwealth.core.config import settings
from stratwealth.terms.engine import PlanCategory


class QuoteRequest(BaseModel):
    """Terms quote request payload."""
    category: str = Field(..., description="SEMI_ANNUAL or ANNUAL")
    principal: Decimal = Field(..., description="Amount to invest")


class QuoteResponse(BaseModel):
    category: PlanCategory
    principal: Decimal
    duration_months: int = Field(..., description="Fixed duration of the category")
    return_rate: Decimal = Field(..., description="Payout rate as a fraction (0.15 = 15%)")
    expected_return: Decimal = Field(..., description="principal * return_rate")
    maturity_date: datetime


class ScheduleRequest(BaseModel):
    total_amount: Decimal = Field(..., description="Amount to split")
    installments: int = Field(
        ..., le=settings.MAX_SCHEDULE_INSTALLMENTS, description="Number of equal installments"
    )
    start_date: Optional[datetime] = Field(None, description="Due date of the first installment (defaults to now)")


class ScheduledPaymentResponse(BaseModel):
    """Represents a single row in the payment schedule."""
    sequence: int
    due_date: datetime
    amount: Decimal


class ScheduleResponse(BaseModel):
    total_amount: Decimal
    installments: int
    installment_amount: Decimal
    payments: List[ScheduledPaymentResponse]


class PlanTermsResponse(BaseModel):
    category: PlanCategory
    duration_months: int
    return_rate: Decimal
