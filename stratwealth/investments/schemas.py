from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from stratwealth.investments.models import InvestmentSector, InvestmentStatus
from stratwealth.terms.engine import PlanCategory


class InvestmentCreate(BaseModel):
    sector: InvestmentSector
    category: PlanCategory
    amount: Decimal = Field(..., gt=0, description="Principal to invest")
    plan_id: Optional[str] = Field(None, description="Required for MARKET investments")
    reinvest: bool = False

    @model_validator(mode="after")
    def market_requires_plan(self):
        if self.sector == InvestmentSector.MARKET and not self.plan_id:
            raise ValueError("plan_id is required for MARKET investments")
        return self


class InvestmentResponse(BaseModel):
    id: str
    user_id: str
    sector: InvestmentSector
    category: PlanCategory
    plan_id: Optional[str] = None
    amount: Decimal
    expected_return: Decimal
    actual_return: Optional[Decimal] = None
    status: InvestmentStatus
    start_date: datetime
    end_date: datetime
    reinvest: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InvestmentSummary(BaseModel):
    total_invested: Decimal
    total_expected_return: Decimal
    active_count: int
    matured_count: int


class MarketPlanCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = None
    category: PlanCategory
    min_amount: Decimal = Field(..., gt=0)
    max_amount: Decimal = Field(..., gt=0)
    return_rate: Decimal = Field(..., gt=0, le=100, description="Percent, e.g. 15 for 15%")
    duration_months: int = Field(..., gt=0)
    is_active: bool = True

    @model_validator(mode="after")
    def bounds_ordered(self):
        if self.min_amount > self.max_amount:
            raise ValueError("min_amount must not exceed max_amount")
        return self


class MarketPlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = None
    min_amount: Optional[Decimal] = Field(None, gt=0)
    max_amount: Optional[Decimal] = Field(None, gt=0)
    is_active: Optional[bool] = None


class MarketPlanResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: PlanCategory
    min_amount: Decimal
    max_amount: Decimal
    return_rate: Decimal
    duration_months: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
