from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from stratwealth.properties.models import PropertyStatus, PropertyTransactionStatus, PurchaseType


class PropertyCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = None
    location: str = Field(..., min_length=2, max_length=300)
    price: Decimal = Field(..., gt=0)
    main_image: Optional[str] = Field(None, max_length=500)


class PropertyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = Field(None, min_length=2, max_length=300)
    price: Optional[Decimal] = Field(None, gt=0)
    status: Optional[PropertyStatus] = None
    main_image: Optional[str] = Field(None, max_length=500)


class PropertyResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    location: str
    price: Decimal
    status: PropertyStatus
    main_image: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PurchaseRequest(BaseModel):
    type: PurchaseType
    installments: Optional[int] = Field(None, description="Number of installments, INSTALLMENT only")

    @model_validator(mode="after")
    def installments_for_installment_plans(self):
        if self.type == PurchaseType.INSTALLMENT and self.installments is None:
            raise ValueError("installments is required for INSTALLMENT purchases")
        return self


class PropertyTransactionResponse(BaseModel):
    id: str
    property_id: str
    user_id: str
    type: PurchaseType
    amount: Decimal
    installments: Optional[int] = None
    installment_amount: Optional[Decimal] = None
    paid_installments: int
    amount_paid: Decimal
    next_payment_due: Optional[datetime] = None
    status: PropertyTransactionStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InstallmentResponse(BaseModel):
    sequence: int
    due_date: datetime
    amount: Decimal
    paid: bool


class InstallmentScheduleResponse(BaseModel):
    transaction_id: str
    total_amount: Decimal
    amount_paid: Decimal
    outstanding: Decimal
    installments: List[InstallmentResponse]
