from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from stratwealth.kyc.models import DocumentType, KycStatus


class KycSubmitRequest(BaseModel):
    country: str = Field(..., min_length=2, max_length=100)
    document_type: DocumentType
    document_number: Optional[str] = Field(None, max_length=100)
    document_image: str = Field(..., min_length=1, max_length=500, description="Storage key of the uploaded document")


class KycRejectRequest(BaseModel):
    reason: str = Field(..., min_length=3, max_length=1000)


class KycResponse(BaseModel):
    id: str
    user_id: str
    status: KycStatus
    country: str
    document_type: DocumentType
    document_number: Optional[str] = None
    document_image: str
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class KycStatusResponse(BaseModel):
    status: KycStatus
    submission: Optional[KycResponse] = None
