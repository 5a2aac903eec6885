from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class TenantCreate(BaseModel):
    id: str = Field(..., min_length=2, max_length=64, pattern=r"^[a-z0-9][a-z0-9_-]*$")
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gstin: Optional[str] = Field(None, max_length=15)
    sender_id: Optional[str] = Field(None, max_length=10)
    sms_enabled: bool = False


class TenantUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    gstin: Optional[str] = Field(None, max_length=15)
    sender_id: Optional[str] = Field(None, max_length=10)
    sms_enabled: Optional[bool] = None


class TenantResponse(BaseModel):
    id: str
    name: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    gstin: Optional[str]
    sender_id: Optional[str]
    sms_enabled: bool
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
