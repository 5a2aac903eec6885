from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from salonsuite.core.validators import validate_gst_rate_id


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    duration_minutes: int = Field(30, ge=1)
    gst_rate_id: Optional[int] = None

    @field_validator("gst_rate_id")
    @classmethod
    def check_gst_rate(cls, v: Optional[int]) -> Optional[int]:
        return validate_gst_rate_id(v)


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, ge=1)
    gst_rate_id: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("gst_rate_id")
    @classmethod
    def check_gst_rate(cls, v: Optional[int]) -> Optional[int]:
        return validate_gst_rate_id(v)


class ServiceResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    price: Decimal
    duration_minutes: int
    gst_rate_id: Optional[int]
    gst_rate: Optional[Decimal] = None  # total GST % of the slab
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    sku: Optional[str] = None
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    stock_quantity: int = Field(0, ge=0)
    gst_rate_id: Optional[int] = None

    @field_validator("gst_rate_id")
    @classmethod
    def check_gst_rate(cls, v: Optional[int]) -> Optional[int]:
        return validate_gst_rate_id(v)


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    gst_rate_id: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("gst_rate_id")
    @classmethod
    def check_gst_rate(cls, v: Optional[int]) -> Optional[int]:
        return validate_gst_rate_id(v)


class ProductResponse(BaseModel):
    id: int
    name: str
    sku: Optional[str]
    description: Optional[str]
    price: Decimal
    stock_quantity: int
    gst_rate_id: Optional[int]
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GSTRateResponse(BaseModel):
    id: int
    name: str
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    total_rate: Decimal

    class Config:
        from_attributes = True
