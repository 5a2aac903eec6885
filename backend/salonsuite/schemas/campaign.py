from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime
from decimal import Decimal
from salonsuite.models.campaign import CampaignTypeEnum, CampaignStatusEnum

Segment = Literal["all", "vip", "new", "inactive"]


class CampaignCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: CampaignTypeEnum
    subject: Optional[str] = None
    message: str = Field(..., min_length=1)
    segment: Segment = "all"
    scheduled_date: Optional[datetime] = None
    budget: Optional[Decimal] = Field(None, ge=0)


class CampaignUpdate(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    segment: Optional[Segment] = None
    scheduled_date: Optional[datetime] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    opened_count: Optional[int] = Field(None, ge=0)
    clicked_count: Optional[int] = Field(None, ge=0)
    revenue: Optional[Decimal] = Field(None, ge=0)


class CampaignResponse(BaseModel):
    id: int
    name: str
    type: CampaignTypeEnum
    subject: Optional[str]
    message: str
    segment: str
    scheduled_date: Optional[datetime]
    budget: Optional[Decimal]
    status: CampaignStatusEnum
    sent_count: int
    opened_count: int
    clicked_count: int
    revenue: Decimal
    sent_at: Optional[datetime]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SegmentResponse(BaseModel):
    id: str
    name: str
    description: str
    count: int
