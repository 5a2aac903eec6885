from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum as SQLEnum, Text
from sqlalchemy.sql import func
import enum
from salonsuite.core.database import Base


class CampaignTypeEnum(str, enum.Enum):
    EMAIL = "email"
    SMS = "sms"
    WHATSAPP = "whatsapp"


class CampaignStatusEnum(str, enum.Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENT = "sent"


class Campaign(Base):
    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(SQLEnum(CampaignTypeEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False)
    subject = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    segment = Column(String(20), nullable=False, default="all")
    scheduled_date = Column(DateTime(timezone=True), nullable=True)
    budget = Column(Numeric(12, 2), nullable=True)
    status = Column(SQLEnum(CampaignStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False), nullable=False, default=CampaignStatusEnum.DRAFT)
    sent_count = Column(Integer, nullable=False, default=0)
    opened_count = Column(Integer, nullable=False, default=0)
    clicked_count = Column(Integer, nullable=False, default=0)
    revenue = Column(Numeric(12, 2), nullable=False, default=0)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
