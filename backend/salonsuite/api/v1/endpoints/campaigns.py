from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from salonsuite.core.database import get_db
from salonsuite.core.dates import utcnow
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.campaign import Campaign, CampaignStatusEnum, CampaignTypeEnum
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.campaign import CampaignCreate, CampaignUpdate, CampaignResponse, SegmentResponse
from salonsuite.services import marketing_service, sms_service

router = APIRouter()
logger = get_logger("campaigns")


def _get_campaign(db: Session, tenant_id: str, campaign_id: int) -> Campaign:
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id, Campaign.tenant_id == tenant_id).first()
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


@router.get("/segments", response_model=List[SegmentResponse])
async def list_segments(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return marketing_service.segment_counts(db, tenant.id)


@router.post("/", response_model=CampaignResponse, status_code=201)
async def create_campaign(
    campaign_in: CampaignCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    status = CampaignStatusEnum.SCHEDULED if campaign_in.scheduled_date else CampaignStatusEnum.DRAFT
    campaign = Campaign(tenant_id=tenant.id, status=status, **campaign_in.model_dump())
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    return campaign


@router.get("/", response_model=List[CampaignResponse])
async def list_campaigns(
    status: Optional[CampaignStatusEnum] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(Campaign).filter(Campaign.tenant_id == tenant.id)
    if status:
        query = query.filter(Campaign.status == status)
    return query.order_by(Campaign.id.desc()).all()


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _get_campaign(db, tenant.id, campaign_id)


@router.put("/{campaign_id}", response_model=CampaignResponse)
async def update_campaign(
    campaign_id: int,
    campaign_update: CampaignUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    campaign = _get_campaign(db, tenant.id, campaign_id)
    changes = campaign_update.model_dump(exclude_unset=True)
    if campaign.status == CampaignStatusEnum.SENT and set(changes) - {"opened_count", "clicked_count", "revenue"}:
        raise HTTPException(status_code=400, detail="A sent campaign can only have its results updated")
    for field, value in changes.items():
        setattr(campaign, field, value)
    if campaign.status != CampaignStatusEnum.SENT and "scheduled_date" in changes:
        campaign.status = CampaignStatusEnum.SCHEDULED if campaign.scheduled_date else CampaignStatusEnum.DRAFT
    db.commit()
    db.refresh(campaign)
    return campaign


@router.delete("/{campaign_id}")
async def delete_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    campaign = _get_campaign(db, tenant.id, campaign_id)
    db.delete(campaign)
    db.commit()
    return {"message": "Campaign deleted"}


@router.post("/{campaign_id}/send", response_model=CampaignResponse)
async def send_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Send an SMS campaign to its segment through MessageBot."""
    campaign = _get_campaign(db, tenant.id, campaign_id)
    if campaign.type != CampaignTypeEnum.SMS:
        raise HTTPException(status_code=400, detail="Only SMS campaigns can be sent from the server")
    if campaign.status == CampaignStatusEnum.SENT:
        raise HTTPException(status_code=400, detail="Campaign has already been sent")
    if not tenant.sms_enabled:
        raise HTTPException(status_code=400, detail="SMS is not enabled for this salon")

    recipients = marketing_service.segment_query(db, tenant.id, campaign.segment).all()
    sent = sms_service.send_campaign_sms(tenant, recipients, campaign.message)
    campaign.sent_count = sent
    campaign.status = CampaignStatusEnum.SENT
    campaign.sent_at = utcnow()
    db.commit()
    db.refresh(campaign)
    logger.info(
        f"Campaign {campaign.id} sent to {sent}/{len(recipients)} customers",
        extra={"tenant_id": tenant.id, "campaign_id": campaign.id, "sent": sent}
    )
    return campaign
