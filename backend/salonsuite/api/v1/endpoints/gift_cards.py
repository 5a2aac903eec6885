from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from salonsuite.core.database import get_db
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.core.validators import get_tenant_customer
from salonsuite.models.gift_card import GiftCard
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.gift_card import GiftCardCreate, GiftCardResponse, GiftCardStats
from salonsuite.services import gift_card_service

router = APIRouter()


@router.post("/", response_model=GiftCardResponse, status_code=201)
async def create_gift_card(
    card_in: GiftCardCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer_name, customer_phone = card_in.customer_name, card_in.customer_phone
    if card_in.issued_to is not None:
        customer = get_tenant_customer(db, tenant.id, card_in.issued_to)
        customer_name = customer_name or customer.name
        customer_phone = customer_phone or customer.phone
    card = gift_card_service.create_gift_card(
        db, tenant.id, card_in.amount,
        customer_name=customer_name,
        customer_phone=customer_phone,
        issued_to=card_in.issued_to,
        expires_in_days=card_in.expires_in_days,
    )
    db.commit()
    db.refresh(card)
    return card


@router.get("/", response_model=List[GiftCardResponse])
async def list_gift_cards(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return db.query(GiftCard).filter(GiftCard.tenant_id == tenant.id).order_by(GiftCard.id.desc()).all()


@router.get("/stats", response_model=GiftCardStats)
async def gift_card_stats(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return GiftCardStats(**gift_card_service.get_gift_card_stats(db, tenant.id))


@router.get("/lookup/{code}", response_model=GiftCardResponse)
async def lookup_gift_card(
    code: str,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    card = gift_card_service.lookup_gift_card(db, tenant.id, code)
    # commit the expired flag a lookup may have set
    db.commit()
    if card is None:
        raise HTTPException(status_code=404, detail="Gift card not found, expired or fully used")
    db.refresh(card)
    return card
