from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload
from salonsuite.core.currency import to_money
from salonsuite.core.database import get_db
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.core.validators import get_tenant_customer
from salonsuite.models.loyalty import LoyaltyTransactionTypeEnum
from salonsuite.models.membership import CustomerMembership
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.loyalty import (
    LoyaltySettingsUpdate,
    LoyaltySettingsResponse,
    LoyaltyTierResponse,
    CustomerLoyaltyResponse,
    TierProgress,
    PointsAdjustment,
    EnrollRequest,
    LoyaltyTransactionResponse,
    LoyaltyStats,
    CustomerInvoiceData,
    MembershipSummary,
)
from salonsuite.services import loyalty_service
from salonsuite.services.membership_service import display_status

router = APIRouter()


def _customer_loyalty_response(db: Session, tenant_id: str, customer) -> CustomerLoyaltyResponse:
    aggregate = loyalty_service.get_customer_loyalty(db, tenant_id, customer.id)
    return CustomerLoyaltyResponse(
        customer_id=customer.id,
        enrolled=customer.loyalty_enrolled,
        points=aggregate.points,
        tier=aggregate.tier,
        lifetime_spending=to_money(aggregate.lifetime_spending),
        total_earned=aggregate.total_earned,
        total_redeemed=aggregate.total_redeemed,
        join_date=aggregate.join_date,
        last_activity=aggregate.last_activity,
        tier_progress=TierProgress(**loyalty_service.progress_to_next_tier(aggregate.lifetime_spending)),
    )


@router.get("/settings", response_model=LoyaltySettingsResponse)
async def get_loyalty_settings(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return loyalty_service.get_or_create_settings(db, tenant.id)


@router.put("/settings", response_model=LoyaltySettingsResponse)
async def update_loyalty_settings(
    changes: LoyaltySettingsUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    row = loyalty_service.update_settings(db, tenant.id, changes.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(row)
    return row


@router.get("/tiers", response_model=List[LoyaltyTierResponse])
async def list_tiers():
    return loyalty_service.get_tiers()


@router.get("/stats", response_model=LoyaltyStats)
async def loyalty_stats(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return LoyaltyStats(**loyalty_service.get_program_stats(db, tenant.id))


@router.get("/transactions", response_model=List[LoyaltyTransactionResponse])
async def list_loyalty_transactions(
    customer_id: Optional[int] = None,
    transaction_type: Optional[LoyaltyTransactionTypeEnum] = Query(None, alias="type"),
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    limit: int = 50,
    offset: int = 0,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Out-of-range limit/offset are clamped (limit 1..200, offset >= 0) rather than rejected."""
    return loyalty_service.list_transactions(
        db, tenant.id,
        customer_id=customer_id,
        transaction_type=transaction_type,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )


@router.get("/expiring", response_model=List[LoyaltyTransactionResponse])
async def expiring_points(
    days: int = Query(7, ge=0, le=365),
    customer_id: Optional[int] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return loyalty_service.get_expiring_points(db, tenant.id, days=days, customer_id=customer_id)


@router.get("/customers/{customer_id}", response_model=CustomerLoyaltyResponse)
async def get_customer_loyalty(
    customer_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, customer_id)
    return _customer_loyalty_response(db, tenant.id, customer)


@router.post("/customers/{customer_id}/enroll", response_model=CustomerLoyaltyResponse)
async def enroll_customer(
    customer_id: int,
    body: Optional[EnrollRequest] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, customer_id)
    award = body.award_welcome_bonus if body else True
    loyalty_service.enroll_customer(db, tenant.id, customer, award_welcome_bonus=award)
    db.commit()
    return _customer_loyalty_response(db, tenant.id, customer)


@router.post("/customers/{customer_id}/unenroll", response_model=CustomerLoyaltyResponse)
async def unenroll_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, customer_id)
    loyalty_service.unenroll_customer(db, customer)
    db.commit()
    return _customer_loyalty_response(db, tenant.id, customer)


@router.post("/customers/{customer_id}/earn", response_model=LoyaltyTransactionResponse, status_code=201)
async def earn_points(
    customer_id: int,
    body: PointsAdjustment,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, customer_id)
    if not customer.loyalty_enrolled:
        raise HTTPException(status_code=400, detail="Customer is not enrolled in the loyalty program")
    txn = loyalty_service.record_transaction(
        db, tenant.id, customer.id,
        LoyaltyTransactionTypeEnum.EARNED,
        body.points,
        description=body.description or "Manual points",
    )
    db.commit()
    db.refresh(txn)
    return txn


@router.post("/customers/{customer_id}/redeem", response_model=LoyaltyTransactionResponse, status_code=201)
async def redeem_points(
    customer_id: int,
    body: PointsAdjustment,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, customer_id)
    try:
        txn = loyalty_service.record_transaction(
            db, tenant.id, customer.id,
            LoyaltyTransactionTypeEnum.REDEEMED,
            body.points,
            amount=body.points,
            description=body.description or "Manual redemption",
        )
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    db.refresh(txn)
    return txn


@router.get("/customers/{customer_id}/invoice-data", response_model=CustomerInvoiceData)
async def customer_invoice_data(
    customer_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Loyalty and membership summary printed on a customer's invoice."""
    customer = get_tenant_customer(db, tenant.id, customer_id)
    aggregate = loyalty_service.get_customer_loyalty(db, tenant.id, customer.id)
    memberships = db.query(CustomerMembership).options(
        joinedload(CustomerMembership.plan)
    ).filter(
        CustomerMembership.tenant_id == tenant.id,
        CustomerMembership.customer_id == customer.id,
    ).order_by(CustomerMembership.end_date.desc()).all()
    return CustomerInvoiceData(
        customer_id=customer.id,
        customer_name=customer.name,
        loyalty_enrolled=customer.loyalty_enrolled,
        points=aggregate.points,
        tier=aggregate.tier,
        points_value=to_money(aggregate.points),
        memberships=[
            MembershipSummary(
                id=m.id,
                plan_name=m.plan.name if m.plan else "",
                start_date=m.start_date,
                end_date=m.end_date,
                status=m.status.value,
                display_status=display_status(m.end_date),
                discount_percentage=m.plan.discount_percentage if m.plan else 0,
            )
            for m in memberships
        ],
    )
