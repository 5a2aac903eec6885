from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload
from salonsuite.core.currency import to_money
from salonsuite.core.database import get_db
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.core.validators import get_tenant_customer
from salonsuite.models.membership import MembershipPlan, CustomerMembership, PlanStatusEnum, MembershipStatusEnum
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.membership import (
    MembershipPlanCreate,
    MembershipPlanUpdate,
    MembershipPlanResponse,
    CustomerMembershipCreate,
    CustomerMembershipUpdate,
    CustomerMembershipResponse,
    MembershipStats,
    ExpireResult,
)
from salonsuite.services import membership_service

router = APIRouter()


def _get_plan(db: Session, tenant_id: str, plan_id: int) -> MembershipPlan:
    plan = db.query(MembershipPlan).filter(MembershipPlan.id == plan_id, MembershipPlan.tenant_id == tenant_id).first()
    if not plan:
        raise HTTPException(status_code=404, detail="Membership plan not found")
    return plan


def _membership_response(m: CustomerMembership) -> CustomerMembershipResponse:
    response = CustomerMembershipResponse.model_validate(m)
    response.plan_name = m.plan.name if m.plan else None
    response.display_status = membership_service.display_status(m.end_date)
    return response


# Plans

@router.post("/plans", response_model=MembershipPlanResponse, status_code=201)
async def create_plan(
    plan_in: MembershipPlanCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    plan = MembershipPlan(tenant_id=tenant.id, status=PlanStatusEnum.ACTIVE, **plan_in.model_dump())
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


@router.get("/plans", response_model=List[MembershipPlanResponse])
async def list_plans(
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(MembershipPlan).filter(MembershipPlan.tenant_id == tenant.id)
    if active_only:
        query = query.filter(MembershipPlan.status == PlanStatusEnum.ACTIVE)
    return query.order_by(MembershipPlan.price).all()


@router.get("/plans/{plan_id}", response_model=MembershipPlanResponse)
async def get_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _get_plan(db, tenant.id, plan_id)


@router.put("/plans/{plan_id}", response_model=MembershipPlanResponse)
async def update_plan(
    plan_id: int,
    plan_update: MembershipPlanUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    plan = _get_plan(db, tenant.id, plan_id)
    for field, value in plan_update.model_dump(exclude_unset=True).items():
        setattr(plan, field, value)
    db.commit()
    db.refresh(plan)
    return plan


@router.delete("/plans/{plan_id}", response_model=MembershipPlanResponse)
async def delete_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Soft delete: existing customer memberships keep pointing at the plan."""
    plan = _get_plan(db, tenant.id, plan_id)
    plan.status = PlanStatusEnum.INACTIVE
    db.commit()
    db.refresh(plan)
    return plan


@router.post("/plans/{plan_id}/toggle", response_model=MembershipPlanResponse)
async def toggle_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    plan = _get_plan(db, tenant.id, plan_id)
    plan.status = PlanStatusEnum.INACTIVE if plan.status == PlanStatusEnum.ACTIVE else PlanStatusEnum.ACTIVE
    db.commit()
    db.refresh(plan)
    return plan


# Customer memberships

@router.post("/customer-memberships", response_model=CustomerMembershipResponse, status_code=201)
async def create_customer_membership(
    body: CustomerMembershipCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, body.customer_id)
    plan = _get_plan(db, tenant.id, body.plan_id)
    if plan.status != PlanStatusEnum.ACTIVE:
        raise HTTPException(status_code=400, detail="Membership plan is not active")
    membership = membership_service.create_customer_membership(
        db, tenant.id, customer.id, plan,
        start_date=body.start_date,
        amount_paid=body.amount_paid,
    )
    db.commit()
    db.refresh(membership)
    return _membership_response(membership)


@router.get("/customer-memberships", response_model=List[CustomerMembershipResponse])
async def list_customer_memberships(
    customer_id: Optional[int] = None,
    status: Optional[MembershipStatusEnum] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(CustomerMembership).options(joinedload(CustomerMembership.plan)).filter(
        CustomerMembership.tenant_id == tenant.id
    )
    if customer_id:
        query = query.filter(CustomerMembership.customer_id == customer_id)
    if status:
        query = query.filter(CustomerMembership.status == status)
    return [_membership_response(m) for m in query.order_by(CustomerMembership.end_date.desc()).all()]


@router.post("/customer-memberships/expire", response_model=ExpireResult)
async def expire_customer_memberships(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    count = membership_service.expire_memberships(db, tenant.id)
    db.commit()
    return ExpireResult(expired=count)


@router.put("/customer-memberships/{membership_id}", response_model=CustomerMembershipResponse)
async def update_customer_membership(
    membership_id: int,
    body: CustomerMembershipUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    membership = db.query(CustomerMembership).filter(
        CustomerMembership.id == membership_id,
        CustomerMembership.tenant_id == tenant.id,
    ).first()
    if not membership:
        raise HTTPException(status_code=404, detail="Customer membership not found")
    changes = body.model_dump(exclude_unset=True)
    if changes.get("end_date") and changes["end_date"] < membership.start_date:
        raise HTTPException(status_code=400, detail="End date cannot be before the start date")
    for field, value in changes.items():
        setattr(membership, field, value)
    db.commit()
    db.refresh(membership)
    return _membership_response(membership)


@router.get("/stats", response_model=MembershipStats)
async def membership_stats(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    plans = db.query(MembershipPlan).filter(MembershipPlan.tenant_id == tenant.id).all()
    memberships = db.query(CustomerMembership).filter(CustomerMembership.tenant_id == tenant.id).all()
    today = date.today()
    return MembershipStats(
        total_plans=len(plans),
        active_plans=sum(1 for p in plans if p.status == PlanStatusEnum.ACTIVE),
        total_memberships=len(memberships),
        active_memberships=sum(
            1 for m in memberships if m.status == MembershipStatusEnum.ACTIVE and m.end_date >= today
        ),
        expired_memberships=sum(
            1 for m in memberships
            if m.status == MembershipStatusEnum.EXPIRED or (m.status == MembershipStatusEnum.ACTIVE and m.end_date < today)
        ),
        total_revenue=to_money(sum((m.amount_paid or 0) for m in memberships)),
    )
