from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session
from salonsuite.core.database import get_db
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.coupon import Coupon, DiscountTypeEnum
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.coupon import (
    CouponCreate,
    CouponUpdate,
    CouponResponse,
    CouponValidateRequest,
    CouponValidateResponse,
)
from salonsuite.services import coupon_service

router = APIRouter()
logger = get_logger("coupons")


def _get_coupon(db: Session, tenant_id: str, coupon_id: int) -> Coupon:
    coupon = db.query(Coupon).filter(Coupon.id == coupon_id, Coupon.tenant_id == tenant_id).first()
    if not coupon:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return coupon


def _code_taken(db: Session, tenant_id: str, code: str) -> bool:
    return db.query(Coupon.id).filter(
        Coupon.tenant_id == tenant_id,
        func.upper(Coupon.code) == code,
    ).first() is not None


@router.post("/", response_model=CouponResponse, status_code=201)
async def create_coupon(
    coupon_in: CouponCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    data = coupon_in.model_dump()
    data["code"] = coupon_service.normalize_code(data["code"])
    if _code_taken(db, tenant.id, data["code"]):
        raise HTTPException(status_code=409, detail="Coupon code already exists")
    coupon = Coupon(tenant_id=tenant.id, used_count=0, **data)
    db.add(coupon)
    db.commit()
    db.refresh(coupon)
    logger.info(f"Coupon created: {coupon.code}", extra={"tenant_id": tenant.id, "coupon_id": coupon.id})
    return coupon


@router.get("/", response_model=List[CouponResponse])
async def list_coupons(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return db.query(Coupon).filter(Coupon.tenant_id == tenant.id).order_by(Coupon.created_at.desc(), Coupon.id.desc()).all()


@router.get("/available", response_model=List[CouponResponse])
async def list_available_coupons(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Coupons usable today, biggest discount value first."""
    today = date.today()
    coupons = db.query(Coupon).filter(
        Coupon.tenant_id == tenant.id,
        Coupon.is_active == True,
        Coupon.valid_from <= today,
        Coupon.valid_until >= today,
    ).order_by(Coupon.discount_value.desc()).all()
    return [c for c in coupons if coupon_service.is_coupon_available(c, today)]


@router.post("/validate", response_model=CouponValidateResponse)
async def validate_coupon(
    body: CouponValidateRequest,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Validate a coupon for an order amount; call when the code is entered at checkout."""
    coupon = coupon_service.find_valid_coupon(db, tenant.id, body.code, body.order_amount)
    if coupon is None:
        return CouponValidateResponse(valid=False, message=coupon_service.INVALID_COUPON_MESSAGE)
    return CouponValidateResponse(
        valid=True,
        message="Coupon applied",
        coupon=CouponResponse.model_validate(coupon),
        discount_amount=coupon_service.compute_coupon_discount(coupon, body.order_amount),
    )


@router.get("/{coupon_id}", response_model=CouponResponse)
async def get_coupon(
    coupon_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _get_coupon(db, tenant.id, coupon_id)


@router.put("/{coupon_id}", response_model=CouponResponse)
async def update_coupon(
    coupon_id: int,
    coupon_update: CouponUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    coupon = _get_coupon(db, tenant.id, coupon_id)
    for field, value in coupon_update.model_dump(exclude_unset=True).items():
        setattr(coupon, field, value)
    if coupon.discount_type == DiscountTypeEnum.PERCENTAGE and coupon.discount_value > 100:
        db.rollback()
        raise HTTPException(status_code=400, detail="Percentage discount must be between 0 and 100")
    if coupon.valid_until < coupon.valid_from:
        db.rollback()
        raise HTTPException(status_code=400, detail="valid_until must not be before valid_from")
    db.commit()
    db.refresh(coupon)
    return coupon


@router.delete("/{coupon_id}")
async def delete_coupon(
    coupon_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    coupon = _get_coupon(db, tenant.id, coupon_id)
    db.delete(coupon)
    db.commit()
    return {"message": "Coupon deleted"}
