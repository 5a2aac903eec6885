from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from salonsuite.core.database import get_db
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.booking import Booking
from salonsuite.models.staff import Staff
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.staff import StaffCreate, StaffUpdate, StaffResponse

router = APIRouter()


def _get_staff(db: Session, tenant_id: str, staff_id: int) -> Staff:
    staff = db.query(Staff).filter(Staff.id == staff_id, Staff.tenant_id == tenant_id).first()
    if not staff:
        raise HTTPException(status_code=404, detail="Staff not found")
    return staff


@router.post("/", response_model=StaffResponse, status_code=201)
async def create_staff(
    staff_in: StaffCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    staff = Staff(tenant_id=tenant.id, is_active=True, **staff_in.model_dump())
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


@router.get("/", response_model=List[StaffResponse])
async def list_staff(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(Staff).filter(Staff.tenant_id == tenant.id)
    if not include_inactive:
        query = query.filter(Staff.is_active == True)
    return query.order_by(Staff.name).all()


@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _get_staff(db, tenant.id, staff_id)


@router.put("/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: int,
    staff_update: StaffUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    staff = _get_staff(db, tenant.id, staff_id)
    for field, value in staff_update.model_dump(exclude_unset=True).items():
        setattr(staff, field, value)
    db.commit()
    db.refresh(staff)
    return staff


@router.delete("/{staff_id}")
async def delete_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Deactivate staff that have bookings; remove the rest."""
    staff = _get_staff(db, tenant.id, staff_id)
    if db.query(Booking.id).filter(Booking.staff_id == staff.id).first():
        staff.is_active = False
        db.commit()
        return {"message": "Staff deactivated", "deactivated": True}
    db.delete(staff)
    db.commit()
    return {"message": "Staff deleted", "deactivated": False}
