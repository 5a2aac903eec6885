from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload
from salonsuite.core.currency import to_money, ZERO
from salonsuite.core.database import get_db
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.core.validators import get_tenant_customer, get_tenant_staff, missing_ids
from salonsuite.models.booking import Booking, BookingService, BookingStatusEnum, BOOKING_TRANSITIONS, TERMINAL_BOOKING_STATUSES
from salonsuite.models.service import Service
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.booking import BookingCreate, BookingStatusUpdate, BookingResponse, BookingServiceResponse
from salonsuite.services.invoice_service import generate_booking_number

router = APIRouter()
logger = get_logger("bookings")


def _to_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        booking_number=booking.booking_number,
        customer_id=booking.customer_id,
        customer_name=booking.customer.name if booking.customer else None,
        staff_id=booking.staff_id,
        booking_date=booking.booking_date,
        booking_time=booking.booking_time,
        status=booking.status,
        total_amount=booking.total_amount,
        notes=booking.notes,
        services=[
            BookingServiceResponse(
                id=bs.id,
                service_id=bs.service_id,
                service_name=bs.service.name if bs.service else None,
                quantity=bs.quantity,
                price=bs.price,
            )
            for bs in booking.services
        ],
        created_at=booking.created_at,
    )


def _get_booking(db: Session, tenant_id: str, booking_id: int) -> Booking:
    booking = db.query(Booking).options(
        joinedload(Booking.customer),
        joinedload(Booking.services).joinedload(BookingService.service),
    ).filter(Booking.id == booking_id, Booking.tenant_id == tenant_id).first()
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.post("/", response_model=BookingResponse, status_code=201)
async def create_booking(
    booking_in: BookingCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    customer = get_tenant_customer(db, tenant.id, booking_in.customer_id)
    get_tenant_staff(db, tenant.id, booking_in.staff_id)

    service_ids = {s.service_id for s in booking_in.services}
    services = {s.id: s for s in db.query(Service).filter(
        Service.tenant_id == tenant.id,
        Service.id.in_(service_ids),
        Service.is_active == True,
    ).all()}
    invalid = missing_ids(service_ids, services)
    if invalid:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid or inactive services: {', '.join(str(i) for i in invalid)}",
        )

    booking = Booking(
        tenant_id=tenant.id,
        booking_number=generate_booking_number(db, tenant.id, booking_in.booking_date),
        customer_id=customer.id,
        staff_id=booking_in.staff_id,
        booking_date=booking_in.booking_date,
        booking_time=booking_in.booking_time,
        status=BookingStatusEnum.PENDING,
        notes=booking_in.notes,
    )
    total = ZERO
    for line in booking_in.services:
        price = to_money(services[line.service_id].price)
        total += price * line.quantity
        booking.services.append(BookingService(service_id=line.service_id, quantity=line.quantity, price=price))
    booking.total_amount = to_money(total)
    db.add(booking)
    db.commit()
    logger.info(
        f"Booking created: {booking.booking_number}",
        extra={"tenant_id": tenant.id, "booking_id": booking.id, "customer_id": customer.id}
    )
    return _to_response(_get_booking(db, tenant.id, booking.id))


@router.get("/", response_model=List[BookingResponse])
async def list_bookings(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[BookingStatusEnum] = None,
    customer_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(Booking).options(
        joinedload(Booking.customer),
        joinedload(Booking.services).joinedload(BookingService.service),
    ).filter(Booking.tenant_id == tenant.id)
    if start_date:
        query = query.filter(Booking.booking_date >= start_date)
    if end_date:
        query = query.filter(Booking.booking_date <= end_date)
    if status:
        query = query.filter(Booking.status == status)
    if customer_id:
        query = query.filter(Booking.customer_id == customer_id)
    bookings = query.order_by(Booking.booking_date.desc(), Booking.booking_time.desc()).offset(skip).limit(limit).all()
    return [_to_response(b) for b in bookings]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _to_response(_get_booking(db, tenant.id, booking_id))


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    body: BookingStatusUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """pending -> confirmed -> completed; cancelled / no_show / completed are final. Never backwards."""
    booking = _get_booking(db, tenant.id, booking_id)
    if body.status != booking.status:
        if booking.status in TERMINAL_BOOKING_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot change status of a {booking.status.value} booking",
            )
        if body.status not in BOOKING_TRANSITIONS[booking.status]:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot move a booking from {booking.status.value} to {body.status.value}",
            )
    booking.status = body.status
    db.commit()
    return _to_response(_get_booking(db, tenant.id, booking_id))


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    booking = _get_booking(db, tenant.id, booking_id)
    if booking.invoice is not None:
        raise HTTPException(status_code=400, detail="Cannot delete a booking that has been invoiced")
    db.delete(booking)
    db.commit()
    return {"message": "Booking deleted"}
