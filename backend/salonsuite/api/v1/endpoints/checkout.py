from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from salonsuite.core.cache import invalidate_tenant_reports
from salonsuite.core.database import get_db
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.customer import Customer
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.checkout import CheckoutRequest, CheckoutQuoteResponse, CheckoutResult
from salonsuite.services import checkout_service, loyalty_service, sms_service

router = APIRouter()
logger = get_logger("checkout")


@router.post("/quote", response_model=CheckoutQuoteResponse)
async def quote_checkout(
    request: CheckoutRequest,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Compute the full totals chain for a cart without creating anything."""
    try:
        prepared = checkout_service.prepare_checkout(db, tenant.id, request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CheckoutQuoteResponse(
        totals=prepared.totals,
        coupon_code=prepared.coupon.code if prepared.coupon else None,
        points_balance=prepared.points_balance,
    )


@router.post("/finalize", response_model=CheckoutResult, status_code=201)
async def finalize_checkout(
    request: CheckoutRequest,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """
    Create the invoice for a sale and apply every side effect
    (coupon usage, gift cards, loyalty, memberships, stock, visit stats)
    in a single transaction.
    """
    try:
        invoice, totals, replayed = checkout_service.finalize_checkout(db, tenant, request)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Checkout failed: {str(e)}", exc_info=True, extra={"tenant_id": tenant.id})
        # A concurrent request with the same idempotency key won the race
        replay = checkout_service.find_replayed_invoice(db, tenant.id, request.idempotency_key)
        if replay is None:
            raise HTTPException(status_code=409, detail="Checkout conflicted with another write; please retry")
        invoice, totals, replayed = replay, checkout_service.totals_from_breakdown(replay), True

    if not replayed:
        invalidate_tenant_reports(tenant.id)
        if request.send_sms:
            customer = db.query(Customer).filter(Customer.id == invoice.customer_id).first()
            sms_service.send_invoice_sms(tenant, invoice, customer)

    return CheckoutResult(
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        booking_id=invoice.booking_id,
        totals=totals,
        points_balance=loyalty_service.get_points_balance(db, tenant.id, invoice.customer_id),
        replayed=replayed,
    )
