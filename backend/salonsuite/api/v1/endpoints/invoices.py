from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload
from salonsuite.core.cache import invalidate_tenant_reports
from salonsuite.core.currency import to_money, ZERO
from salonsuite.core.database import get_db
from salonsuite.core.db_transaction import safe_commit
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.core.validators import get_tenant_customer
from salonsuite.models.gift_card import GiftCardTransaction
from salonsuite.models.invoice import Invoice, InvoiceItem, InvoiceItemTypeEnum, InvoiceStatusEnum
from salonsuite.models.loyalty import LoyaltyTransaction
from salonsuite.models.membership import CustomerMembership
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.invoice import InvoiceCreate, InvoiceUpdate, InvoiceResponse, ShareTokenResponse
from salonsuite.services.invoice_service import generate_invoice_number, ensure_share_token

router = APIRouter()
logger = get_logger("invoices")


def _to_response(invoice: Invoice) -> InvoiceResponse:
    response = InvoiceResponse.model_validate(invoice)
    response.customer_name = invoice.customer.name if invoice.customer else None
    return response


def _get_invoice(db: Session, tenant_id: str, invoice_id: int) -> Invoice:
    invoice = db.query(Invoice).options(
        joinedload(Invoice.customer),
        joinedload(Invoice.items),
    ).filter(Invoice.id == invoice_id, Invoice.tenant_id == tenant_id).first()
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post("/", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    invoice_in: InvoiceCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Manual invoice for a single amount (no catalog lines, no loyalty effects)."""
    customer = get_tenant_customer(db, tenant.id, invoice_in.customer_id)
    if invoice_in.due_date < invoice_in.invoice_date:
        raise HTTPException(status_code=400, detail="Due date cannot be before the invoice date")
    amount = to_money(invoice_in.amount)
    invoice = Invoice(
        tenant_id=tenant.id,
        invoice_number=generate_invoice_number(db, tenant.id, invoice_in.invoice_date),
        customer_id=customer.id,
        invoice_date=invoice_in.invoice_date,
        due_date=invoice_in.due_date,
        subtotal=amount,
        discount_amount=ZERO,
        gst_amount=ZERO,
        total_amount=amount,
        payment_method=invoice_in.payment_method,
        status=InvoiceStatusEnum.PAID,
        notes=invoice_in.notes,
    )
    invoice.items.append(InvoiceItem(
        item_type=InvoiceItemTypeEnum.CUSTOM,
        description=invoice_in.description,
        quantity=1,
        unit_price=amount,
        total_amount=amount,
    ))
    db.add(invoice)
    if not safe_commit(db, "create_invoice"):
        raise HTTPException(status_code=500, detail="Failed to create invoice. Please try again.")
    invalidate_tenant_reports(tenant.id)
    logger.info(
        f"Manual invoice created: {invoice.invoice_number}",
        extra={"tenant_id": tenant.id, "invoice_id": invoice.id, "total": str(amount)}
    )
    return _to_response(_get_invoice(db, tenant.id, invoice.id))


@router.get("/", response_model=List[InvoiceResponse])
async def list_invoices(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    customer_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(Invoice).options(
        joinedload(Invoice.customer),
        joinedload(Invoice.items),
    ).filter(Invoice.tenant_id == tenant.id)
    if start_date:
        query = query.filter(Invoice.invoice_date >= start_date)
    if end_date:
        query = query.filter(Invoice.invoice_date <= end_date)
    if customer_id:
        query = query.filter(Invoice.customer_id == customer_id)
    invoices = query.order_by(Invoice.invoice_date.desc(), Invoice.id.desc()).offset(skip).limit(limit).all()
    return [_to_response(i) for i in invoices]


@router.get("/shared/{token}", response_model=InvoiceResponse)
async def get_shared_invoice(token: str, db: Session = Depends(get_db)):
    """Public read of an invoice by share token; no tenant header needed."""
    invoice = db.query(Invoice).options(
        joinedload(Invoice.customer),
        joinedload(Invoice.items),
    ).filter(Invoice.share_token == token).first()
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return _to_response(invoice)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _to_response(_get_invoice(db, tenant.id, invoice_id))


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    invoice_update: InvoiceUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    invoice = _get_invoice(db, tenant.id, invoice_id)
    for field, value in invoice_update.model_dump(exclude_unset=True).items():
        setattr(invoice, field, value)
    db.commit()
    return _to_response(_get_invoice(db, tenant.id, invoice_id))


@router.post("/{invoice_id}/void", response_model=InvoiceResponse)
async def void_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    invoice = _get_invoice(db, tenant.id, invoice_id)
    if invoice.status == InvoiceStatusEnum.VOID:
        raise HTTPException(status_code=400, detail="Invoice is already void")
    invoice.status = InvoiceStatusEnum.VOID
    db.commit()
    invalidate_tenant_reports(tenant.id)
    logger.info(f"Invoice voided: {invoice.invoice_number}", extra={"tenant_id": tenant.id, "invoice_id": invoice.id})
    return _to_response(_get_invoice(db, tenant.id, invoice_id))


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    invoice = _get_invoice(db, tenant.id, invoice_id)
    linked = [
        label
        for label, model in (
            ("loyalty transactions", LoyaltyTransaction),
            ("gift card redemptions", GiftCardTransaction),
            ("memberships", CustomerMembership),
        )
        if db.query(model.id).filter(model.invoice_id == invoice.id).first() is not None
    ]
    if linked:
        raise HTTPException(
            status_code=400,
            detail=f"Invoice has linked {', '.join(linked)}; void it instead of deleting",
        )
    db.delete(invoice)
    db.commit()
    invalidate_tenant_reports(tenant.id)
    return {"message": "Invoice deleted"}


@router.post("/{invoice_id}/share-token", response_model=ShareTokenResponse)
async def create_share_token(
    invoice_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    invoice = _get_invoice(db, tenant.id, invoice_id)
    token = ensure_share_token(db, invoice)
    db.commit()
    return ShareTokenResponse(invoice_id=invoice_id, share_token=token)
