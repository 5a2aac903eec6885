from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from salonsuite.core.database import get_db
from salonsuite.core.gst_rates import get_gst_rates, get_gst_rate_by_id
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.service import Service, Product
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.service import (
    ServiceCreate,
    ServiceUpdate,
    ServiceResponse,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    GSTRateResponse,
)

router = APIRouter()


def _attach_gst_rate(service: Service) -> ServiceResponse:
    response = ServiceResponse.model_validate(service)
    rate = get_gst_rate_by_id(service.gst_rate_id) if service.gst_rate_id else None
    response.gst_rate = rate.total_rate if rate else None
    return response


def _get_service(db: Session, tenant_id: str, service_id: int) -> Service:
    service = db.query(Service).filter(Service.id == service_id, Service.tenant_id == tenant_id).first()
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


def _get_product(db: Session, tenant_id: str, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id, Product.tenant_id == tenant_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/gst-rates", response_model=List[GSTRateResponse])
async def list_gst_rates():
    return [
        GSTRateResponse(
            id=r.id,
            name=r.name,
            cgst_rate=r.cgst_rate,
            sgst_rate=r.sgst_rate,
            igst_rate=r.igst_rate,
            total_rate=r.total_rate,
        )
        for r in get_gst_rates()
    ]


@router.post("/products", response_model=ProductResponse, status_code=201)
async def create_product(
    product_in: ProductCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    product = Product(tenant_id=tenant.id, is_active=True, **product_in.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@router.get("/products", response_model=List[ProductResponse])
async def list_products(
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(Product).filter(Product.tenant_id == tenant.id)
    if not include_inactive:
        query = query.filter(Product.is_active == True)
    return query.order_by(Product.name).all()


@router.put("/products/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product_update: ProductUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    product = _get_product(db, tenant.id, product_id)
    for field, value in product_update.model_dump(exclude_unset=True).items():
        setattr(product, field, value)
    db.commit()
    db.refresh(product)
    return product


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    product = _get_product(db, tenant.id, product_id)
    product.is_active = False
    db.commit()
    return {"message": "Product deactivated"}


@router.post("/", response_model=ServiceResponse, status_code=201)
async def create_service(
    service_in: ServiceCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    service = Service(tenant_id=tenant.id, is_active=True, **service_in.model_dump())
    db.add(service)
    db.commit()
    db.refresh(service)
    return _attach_gst_rate(service)


@router.get("/", response_model=List[ServiceResponse])
async def list_services(
    category: Optional[str] = None,
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = db.query(Service).filter(Service.tenant_id == tenant.id)
    if not include_inactive:
        query = query.filter(Service.is_active == True)
    if category:
        query = query.filter(Service.category == category)
    return [_attach_gst_rate(s) for s in query.order_by(Service.name).all()]


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _attach_gst_rate(_get_service(db, tenant.id, service_id))


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    service_update: ServiceUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    service = _get_service(db, tenant.id, service_id)
    for field, value in service_update.model_dump(exclude_unset=True).items():
        setattr(service, field, value)
    db.commit()
    db.refresh(service)
    return _attach_gst_rate(service)


@router.delete("/{service_id}")
async def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Services stay referenced by past bookings, so deleting only deactivates."""
    service = _get_service(db, tenant.id, service_id)
    service.is_active = False
    db.commit()
    return {"message": "Service deactivated"}
