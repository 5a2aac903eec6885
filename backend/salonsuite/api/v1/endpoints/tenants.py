from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from salonsuite.core.database import get_db
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.tenant import TenantCreate, TenantUpdate, TenantResponse
from salonsuite.services import loyalty_service

router = APIRouter()
logger = get_logger("tenants")


@router.post("/", response_model=TenantResponse, status_code=201)
async def create_tenant(
    tenant_in: TenantCreate,
    db: Session = Depends(get_db),
):
    """Register a salon. Its loyalty program starts with the default settings."""
    if db.query(Tenant).filter(Tenant.id == tenant_in.id).first():
        raise HTTPException(status_code=409, detail="Tenant with this id already exists")
    tenant = Tenant(**tenant_in.model_dump(), is_active=True)
    db.add(tenant)
    db.flush()
    loyalty_service.get_or_create_settings(db, tenant.id)
    db.commit()
    db.refresh(tenant)
    logger.info(f"Tenant created: {tenant.id}", extra={"tenant_id": tenant.id})
    return tenant


@router.get("/current", response_model=TenantResponse)
async def get_tenant(tenant: Tenant = Depends(get_current_tenant)):
    return tenant


@router.patch("/current", response_model=TenantResponse)
async def update_tenant(
    tenant_update: TenantUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    for field, value in tenant_update.model_dump(exclude_unset=True).items():
        setattr(tenant, field, value)
    db.commit()
    db.refresh(tenant)
    return tenant
