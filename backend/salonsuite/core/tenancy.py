"""
Tenant resolution. Every tenant-scoped endpoint depends on get_current_tenant,
which reads the X-Tenant-ID header.
"""
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from salonsuite.core.database import get_db
from salonsuite.core.logging_config import get_logger
from salonsuite.models.tenant import Tenant

logger = get_logger("tenancy")


def get_current_tenant(
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    db: Session = Depends(get_db),
) -> Tenant:
    if not x_tenant_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Tenant-ID header",
        )
    tenant = db.query(Tenant).filter(
        Tenant.id == x_tenant_id,
        Tenant.is_active == True,
    ).first()
    if not tenant:
        logger.warning(f"Rejected request for tenant {x_tenant_id}", extra={"tenant_id": x_tenant_id})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tenant not found or inactive",
        )
    return tenant
