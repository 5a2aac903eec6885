from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from salonsuite.core.currency import to_money
from salonsuite.core.database import get_db
from salonsuite.core.logging_config import get_logger
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.cash_register import CashRegister, CashTransaction, CashTransactionTypeEnum, RegisterStatusEnum
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.cash_register import (
    CashRegisterCreate,
    CashRegisterResponse,
    CashTransactionCreate,
    CashTransactionResponse,
)

router = APIRouter()
logger = get_logger("cash_registers")

LIST_TRANSACTION_LIMIT = 100
REGISTER_TRANSACTION_LIMIT = 50


def _get_register(db: Session, tenant_id: str, register_id: int) -> CashRegister:
    register = db.query(CashRegister).filter(
        CashRegister.id == register_id,
        CashRegister.tenant_id == tenant_id,
    ).first()
    if not register:
        raise HTTPException(status_code=404, detail="Cash register not found")
    return register


def _recent_transactions(db: Session, tenant_id: str, register_ids: List[int], limit: int) -> List[CashTransaction]:
    if not register_ids:
        return []
    return db.query(CashTransaction).filter(
        CashTransaction.tenant_id == tenant_id,
        CashTransaction.register_id.in_(register_ids),
    ).order_by(CashTransaction.id.desc()).limit(limit).all()


def _register_response(register: CashRegister, transactions: List[CashTransaction]) -> CashRegisterResponse:
    return CashRegisterResponse(
        id=register.id,
        name=register.name,
        location=register.location,
        opening_balance=register.opening_balance,
        current_balance=register.current_balance,
        status=register.status,
        transactions=[CashTransactionResponse.model_validate(t) for t in transactions],
        created_at=register.created_at,
    )


@router.post("/", response_model=CashRegisterResponse, status_code=201)
async def create_register(
    register_in: CashRegisterCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    opening = to_money(register_in.opening_balance)
    register = CashRegister(
        tenant_id=tenant.id,
        name=register_in.name,
        location=register_in.location,
        opening_balance=opening,
        current_balance=opening,
        status=RegisterStatusEnum.OPEN,
    )
    db.add(register)
    db.commit()
    db.refresh(register)
    return _register_response(register, [])


@router.get("/", response_model=List[CashRegisterResponse])
async def list_registers(
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Registers with the latest 100 transactions across them."""
    registers = db.query(CashRegister).filter(CashRegister.tenant_id == tenant.id).order_by(CashRegister.name).all()
    recent = _recent_transactions(db, tenant.id, [r.id for r in registers], LIST_TRANSACTION_LIMIT)
    return [
        _register_response(r, [t for t in recent if t.register_id == r.id])
        for r in registers
    ]


@router.get("/{register_id}", response_model=CashRegisterResponse)
async def get_register(
    register_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    register = _get_register(db, tenant.id, register_id)
    return _register_response(register, _recent_transactions(db, tenant.id, [register.id], REGISTER_TRANSACTION_LIMIT))


@router.get("/{register_id}/transactions", response_model=List[CashTransactionResponse])
async def list_register_transactions(
    register_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    register = _get_register(db, tenant.id, register_id)
    return _recent_transactions(db, tenant.id, [register.id], REGISTER_TRANSACTION_LIMIT)


@router.post("/{register_id}/transactions", response_model=CashTransactionResponse, status_code=201)
async def record_transaction(
    register_id: int,
    body: CashTransactionCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    """Insert the movement and adjust the register balance in the same transaction."""
    register = _get_register(db, tenant.id, register_id)
    amount = to_money(body.amount)
    txn = CashTransaction(
        tenant_id=tenant.id,
        register_id=register.id,
        type=body.type,
        amount=amount,
        category=body.category,
        description=body.description,
        reference=body.reference,
    )
    delta = amount if body.type == CashTransactionTypeEnum.CASH_IN else -amount
    register.current_balance = to_money(register.current_balance) + delta
    db.add(txn)
    db.commit()
    db.refresh(txn)
    logger.info(
        f"Cash {body.type.value} of {amount} on register {register.id}",
        extra={"tenant_id": tenant.id, "register_id": register.id, "balance": str(register.current_balance)}
    )
    return txn
