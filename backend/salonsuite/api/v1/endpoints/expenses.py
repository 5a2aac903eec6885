from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from salonsuite.core.cache import invalidate_tenant_reports
from salonsuite.core.currency import to_money, ZERO
from salonsuite.core.database import get_db
from salonsuite.core.tenancy import get_current_tenant
from salonsuite.models.expense import Expense, ExpenseStatusEnum
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseSummary

router = APIRouter()


def _get_expense(db: Session, tenant_id: str, expense_id: int) -> Expense:
    expense = db.query(Expense).filter(Expense.id == expense_id, Expense.tenant_id == tenant_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


def _date_filtered(query, start_date: Optional[date], end_date: Optional[date]):
    if start_date:
        query = query.filter(Expense.expense_date >= start_date)
    if end_date:
        query = query.filter(Expense.expense_date <= end_date)
    return query


@router.post("/", response_model=ExpenseResponse, status_code=201)
async def create_expense(
    expense_in: ExpenseCreate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    expense = Expense(tenant_id=tenant.id, status=ExpenseStatusEnum.PENDING, **expense_in.model_dump())
    db.add(expense)
    db.commit()
    db.refresh(expense)
    invalidate_tenant_reports(tenant.id)
    return expense


@router.get("/", response_model=List[ExpenseResponse])
async def list_expenses(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[ExpenseStatusEnum] = None,
    category: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    query = _date_filtered(db.query(Expense).filter(Expense.tenant_id == tenant.id), start_date, end_date)
    if status:
        query = query.filter(Expense.status == status)
    if category:
        query = query.filter(Expense.category == category)
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).offset(skip).limit(limit).all()


@router.get("/summary", response_model=ExpenseSummary)
async def expense_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    expenses = _date_filtered(db.query(Expense).filter(Expense.tenant_id == tenant.id), start_date, end_date).all()
    by_category: Dict[str, Decimal] = {}
    for e in expenses:
        by_category[e.category] = by_category.get(e.category, ZERO) + to_money(e.amount)

    def total_of(status=None):
        return sum((to_money(e.amount) for e in expenses if status is None or e.status == status), ZERO)

    return ExpenseSummary(
        total=total_of(),
        approved_total=total_of(ExpenseStatusEnum.APPROVED),
        pending_total=total_of(ExpenseStatusEnum.PENDING),
        by_category=by_category,
    )


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _get_expense(db, tenant.id, expense_id)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    expense_update: ExpenseUpdate,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    expense = _get_expense(db, tenant.id, expense_id)
    for field, value in expense_update.model_dump(exclude_unset=True).items():
        setattr(expense, field, value)
    db.commit()
    db.refresh(expense)
    invalidate_tenant_reports(tenant.id)
    return expense


def _review(db: Session, tenant_id: str, expense_id: int, new_status: ExpenseStatusEnum) -> Expense:
    expense = _get_expense(db, tenant_id, expense_id)
    if expense.status != ExpenseStatusEnum.PENDING:
        raise HTTPException(status_code=400, detail=f"Only pending expenses can be {new_status.value}")
    expense.status = new_status
    db.commit()
    db.refresh(expense)
    invalidate_tenant_reports(tenant_id)
    return expense


@router.post("/{expense_id}/approve", response_model=ExpenseResponse)
async def approve_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _review(db, tenant.id, expense_id, ExpenseStatusEnum.APPROVED)


@router.post("/{expense_id}/reject", response_model=ExpenseResponse)
async def reject_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    return _review(db, tenant.id, expense_id, ExpenseStatusEnum.REJECTED)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant),
):
    expense = _get_expense(db, tenant.id, expense_id)
    db.delete(expense)
    db.commit()
    invalidate_tenant_reports(tenant.id)
    return {"message": "Expense deleted"}
