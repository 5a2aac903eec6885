from fastapi import APIRouter
from salonsuite.api.v1.endpoints import (
    tenants,
    customers,
    staff,
    services,
    bookings,
    checkout,
    invoices,
    loyalty,
    coupons,
    gift_cards,
    memberships,
    cash_registers,
    expenses,
    campaigns,
    reports,
)

api_router = APIRouter()
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(checkout.router, prefix="/checkout", tags=["checkout"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(loyalty.router, prefix="/loyalty", tags=["loyalty"])
api_router.include_router(coupons.router, prefix="/coupons", tags=["coupons"])
api_router.include_router(gift_cards.router, prefix="/gift-cards", tags=["gift-cards"])
api_router.include_router(memberships.router, prefix="/memberships", tags=["memberships"])
api_router.include_router(cash_registers.router, prefix="/cash-registers", tags=["cash-registers"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
