from salonsuite.models.tenant import Tenant
from salonsuite.models.customer import Customer
from salonsuite.models.staff import Staff, StaffRoleEnum
from salonsuite.models.service import Service, Product
from salonsuite.models.booking import Booking, BookingService, BookingStatusEnum
from salonsuite.models.invoice import Invoice, InvoiceItem, InvoiceStatusEnum, InvoiceItemTypeEnum, PaymentModeEnum
from salonsuite.models.membership import MembershipPlan, CustomerMembership, PlanStatusEnum, MembershipStatusEnum
from salonsuite.models.loyalty import LoyaltySettings, LoyaltyTransaction, CustomerLoyalty, LoyaltyTransactionTypeEnum
from salonsuite.models.coupon import Coupon, DiscountTypeEnum
from salonsuite.models.gift_card import GiftCard, GiftCardTransaction, GiftCardStatusEnum
from salonsuite.models.cash_register import CashRegister, CashTransaction, CashTransactionTypeEnum, RegisterStatusEnum
from salonsuite.models.expense import Expense, ExpenseStatusEnum
from salonsuite.models.campaign import Campaign, CampaignTypeEnum, CampaignStatusEnum

__all__ = [
    "Tenant",
    "Customer",
    "Staff",
    "StaffRoleEnum",
    "Service",
    "Product",
    "Booking",
    "BookingService",
    "BookingStatusEnum",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatusEnum",
    "InvoiceItemTypeEnum",
    "PaymentModeEnum",
    "MembershipPlan",
    "CustomerMembership",
    "PlanStatusEnum",
    "MembershipStatusEnum",
    "LoyaltySettings",
    "LoyaltyTransaction",
    "CustomerLoyalty",
    "LoyaltyTransactionTypeEnum",
    "Coupon",
    "DiscountTypeEnum",
    "GiftCard",
    "GiftCardTransaction",
    "GiftCardStatusEnum",
    "CashRegister",
    "CashTransaction",
    "CashTransactionTypeEnum",
    "RegisterStatusEnum",
    "Expense",
    "ExpenseStatusEnum",
    "Campaign",
    "CampaignTypeEnum",
    "CampaignStatusEnum",
]
