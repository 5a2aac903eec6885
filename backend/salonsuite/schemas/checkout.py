from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from decimal import Decimal
from salonsuite.models.invoice import InvoiceItemTypeEnum, PaymentModeEnum


class CheckoutLine(BaseModel):
    item_type: InvoiceItemTypeEnum = InvoiceItemTypeEnum.SERVICE
    item_id: Optional[int] = None  # service / product / membership plan id
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)  # only honoured for custom lines
    quantity: int = Field(1, ge=1)
    staff_id: Optional[int] = None

    @model_validator(mode="after")
    def check_reference(self):
        if self.item_type == InvoiceItemTypeEnum.CUSTOM:
            if self.price is None or not self.description:
                raise ValueError("Custom lines need a description and a price")
        elif self.item_id is None:
            raise ValueError(f"{self.item_type.value} lines need an item_id")
        return self


class GiftCardApplication(BaseModel):
    code: str
    amount: Decimal = Field(..., gt=0)


class CheckoutRequest(BaseModel):
    customer_id: int
    lines: List[CheckoutLine] = Field(..., min_length=1)
    coupon_code: Optional[str] = None
    manual_discount_percent: Decimal = Field(Decimal("0"), ge=0, le=100)
    gift_cards: List[GiftCardApplication] = []
    redeem_points: int = Field(0, ge=0)
    payment_method: PaymentModeEnum = PaymentModeEnum.CASH
    staff_id: Optional[int] = None
    notes: Optional[str] = None
    idempotency_key: Optional[str] = Field(None, max_length=100)
    send_sms: bool = False


class CheckoutTotals(BaseModel):
    subtotal: Decimal
    coupon_discount: Decimal
    manual_discount: Decimal
    discounted_subtotal: Decimal
    gst_rate: Decimal
    gst_amount: Decimal
    amount_before_loyalty: Decimal
    gift_card_total: Decimal
    amount_after_gift_cards: Decimal
    max_redeemable_points: int
    points_redeemed: int
    loyalty_discount: Decimal
    total: Decimal
    points_earned: int


class CheckoutQuoteResponse(BaseModel):
    totals: CheckoutTotals
    coupon_code: Optional[str] = None
    points_balance: int


class CheckoutResult(BaseModel):
    invoice_id: int
    invoice_number: str
    booking_id: Optional[int]
    totals: CheckoutTotals
    points_balance: int
    replayed: bool = False
