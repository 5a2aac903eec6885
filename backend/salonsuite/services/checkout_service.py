"""
Checkout Service for SalonSuite

compute_checkout_totals is the pure money chain:
    coupon (or manual discount) -> GST -> gift cards -> loyalty redemption
finalize_checkout writes the invoice and every side effect in one session.
Amounts sent by clients are never trusted; everything is recomputed here.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session

from salonsuite.core.currency import to_money, ZERO
from salonsuite.core.dates import utcnow
from salonsuite.core.logging_config import get_logger
from salonsuite.core.validators import missing_ids
from salonsuite.models.booking import Booking, BookingService, BookingStatusEnum
from salonsuite.models.coupon import Coupon
from salonsuite.models.customer import Customer
from salonsuite.models.gift_card import GiftCard
from salonsuite.models.invoice import Invoice, InvoiceItem, InvoiceItemTypeEnum, InvoiceStatusEnum
from salonsuite.models.loyalty import LoyaltyTransactionTypeEnum
from salonsuite.models.membership import MembershipPlan, PlanStatusEnum
from salonsuite.models.service import Service, Product
from salonsuite.models.staff import Staff
from salonsuite.models.tenant import Tenant
from salonsuite.schemas.checkout import CheckoutRequest, CheckoutTotals
from salonsuite.services import coupon_service, gift_card_service, invoice_service, loyalty_service, membership_service

logger = get_logger("checkout_service")


class CheckoutError(ValueError):
    """A checkout request that breaks a money rule (bad gift card amount, too many points, ...)."""


def compute_checkout_totals(
    lines: Iterable[Tuple[Any, int]],
    coupon=None,
    manual_discount_percent=ZERO,
    gst_rate=ZERO,
    gift_cards: Sequence[Tuple[str, Any, Any]] = (),
    redeem_points: int = 0,
    points_balance: int = 0,
    settings=None,
) -> CheckoutTotals:
    """
    Args:
        lines: (unit_price, quantity) pairs
        coupon: validated coupon (discount_type, discount_value, max_discount) or None
        manual_discount_percent: 0..100, used only when there is no coupon
        gst_rate: GST percentage applied to the discounted subtotal
        gift_cards: (code, amount_to_apply, card_balance) triples
        redeem_points: loyalty points the customer wants to use
        points_balance: the customer's current points
        settings: loyalty settings (None means the program is off)

    Raises:
        CheckoutError: on any amount that breaks the chain rules
    """
    subtotal = ZERO
    for price, quantity in lines:
        price = to_money(price)
        if price < ZERO:
            raise CheckoutError("Line price cannot be negative")
        if int(quantity) < 1:
            raise CheckoutError("Line quantity must be at least 1")
        subtotal += to_money(price * int(quantity))
    subtotal = to_money(subtotal)

    coupon_discount = ZERO
    manual_discount = ZERO
    if coupon is not None:
        coupon_discount = coupon_service.compute_coupon_discount(coupon, subtotal)
    else:
        percent = to_money(manual_discount_percent)
        if percent < ZERO or percent > Decimal("100"):
            raise CheckoutError("Manual discount must be between 0 and 100 percent")
        manual_discount = to_money(subtotal * percent / Decimal("100"))

    discounted = max(ZERO, subtotal - coupon_discount - manual_discount)
    rate = to_money(gst_rate)
    gst_amount = to_money(discounted * rate / Decimal("100"))
    before_loyalty = to_money(discounted + gst_amount)

    gift_total = ZERO
    seen_codes = set()
    for code, amount, balance in gift_cards:
        key = (code or "").strip().upper()
        if key in seen_codes:
            raise CheckoutError(f"Gift card {key} applied more than once")
        seen_codes.add(key)
        amount = to_money(amount)
        if amount <= ZERO:
            raise CheckoutError(f"Gift card {key} amount must be greater than zero")
        if amount > to_money(balance):
            raise CheckoutError(f"Gift card {key} amount exceeds its balance")
        gift_total += amount
    if gift_total > before_loyalty:
        raise CheckoutError("Gift card amounts exceed the amount due")
    after_gc = max(ZERO, before_loyalty - gift_total)

    redeem_points = int(redeem_points or 0)
    if redeem_points < 0:
        raise CheckoutError("Points to redeem cannot be negative")
    if settings is None or not settings.is_active:
        if redeem_points > 0:
            raise CheckoutError("Loyalty program is not active")
        max_redeemable = 0
    else:
        max_redeemable = loyalty_service.calculate_max_redeemable(after_gc, settings, points_balance)
    if redeem_points > max_redeemable:
        raise CheckoutError(f"Cannot redeem {redeem_points} points; the maximum for this order is {max_redeemable}")

    # 1 point = 1 rupee
    loyalty_discount = min(to_money(redeem_points), after_gc)
    total = max(ZERO, after_gc - loyalty_discount)
    points_earned = loyalty_service.calculate_points_earned(total, settings) if settings is not None else 0

    return CheckoutTotals(
        subtotal=subtotal,
        coupon_discount=coupon_discount,
        manual_discount=manual_discount,
        discounted_subtotal=discounted,
        gst_rate=rate,
        gst_amount=gst_amount,
        amount_before_loyalty=before_loyalty,
        gift_card_total=to_money(gift_total),
        amount_after_gift_cards=after_gc,
        max_redeemable_points=max_redeemable,
        points_redeemed=redeem_points,
        loyalty_discount=loyalty_discount,
        total=total,
        points_earned=points_earned,
    )


class _PreparedCheckout:
    """Catalog rows, coupon, gift cards and totals resolved for one request."""

    def __init__(self):
        self.customer: Optional[Customer] = None
        self.priced_lines: List[Dict[str, Any]] = []
        self.coupon: Optional[Coupon] = None
        self.cards: List[Tuple[GiftCard, Decimal]] = []
        self.settings = None
        self.points_balance = 0
        self.totals: Optional[CheckoutTotals] = None


def _load_catalog(db: Session, tenant_id: str, request: CheckoutRequest):
    def ids_of(item_type):
        return {l.item_id for l in request.lines if l.item_type == item_type}

    service_ids = ids_of(InvoiceItemTypeEnum.SERVICE)
    product_ids = ids_of(InvoiceItemTypeEnum.PRODUCT)
    plan_ids = ids_of(InvoiceItemTypeEnum.MEMBERSHIP)

    services = {}
    if service_ids:
        services = {s.id: s for s in db.query(Service).filter(
            Service.tenant_id == tenant_id,
            Service.id.in_(service_ids),
            Service.is_active == True,
        ).all()}
        invalid = missing_ids(service_ids, services)
        if invalid:
            raise CheckoutError(f"Invalid or inactive services: {', '.join(str(i) for i in invalid)}")

    products = {}
    if product_ids:
        products = {p.id: p for p in db.query(Product).filter(
            Product.tenant_id == tenant_id,
            Product.id.in_(product_ids),
            Product.is_active == True,
        ).all()}
        invalid = missing_ids(product_ids, products)
        if invalid:
            raise CheckoutError(f"Invalid or inactive products: {', '.join(str(i) for i in invalid)}")

    plans = {}
    if plan_ids:
        plans = {p.id: p for p in db.query(MembershipPlan).filter(
            MembershipPlan.tenant_id == tenant_id,
            MembershipPlan.id.in_(plan_ids),
            MembershipPlan.status == PlanStatusEnum.ACTIVE,
        ).all()}
        invalid = missing_ids(plan_ids, plans)
        if invalid:
            raise CheckoutError(f"Invalid or inactive membership plans: {', '.join(str(i) for i in invalid)}")

    return services, products, plans


def prepare_checkout(db: Session, tenant_id: str, request: CheckoutRequest) -> _PreparedCheckout:
    """Validate everything a checkout touches and compute totals. Writes nothing."""
    prepared = _PreparedCheckout()
    prepared.customer = db.query(Customer).filter(
        Customer.id == request.customer_id,
        Customer.tenant_id == tenant_id,
    ).first()
    if not prepared.customer:
        raise CheckoutError("Customer not found")

    staff_ids = {l.staff_id for l in request.lines if l.staff_id is not None}
    if request.staff_id is not None:
        staff_ids.add(request.staff_id)
    if staff_ids:
        found = [s.id for s in db.query(Staff).filter(
            Staff.tenant_id == tenant_id,
            Staff.id.in_(staff_ids),
            Staff.is_active == True,
        ).all()]
        invalid = missing_ids(staff_ids, found)
        if invalid:
            raise CheckoutError(f"Invalid or inactive staff: {', '.join(str(i) for i in invalid)}")

    services, products, plans = _load_catalog(db, tenant_id, request)
    requested_stock: Dict[int, int] = {}
    for line in request.lines:
        if line.item_type == InvoiceItemTypeEnum.PRODUCT:
            requested_stock[line.item_id] = requested_stock.get(line.item_id, 0) + line.quantity
    for product_id, quantity in requested_stock.items():
        if products[product_id].stock_quantity < quantity:
            raise CheckoutError(f"Insufficient stock for {products[product_id].name}")

    for line in request.lines:
        if line.item_type == InvoiceItemTypeEnum.SERVICE:
            row = services[line.item_id]
            price, description = row.price, row.name
        elif line.item_type == InvoiceItemTypeEnum.PRODUCT:
            row = products[line.item_id]
            price, description = row.price, row.name
        elif line.item_type == InvoiceItemTypeEnum.MEMBERSHIP:
            row = plans[line.item_id]
            price, description = row.price, f"Membership: {row.name}"
        else:
            row, price, description = None, line.price, line.description
        prepared.priced_lines.append({
            "line": line,
            "row": row,
            "unit_price": to_money(price),
            "description": line.description or description,
        })

    subtotal = sum((l["unit_price"] * l["line"].quantity for l in prepared.priced_lines), ZERO)

    if request.coupon_code:
        prepared.coupon = coupon_service.find_valid_coupon(db, tenant_id, request.coupon_code, subtotal)
        if prepared.coupon is None:
            raise CheckoutError(coupon_service.INVALID_COUPON_MESSAGE)

    for application in request.gift_cards:
        card = gift_card_service.lookup_gift_card(db, tenant_id, application.code)
        if card is None:
            raise CheckoutError(f"Gift card {application.code.upper()} is invalid, expired or empty")
        prepared.cards.append((card, to_money(application.amount)))

    prepared.settings = loyalty_service.get_or_create_settings(db, tenant_id)
    prepared.points_balance = loyalty_service.get_points_balance(db, tenant_id, prepared.customer.id)

    prepared.totals = compute_checkout_totals(
        [(l["unit_price"], l["line"].quantity) for l in prepared.priced_lines],
        coupon=prepared.coupon,
        manual_discount_percent=request.manual_discount_percent,
        gst_rate=invoice_service.get_gst_rate_percent(),
        gift_cards=[(card.code, amount, card.balance) for card, amount in prepared.cards],
        redeem_points=request.redeem_points,
        points_balance=prepared.points_balance,
        settings=prepared.settings,
    )
    if not prepared.customer.loyalty_enrolled:
        prepared.totals = prepared.totals.model_copy(update={"points_earned": 0})
    return prepared


def find_replayed_invoice(db: Session, tenant_id: str, idempotency_key: Optional[str]) -> Optional[Invoice]:
    if not idempotency_key:
        return None
    return db.query(Invoice).filter(
        Invoice.tenant_id == tenant_id,
        Invoice.idempotency_key == idempotency_key,
    ).first()


def totals_from_breakdown(invoice: Invoice) -> CheckoutTotals:
    return CheckoutTotals(**(invoice.breakdown or {})["totals"])


def finalize_checkout(db: Session, tenant: Tenant, request: CheckoutRequest) -> Tuple[Invoice, CheckoutTotals, bool]:
    """
    Persist a sale. Returns (invoice, totals, replayed).

    A repeated idempotency_key returns the first invoice untouched. The caller
    owns the transaction: any exception must roll the session back.
    """
    tenant_id = tenant.id
    replay = find_replayed_invoice(db, tenant_id, request.idempotency_key)
    if replay is not None:
        logger.info(
            f"Checkout replay for key {request.idempotency_key}",
            extra={"tenant_id": tenant_id, "invoice_id": replay.id}
        )
        return replay, totals_from_breakdown(replay), True

    prepared = prepare_checkout(db, tenant_id, request)
    totals = prepared.totals
    customer = prepared.customer
    today = date.today()

    booking = None
    service_lines = [l for l in prepared.priced_lines if l["line"].item_type == InvoiceItemTypeEnum.SERVICE]
    if service_lines:
        booking = Booking(
            tenant_id=tenant_id,
            booking_number=invoice_service.generate_booking_number(db, tenant_id, today),
            customer_id=customer.id,
            staff_id=request.staff_id,
            booking_date=today,
            booking_time=utcnow().strftime("%H:%M"),
            status=BookingStatusEnum.COMPLETED,
            total_amount=to_money(sum((l["unit_price"] * l["line"].quantity for l in service_lines), ZERO)),
            notes="Created at checkout",
        )
        for l in service_lines:
            booking.services.append(BookingService(
                service_id=l["row"].id,
                quantity=l["line"].quantity,
                price=l["unit_price"],
            ))
        db.add(booking)
        db.flush()

    invoice = Invoice(
        tenant_id=tenant_id,
        invoice_number=invoice_service.generate_invoice_number(db, tenant_id, today),
        customer_id=customer.id,
        booking_id=booking.id if booking else None,
        invoice_date=today,
        due_date=today,
        subtotal=totals.subtotal,
        discount_amount=to_money(
            totals.coupon_discount + totals.manual_discount + totals.gift_card_total + totals.loyalty_discount
        ),
        gst_amount=totals.gst_amount,
        total_amount=totals.total,
        payment_method=request.payment_method,
        status=InvoiceStatusEnum.PAID,
        notes=request.notes,
        idempotency_key=request.idempotency_key,
    )
    for l in prepared.priced_lines:
        line = l["line"]
        invoice.items.append(InvoiceItem(
            item_type=line.item_type,
            reference_id=l["row"].id if l["row"] is not None else None,
            staff_id=line.staff_id or request.staff_id,
            description=l["description"],
            quantity=line.quantity,
            unit_price=l["unit_price"],
            total_amount=to_money(l["unit_price"] * line.quantity),
        ))
    cgst, sgst = invoice_service.calculate_gst(totals.discounted_subtotal)
    invoice.breakdown = {
        "coupon_code": prepared.coupon.code if prepared.coupon else None,
        "coupon_discount": str(totals.coupon_discount),
        "manual_discount_percent": str(to_money(request.manual_discount_percent)),
        "gift_cards": [{"code": card.code, "amount": str(amount)} for card, amount in prepared.cards],
        "points_used": totals.points_redeemed,
        "points_earned": totals.points_earned,
        "cgst": str(cgst),
        "sgst": str(sgst),
        "totals": totals.model_dump(mode="json"),
    }
    db.add(invoice)
    db.flush()

    if prepared.coupon is not None:
        coupon_service.record_coupon_use(db, prepared.coupon)

    for card, amount in prepared.cards:
        gift_card_service.redeem_gift_card(db, card, amount, invoice_id=invoice.id)

    for l in prepared.priced_lines:
        line = l["line"]
        if line.item_type == InvoiceItemTypeEnum.MEMBERSHIP:
            for _ in range(line.quantity):
                membership_service.create_customer_membership(
                    db, tenant_id, customer.id, l["row"],
                    start_date=today, amount_paid=l["unit_price"], invoice_id=invoice.id,
                )
        elif line.item_type == InvoiceItemTypeEnum.PRODUCT:
            l["row"].stock_quantity -= line.quantity

    if totals.points_redeemed > 0:
        loyalty_service.record_transaction(
            db, tenant_id, customer.id,
            LoyaltyTransactionTypeEnum.REDEEMED,
            totals.points_redeemed,
            amount=totals.loyalty_discount,
            description=f"Redeemed on invoice {invoice.invoice_number}",
            invoice_id=invoice.id,
            settings=prepared.settings,
        )
    if totals.points_earned > 0:
        loyalty_service.record_transaction(
            db, tenant_id, customer.id,
            LoyaltyTransactionTypeEnum.EARNED,
            totals.points_earned,
            amount=totals.total,
            description=f"Earned on invoice {invoice.invoice_number}",
            invoice_id=invoice.id,
            settings=prepared.settings,
        )

    customer.total_visits = (customer.total_visits or 0) + 1
    customer.total_spent = to_money(customer.total_spent) + totals.total
    customer.last_visit = utcnow()
    db.flush()

    logger.info(
        f"Checkout finalized: {invoice.invoice_number}",
        extra={
            "tenant_id": tenant_id,
            "invoice_id": invoice.id,
            "customer_id": customer.id,
            "total": str(totals.total),
            "points_redeemed": totals.points_redeemed,
            "points_earned": totals.points_earned,
        }
    )
    return invoice, totals, False
