"""Order aggregate (CQRS) — the root of the marketplace order pipeline.

An order is created at checkout with immutable line-item snapshots and then
walks a lifecycle driven by the operator, the handling partner and the
customer. Every status change appends to ``status_history``; the history is
never rewritten and its newest entry always carries the current status.

State Machine (11 states):
    NEW → PROCESSING → IN_TRANSIT → OUT_FOR_DELIVERY → READY/DELIVERED
    READY → DELIVERED
    NEW/PROCESSING/IN_TRANSIT/OUT_FOR_DELIVERY/READY → CANCELLED
    DELIVERED → RETURN_REQUESTED → RETURN_ACCEPTED → RETURN_PROCESSING → REFUNDED
    RETURN_REQUESTED → DELIVERED (return rejected)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.order.events import (
    OrderCreated,
    OrderStatusChanged,
    ReceiptConfirmed,
    RefundIssued,
    RefundVoucherRedeemed,
)
from marketplace.shared.exceptions import IllegalTransitionError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    NEW = "New"
    PROCESSING = "Processing"
    IN_TRANSIT = "In_Transit"
    OUT_FOR_DELIVERY = "Out_For_Delivery"
    READY = "Ready"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURN_REQUESTED = "Return_Requested"
    RETURN_ACCEPTED = "Return_Accepted"
    RETURN_PROCESSING = "Return_Processing"
    REFUNDED = "Refunded"


class DeliveryMethod(Enum):
    HOME = "Home"
    PICKUP = "Pickup"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "Cash_On_Delivery"
    MOBILE_MONEY = "Mobile_Money"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.NEW: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.IN_TRANSIT, OrderStatus.CANCELLED},
    OrderStatus.IN_TRANSIT: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {
        OrderStatus.READY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.READY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.RETURN_REQUESTED},
    OrderStatus.RETURN_REQUESTED: {
        OrderStatus.RETURN_ACCEPTED,
        OrderStatus.DELIVERED,  # Return rejected
    },
    OrderStatus.RETURN_ACCEPTED: {OrderStatus.RETURN_PROCESSING},
    OrderStatus.RETURN_PROCESSING: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.REFUNDED: set(),  # Terminal
}

TERMINAL_STATES = frozenset({OrderStatus.CANCELLED, OrderStatus.REFUNDED})


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class CustomerDetails:
    """Contact and delivery details captured at checkout.

    Guests have no account; the phone number is the only link between an
    order and a registered client.
    """

    full_name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20)
    city = String(required=True, max_length=100)
    commune = String(max_length=100)
    address = String(max_length=255)
    delivery_method = String(choices=DeliveryMethod, default=DeliveryMethod.HOME.value)
    pickup_point_id = Identifier()


@marketplace.value_object(part_of="Order")
class VariantSelection:
    """The variant the customer picked, one optional field per axis."""

    color = String(max_length=50)
    size = String(max_length=50)
    model = String(max_length=100)
    weight = String(max_length=50)
    volume = String(max_length=50)


@marketplace.value_object(part_of="Order")
class ReviewDetails:
    """Post-delivery feedback left when the customer confirms receipt."""

    product_opinion = Text(required=True)
    service_opinion = Text()
    store_rating = Integer(min_value=1, max_value=5)
    delivery_rating = Integer(min_value=1, max_value=5)
    submitted_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """A line item frozen at checkout.

    The unit price is a snapshot: later catalogue price changes never reach
    an existing order.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    supplier_id = Identifier()
    variant = ValueObject(VariantSelection)

    @property
    def line_total(self):
        return self.unit_price * self.quantity


@marketplace.entity(part_of="Order")
class StatusEntry:
    """One append-only entry of the order's status history."""

    sequence = Integer(required=True, min_value=1)
    status = String(choices=OrderStatus, required=True)
    changed_at = DateTime(required=True)
    note = String(max_length=500)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    short_code = String(required=True, max_length=6, unique=True)
    customer = ValueObject(CustomerDetails, required=True)
    items = HasMany(OrderItem)
    status_history = HasMany(StatusEntry)
    status = String(choices=OrderStatus, default=OrderStatus.NEW.value)

    # Pricing
    subtotal = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    discount_amount = Float(default=0.0)
    total = Float(required=True, min_value=0.0)
    used_coupon_code = String(max_length=50)

    # Handling partner
    assigned_partner_id = Identifier()
    commission_amount = Float(default=0.0)

    # Payment
    is_paid = Boolean(default=False)
    payment_method = String(choices=PaymentMethod)

    # Pickup and delivery
    collection_code = String(max_length=4)
    delivered_at = DateTime()
    customer_confirmed_receipt = Boolean(default=False)
    review = ValueObject(ReviewDetails)

    # Refund voucher
    refund_coupon_code = String(max_length=20)
    refund_coupon_value = Float()
    coupon_redeemed = Boolean(default=False)

    # Settlement guard
    financial_processed = Boolean(default=False)

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def history_tail_matches_status(self):
        if not self.status_history:
            return
        latest = self.latest_status_entry
        if latest.status != self.status:
            raise ValidationError(
                {"status_history": [f"Latest history entry is {latest.status} but order status is {self.status}"]}
            )

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        short_code,
        customer,
        items_data,
        pricing,
        initial_status=OrderStatus.NEW,
        assigned_partner_id=None,
        commission_amount=0.0,
        payment_method=None,
        is_paid=False,
        collection_code=None,
        used_coupon_code=None,
    ):
        """Record a new order from checkout data.

        Args:
            short_code: Six-character tracking code shown to the customer.
            customer: Dict with full_name, phone, city, commune, address,
                      delivery_method, pickup_point_id.
            items_data: List of dicts with product_id, name, quantity,
                        unit_price, supplier_id and an optional ``variant``
                        dict (color, size, model, weight, volume).
            pricing: Dict with subtotal, delivery_fee, discount_amount, total.
        """
        now = datetime.now(UTC)

        items = []
        for item in items_data:
            variant = item.get("variant")
            items.append(
                OrderItem(
                    product_id=item["product_id"],
                    name=item["name"],
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    supplier_id=item.get("supplier_id"),
                    variant=VariantSelection(**variant) if variant else None,
                )
            )

        order = cls(
            short_code=short_code,
            customer=CustomerDetails(**customer),
            items=items,
            status=initial_status.value,
            status_history=[
                StatusEntry(
                    sequence=1,
                    status=initial_status.value,
                    changed_at=now,
                    note="Order created",
                )
            ],
            subtotal=pricing.get("subtotal", 0.0),
            delivery_fee=pricing.get("delivery_fee", 0.0),
            discount_amount=pricing.get("discount_amount", 0.0),
            total=pricing["total"],
            used_coupon_code=used_coupon_code,
            assigned_partner_id=assigned_partner_id,
            commission_amount=commission_amount,
            payment_method=payment_method,
            is_paid=is_paid,
            collection_code=collection_code,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                short_code=short_code,
                customer_name=order.customer.full_name,
                customer_phone=order.customer.phone,
                status=order.status,
                total=order.total,
                assigned_partner_id=assigned_partner_id,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def latest_status_entry(self):
        return max(self.status_history, key=lambda entry: entry.sequence)

    @property
    def ordered_history(self):
        return sorted(self.status_history, key=lambda entry: entry.sequence)

    @property
    def is_pickup(self):
        return self.customer.delivery_method == DeliveryMethod.PICKUP.value

    @property
    def item_subtotal(self):
        return sum(item.line_total for item in self.items)

    @property
    def supplier_ids(self):
        """Distinct supplier ids across line items, in line order."""
        seen = []
        for item in self.items:
            if item.supplier_id and str(item.supplier_id) not in seen:
                seen.append(str(item.supplier_id))
        return seen

    @property
    def product_ids(self):
        return [str(item.product_id) for item in self.items]

    def can_transition_to(self, target_status):
        current = OrderStatus(self.status)
        return target_status in _VALID_TRANSITIONS.get(current, set())

    def matches_collection_code(self, submitted_code):
        return bool(self.collection_code) and self.collection_code == submitted_code

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        if not self.can_transition_to(target_status):
            raise IllegalTransitionError(self.status, target_status.value)

    def transition(self, target_status, note=None, is_paid=None):
        """Move the order to ``target_status`` and append a history entry.

        Returns the previous status. Callers decide what to do about
        re-asserting the current status; this method always validates
        against the transition table.
        """
        self._assert_can_transition(target_status)

        previous = self.status
        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = target_status.value
            self.add_status_history(
                StatusEntry(
                    sequence=len(self.status_history) + 1,
                    status=target_status.value,
                    changed_at=now,
                    note=note,
                )
            )
            if is_paid is not None:
                self.is_paid = is_paid
            if target_status == OrderStatus.DELIVERED and self.delivered_at is None:
                self.delivered_at = now
            self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                short_code=self.short_code,
                previous_status=previous,
                new_status=target_status.value,
                note=note,
                changed_at=now,
            )
        )
        return previous

    def cancel(self, reason):
        """Cancel the order. Only meaningful before delivery."""
        return self.transition(OrderStatus.CANCELLED, note=reason)

    def mark_financial_processed(self):
        """Flip the settlement guard. It only ever goes from False to True."""
        if self.financial_processed:
            raise ValidationError({"financial_processed": ["Order has already been settled"]})
        self.financial_processed = True
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Receipt and refund voucher
    # -------------------------------------------------------------------
    def confirm_receipt(self, product_opinion, service_opinion=None, store_rating=None, delivery_rating=None):
        """Record the customer's confirmation of receipt and their review."""
        if OrderStatus(self.status) != OrderStatus.DELIVERED:
            raise ValidationError({"status": ["Receipt can only be confirmed on a delivered order"]})

        now = datetime.now(UTC)
        self.customer_confirmed_receipt = True
        self.review = ReviewDetails(
            product_opinion=product_opinion,
            service_opinion=service_opinion,
            store_rating=store_rating,
            delivery_rating=delivery_rating,
            submitted_at=now,
        )
        self.updated_at = now

        self.raise_(
            ReceiptConfirmed(
                order_id=str(self.id),
                short_code=self.short_code,
                confirmed_at=now,
            )
        )

    def issue_refund(self, refund_code):
        """Attach a refund voucher worth the order total and close the return."""
        if self.refund_coupon_code:
            raise ValidationError({"refund_coupon_code": ["A refund voucher was already issued"]})

        self._assert_can_transition(OrderStatus.REFUNDED)
        now = datetime.now(UTC)

        self.refund_coupon_code = refund_code
        self.refund_coupon_value = self.total
        self.transition(OrderStatus.REFUNDED, note=f"Refund voucher {refund_code} issued")

        self.raise_(
            RefundIssued(
                order_id=str(self.id),
                short_code=self.short_code,
                refund_code=refund_code,
                refund_value=self.refund_coupon_value,
                issued_at=now,
            )
        )

    def redeem_refund_voucher(self):
        """The customer collected their voucher. The historical total is untouched."""
        if not self.refund_coupon_code:
            raise ValidationError({"refund_coupon_code": ["Order has no refund voucher to redeem"]})
        if self.coupon_redeemed:
            return

        now = datetime.now(UTC)
        self.coupon_redeemed = True
        self.updated_at = now

        self.raise_(
            RefundVoucherRedeemed(
                order_id=str(self.id),
                short_code=self.short_code,
                redeemed_at=now,
            )
        )
