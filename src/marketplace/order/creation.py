"""Order placement — command and handler.

Turns a checkout submission into an Order: line items are priced from the
catalogue (never from the client), the coupon is applied through the
ledger, a handling partner is resolved from the delivery zone or the chosen
pickup point, and stock is taken out of the catalogue.
"""

import json
import re

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace
from marketplace.identity.account import Account
from marketplace.ledger.checkout import consume_coupon, price_checkout
from marketplace.order.order import DeliveryMethod, Order, OrderStatus, PaymentMethod
from marketplace.shared.codes import generate_collection_code, generate_short_code

logger = structlog.get_logger(__name__)

COMMISSION_RATE = 0.015

_PHONE_PATTERN = re.compile(r"\d{10}")
_VARIANT_KEYS = ("color", "size", "model", "weight", "volume")


@marketplace.command(part_of="Order")
class PlaceOrder:
    customer = Text(required=True)  # JSON: full_name, phone, city, commune, address, delivery_method, pickup_point_id
    items = Text(required=True)  # JSON: list of {product_id, quantity, variant}
    delivery_fee = Float(default=0.0, min_value=0.0)
    coupon_code = String(max_length=50)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    payment_validated = Boolean(default=False)


def _load(value):
    return json.loads(value) if isinstance(value, str) else value


def _clean_customer(customer):
    """Check the required contact fields and normalise the phone number."""
    errors = {}
    for field in ("full_name", "phone", "city"):
        if not (customer.get(field) or "").strip():
            errors[field] = [f"{field} is required"]

    phone = re.sub(r"[\s.-]", "", customer.get("phone") or "")
    if "phone" not in errors and not _PHONE_PATTERN.fullmatch(phone):
        errors["phone"] = ["Phone number must have exactly 10 digits"]

    delivery_method = customer.get("delivery_method") or DeliveryMethod.HOME.value
    if delivery_method == DeliveryMethod.PICKUP.value and not customer.get("pickup_point_id"):
        errors["pickup_point_id"] = ["A pickup point is required for pickup orders"]

    if errors:
        raise ValidationError(errors)

    return {
        "full_name": customer["full_name"].strip(),
        "phone": phone,
        "city": customer["city"].strip(),
        "commune": (customer.get("commune") or "").strip() or None,
        "address": customer.get("address"),
        "delivery_method": delivery_method,
        "pickup_point_id": customer.get("pickup_point_id"),
    }


def _quantity(entry) -> int:
    """Requested quantity of a cart line; a missing quantity means one."""
    value = entry.get("quantity", 1)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError({"items": [f"Invalid quantity {value!r}"]})
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        raise ValidationError({"items": [f"Invalid quantity {value!r}"]})
    if quantity < 1:
        raise ValidationError({"items": ["Quantity must be at least 1"]})
    return quantity


def resolve_partner(customer) -> Account | None:
    """The partner handling the order.

    Pickup orders go to the chosen pickup point. Home deliveries go to the
    active partner covering the commune, falling back to the city.
    """
    repo = current_domain.repository_for(Account)

    if customer["delivery_method"] == DeliveryMethod.PICKUP.value:
        pickup_point = repo.find_by_id(customer["pickup_point_id"])
        if pickup_point is None or not pickup_point.is_partner or not pickup_point.is_active:
            raise ValidationError({"pickup_point_id": ["Unknown pickup point"]})
        return pickup_point

    partner = None
    if customer.get("commune"):
        partner = repo.find_partner_for_zone(customer["commune"])
    if partner is None:
        partner = repo.find_partner_for_zone(customer["city"])
    return partner


def _unique_short_code(repo) -> str:
    while True:
        short_code = generate_short_code()
        if not repo.short_code_taken(short_code):
            return short_code


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        customer = _clean_customer(_load(command.customer) or {})
        requested_items = _load(command.items) or []
        if not requested_items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        product_repo = current_domain.repository_for(Product)
        products = {}
        sold = {}
        items_data = []
        for entry in requested_items:
            product_id = str(entry.get("product_id") or "")
            product = products.get(product_id) or product_repo.find_by_id(product_id)
            if product is None or not product.active:
                raise ValidationError({"items": [f"Unknown product {product_id}"]})
            products[product_id] = product

            quantity = _quantity(entry)
            sold[product_id] = sold.get(product_id, 0) + quantity

            variant = {key: value for key, value in (entry.get("variant") or {}).items() if key in _VARIANT_KEYS}
            items_data.append(
                {
                    "product_id": product_id,
                    "name": product.name,
                    "quantity": quantity,
                    "unit_price": product.price,
                    "supplier_id": product.supplier_id,
                    "variant": variant or None,
                }
            )

        item_subtotal = sum(item["unit_price"] * item["quantity"] for item in items_data)
        pricing = price_checkout(
            item_subtotal,
            delivery_fee=command.delivery_fee or 0.0,
            code=command.coupon_code,
            payment_method=command.payment_method,
            payment_validated=command.payment_validated,
        )

        partner = resolve_partner(customer)
        commission = round(item_subtotal * COMMISSION_RATE, 2) if partner is not None else 0.0

        is_pickup = customer["delivery_method"] == DeliveryMethod.PICKUP.value
        all_in_stock = all(products[product_id].has_stock_for(quantity) for product_id, quantity in sold.items())
        initial_status = OrderStatus.READY if is_pickup and all_in_stock else OrderStatus.NEW

        repo = current_domain.repository_for(Order)
        order = Order.place(
            short_code=_unique_short_code(repo),
            customer=customer,
            items_data=items_data,
            pricing={
                "subtotal": pricing.subtotal,
                "delivery_fee": pricing.delivery_fee,
                "discount_amount": pricing.discount,
                "total": pricing.total,
            },
            initial_status=initial_status,
            assigned_partner_id=str(partner.id) if partner is not None else None,
            commission_amount=commission,
            payment_method=command.payment_method,
            is_paid=pricing.is_paid,
            collection_code=generate_collection_code() if is_pickup else None,
            used_coupon_code=pricing.coupon.code if pricing.coupon else None,
        )

        for product_id, quantity in sold.items():
            product = products[product_id]
            product.record_sale(quantity)
            product_repo.add(product)

        consume_coupon(pricing.coupon, str(order.id))
        repo.add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            short_code=order.short_code,
            status=order.status,
            total=order.total,
            partner_id=order.assigned_partner_id,
        )
        return str(order.id)
