"""Application tests for order placement through the PlaceOrder command."""

import json

import pytest
from marketplace.catalogue.product import Product
from marketplace.ledger.management import CreatePromoCode, IssueManualVoucher
from marketplace.ledger.voucher import Voucher, VoucherStatus
from marketplace.order.creation import PlaceOrder
from marketplace.order.order import Order, OrderStatus
from protean import current_domain
from protean.exceptions import ValidationError


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestPlaceOrder:
    def test_order_is_recorded_as_new(self, place_order):
        order = _order(place_order(delivery_fee=1000.0))

        assert order.status == OrderStatus.NEW.value
        assert len(order.short_code) == 6
        assert order.subtotal == 10000.0
        assert order.delivery_fee == 1000.0
        assert order.total == 11000.0
        assert order.is_paid is False
        assert order.collection_code is None
        assert len(order.status_history) == 1

    def test_line_items_are_priced_from_catalogue(self, place_order, product_id):
        order = _order(place_order(items=[{"product_id": product_id, "quantity": 2, "unit_price": 1.0}]))

        item = order.items[0]
        assert item.name == "Wax fabric"
        assert item.unit_price == 10000.0
        assert item.quantity == 2
        assert str(item.supplier_id) == "sup-001"
        assert order.subtotal == 20000.0

    def test_variant_is_kept_on_the_line(self, place_order, product_id):
        order = _order(place_order(items=[{"product_id": product_id, "quantity": 1, "variant": {"color": "Red"}}]))
        assert order.items[0].variant.color == "Red"

    def test_stock_is_taken_out(self, place_order, product_id):
        place_order(items=[{"product_id": product_id, "quantity": 3}])
        assert current_domain.repository_for(Product).get(product_id).stock == 17

    def test_phone_is_normalised(self, place_order):
        order = _order(place_order(customer_overrides={"phone": "07 00.00-00 01"}))
        assert order.customer.phone == "0700000001"


class TestPlaceOrderValidation:
    @pytest.mark.parametrize("missing", ["full_name", "phone", "city"])
    def test_required_contact_fields(self, place_order, missing):
        with pytest.raises(ValidationError) as exc:
            place_order(customer_overrides={missing: ""})
        assert missing in exc.value.messages

    @pytest.mark.parametrize("phone", ["070000000", "07000000011", "07000000AB"])
    def test_phone_must_have_ten_digits(self, place_order, phone):
        with pytest.raises(ValidationError) as exc:
            place_order(customer_overrides={"phone": phone})
        assert exc.value.messages == {"phone": ["Phone number must have exactly 10 digits"]}

    def test_unknown_product(self, place_order):
        with pytest.raises(ValidationError) as exc:
            place_order(items=[{"product_id": "no-such-product", "quantity": 1}])
        assert exc.value.messages == {"items": ["Unknown product no-such-product"]}

    def test_empty_cart(self, place_order):
        with pytest.raises(ValidationError):
            place_order(items=[])

    def test_zero_quantity_is_refused(self, place_order, product_id):
        with pytest.raises(ValidationError) as exc:
            place_order(items=[{"product_id": product_id, "quantity": 0}])
        assert exc.value.messages == {"items": ["Quantity must be at least 1"]}
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    @pytest.mark.parametrize("quantity", ["abc", None, 1.5, True])
    def test_malformed_quantity_is_refused(self, place_order, product_id, quantity):
        with pytest.raises(ValidationError) as exc:
            place_order(items=[{"product_id": product_id, "quantity": quantity}])
        assert exc.value.messages == {"items": [f"Invalid quantity {quantity!r}"]}

    def test_missing_quantity_means_one(self, place_order, product_id):
        order = _order(place_order(items=[{"product_id": product_id}]))
        assert order.items[0].quantity == 1

    def test_pickup_requires_pickup_point(self, place_order):
        with pytest.raises(ValidationError) as exc:
            place_order(customer_overrides={"delivery_method": "Pickup"})
        assert "pickup_point_id" in exc.value.messages

    def test_rejected_order_leaves_stock_untouched(self, place_order, product_id):
        with pytest.raises(ValidationError):
            place_order(customer_overrides={"phone": "123"})
        assert current_domain.repository_for(Product).get(product_id).stock == 20


class TestPartnerResolution:
    def test_partner_covering_the_commune(self, place_order, register_account):
        partner_id = register_account("agence-cocody", "Partner", assigned_zone="Cocody")
        order = _order(place_order())

        assert order.assigned_partner_id == partner_id
        assert order.commission_amount == 150.0

    def test_falls_back_to_city(self, place_order, register_account):
        partner_id = register_account("agence-abidjan", "Partner", assigned_zone="ABIDJAN")
        order = _order(place_order())
        assert order.assigned_partner_id == partner_id

    def test_no_partner_means_no_commission(self, place_order):
        order = _order(place_order())
        assert order.assigned_partner_id is None
        assert order.commission_amount == 0.0

    def test_inactive_partner_is_ignored(self, place_order, register_account):
        from marketplace.identity.management import DeactivateAccount

        partner_id = register_account("agence-cocody", "Partner", assigned_zone="Cocody")
        current_domain.process(DeactivateAccount(account_id=partner_id), asynchronous=False)

        order = _order(place_order())
        assert order.assigned_partner_id is None


class TestPickupOrders:
    @pytest.fixture()
    def pickup_point_id(self, register_account):
        return register_account("relais-plateau", "Partner", partner_type="Pickup", assigned_zone="Plateau")

    def test_in_stock_pickup_is_ready_with_collection_code(self, place_order, pickup_point_id):
        order = _order(
            place_order(customer_overrides={"delivery_method": "Pickup", "pickup_point_id": pickup_point_id})
        )

        assert order.status == OrderStatus.READY.value
        assert order.assigned_partner_id == pickup_point_id
        assert len(order.collection_code) == 4
        assert order.collection_code.isdigit()

    def test_short_stock_pickup_starts_as_new(self, place_order, register_product, pickup_point_id):
        scarce_id = register_product(name="Last pair", stock=1)
        order = _order(
            place_order(
                items=[{"product_id": scarce_id, "quantity": 2}],
                customer_overrides={"delivery_method": "Pickup", "pickup_point_id": pickup_point_id},
            )
        )

        assert order.status == OrderStatus.NEW.value
        assert order.collection_code is not None
        assert current_domain.repository_for(Product).get(scarce_id).stock == 0

    def test_unknown_pickup_point(self, place_order):
        with pytest.raises(ValidationError) as exc:
            place_order(customer_overrides={"delivery_method": "Pickup", "pickup_point_id": "nowhere"})
        assert exc.value.messages == {"pickup_point_id": ["Unknown pickup point"]}


class TestCoupons:
    def test_voucher_is_spent_by_the_order(self, place_order):
        current_domain.process(IssueManualVoucher(code="gift500", value=500.0), asynchronous=False)

        order = _order(place_order(coupon_code="GIFT500"))

        assert order.discount_amount == 500.0
        assert order.total == 9500.0
        assert order.used_coupon_code == "GIFT500"
        voucher = current_domain.repository_for(Voucher).find_by_code("GIFT500")
        assert voucher.status == VoucherStatus.USED.value
        assert voucher.used_by_order_id == order.id

    def test_spent_voucher_is_refused(self, place_order):
        current_domain.process(IssueManualVoucher(code="GIFT500", value=500.0), asynchronous=False)
        place_order(coupon_code="GIFT500")

        with pytest.raises(ValidationError) as exc:
            place_order(coupon_code="GIFT500")
        assert exc.value.messages == {"coupon_code": ["Invalid or expired code"]}

    def test_percentage_promo(self, place_order):
        current_domain.process(
            CreatePromoCode(code="TABASKI10", discount_type="Percentage", value=10), asynchronous=False
        )
        order = _order(place_order(coupon_code="tabaski10", delivery_fee=1000.0))

        assert order.discount_amount == 1000.0
        assert order.total == 10000.0

    def test_promo_minimum_spend(self, place_order):
        current_domain.process(
            CreatePromoCode(code="BIGCART", discount_type="Fixed", value=2000, min_spend=50000), asynchronous=False
        )
        with pytest.raises(ValidationError) as exc:
            place_order(coupon_code="BIGCART")
        assert "coupon_code" in exc.value.messages

    def test_fully_covered_order_is_paid(self, place_order):
        current_domain.process(IssueManualVoucher(code="BIGGIFT", value=50000.0), asynchronous=False)
        order = _order(place_order(coupon_code="BIGGIFT", delivery_fee=1000.0))

        assert order.total == 0.0
        assert order.is_paid is True

    def test_validated_mobile_money_is_paid(self, place_order):
        order = _order(place_order(payment_method="Mobile_Money", payment_validated=True))
        assert order.is_paid is True

    def test_unvalidated_mobile_money_is_not_paid(self, place_order):
        order = _order(place_order(payment_method="Mobile_Money"))
        assert order.is_paid is False


def test_items_payload_accepts_several_lines(place_order, register_product, product_id):
    other_id = register_product(name="Basket", price=2500.0, capital=1000.0, supplier_id="sup-002")
    order = _order(
        place_order(
            items=[
                {"product_id": product_id, "quantity": 1},
                {"product_id": other_id, "quantity": 2},
            ]
        )
    )
    assert order.subtotal == 15000.0
    assert order.supplier_ids == ["sup-001", "sup-002"]


def test_command_payload_is_json(customer, product_id):
    order_id = current_domain.process(
        PlaceOrder(customer=json.dumps(customer), items=json.dumps([{"product_id": product_id, "quantity": 1}])),
        asynchronous=False,
    )
    assert _order(order_id).customer.full_name == "Awa Kone"
