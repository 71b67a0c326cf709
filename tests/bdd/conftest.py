"""Shared BDD fixtures and step definitions for the order pipeline."""

import json

import pytest
from marketplace.catalogue.management import RegisterProduct
from marketplace.finance.transaction import FinancialTransaction
from marketplace.identity.management import RegisterAccount
from marketplace.order.creation import PlaceOrder
from marketplace.order.lifecycle import UpdateOrderStatus
from marketplace.order.order import Order
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_CUSTOMER = {
    "full_name": "Awa Kone",
    "phone": "0700000001",
    "city": "Abidjan",
    "commune": "Cocody",
}

_TO_DELIVERED = ("Processing", "In_Transit", "Out_For_Delivery", "Delivered")


def process(command):
    return current_domain.process(command, asynchronous=False)


def load_order(order_id):
    return current_domain.repository_for(Order).get(order_id)


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _place(product_id, **customer):
    return process(
        PlaceOrder(
            customer=json.dumps({**_CUSTOMER, **customer}),
            items=json.dumps([{"product_id": product_id, "quantity": 1}]),
        )
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse("a product priced {price:d} with a capital of {capital:d}"),
    target_fixture="product_id",
)
def _(price, capital):
    return process(RegisterProduct(name="Wax fabric", price=price, capital=capital, stock=20, supplier_id="sup-001"))


@given("a home order for that product", target_fixture="order_id")
def _(product_id):
    return _place(product_id)


@given("a delivered home order for that product", target_fixture="order_id")
def _(product_id):
    order_id = _place(product_id)
    for status in _TO_DELIVERED:
        process(UpdateOrderStatus(order_id=order_id, status=status))
    return order_id


@given("a pickup order for that product", target_fixture="order_id")
def _(product_id):
    pickup_point_id = process(
        RegisterAccount(username="relais-plateau", name="Relais Plateau", role="Partner", partner_type="Pickup")
    )
    return _place(product_id, delivery_method="Pickup", pickup_point_id=pickup_point_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert load_order(order_id).status == status


@then(parsers.cfparse("the order has exactly {count:d} settlement record"))
def _(order_id, count):
    records = current_domain.repository_for(FinancialTransaction).list_all()
    assert len([record for record in records if record.order_id == order_id]) == count


@then(parsers.cfparse('the request is refused on "{field}"'))
def _(error, field):
    assert isinstance(error["exc"], ValidationError)
    assert field in error["exc"].messages
