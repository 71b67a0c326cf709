import json
import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


def pytest_sessionstart(session):
    """Select the config overlay before any test module imports the domain."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Builders shared by the application, integration and scenario tests
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer():
    return {
        "full_name": "Awa Kone",
        "phone": "0700000001",
        "city": "Abidjan",
        "commune": "Cocody",
        "address": "Rue des Jardins",
        "delivery_method": "Home",
    }


@pytest.fixture()
def register_product():
    from marketplace.catalogue.management import RegisterProduct
    from protean import current_domain

    def _register(name="Wax fabric", price=10000.0, capital=6000.0, stock=20, supplier_id="sup-001", **extra):
        return current_domain.process(
            RegisterProduct(
                name=name,
                price=price,
                capital=capital,
                stock=stock,
                supplier_id=supplier_id,
                **extra,
            ),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def register_account():
    from marketplace.identity.management import RegisterAccount
    from protean import current_domain

    def _register(username, role, name=None, **extra):
        return current_domain.process(
            RegisterAccount(username=username, name=name or username, role=role, **extra),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def product_id(register_product):
    return register_product()


@pytest.fixture()
def place_order(customer, product_id):
    """Place an order through the command; returns the order id."""
    from marketplace.order.creation import PlaceOrder
    from protean import current_domain

    def _place(items=None, customer_overrides=None, **kwargs):
        details = {**customer, **(customer_overrides or {})}
        lines = items if items is not None else [{"product_id": product_id, "quantity": 1}]
        return current_domain.process(
            PlaceOrder(customer=json.dumps(details), items=json.dumps(lines), **kwargs),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def advance():
    """Walk an order through the given statuses, one command each."""
    from marketplace.order.lifecycle import UpdateOrderStatus
    from protean import current_domain

    def _advance(order_id, *statuses):
        for status in statuses:
            current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)

    return _advance


@pytest.fixture()
def delivered_order_id(place_order, advance):
    order_id = place_order()
    advance(order_id, "Processing", "In_Transit", "Out_For_Delivery", "Delivered")
    return order_id
