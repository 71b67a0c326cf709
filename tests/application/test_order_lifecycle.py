"""Application tests for status updates, cancellation and the settlement trigger."""

import pytest
from marketplace.finance.settlement import settle
from marketplace.finance.transaction import FinancialTransaction
from marketplace.order.lifecycle import CancelOrder, UpdateOrderStatus
from marketplace.order.order import Order, OrderStatus
from marketplace.shared.exceptions import IllegalTransitionError
from protean import current_domain


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _update(order_id, status, **kwargs):
    return current_domain.process(UpdateOrderStatus(order_id=order_id, status=status, **kwargs), asynchronous=False)


def _transactions():
    return current_domain.repository_for(FinancialTransaction).list_all()


class TestUpdateStatus:
    def test_each_change_appends_history(self, place_order, advance):
        order_id = place_order()
        advance(order_id, "Processing", "In_Transit")

        order = _order(order_id)
        assert order.status == OrderStatus.IN_TRANSIT.value
        assert [entry.status for entry in order.ordered_history] == ["New", "Processing", "In_Transit"]
        assert [entry.sequence for entry in order.ordered_history] == [1, 2, 3]

    def test_note_and_paid_flag(self, place_order):
        order_id = place_order()
        assert _update(order_id, "Processing", note="Packed", is_paid=True) is True

        order = _order(order_id)
        assert order.latest_status_entry.note == "Packed"
        assert order.is_paid is True

    def test_illegal_move_changes_nothing(self, place_order):
        order_id = place_order()

        with pytest.raises(IllegalTransitionError) as exc:
            _update(order_id, "Delivered")

        assert exc.value.current == "New"
        assert exc.value.target == "Delivered"
        order = _order(order_id)
        assert order.status == OrderStatus.NEW.value
        assert len(order.status_history) == 1
        assert _transactions() == []

    def test_terminal_order_accepts_nothing(self, place_order):
        order_id = place_order()
        current_domain.process(CancelOrder(order_id=order_id, reason="Changed mind"), asynchronous=False)

        for status in ("New", "Processing", "Delivered", "Cancelled"):
            with pytest.raises(IllegalTransitionError):
                _update(order_id, status)
        assert len(_order(order_id).status_history) == 2


class TestCancellation:
    def test_cancel_before_delivery(self, place_order, advance):
        order_id = place_order()
        advance(order_id, "Processing")

        current_domain.process(CancelOrder(order_id=order_id, reason="Customer unreachable"), asynchronous=False)

        order = _order(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.latest_status_entry.note == "Customer unreachable"

    def test_delivered_order_cannot_be_cancelled(self, delivered_order_id):
        with pytest.raises(IllegalTransitionError):
            current_domain.process(CancelOrder(order_id=delivered_order_id, reason="Too late"), asynchronous=False)


class TestSettlementOnDelivery:
    def test_delivery_settles_the_order(self, delivered_order_id):
        order = _order(delivered_order_id)
        assert order.financial_processed is True
        assert order.delivered_at is not None

        [record] = _transactions()
        assert record.order_id == delivered_order_id
        assert record.order_short_code == order.short_code
        assert record.total_sales == 10000.0
        assert record.total_capital == 6000.0
        assert record.gross_profit == 4000.0
        assert record.distribution.supplier == 1200.0
        assert record.distribution.vat == 720.0
        assert record.distribution.partner == 680.0
        assert record.distribution.operator == 1400.0

    def test_delivery_fee_is_not_part_of_sales(self, place_order, advance):
        order_id = place_order(delivery_fee=1500.0)
        advance(order_id, "Processing", "In_Transit", "Out_For_Delivery", "Delivered")

        [record] = _transactions()
        assert record.total_sales == 10000.0

    def test_repeat_delivery_is_a_no_op(self, delivered_order_id):
        before = _order(delivered_order_id)

        assert _update(delivered_order_id, "Delivered") is False

        after = _order(delivered_order_id)
        assert len(after.status_history) == len(before.status_history)
        assert after.delivered_at == before.delivered_at
        assert len(_transactions()) == 1

    def test_rejected_return_does_not_settle_again(self, delivered_order_id, advance):
        advance(delivered_order_id, "Return_Requested", "Delivered")

        order = _order(delivered_order_id)
        assert order.status == OrderStatus.DELIVERED.value
        assert len(_transactions()) == 1

    def test_loss_making_order_has_zero_profit(self, place_order, register_product, advance):
        discounted_id = register_product(name="Clearance", price=3000.0, capital=5000.0)
        order_id = place_order(items=[{"product_id": discounted_id, "quantity": 2}])
        advance(order_id, "Processing", "In_Transit", "Out_For_Delivery", "Delivered")

        [record] = _transactions()
        assert record.total_sales == 6000.0
        assert record.total_capital == 10000.0
        assert record.gross_profit == 0.0
        assert record.distribution.total == 0.0

    def test_missing_capital_counts_as_zero(self, place_order, register_product, advance):
        uncosted_id = register_product(name="Sample", price=2000.0, capital=None)
        order_id = place_order(items=[{"product_id": uncosted_id, "quantity": 1}])
        advance(order_id, "Processing", "In_Transit", "Out_For_Delivery", "Delivered")

        [record] = _transactions()
        assert record.total_capital == 0.0
        assert record.gross_profit == 2000.0


class TestSettleHelper:
    def test_existing_record_only_repairs_the_flag(self, place_order):
        order = _order(place_order())
        current_domain.repository_for(FinancialTransaction).add(
            FinancialTransaction.record(
                order_id=str(order.id),
                order_short_code=order.short_code,
                total_sales=10000.0,
                total_capital=6000.0,
                gross_profit=4000.0,
                distribution={"supplier": 1200.0, "vat": 720.0, "partner": 680.0, "operator": 1400.0},
            )
        )

        assert settle(order) is None
        assert order.financial_processed is True
        assert len(_transactions()) == 1

    def test_flagged_order_is_skipped(self, delivered_order_id):
        order = _order(delivered_order_id)
        assert settle(order) is None
        assert len(_transactions()) == 1
