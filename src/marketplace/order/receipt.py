"""Receipt confirmation — command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.order import Order


@marketplace.command(part_of="Order")
class ConfirmReceipt:
    """The customer confirms they received a delivered order and reviews it."""

    order_id = Identifier(required=True)
    product_opinion = Text(required=True)
    service_opinion = Text()
    store_rating = Integer(min_value=1, max_value=5)
    delivery_rating = Integer(min_value=1, max_value=5)


@marketplace.command_handler(part_of=Order)
class ConfirmReceiptHandler:
    @handle(ConfirmReceipt)
    def confirm_receipt(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm_receipt(
            product_opinion=command.product_opinion,
            service_opinion=command.service_opinion,
            store_rating=command.store_rating,
            delivery_rating=command.delivery_rating,
        )
        repo.add(order)
