"""Catalogue mirror management — commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product import Product
from marketplace.domain import marketplace


@marketplace.command(part_of="Product")
class RegisterProduct:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    capital = Float(min_value=0.0)
    stock = Integer(default=0, min_value=0)
    supplier_id = Identifier()
    variants = Text()  # JSON: {"colors": [...], "sizes": [...], ...}
    low_stock_threshold = Integer(min_value=0)


@marketplace.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@marketplace.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(RegisterProduct)
    def register_product(self, command):
        variants = None
        if command.variants:
            variants = json.loads(command.variants) if isinstance(command.variants, str) else command.variants

        product = Product.register(
            name=command.name,
            price=command.price,
            capital=command.capital,
            stock=command.stock or 0,
            supplier_id=command.supplier_id,
            variants=variants,
            low_stock_threshold=command.low_stock_threshold,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.quantity)
        repo.add(product)
