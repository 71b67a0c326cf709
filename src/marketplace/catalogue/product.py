"""Product aggregate — the slice of the catalogue the order pipeline reads.

Orders snapshot a product's name, price and supplier at checkout; settlement
later reads the product's ``capital`` (cost basis) to compute gross profit.
Stock is decremented by each sale and a LowStockDetected event is raised once
the remaining stock drops to the threshold or below.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text, ValueObject

from marketplace.catalogue.events import LowStockDetected, ProductRegistered, ProductRestocked
from marketplace.domain import marketplace

LOW_STOCK_THRESHOLD = 5

VARIANT_AXES = ("colors", "sizes", "models", "weights", "volumes")


@marketplace.value_object(part_of="Product")
class ProductVariants:
    """Allowed values per variant axis, each stored as a JSON list of strings."""

    colors: Text()
    sizes: Text()
    models: Text()
    weights: Text()
    volumes: Text()

    @invariant.post
    def axes_must_be_json_lists(self):
        for axis in VARIANT_AXES:
            raw = getattr(self, axis)
            if not raw:
                continue
            try:
                values = json.loads(raw)
            except (json.JSONDecodeError, TypeError):
                raise ValidationError({axis: [f"{axis} must be valid JSON"]}) from None
            if not isinstance(values, list):
                raise ValidationError({axis: [f"{axis} must be a JSON list"]})

    def options(self, axis):
        raw = getattr(self, axis)
        return json.loads(raw) if raw else []


@marketplace.aggregate
class Product:
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    capital: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    low_stock_threshold: Integer(default=LOW_STOCK_THRESHOLD, min_value=0)
    supplier_id: Identifier()
    active: Boolean(default=True)
    variants: ValueObject(ProductVariants)
    created_at: DateTime()

    @classmethod
    def register(cls, name, price, capital=None, stock=0, supplier_id=None, variants=None, low_stock_threshold=None):
        now = datetime.now(UTC)
        variant_values = None
        if variants:
            variant_values = ProductVariants(
                **{axis: json.dumps(values) for axis, values in variants.items() if axis in VARIANT_AXES}
            )

        product = cls(
            name=name,
            price=price,
            capital=capital,
            stock=stock,
            low_stock_threshold=LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold,
            supplier_id=supplier_id,
            variants=variant_values,
            created_at=now,
        )
        product.raise_(
            ProductRegistered(
                product_id=str(product.id),
                name=name,
                supplier_id=supplier_id,
                price=price,
                stock=stock,
                registered_at=now,
            )
        )
        return product

    def has_stock_for(self, quantity):
        return (self.stock or 0) >= quantity

    def record_sale(self, quantity):
        """Take ``quantity`` units out of stock.

        Stock never goes negative; overselling a pickup order that was placed
        on a stale view simply empties the shelf.
        """
        self.stock = max(0, (self.stock or 0) - quantity)

        if self.stock <= self.low_stock_threshold:
            self.raise_(
                LowStockDetected(
                    product_id=str(self.id),
                    name=self.name,
                    supplier_id=self.supplier_id,
                    stock=self.stock,
                    threshold=self.low_stock_threshold,
                    detected_at=datetime.now(UTC),
                )
            )

    def restock(self, quantity):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Restock quantity must be positive"]})
        self.stock = (self.stock or 0) + quantity
        self.raise_(
            ProductRestocked(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock,
                restocked_at=datetime.now(UTC),
            )
        )
