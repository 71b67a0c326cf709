"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductRegistered:
    """A product was added to the catalogue mirror."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    supplier_id: Identifier()
    price: Float(required=True)
    stock: Integer(required=True)
    registered_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductRestocked:
    """Units were added back to a product's stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    new_stock: Integer(required=True)
    restocked_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class LowStockDetected:
    """A sale left a product at or below its low-stock threshold."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    supplier_id: Identifier()
    stock: Integer(required=True)
    threshold: Integer(required=True)
    detected_at: DateTime(required=True)
