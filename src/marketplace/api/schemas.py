"""Pydantic request/response schemas for the Marketplace API.

These are external contracts, kept separate from the Protean commands they
are translated into.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CustomerSchema(BaseModel):
    full_name: str
    phone: str
    city: str
    commune: str | None = None
    address: str | None = None
    delivery_method: str = "Home"
    pickup_point_id: str | None = None


class VariantSchema(BaseModel):
    color: str | None = None
    size: str | None = None
    model: str | None = None
    weight: str | None = None
    volume: str | None = None


class CartLineSchema(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)
    variant: VariantSchema | None = None


# ---------------------------------------------------------------------------
# Order requests
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    customer: CustomerSchema
    items: list[CartLineSchema]
    delivery_fee: float = Field(ge=0, default=0.0)
    coupon_code: str | None = None
    payment_method: str = "Cash_On_Delivery"
    payment_validated: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer": {
                        "full_name": "Awa Kone",
                        "phone": "0700000001",
                        "city": "Abidjan",
                        "commune": "Cocody",
                        "delivery_method": "Home",
                    },
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "delivery_fee": 1500,
                    "payment_method": "Cash_On_Delivery",
                }
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: str
    note: str | None = None
    is_paid: bool | None = None


class CancelOrderRequest(BaseModel):
    reason: str


class ConfirmReceiptRequest(BaseModel):
    product_opinion: str
    service_opinion: str | None = None
    store_rating: int | None = Field(default=None, ge=1, le=5)
    delivery_rating: int | None = Field(default=None, ge=1, le=5)


class ReturnProcessingRequest(BaseModel):
    note: str | None = None


class CollectionCodeRequest(BaseModel):
    short_code: str
    code: str


# ---------------------------------------------------------------------------
# Dispute requests
# ---------------------------------------------------------------------------
class OpenDisputeRequest(BaseModel):
    description: str
    dispute_type: str = "Return"
    affected_product_ids: list[str] | None = None
    photo_url: str | None = None


class ReportProblemRequest(BaseModel):
    partner_id: str
    description: str
    affected_product_ids: list[str] | None = None
    photo_url: str | None = None


class ResolveDisputeRequest(BaseModel):
    decision: str
    note: str | None = None


# ---------------------------------------------------------------------------
# Ledger requests
# ---------------------------------------------------------------------------
class ValidateCouponRequest(BaseModel):
    code: str


class PriceCheckoutRequest(BaseModel):
    subtotal: float = Field(ge=0)
    delivery_fee: float = Field(ge=0, default=0.0)
    code: str | None = None
    payment_method: str | None = None
    payment_validated: bool = False


class CreatePromoCodeRequest(BaseModel):
    code: str
    discount_type: str
    value: float = Field(ge=0)
    min_spend: float | None = Field(default=None, ge=0)


class IssueVoucherRequest(BaseModel):
    code: str
    value: float = Field(ge=0)


# ---------------------------------------------------------------------------
# Back-office requests
# ---------------------------------------------------------------------------
class ActorRequest(BaseModel):
    actor_id: str | None = None


class RegisterProductRequest(BaseModel):
    name: str
    price: float = Field(ge=0)
    capital: float | None = Field(default=None, ge=0)
    stock: int = Field(ge=0, default=0)
    supplier_id: str | None = None
    low_stock_threshold: int | None = Field(default=None, ge=0)
    variants: dict[str, list[str]] | None = None


class RestockProductRequest(BaseModel):
    quantity: int = Field(ge=1)


class RegisterAccountRequest(BaseModel):
    username: str
    name: str
    role: str
    assigned_zone: str | None = None
    partner_type: str | None = None
    commission_rate: float | None = None
    actor_id: str | None = None


class SubmitDriverRequest(BaseModel):
    agency_id: str
    name: str
    phone: str
    zone: str | None = None
    submitted_by_operator: bool = False


class ReviewDriverRequest(BaseModel):
    status: str
    note: str | None = None
    actor_id: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


class PlaceOrderResponse(BaseModel):
    order_id: str
    short_code: str


class ChangedResponse(BaseModel):
    changed: bool


class CollectionCodeResponse(BaseModel):
    valid: bool


class RefundResponse(BaseModel):
    refund_code: str | None = None


class StatusEntryResponse(BaseModel):
    status: str
    changed_at: datetime
    note: str | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    unit_price: float
    supplier_id: str | None = None


class OrderResponse(BaseModel):
    order_id: str
    short_code: str
    status: str
    customer_name: str
    delivery_method: str | None = None
    items: list[OrderItemResponse]
    subtotal: float
    delivery_fee: float
    discount_amount: float
    total: float
    is_paid: bool
    assigned_partner_id: str | None = None
    commission_amount: float
    delivered_at: datetime | None = None
    refund_coupon_code: str | None = None
    coupon_redeemed: bool
    history: list[StatusEntryResponse]


class DisputeResponse(BaseModel):
    dispute_id: str
    order_short_code: str
    partner_id: str | None = None
    dispute_type: str
    description: str | None = None
    status: str
    decision: str | None = None
    resolution_note: str | None = None
    affected_product_ids: list[str]
    created_at: datetime | None = None
    resolved_at: datetime | None = None


class CouponValidationResponse(BaseModel):
    is_valid: bool
    value: float
    message: str
    kind: str | None = None
    discount_type: str | None = None


class CheckoutPricingResponse(BaseModel):
    subtotal: float
    delivery_fee: float
    discount: float
    total: float
    is_paid: bool


class FinancialRecordResponse(BaseModel):
    transaction_id: str
    order_short_code: str
    settled_at: datetime
    total_sales: float
    total_capital: float
    gross_profit: float
    supplier: float
    vat: float
    partner: float
    operator: float
    status: str


class FinancialSummaryResponse(BaseModel):
    record_count: int
    total_sales: float
    total_capital: float
    gross_profit: float
    supplier: float
    vat: float
    partner: float
    operator: float


class NotificationResponse(BaseModel):
    notification_id: str
    title: str
    message: str
    category: str
    link: str | None = None
    read: bool
    created_at: datetime | None = None


class CountResponse(BaseModel):
    count: int


class SystemLogResponse(BaseModel):
    action: str
    actor_id: str | None = None
    details: str | None = None
    severity: str
    logged_at: datetime
