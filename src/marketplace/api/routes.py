"""FastAPI routes for the order pipeline — orders, tracking, disputes and coupons.

Every command that mutates an order is processed under that order's lock so
two requests for the same order never interleave their read-modify-write.
"""

import json

from fastapi import APIRouter, HTTPException
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    CancelOrderRequest,
    ChangedResponse,
    CheckoutPricingResponse,
    CollectionCodeRequest,
    CollectionCodeResponse,
    ConfirmReceiptRequest,
    CouponValidationResponse,
    CreatePromoCodeRequest,
    DisputeResponse,
    IdResponse,
    IssueVoucherRequest,
    OpenDisputeRequest,
    OrderItemResponse,
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PriceCheckoutRequest,
    RefundResponse,
    ReportProblemRequest,
    ResolveDisputeRequest,
    ReturnProcessingRequest,
    StatusEntryResponse,
    StatusResponse,
    UpdateStatusRequest,
    ValidateCouponRequest,
)
from marketplace.dispute.dispute import Dispute
from marketplace.dispute.opening import OpenDispute, ReportPartnerProblem
from marketplace.dispute.resolution import ResolveDispute
from marketplace.ledger.checkout import price_checkout
from marketplace.ledger.management import CreatePromoCode, DeactivatePromoCode, IssueManualVoucher
from marketplace.ledger.refund import IssueRefund, RedeemRefundVoucher
from marketplace.ledger.validation import validate_code
from marketplace.order.collection import ValidateCollectionCode
from marketplace.order.creation import PlaceOrder
from marketplace.order.lifecycle import CancelOrder, UpdateOrderStatus
from marketplace.order.order import Order
from marketplace.order.receipt import ConfirmReceipt
from marketplace.order.returns import MarkReturnProcessing
from marketplace.order.tracking import track_order
from marketplace.shared.locks import process_for_order


def order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        short_code=order.short_code,
        status=order.status,
        customer_name=order.customer.full_name,
        delivery_method=order.customer.delivery_method,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                supplier_id=str(item.supplier_id) if item.supplier_id else None,
            )
            for item in order.items
        ],
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        discount_amount=order.discount_amount,
        total=order.total,
        is_paid=order.is_paid,
        assigned_partner_id=str(order.assigned_partner_id) if order.assigned_partner_id else None,
        commission_amount=order.commission_amount,
        delivered_at=order.delivered_at,
        refund_coupon_code=order.refund_coupon_code,
        coupon_redeemed=order.coupon_redeemed,
        history=[
            StatusEntryResponse(status=entry.status, changed_at=entry.changed_at, note=entry.note)
            for entry in order.ordered_history
        ],
    )


def dispute_response(dispute) -> DisputeResponse:
    return DisputeResponse(
        dispute_id=str(dispute.id),
        order_short_code=dispute.order_short_code,
        partner_id=str(dispute.partner_id) if dispute.partner_id else None,
        dispute_type=dispute.dispute_type,
        description=dispute.description,
        status=dispute.status,
        decision=dispute.decision,
        resolution_note=dispute.resolution_note,
        affected_product_ids=dispute.affected_products,
        created_at=dispute.created_at,
        resolved_at=dispute.resolved_at,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def place_order(body: PlaceOrderRequest) -> PlaceOrderResponse:
    command = PlaceOrder(
        customer=json.dumps(body.customer.model_dump()),
        items=json.dumps([line.model_dump(exclude_none=True) for line in body.items]),
        delivery_fee=body.delivery_fee,
        coupon_code=body.coupon_code,
        payment_method=body.payment_method,
        payment_validated=body.payment_validated,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return PlaceOrderResponse(order_id=order_id, short_code=order.short_code)


@order_router.post("/collection", response_model=CollectionCodeResponse)
async def validate_collection_code(body: CollectionCodeRequest) -> CollectionCodeResponse:
    """Pickup point validates the code a customer presents."""
    short_code = body.short_code.strip().upper()
    order = current_domain.repository_for(Order).find_by_short_code(short_code)
    if order is None:
        return CollectionCodeResponse(valid=False)

    command = ValidateCollectionCode(short_code=short_code, code=body.code.strip())
    valid = process_for_order(command, order.id)
    return CollectionCodeResponse(valid=valid)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = current_domain.repository_for(Order).get(order_id)
    return order_response(order)


@order_router.put("/{order_id}/status", response_model=ChangedResponse)
async def update_order_status(order_id: str, body: UpdateStatusRequest) -> ChangedResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        note=body.note,
        is_paid=body.is_paid,
    )
    changed = process_for_order(command, order_id)
    return ChangedResponse(changed=changed)


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    process_for_order(CancelOrder(order_id=order_id, reason=body.reason), order_id)
    return StatusResponse()


@order_router.post("/{order_id}/receipt", response_model=StatusResponse)
async def confirm_receipt(order_id: str, body: ConfirmReceiptRequest) -> StatusResponse:
    command = ConfirmReceipt(order_id=order_id, **body.model_dump())
    process_for_order(command, order_id)
    return StatusResponse()


@order_router.post("/{order_id}/disputes", status_code=201, response_model=IdResponse)
async def open_dispute(order_id: str, body: OpenDisputeRequest) -> IdResponse:
    command = OpenDispute(
        order_id=order_id,
        description=body.description,
        dispute_type=body.dispute_type,
        affected_product_ids=json.dumps(body.affected_product_ids) if body.affected_product_ids else None,
        photo_url=body.photo_url,
    )
    dispute_id = process_for_order(command, order_id)
    return IdResponse(id=dispute_id)


@order_router.post("/{order_id}/problems", status_code=201, response_model=IdResponse)
async def report_partner_problem(order_id: str, body: ReportProblemRequest) -> IdResponse:
    command = ReportPartnerProblem(
        order_id=order_id,
        partner_id=body.partner_id,
        description=body.description,
        affected_product_ids=json.dumps(body.affected_product_ids) if body.affected_product_ids else None,
        photo_url=body.photo_url,
    )
    dispute_id = process_for_order(command, order_id)
    return IdResponse(id=dispute_id)


@order_router.put("/{order_id}/return-processing", response_model=StatusResponse)
async def mark_return_processing(order_id: str, body: ReturnProcessingRequest) -> StatusResponse:
    command = MarkReturnProcessing(order_id=order_id, **body.model_dump(exclude_none=True))
    process_for_order(command, order_id)
    return StatusResponse()


@order_router.post("/{order_id}/refund", response_model=RefundResponse)
async def issue_refund(order_id: str) -> RefundResponse:
    refund_code = process_for_order(IssueRefund(order_id=order_id), order_id)
    return RefundResponse(refund_code=refund_code)


@order_router.put("/{order_id}/refund/redeem", response_model=StatusResponse)
async def redeem_refund_voucher(order_id: str) -> StatusResponse:
    process_for_order(RedeemRefundVoucher(order_id=order_id), order_id)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Tracking Router
# ---------------------------------------------------------------------------
tracking_router = APIRouter(prefix="/track", tags=["tracking"])


@tracking_router.get("/{reference}", response_model=OrderResponse)
async def track(reference: str) -> OrderResponse:
    order = track_order(reference)
    if order is None:
        raise HTTPException(status_code=404, detail="No order matches this tracking code")
    return order_response(order)


# ---------------------------------------------------------------------------
# Dispute Router
# ---------------------------------------------------------------------------
dispute_router = APIRouter(prefix="/disputes", tags=["disputes"])


@dispute_router.get("", response_model=list[DisputeResponse])
async def list_open_disputes() -> list[DisputeResponse]:
    return [dispute_response(dispute) for dispute in current_domain.repository_for(Dispute).find_open()]


@dispute_router.get("/{dispute_id}", response_model=DisputeResponse)
async def get_dispute(dispute_id: str) -> DisputeResponse:
    return dispute_response(current_domain.repository_for(Dispute).get(dispute_id))


@dispute_router.put("/{dispute_id}/resolve", response_model=StatusResponse)
async def resolve_dispute(dispute_id: str, body: ResolveDisputeRequest) -> StatusResponse:
    dispute = current_domain.repository_for(Dispute).get(dispute_id)
    order = current_domain.repository_for(Order).find_by_short_code(dispute.order_short_code)
    command = ResolveDispute(dispute_id=dispute_id, decision=body.decision, note=body.note)
    process_for_order(command, order.id if order is not None else dispute.order_short_code)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(tags=["coupons"])


@coupon_router.post("/coupons/validate", response_model=CouponValidationResponse)
async def validate_coupon(body: ValidateCouponRequest) -> CouponValidationResponse:
    result = validate_code(body.code)
    return CouponValidationResponse(
        is_valid=result.is_valid,
        value=result.value,
        message=result.message,
        kind=result.kind,
        discount_type=result.discount_type,
    )


@coupon_router.post("/coupons/price", response_model=CheckoutPricingResponse)
async def price_cart(body: PriceCheckoutRequest) -> CheckoutPricingResponse:
    pricing = price_checkout(
        body.subtotal,
        delivery_fee=body.delivery_fee,
        code=body.code,
        payment_method=body.payment_method,
        payment_validated=body.payment_validated,
    )
    return CheckoutPricingResponse(
        subtotal=pricing.subtotal,
        delivery_fee=pricing.delivery_fee,
        discount=pricing.discount,
        total=pricing.total,
        is_paid=pricing.is_paid,
    )


@coupon_router.post("/promo-codes", status_code=201, response_model=IdResponse)
async def create_promo_code(body: CreatePromoCodeRequest) -> IdResponse:
    command = CreatePromoCode(**body.model_dump())
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@coupon_router.put("/promo-codes/{promo_code_id}/deactivate", response_model=StatusResponse)
async def deactivate_promo_code(promo_code_id: str) -> StatusResponse:
    current_domain.process(DeactivatePromoCode(promo_code_id=promo_code_id), asynchronous=False)
    return StatusResponse()


@coupon_router.post("/vouchers", status_code=201, response_model=IdResponse)
async def issue_manual_voucher(body: IssueVoucherRequest) -> IdResponse:
    command = IssueManualVoucher(code=body.code, value=body.value)
    return IdResponse(id=current_domain.process(command, asynchronous=False))
