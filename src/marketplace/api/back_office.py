"""FastAPI routes for the back office — settlement records, inboxes,
catalogue mirror, accounts, drivers and the audit trail."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    ActorRequest,
    CountResponse,
    FinancialRecordResponse,
    FinancialSummaryResponse,
    IdResponse,
    NotificationResponse,
    RegisterAccountRequest,
    RegisterProductRequest,
    RestockProductRequest,
    ReviewDriverRequest,
    StatusResponse,
    SubmitDriverRequest,
    SystemLogResponse,
)
from marketplace.audit.system_log import recent_logs
from marketplace.catalogue.management import RegisterProduct, RestockProduct
from marketplace.finance.archival import ToggleFinancialRecordStatus
from marketplace.finance.reporting import financial_summary
from marketplace.finance.transaction import FinancialTransaction
from marketplace.identity.management import DeactivateAccount, RegisterAccount
from marketplace.logistics.management import ArchiveDriver, SubmitDriver, ValidateDriver
from marketplace.notification.reading import MarkAllNotificationsRead, MarkNotificationRead, notifications_for


def _record_response(record) -> FinancialRecordResponse:
    return FinancialRecordResponse(
        transaction_id=str(record.id),
        order_short_code=record.order_short_code,
        settled_at=record.settled_at,
        total_sales=record.total_sales,
        total_capital=record.total_capital,
        gross_profit=record.gross_profit,
        supplier=record.distribution.supplier,
        vat=record.distribution.vat,
        partner=record.distribution.partner,
        operator=record.distribution.operator,
        status=record.status,
    )


# ---------------------------------------------------------------------------
# Finance Router
# ---------------------------------------------------------------------------
finance_router = APIRouter(prefix="/finance", tags=["finance"])


@finance_router.get("/records", response_model=list[FinancialRecordResponse])
async def list_records() -> list[FinancialRecordResponse]:
    records = current_domain.repository_for(FinancialTransaction).list_all()
    return [_record_response(record) for record in records]


@finance_router.get("/summary", response_model=FinancialSummaryResponse)
async def summary() -> FinancialSummaryResponse:
    totals = financial_summary()
    return FinancialSummaryResponse(**vars(totals))


@finance_router.put("/records/{transaction_id}/toggle", response_model=StatusResponse)
async def toggle_record(transaction_id: str, body: ActorRequest) -> StatusResponse:
    command = ToggleFinancialRecordStatus(transaction_id=transaction_id, actor_id=body.actor_id)
    new_status = current_domain.process(command, asynchronous=False)
    return StatusResponse(status=new_status)


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("/{recipient_id}", response_model=list[NotificationResponse])
async def inbox(recipient_id: str, unread_only: bool = False) -> list[NotificationResponse]:
    return [
        NotificationResponse(
            notification_id=str(notification.id),
            title=notification.title,
            message=notification.message,
            category=notification.category,
            link=notification.link,
            read=notification.read,
            created_at=notification.created_at,
        )
        for notification in notifications_for(recipient_id, unread_only=unread_only)
    ]


@notification_router.put("/{recipient_id}/read-all", response_model=CountResponse)
async def mark_all_read(recipient_id: str) -> CountResponse:
    count = current_domain.process(MarkAllNotificationsRead(recipient_id=recipient_id), asynchronous=False)
    return CountResponse(count=count)


@notification_router.put("/{recipient_id}/{notification_id}/read", response_model=StatusResponse)
async def mark_read(recipient_id: str, notification_id: str) -> StatusResponse:  # noqa: ARG001
    current_domain.process(MarkNotificationRead(notification_id=notification_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Catalogue Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=IdResponse)
async def register_product(body: RegisterProductRequest) -> IdResponse:
    command = RegisterProduct(
        name=body.name,
        price=body.price,
        capital=body.capital,
        stock=body.stock,
        supplier_id=body.supplier_id,
        low_stock_threshold=body.low_stock_threshold,
        variants=json.dumps(body.variants) if body.variants else None,
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@product_router.put("/{product_id}/restock", response_model=StatusResponse)
async def restock_product(product_id: str, body: RestockProductRequest) -> StatusResponse:
    current_domain.process(RestockProduct(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Account Router
# ---------------------------------------------------------------------------
account_router = APIRouter(prefix="/accounts", tags=["accounts"])


@account_router.post("", status_code=201, response_model=IdResponse)
async def register_account(body: RegisterAccountRequest) -> IdResponse:
    command = RegisterAccount(**body.model_dump())
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@account_router.put("/{account_id}/deactivate", response_model=StatusResponse)
async def deactivate_account(account_id: str, body: ActorRequest) -> StatusResponse:
    current_domain.process(DeactivateAccount(account_id=account_id, actor_id=body.actor_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Driver Router
# ---------------------------------------------------------------------------
driver_router = APIRouter(prefix="/drivers", tags=["drivers"])


@driver_router.post("", status_code=201, response_model=IdResponse)
async def submit_driver(body: SubmitDriverRequest) -> IdResponse:
    command = SubmitDriver(**body.model_dump())
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@driver_router.put("/{driver_id}/review", response_model=StatusResponse)
async def review_driver(driver_id: str, body: ReviewDriverRequest) -> StatusResponse:
    command = ValidateDriver(driver_id=driver_id, status=body.status, note=body.note, actor_id=body.actor_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@driver_router.put("/{driver_id}/archive", response_model=StatusResponse)
async def archive_driver(driver_id: str, body: ActorRequest) -> StatusResponse:
    current_domain.process(ArchiveDriver(driver_id=driver_id, actor_id=body.actor_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Audit Router
# ---------------------------------------------------------------------------
audit_router = APIRouter(prefix="/system-logs", tags=["audit"])


@audit_router.get("", response_model=list[SystemLogResponse])
async def list_system_logs(limit: int = 100) -> list[SystemLogResponse]:
    return [
        SystemLogResponse(
            action=entry.action,
            actor_id=str(entry.actor_id) if entry.actor_id else None,
            details=entry.details,
            severity=entry.severity,
            logged_at=entry.logged_at,
        )
        for entry in recent_logs(limit)
    ]
