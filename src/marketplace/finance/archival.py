"""Financial record archival — command and handler.

Settlement is never recomputed. When an order is reversed at the business
level (an accepted return, a fraudulent delivery) the operator archives its
settlement record instead, and can bring it back if that was a mistake.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.audit.system_log import Severity, record_system_log
from marketplace.domain import marketplace
from marketplace.finance.transaction import FinancialTransaction

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="FinancialTransaction")
class ToggleFinancialRecordStatus:
    transaction_id = Identifier(required=True)
    actor_id = Identifier()


@marketplace.command_handler(part_of=FinancialTransaction)
class FinancialRecordHandler:
    @handle(ToggleFinancialRecordStatus)
    def toggle_status(self, command):
        repo = current_domain.repository_for(FinancialTransaction)
        transaction = repo.get(command.transaction_id)
        transaction.toggle_status()
        repo.add(transaction)

        record_system_log(
            "financial_record_toggled",
            actor_id=command.actor_id,
            details=json.dumps(
                {
                    "transaction_id": str(transaction.id),
                    "order_short_code": transaction.order_short_code,
                    "status": transaction.status,
                }
            ),
            severity=Severity.WARNING,
        )
        logger.info(
            "Financial record status toggled",
            transaction_id=str(transaction.id),
            status=transaction.status,
        )
        return transaction.status
