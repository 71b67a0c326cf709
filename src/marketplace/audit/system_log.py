"""SystemLog aggregate — the operator-facing audit trail.

Administrative actions that move money or change who may act on the
platform (record archival, account changes, driver approvals) leave an
entry here in addition to the structured application log.
"""

from datetime import UTC, datetime
from enum import Enum

import structlog
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.domain import marketplace

logger = structlog.get_logger(__name__)


class Severity(Enum):
    INFO = "Info"
    WARNING = "Warning"
    CRITICAL = "Critical"


@marketplace.aggregate
class SystemLog:
    action = String(required=True, max_length=100)
    actor_id = Identifier()
    details = Text()
    severity = String(choices=Severity, default=Severity.INFO.value)
    logged_at = DateTime(required=True)


def record_system_log(action, actor_id=None, details=None, severity=Severity.INFO):
    """Append an audit entry in the current unit of work."""
    entry = SystemLog(
        action=action,
        actor_id=actor_id,
        details=details,
        severity=severity.value,
        logged_at=datetime.now(UTC),
    )
    current_domain.repository_for(SystemLog).add(entry)
    logger.info("System log recorded", action=action, actor_id=actor_id, severity=severity.value)
    return entry


def recent_logs(limit=100):
    """Newest entries first."""
    return current_domain.repository_for(SystemLog).recent(limit)
