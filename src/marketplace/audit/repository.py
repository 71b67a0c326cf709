"""Repository for the SystemLog aggregate."""

from marketplace.audit.system_log import SystemLog
from marketplace.domain import marketplace


@marketplace.repository(part_of=SystemLog)
class SystemLogRepository:
    def recent(self, limit: int = 100) -> list[SystemLog]:
        """Newest entries first."""
        entries = self._dao.query.all().items
        return sorted(entries, key=lambda entry: entry.logged_at, reverse=True)[:limit]

    def find_by_action(self, action: str) -> list[SystemLog]:
        return self._dao.query.filter(action=action).all().items
