"""Repository for the Driver aggregate."""

from marketplace.domain import marketplace
from marketplace.logistics.driver import Driver, DriverStatus


@marketplace.repository(part_of=Driver)
class DriverRepository:
    def find_by_agency(self, agency_id) -> list[Driver]:
        drivers = self._dao.query.filter(agency_id=str(agency_id)).all().items
        return [driver for driver in drivers if driver.status != DriverStatus.ARCHIVED.value]

    def find_pending(self) -> list[Driver]:
        return self._dao.query.filter(status=DriverStatus.PENDING_APPROVAL.value).all().items
