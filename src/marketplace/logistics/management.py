"""Driver management — commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.audit.system_log import Severity, record_system_log
from marketplace.domain import marketplace
from marketplace.logistics.driver import Driver, DriverStatus


@marketplace.command(part_of="Driver")
class SubmitDriver:
    agency_id = Identifier(required=True)
    name = String(required=True, max_length=150)
    phone = String(required=True, max_length=20)
    zone = String(max_length=100)
    submitted_by_operator = Boolean(default=False)


@marketplace.command(part_of="Driver")
class ValidateDriver:
    driver_id = Identifier(required=True)
    status = String(choices=DriverStatus, required=True)
    note = Text()
    actor_id = Identifier()


@marketplace.command(part_of="Driver")
class ArchiveDriver:
    driver_id = Identifier(required=True)
    actor_id = Identifier()


@marketplace.command_handler(part_of=Driver)
class ManageDriverHandler:
    @handle(SubmitDriver)
    def submit_driver(self, command):
        driver = Driver.submit(
            agency_id=command.agency_id,
            name=command.name,
            phone=command.phone,
            zone=command.zone,
            approved=bool(command.submitted_by_operator),
        )
        current_domain.repository_for(Driver).add(driver)
        return str(driver.id)

    @handle(ValidateDriver)
    def validate_driver(self, command):
        repo = current_domain.repository_for(Driver)
        driver = repo.get(command.driver_id)
        driver.review(command.status, note=command.note)
        repo.add(driver)
        record_system_log(
            "driver_reviewed",
            actor_id=command.actor_id,
            details=json.dumps({"driver_id": str(driver.id), "status": driver.status}),
        )

    @handle(ArchiveDriver)
    def archive_driver(self, command):
        repo = current_domain.repository_for(Driver)
        driver = repo.get(command.driver_id)
        driver.archive()
        repo.add(driver)
        record_system_log(
            "driver_archived",
            actor_id=command.actor_id,
            details=json.dumps({"driver_id": str(driver.id), "agency_id": str(driver.agency_id)}),
            severity=Severity.WARNING,
        )
