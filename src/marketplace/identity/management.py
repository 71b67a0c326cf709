"""Account management — commands and handler."""

import json

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from marketplace.audit.system_log import Severity, record_system_log
from marketplace.domain import marketplace
from marketplace.identity.account import Account, AccountRole


@marketplace.command(part_of="Account")
class RegisterAccount:
    username = String(required=True, max_length=100)
    name = String(required=True, max_length=150)
    role = String(choices=AccountRole, required=True)
    assigned_zone = String(max_length=100)
    partner_type = String(max_length=20)
    commission_rate = Float(min_value=0.0)
    actor_id = Identifier()


@marketplace.command(part_of="Account")
class DeactivateAccount:
    account_id = Identifier(required=True)
    actor_id = Identifier()


@marketplace.command_handler(part_of=Account)
class ManageAccountHandler:
    @handle(RegisterAccount)
    def register_account(self, command):
        account = Account.register(
            username=command.username,
            name=command.name,
            role=command.role,
            assigned_zone=command.assigned_zone,
            partner_type=command.partner_type,
            commission_rate=command.commission_rate,
        )
        current_domain.repository_for(Account).add(account)
        record_system_log(
            "account_registered",
            actor_id=command.actor_id,
            details=json.dumps({"account_id": str(account.id), "role": account.role}),
        )
        return str(account.id)

    @handle(DeactivateAccount)
    def deactivate_account(self, command):
        repo = current_domain.repository_for(Account)
        account = repo.get(command.account_id)
        account.deactivate()
        repo.add(account)
        record_system_log(
            "account_deactivated",
            actor_id=command.actor_id,
            details=json.dumps({"account_id": str(account.id), "username": account.username}),
            severity=Severity.WARNING,
        )
