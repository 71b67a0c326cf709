"""Repository for the Account aggregate."""

from marketplace.domain import marketplace
from marketplace.identity.account import Account, AccountRole


@marketplace.repository(part_of=Account)
class AccountRepository:
    def find_by_id(self, account_id) -> Account | None:
        results = self._dao.query.filter(id=str(account_id)).all().items
        return results[0] if results else None

    def find_active_by_role(self, role: AccountRole) -> list[Account]:
        return self._dao.query.filter(role=role.value, is_active=True).all().items

    def find_partner_for_zone(self, zone: str) -> Account | None:
        """The active partner covering ``zone`` (case-insensitive), or None."""
        if not zone:
            return None
        wanted = zone.strip().lower()
        for partner in self.find_active_by_role(AccountRole.PARTNER):
            if partner.assigned_zone and partner.assigned_zone.strip().lower() == wanted:
                return partner
        return None

    def find_clients_by_username(self, username: str) -> list[Account]:
        return self._dao.query.filter(username=username, role=AccountRole.CLIENT.value, is_active=True).all().items
