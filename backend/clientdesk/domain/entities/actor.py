"""Domain entity — the authenticated identity performing an operation."""

from dataclasses import dataclass

ADMIN_ROLES = frozenset({"law_firm_admin", "law_firm"})
STAFF_ROLES = frozenset({
    "law_firm_admin",
    "law_firm",
    "credit_head",
    "debt_collector",
    "legal_head",
    "advocate",
    "receptionist",
})


@dataclass(frozen=True)
class Actor:
    """Caller identity with a role and an owning law firm.

    Built by the presentation layer from the upstream-authenticated user;
    services trust it as given.
    """

    user_id: str
    law_firm_id: str
    role: str
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def can_manage_clients(self) -> bool:
        return self.role in STAFF_ROLES

    def owns(self, law_firm_id: str) -> bool:
        return str(law_firm_id) == str(self.law_firm_id)
