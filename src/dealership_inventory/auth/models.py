"""
dealership_inventory.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass

ADMIN_ROLE = "ADMINISTRATOR"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity (a staff user).
    """

    subject: str
    roles: frozenset[str]
    username: str = ""

    @property
    def user_id(self) -> int:
        # Tokens are issued with the numeric user id as `sub`.
        return int(self.subject)

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles

    def has_any_role(self, *roles: str) -> bool:
        return self.is_admin or not self.roles.isdisjoint(roles)


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API and service layers.
