"""
Module: connectors.identity_provider

In-memory identity/session provider. Resolves a caller to a user record with
a role and an approval status; used only for authorization gating in front of
the pricing advisor.
"""

import asyncio

from pydantic import BaseModel

from models.enums import ApprovalStatus, UserRole

PRICING_ROLES = {UserRole.SUPERADMIN, UserRole.MANAGER}


class User(BaseModel):
    """Dashboard user as held by the identity provider."""

    uid: str
    email: str
    name: str | None = None
    role: UserRole
    status: ApprovalStatus = ApprovalStatus.PENDING
    manager_id: str | None = None


def can_use_pricing_assistant(user: User | None) -> bool:
    """Only approved superadmins and managers may request price suggestions."""
    if user is None:
        return False
    return user.status == ApprovalStatus.APPROVED and user.role in PRICING_ROLES


class InMemoryIdentityProvider:
    """Identity connector backed by a dict keyed on uid."""

    def __init__(self, users: list[User] | None = None):
        self._users: dict[str, User] = {u.uid: u for u in users or []}

    async def get_user(self, uid: str) -> User | None:
        await asyncio.sleep(0)
        user = self._users.get(uid)
        return user.model_copy() if user else None

    def add_user(self, user: User) -> None:
        self._users[user.uid] = user

    async def approve(self, uid: str) -> User | None:
        """Approve a pending sign-up. Returns the updated user, or None if unknown."""
        await asyncio.sleep(0)
        user = self._users.get(uid)
        if user is None:
            return None
        user.status = ApprovalStatus.APPROVED
        return user.model_copy()
