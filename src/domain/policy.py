"""Role and capability rules for the doubt workflow.

Roles are never compared directly inside the service. Each operation asks the
policy whether the caller's role carries a capability, and the generic listing
asks which scope applies to that role. A new role is added here only.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field

from src.core.auth import Role
from src.domain.errors import AuthorizationError
from src.domain.models import Principal


class Capability(str, enum.Enum):
    ASK = "ask"
    CLAIM = "claim"
    LIST_OWN = "list_own"
    LIST_ASSIGNED = "list_assigned"
    LIST_AVAILABLE = "list_available"


class ListScope(str, enum.Enum):
    """Which questions the generic listing returns for a role."""

    OWN = "own"
    ASSIGNED = "assigned"


def _default_grants() -> dict[Capability, frozenset[str]]:
    student = frozenset({Role.STUDENT.value})
    tutor = frozenset({Role.TUTOR.value})
    return {
        Capability.ASK: student,
        Capability.LIST_OWN: student,
        Capability.CLAIM: tutor,
        Capability.LIST_ASSIGNED: tutor,
        Capability.LIST_AVAILABLE: tutor,
    }


def _default_scopes() -> dict[str, ListScope]:
    return {Role.STUDENT.value: ListScope.OWN, Role.TUTOR.value: ListScope.ASSIGNED}


_DENIED_MESSAGES = {
    Capability.ASK: "Only students can create questions",
    Capability.CLAIM: "Access denied. Tutors only.",
    Capability.LIST_OWN: "Access denied. Students only.",
    Capability.LIST_ASSIGNED: "Access denied. Tutors only.",
    Capability.LIST_AVAILABLE: "Access denied. Tutors only.",
}


@dataclass(frozen=True)
class AccessPolicy:
    grants: Mapping[Capability, frozenset[str]] = field(default_factory=_default_grants)
    list_scopes: Mapping[str, ListScope] = field(default_factory=_default_scopes)

    def allows(self, principal: Principal, capability: Capability) -> bool:
        return principal.role in self.grants.get(capability, frozenset())

    def require(self, principal: Principal, capability: Capability) -> None:
        if not self.allows(principal, capability):
            raise AuthorizationError(
                _DENIED_MESSAGES.get(capability, "Insufficient role privileges")
            )

    def list_scope(self, principal: Principal) -> ListScope:
        scope = self.list_scopes.get(principal.role)
        if scope is None:
            raise AuthorizationError(f"Role '{principal.role}' has no question listing scope")
        return scope


DEFAULT_POLICY = AccessPolicy()
