"""Capability resolution.

Roles and permissions are owned by another part of the system; the
discussion engine only asks yes/no questions about a principal.
"""

from abc import ABC, abstractmethod

from discuss.domain.value import Capability, Principal


class CapabilityResolver(ABC):
    """Answers whether a principal holds a named capability."""

    @abstractmethod
    def has_capability(self, principal: Principal, capability: Capability) -> bool:
        pass


class ClaimsCapabilityResolver(CapabilityResolver):
    """Resolve capabilities from the claims carried on the principal.

    Admins hold every capability; everyone else holds what was granted
    explicitly.
    """

    def has_capability(self, principal: Principal, capability: Capability) -> bool:
        if principal.is_admin:
            return True
        return capability.value in principal.capabilities
