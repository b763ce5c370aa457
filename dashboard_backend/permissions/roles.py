# permissions/roles.py

from __future__ import annotations

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
# They describe what the staff member does, and mirror User.ROLE_*.
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_SALES = "sales"
ROLE_TECHNICIAN = "technician"
ROLE_CUSTOMER = "customer"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_SALES,
    ROLE_TECHNICIAN,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_EXCHANGE_VIEW = "exchanges.view"
CAP_EXCHANGE_CREATE = "exchanges.create"
CAP_EXCHANGE_APPROVE = "exchanges.approve"    # status changes move stock
CAP_EXCHANGE_DELETE = "exchanges.delete"

CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_ADJUST = "inventory.adjust"     # manual stock adjustments

ALL_CAPABILITIES = {
    CAP_EXCHANGE_VIEW,
    CAP_EXCHANGE_CREATE,
    CAP_EXCHANGE_APPROVE,
    CAP_EXCHANGE_DELETE,
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_ADJUST,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_EXCHANGE_VIEW,
        CAP_EXCHANGE_CREATE,
        CAP_EXCHANGE_APPROVE,
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_ADJUST,
    },
    ROLE_SALES: {
        CAP_EXCHANGE_VIEW,
        CAP_EXCHANGE_CREATE,
        CAP_INVENTORY_VIEW,
    },
    ROLE_TECHNICIAN: {
        CAP_EXCHANGE_VIEW,
        CAP_INVENTORY_VIEW,
    },
    ROLE_CUSTOMER: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> str | None:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in effective_capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_EXCHANGE_APPROVE
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default to avoid accidental open endpoints
            return False
        return user_has_capability(request.user, required)
