# aqua/core/rbac.py

from fastapi import Depends, HTTPException, status
from aqua.api.deps import get_current_user, to_principal
from aqua.core.guard import GuardState, PrincipalState, evaluate_guard
from aqua.core.roles import (
    ADMIN_GUARD,
    MANAGER_GUARD,
    STAFF_GUARD,
    TECHNICIAN_GUARD,
    AccessRule,
    SERVICE_DESK_ROLES,
    NOTIFIER_ROLES,
)
from aqua.models.user import User


def RequireRule(rule: AccessRule):
    """
    Route dependency over the same guard evaluation the dashboard uses.
    Unauthenticated callers never reach here (get_current_user raises 401);
    a role that fails the rule gets 403 with the denial message.
    """

    async def rule_checker(current_user: User = Depends(get_current_user)):
        result = evaluate_guard(
            PrincipalState(principal=to_principal(current_user)),
            rule,
            show_unauthorized=True,
        )

        if result.state != GuardState.Authorized:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=result.message or "Access denied",
            )

        return current_user

    return rule_checker


def AllowRoles(*allowed_roles):
    """Accepts UserRole values or raw strings; unknown strings are ignored."""
    return RequireRule(AccessRule.any_of(allowed_roles))


def RequireCapability(capability: str):
    return RequireRule(AccessRule.needs(capability))


# ------------------------------------------------------------
# Exposed dependencies for routers
# ------------------------------------------------------------
require_admin = RequireRule(ADMIN_GUARD)
require_manager = RequireRule(MANAGER_GUARD)
require_staff = RequireRule(STAFF_GUARD)
require_field_staff = RequireRule(TECHNICIAN_GUARD)
require_service_desk = AllowRoles(*SERVICE_DESK_ROLES)
require_notifier = AllowRoles(*NOTIFIER_ROLES)
require_user_manager = RequireCapability("can_manage_users")
