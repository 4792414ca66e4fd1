# aqua/core/capabilities.py

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from aqua.core.roles import CAPABILITY_ROLES, has_capability, parse_role


class Capabilities(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Optional[str] = None

    can_view_admin: bool = False
    can_manage_users: bool = False
    can_manage_customers: bool = False
    can_manage_complaints: bool = False
    can_manage_services: bool = False
    can_manage_drivers: bool = False
    can_manage_vehicles: bool = False
    can_manage_accounts: bool = False
    can_manage_products: bool = False
    can_view_reports: bool = False
    can_view_dashboard: bool = False
    is_manager: bool = False
    is_customer: bool = False
    is_staff: bool = False


def derive_capabilities(role: Any = None) -> Capabilities:
    """
    Translate a role into the flag bag the dashboard uses to decide which
    buttons and links to show. No principal (or an unknown role) gives
    every flag False.
    """
    parsed = parse_role(role)
    if parsed is None:
        return Capabilities()

    flags = {name: has_capability(parsed, name) for name in CAPABILITY_ROLES}
    return Capabilities(role=parsed.value, **flags)
