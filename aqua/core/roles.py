# aqua/core/roles.py

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional


class UserRole(str, Enum):
    Admin = "admin"
    DeptHead = "dept_head"
    ServiceManager = "service_manager"
    AccountsManager = "accounts_manager"
    ProductManager = "product_manager"
    DriverManager = "driver_manager"
    Technician = "technician"
    Customer = "customer"


def parse_role(value: Any) -> Optional[UserRole]:
    """
    Accepts a UserRole or a raw string (case and whitespace insensitive).
    Anything outside the enumeration comes back as None, which every rule
    below treats as "deny".
    """
    if isinstance(value, UserRole):
        return value
    if value is None:
        return None
    try:
        return UserRole(str(value).strip().lower())
    except ValueError:
        return None


# ==========================================================
# ROLE GROUPS
# ==========================================================
ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)

MANAGER_ROLES = frozenset({
    UserRole.Admin,
    UserRole.DeptHead,
    UserRole.ServiceManager,
    UserRole.AccountsManager,
    UserRole.ProductManager,
    UserRole.DriverManager,
})

STAFF_ROLES = ALL_ROLES - {UserRole.Customer}

# Roles allowed to edit any field of a service request
SERVICE_DESK_ROLES = frozenset({
    UserRole.Admin,
    UserRole.DeptHead,
    UserRole.ServiceManager,
})

FIELD_ROLES = SERVICE_DESK_ROLES | {UserRole.Technician}

# Who may push notifications to other users
NOTIFIER_ROLES = frozenset({UserRole.Admin, UserRole.ServiceManager})


# ==========================================================
# CAPABILITIES
# ==========================================================
CAPABILITY_ROLES = {
    "can_view_admin": frozenset({UserRole.Admin}),
    "can_manage_users": frozenset({UserRole.Admin, UserRole.DeptHead}),
    "can_manage_customers": SERVICE_DESK_ROLES,
    "can_manage_complaints": FIELD_ROLES,
    "can_manage_services": FIELD_ROLES,
    "can_manage_drivers": frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.DriverManager}),
    "can_manage_vehicles": frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.DriverManager}),
    "can_manage_accounts": frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.AccountsManager}),
    "can_manage_products": frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.ProductManager}),
    "can_view_reports": MANAGER_ROLES,
    "can_view_dashboard": ALL_ROLES,
    "is_manager": MANAGER_ROLES,
    "is_customer": frozenset({UserRole.Customer}),
    "is_staff": STAFF_ROLES,
}


# ==========================================================
# PAGES (navigation entries of the dashboard)
# ==========================================================
@dataclass(frozen=True)
class Page:
    key: str
    label: str
    href: str
    roles: FrozenSet[UserRole]


PAGES = (
    Page("dashboard", "Dashboard", "/dashboard", ALL_ROLES),
    Page("admin_dashboard", "Admin Dashboard", "/admin/dashboard",
         frozenset({UserRole.Admin, UserRole.DeptHead})),
    Page("admin", "Admin Panel", "/admin", frozenset({UserRole.Admin})),
    Page("users", "User Management", "/admin/users",
         frozenset({UserRole.Admin, UserRole.DeptHead})),
    Page("customers", "Customers", "/customers", SERVICE_DESK_ROLES),
    Page("complaints", "Complaints", "/complaints", FIELD_ROLES | {UserRole.Customer}),
    Page("services", "Services", "/services", FIELD_ROLES | {UserRole.Customer}),
    Page("service_assignment", "Service Assignment", "/services/assignment", SERVICE_DESK_ROLES),
    Page("distribution", "Water Distribution", "/distribution",
         frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.DriverManager})),
    Page("driver", "Driver Management", "/driver",
         frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.DriverManager})),
    Page("accounts", "Accounts", "/accounts",
         frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.AccountsManager})),
    Page("products", "Products", "/products",
         frozenset({UserRole.Admin, UserRole.DeptHead, UserRole.ProductManager})),
    Page("reports", "Reports", "/reports", MANAGER_ROLES),
)

PAGES_BY_KEY = {page.key: page for page in PAGES}


# ==========================================================
# ACCESS RULES
# ==========================================================
@dataclass(frozen=True)
class AccessRule:
    """
    One of three shapes: a single required role, an allow-list of roles,
    or a named capability. Exactly one field is expected to be set; a rule
    with nothing set allows any recognised role.
    """
    required_role: Optional[UserRole] = None
    allowed_roles: Optional[FrozenSet[UserRole]] = None
    capability: Optional[str] = None

    @classmethod
    def role(cls, role: UserRole) -> "AccessRule":
        return cls(required_role=role)

    @classmethod
    def any_of(cls, roles: Iterable[Any]) -> "AccessRule":
        parsed = {parse_role(r) for r in roles}
        parsed.discard(None)
        return cls(allowed_roles=frozenset(parsed))

    @classmethod
    def needs(cls, capability: str) -> "AccessRule":
        return cls(capability=capability)

    def describe(self) -> str:
        if self.required_role is not None:
            return f"Required role: {self.required_role.value}"
        if self.capability is not None:
            return f"Required capability: {self.capability}"
        return "You don't have permission to view this content."


ADMIN_GUARD = AccessRule.role(UserRole.Admin)
MANAGER_GUARD = AccessRule(allowed_roles=MANAGER_ROLES)
TECHNICIAN_GUARD = AccessRule(allowed_roles=FIELD_ROLES)
CUSTOMER_GUARD = AccessRule.role(UserRole.Customer)
STAFF_GUARD = AccessRule(allowed_roles=STAFF_ROLES)


# ==========================================================
# EVALUATION (pure, default-deny)
# ==========================================================
def has_role(role: Any, required: Any) -> bool:
    current = parse_role(role)
    wanted = parse_role(required)
    return current is not None and wanted is not None and current == wanted


def has_any_role(role: Any, allowed: Iterable[Any]) -> bool:
    current = parse_role(role)
    if current is None:
        return False
    return any(parse_role(r) == current for r in allowed)


def has_capability(role: Any, capability: str) -> bool:
    current = parse_role(role)
    if current is None:
        return False
    return current in CAPABILITY_ROLES.get(capability, frozenset())


def can_access_page(role: Any, page: str) -> bool:
    current = parse_role(role)
    entry = PAGES_BY_KEY.get(page)
    if current is None or entry is None:
        return False
    return current in entry.roles


def satisfies(role: Any, rule: AccessRule) -> bool:
    current = parse_role(role)
    if current is None:
        return False

    if rule.required_role is not None and current != rule.required_role:
        return False

    if rule.allowed_roles is not None and current not in rule.allowed_roles:
        return False

    if rule.capability is not None and not has_capability(current, rule.capability):
        return False

    return True


def visible_pages(role: Any) -> list[Page]:
    return [page for page in PAGES if can_access_page(role, page.key)]
