import pytest

from aqua.core.capabilities import Capabilities, derive_capabilities
from aqua.core.roles import CAPABILITY_ROLES, UserRole, has_capability


def test_no_principal_gives_all_false():
    caps = derive_capabilities(None)
    assert caps.role is None
    assert not any(getattr(caps, name) for name in CAPABILITY_ROLES)


def test_unknown_role_gives_all_false():
    assert derive_capabilities("dispatcher") == Capabilities()


@pytest.mark.parametrize("role", list(UserRole))
def test_flags_match_policy_table(role):
    caps = derive_capabilities(role)
    assert caps.role == role.value
    for name in CAPABILITY_ROLES:
        assert getattr(caps, name) == has_capability(role, name)


def test_admin_and_customer_bags():
    admin = derive_capabilities("admin")
    assert admin.can_view_admin and admin.is_manager and admin.is_staff
    assert not admin.is_customer

    customer = derive_capabilities(UserRole.Customer)
    assert customer.is_customer and customer.can_view_dashboard
    assert not customer.is_staff
    assert not customer.can_manage_services


def test_capabilities_are_read_only():
    caps = derive_capabilities("admin")
    with pytest.raises(Exception):
        caps.can_view_admin = False
