from uuid import uuid4

import pytest

from aqua.core.guard import (
    SIGN_IN_MESSAGE,
    GuardState,
    Principal,
    PrincipalState,
    RenderKind,
    evaluate_guard,
)
from aqua.core.roles import ADMIN_GUARD, MANAGER_GUARD, TECHNICIAN_GUARD, AccessRule, UserRole


def signed_in(role):
    return PrincipalState(principal=Principal(id=uuid4(), role=role))


@pytest.mark.parametrize("show_unauthorized", [True, False])
@pytest.mark.parametrize("has_fallback", [True, False])
def test_loading_only_renders_indicator(show_unauthorized, has_fallback):
    state = PrincipalState(principal=Principal(id=uuid4(), role=UserRole.Admin), loading=True)
    result = evaluate_guard(state, ADMIN_GUARD, has_fallback, show_unauthorized)
    assert result.state == GuardState.Loading
    assert result.render == RenderKind.LoadingIndicator
    assert result.message is None


def test_anonymous_gets_sign_in_prompt_when_asked():
    result = evaluate_guard(PrincipalState(), ADMIN_GUARD, show_unauthorized=True)
    assert result.state == GuardState.Unauthenticated
    assert result.render == RenderKind.SignInPrompt
    assert result.message == SIGN_IN_MESSAGE


def test_anonymous_falls_back_silently():
    assert evaluate_guard(PrincipalState(), ADMIN_GUARD, has_fallback=True).render == RenderKind.Fallback
    assert evaluate_guard(PrincipalState(), ADMIN_GUARD).render == RenderKind.Nothing


def test_authorized_renders_children():
    result = evaluate_guard(signed_in(UserRole.Technician), TECHNICIAN_GUARD)
    assert result.allowed
    assert result.render == RenderKind.Children


def test_denied_with_message():
    result = evaluate_guard(signed_in(UserRole.DeptHead), ADMIN_GUARD, show_unauthorized=True)
    assert result.state == GuardState.Unauthorized
    assert result.render == RenderKind.DeniedMessage
    assert result.message == "Access denied. Required role: admin"


def test_denied_allow_list_message():
    result = evaluate_guard(signed_in(UserRole.Customer), MANAGER_GUARD, show_unauthorized=True)
    assert result.message == "Access denied. You don't have permission to view this content."


def test_denied_capability_message():
    rule = AccessRule.needs("can_manage_products")
    result = evaluate_guard(signed_in(UserRole.Technician), rule, show_unauthorized=True)
    assert result.message == "Access denied. Required capability: can_manage_products"


def test_denied_quietly_uses_fallback_or_nothing():
    state = signed_in(UserRole.Customer)
    assert evaluate_guard(state, ADMIN_GUARD, has_fallback=True).render == RenderKind.Fallback
    assert evaluate_guard(state, ADMIN_GUARD).render == RenderKind.Nothing


def test_unrecognised_role_is_denied():
    state = PrincipalState(principal=Principal(id=uuid4(), role=None))
    result = evaluate_guard(state, AccessRule(), show_unauthorized=True)
    assert result.state == GuardState.Unauthorized


@pytest.mark.parametrize("role", list(UserRole))
def test_only_two_outcomes_for_a_signed_in_principal(role):
    result = evaluate_guard(signed_in(role), MANAGER_GUARD, has_fallback=True)
    assert result.render in (RenderKind.Children, RenderKind.Fallback)


def test_same_inputs_same_result():
    state = signed_in(UserRole.ServiceManager)
    first = evaluate_guard(state, TECHNICIAN_GUARD, show_unauthorized=True)
    assert all(evaluate_guard(state, TECHNICIAN_GUARD, show_unauthorized=True) == first for _ in range(3))
