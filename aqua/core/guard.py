# aqua/core/guard.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from uuid import UUID

from aqua.core.roles import AccessRule, UserRole, satisfies


class GuardState(str, Enum):
    Loading = "loading"
    Authorized = "authorized"
    Unauthorized = "unauthorized"
    Unauthenticated = "unauthenticated"


class RenderKind(str, Enum):
    LoadingIndicator = "loading_indicator"
    Children = "children"
    Fallback = "fallback"
    SignInPrompt = "sign_in_prompt"
    DeniedMessage = "denied_message"
    Nothing = "nothing"


SIGN_IN_MESSAGE = "Please sign in to access this content."


@dataclass(frozen=True)
class Principal:
    id: UUID
    role: Optional[UserRole]
    name: Optional[str] = None


@dataclass(frozen=True)
class PrincipalState:
    """What the presentation layer knows about the session right now."""
    principal: Optional[Principal] = None
    loading: bool = False


@dataclass(frozen=True)
class GuardResult:
    state: GuardState
    render: RenderKind
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.state == GuardState.Authorized


def _denial(fallback: bool, show_unauthorized: bool, message: str) -> tuple[RenderKind, Optional[str]]:
    if show_unauthorized:
        return RenderKind.DeniedMessage, message
    if fallback:
        return RenderKind.Fallback, None
    return RenderKind.Nothing, None


def evaluate_guard(
    session: PrincipalState,
    rule: AccessRule,
    has_fallback: bool = False,
    show_unauthorized: bool = False,
) -> GuardResult:
    """
    Decide what a guarded region renders.

    loading -> loading indicator only. No principal -> sign-in prompt (when
    show_unauthorized) or the fallback. Role fails the rule -> denial
    message (when show_unauthorized) or the fallback. Otherwise the
    children. Pure: the same inputs always produce the same result.
    """
    if session.loading:
        return GuardResult(GuardState.Loading, RenderKind.LoadingIndicator)

    if session.principal is None:
        if show_unauthorized:
            return GuardResult(GuardState.Unauthenticated, RenderKind.SignInPrompt, SIGN_IN_MESSAGE)
        render = RenderKind.Fallback if has_fallback else RenderKind.Nothing
        return GuardResult(GuardState.Unauthenticated, render)

    if not satisfies(session.principal.role, rule):
        render, message = _denial(
            has_fallback, show_unauthorized, f"Access denied. {rule.describe()}"
        )
        return GuardResult(GuardState.Unauthorized, render, message)

    return GuardResult(GuardState.Authorized, RenderKind.Children)
