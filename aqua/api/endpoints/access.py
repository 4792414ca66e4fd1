# aqua/api/endpoints/access.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from aqua.api.deps import get_optional_user, get_principal_state
from aqua.core.capabilities import Capabilities, derive_capabilities
from aqua.core.guard import PrincipalState, evaluate_guard
from aqua.core.roles import PAGES_BY_KEY, AccessRule, visible_pages
from aqua.models.user import User
from aqua.schemas.access import GuardDecision, NavigationItem, NavigationRead

router = APIRouter(prefix="/api/access", tags=["Access"])


@router.get("/me", response_model=Capabilities)
async def my_capabilities(user: Optional[User] = Depends(get_optional_user)):
    return derive_capabilities(user.role if user else None)


@router.get("/navigation", response_model=NavigationRead)
async def my_navigation(user: Optional[User] = Depends(get_optional_user)):
    role = user.role if user else None
    return NavigationRead(
        role=role.value if role else None,
        items=[NavigationItem(key=p.key, label=p.label, href=p.href) for p in visible_pages(role)],
    )


@router.get("/pages/{page}", response_model=GuardDecision)
async def page_decision(
    page: str,
    show_unauthorized: bool = Query(False),
    has_fallback: bool = Query(False),
    state: PrincipalState = Depends(get_principal_state),
):
    """
    What the dashboard should render for `page` given the caller's session:
    the page itself, a fallback, a sign-in prompt or a denial message.
    """
    entry = PAGES_BY_KEY.get(page)
    if entry is None:
        raise HTTPException(status_code=404, detail="Page not found")

    result = evaluate_guard(
        state,
        AccessRule(allowed_roles=entry.roles),
        has_fallback=has_fallback,
        show_unauthorized=show_unauthorized,
    )
    return GuardDecision(
        page=page,
        state=result.state.value,
        render=result.render.value,
        message=result.message,
    )
