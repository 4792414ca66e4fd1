from typing import List, Optional
from pydantic import BaseModel


class NavigationItem(BaseModel):
    key: str
    label: str
    href: str


class NavigationRead(BaseModel):
    role: Optional[str] = None
    items: List[NavigationItem]


class GuardDecision(BaseModel):
    page: str
    state: str
    render: str
    message: Optional[str] = None
