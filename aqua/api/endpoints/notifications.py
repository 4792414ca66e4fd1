# aqua/api/endpoints/notifications.py

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from aqua.api.deps import get_current_user, get_db_session
from aqua.core.rbac import require_notifier
from aqua.models.user import User
from aqua.schemas.notification import (
    MarkReadRequest,
    NotificationCreate,
    NotificationList,
    NotificationRead,
    ReadStateUpdate,
)
from aqua.services.auth_service import get_user_by_id
from aqua.services.notification_service import (
    create_notification,
    delete_notification,
    get_own_notification,
    list_notifications,
    mark_read,
    set_read_state,
)

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("/", response_model=NotificationList)
async def my_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
):
    return await list_notifications(session, current_user.id, unread_only=unread_only, limit=limit)


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def send_notification(
    data: NotificationCreate,
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(require_notifier),
):
    if not await get_user_by_id(session, data.user_id):
        raise HTTPException(status_code=404, detail="Recipient not found")
    return await create_notification(session, data.model_dump())


# Declared before /{notification_id} so "mark-read" is not parsed as an id
@router.post("/mark-read")
async def mark_notifications_read(
    payload: MarkReadRequest,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
):
    try:
        count = await mark_read(
            session,
            current_user.id,
            notification_ids=payload.notification_ids,
            mark_all=payload.mark_all,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"updated_count": count}


@router.patch("/{notification_id}", response_model=NotificationRead)
async def update_read_state(
    notification_id: UUID,
    payload: ReadStateUpdate,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
):
    notification = await get_own_notification(session, current_user.id, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return await set_read_state(session, notification, payload.is_read)


@router.delete("/{notification_id}")
async def remove_notification(
    notification_id: UUID,
    session: AsyncSession = Depends(get_db_session),
    current_user: User = Depends(get_current_user),
):
    notification = await get_own_notification(session, current_user.id, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    await delete_notification(session, notification)
    return {"detail": "Notification deleted successfully"}
