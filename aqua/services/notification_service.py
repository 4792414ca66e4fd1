# aqua/services/notification_service.py

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aqua.models.notification import Notification


async def list_notifications(
    session: AsyncSession,
    user_id: UUID,
    unread_only: bool = False,
    limit: int = 50,
) -> dict:
    query = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712

    result = await session.execute(query)
    notifications = result.scalars().all()

    return {
        "notifications": notifications,
        "unread_count": sum(1 for n in notifications if not n.is_read),
    }


def build_notification(
    user_id: UUID,
    title: str,
    message: str,
    type: str = "info",
    related_id: Optional[UUID] = None,
    action_url: Optional[str] = None,
) -> Notification:
    return Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=type,
        related_id=related_id,
        action_url=action_url,
    )


async def create_notification(session: AsyncSession, data: dict) -> Notification:
    notification = build_notification(**data)
    session.add(notification)
    await session.commit()
    await session.refresh(notification)
    return notification


async def get_own_notification(session: AsyncSession, user_id: UUID, notification_id: UUID) -> Notification | None:
    result = await session.execute(
        select(Notification).where(
            (Notification.id == notification_id) & (Notification.user_id == user_id)
        )
    )
    return result.scalar_one_or_none()


async def set_read_state(session: AsyncSession, notification: Notification, is_read: bool) -> Notification:
    notification.is_read = is_read
    notification.read_at = datetime.utcnow() if is_read else None

    session.add(notification)
    await session.commit()
    await session.refresh(notification)
    return notification


async def mark_read(
    session: AsyncSession,
    user_id: UUID,
    notification_ids: Optional[list[UUID]] = None,
    mark_all: bool = False,
) -> int:
    """Bulk mark-as-read, scoped to the caller's own notifications. Returns the row count."""
    stmt = (
        update(Notification)
        .where(Notification.user_id == user_id)
        .values(is_read=True, read_at=datetime.utcnow())
    )

    if mark_all:
        stmt = stmt.where(Notification.is_read == False)  # noqa: E712
    elif notification_ids:
        stmt = stmt.where(Notification.id.in_(notification_ids))
    else:
        raise ValueError("Provide notification_ids or mark_all")

    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount or 0


async def delete_notification(session: AsyncSession, notification: Notification) -> None:
    await session.delete(notification)
    await session.commit()
