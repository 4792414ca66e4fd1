from importlib.metadata import version

import pytest

from aqua.core.database import AsyncSessionLocal
from aqua.core.roles import UserRole
from aqua.models.notification import Notification


def _release(dist: str) -> tuple:
    parts = []
    for piece in version(dist).split(".")[:3]:
        digits = "".join(ch for ch in piece if ch.isdigit())
        parts.append(int(digits or 0))
    return tuple(parts)


def test_sqlmodel_release_accepts_naive_timestamps():
    # 0.0.25+ rejects the naive utc stamps the models default to
    assert (0, 0, 16) <= _release("sqlmodel") < (0, 0, 25)


def test_bcrypt_release_supported_by_passlib():
    assert _release("bcrypt")[0] < 5


@pytest.mark.asyncio
async def test_timestamped_rows_insert_and_load(make_user):
    user = await make_user(UserRole.Customer)

    async with AsyncSessionLocal() as session:
        note = Notification(user_id=user.id, title="Welcome", message="Account ready")
        session.add(note)
        await session.commit()
        await session.refresh(note)

        stored = await session.get(Notification, note.id)
        assert stored.created_at is not None
        assert stored.is_read is False
