# aqua/services/numbering.py

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select


async def next_sequence_number(session: AsyncSession, column, prefix: str, now: datetime | None = None) -> str:
    """
    Month-scoped running numbers: <PREFIX><YYYY><MM><seq4>, e.g. CMP2026100007.
    The sequence restarts at 0001 every month.
    """
    now = now or datetime.utcnow()
    stem = f"{prefix}{now.year}{now.month:02d}"

    result = await session.execute(
        select(column).where(column.like(f"{stem}%")).order_by(column.desc()).limit(1)
    )
    last = result.scalar_one_or_none()

    sequence = 1
    if last:
        try:
            sequence = int(last[-4:]) + 1
        except ValueError:
            sequence = 1

    return f"{stem}{sequence:04d}"
