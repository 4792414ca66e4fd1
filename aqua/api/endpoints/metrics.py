# aqua/api/endpoints/metrics.py

import time

import psutil
import redis.asyncio as redis
from redis.exceptions import RedisError
from fastapi import APIRouter, Depends
from loguru import logger

from aqua.core.config import settings
from aqua.core.database import test_connection
from aqua.core.rbac import require_admin
from aqua.models.user import User

router = APIRouter(prefix="/api/metrics", tags=["System"])

# Module load time doubles as process start for uptime
START_TIME = time.time()


@router.get("")
async def metrics():
    uptime_seconds = int(time.time() - START_TIME)
    cpu_usage = psutil.cpu_percent(interval=None)
    ram_usage = psutil.virtual_memory().percent
    try:
        disk_usage = psutil.disk_usage('/').percent
    except OSError:
        disk_usage = 0

    # Database health & latency
    db_start = time.time()
    db_latency = 0
    try:
        await test_connection()
        db_status = "Connected"
        db_latency = round((time.time() - db_start) * 1000, 2)
    except Exception:
        logger.exception("Metrics: database ping failed")
        db_status = "Error"

    return {
        "status": "Online",
        "environment": settings.ENV,
        "cpu": cpu_usage,
        "ram": ram_usage,
        "disk": disk_usage,
        "uptime": uptime_seconds,
        "database": db_status,
        "db_latency": db_latency,
        "rate_limit_storage": "redis" if settings.REDIS_URL else "memory",
    }


# ===================================================================
# RATE LIMITER STORAGE (Admin only)
# ===================================================================
@router.get("/redis")
async def redis_statistics(_: User = Depends(require_admin)):
    if not settings.REDIS_URL:
        return {"status": "Disabled", "message": "Redis is not configured; rate limits are kept in memory."}

    client = None
    try:
        client = redis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=2,
        )

        info = await client.info()
        active_limits = []
        async for key in client.scan_iter(match="LIMITER/*", count=100):
            active_limits.append(key)
            if len(active_limits) >= 20:
                break

        return {
            "status": "Online",
            "redis_version": info.get("redis_version"),
            "connected_clients": info.get("connected_clients"),
            "used_memory": info.get("used_memory_human"),
            "total_keys": await client.dbsize(),
            "active_rate_limit_windows": len(active_limits),
        }

    except RedisError as e:
        logger.warning(f"Redis stats unavailable: {e}")
        return {"status": "Offline", "detail": "Redis server unreachable."}
    finally:
        if client:
            await client.aclose()
