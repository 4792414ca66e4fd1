# aqua/core/rate_limiter.py

from typing import Optional

from loguru import logger
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from aqua.core.config import settings


def get_real_ip(request: Request) -> str:
    """
    Client IP behind a proxy: X-Forwarded-For (leftmost), then X-Real-IP,
    then the socket peer.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def resolve_storage_uri(redis_url: Optional[str], env: str) -> Optional[str]:
    """
    Where rate-limit windows live. None means in-process memory. Production
    Redis is reached over TLS, so a plain redis:// URL is upgraded.
    """
    if not redis_url:
        return None
    if env == "prod" and redis_url.startswith("redis://"):
        return "rediss://" + redis_url[len("redis://"):]
    return redis_url


def build_limiter(redis_url: Optional[str] = None, env: str = "dev", enabled: bool = True) -> Limiter:
    storage_uri = resolve_storage_uri(redis_url, env)

    if storage_uri is None:
        logger.warning("REDIS_URL not set. Rate limit windows are kept in memory.")
        return Limiter(key_func=get_real_ip, enabled=enabled)

    try:
        limiter = Limiter(
            key_func=get_real_ip,
            enabled=enabled,
            storage_uri=storage_uri,
            strategy="fixed-window",
            storage_options={"socket_connect_timeout": 5, "retry_on_timeout": True},
        )
    except Exception as e:
        logger.error(f"Failed to configure Redis rate limiting, using memory: {e}")
        return Limiter(key_func=get_real_ip, enabled=enabled)

    logger.info("Rate limiter using Redis storage")
    return limiter


limiter = build_limiter(settings.REDIS_URL, settings.ENV, settings.RATE_LIMIT_ENABLED)
