"""ARQ (Async Redis Queue) configuration helpers."""

from arq.connections import RedisSettings

from libs.common.config import get_settings


def get_redis_settings() -> RedisSettings:
    """Build ARQ RedisSettings from the REDIS_URL setting."""
    return RedisSettings.from_dsn(get_settings().REDIS_URL)
