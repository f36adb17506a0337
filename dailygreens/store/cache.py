import logging
from typing import Iterable
from redis import Redis, RedisError
from dailygreens.core.config import settings

log = logging.getLogger(__name__)

def get_client() -> Redis:
    return Redis.from_url(settings.REDIS_URL, decode_responses=True)

def blacklist_key(token: str) -> str:
    return f"blacklist:{token}"

def is_token_revoked(r: Redis, token: str) -> bool:
    return r.exists(blacklist_key(token)) > 0

def invalidate_product_cache(r: Redis, patterns: Iterable[str]) -> int:
    """Drop cached product listings/details; failures are logged, not raised."""
    removed = 0
    for pattern in patterns:
        try:
            keys = list(r.scan_iter(match=pattern))
            if keys:
                removed += r.delete(*keys)
                log.info("invalidated %d cache keys for pattern %s", len(keys), pattern)
        except RedisError as e:
            log.warning("failed to invalidate cache keys for pattern %s: %s", pattern, e)
    return removed
