import hashlib
import time
from datetime import date, datetime
from typing import Collection, Dict, NamedTuple, Optional, Tuple
from uuid import UUID

import redis
import structlog

from app.core.config import settings
from app.schemas.analytics import EventsOverview
from app.services.bucketing import today_utc

logger = structlog.get_logger()


class OverviewKey(NamedTuple):
    """Cache key resolved once per request, before the events are read"""
    digest: str
    day: date
    versions: Tuple[Tuple[UUID, int], ...]


class OverviewCache:
    """
    Redis-backed cache of computed overviews, falling back to process memory.

    Keys combine the sorted project set, the window size, the UTC day of the
    request and a per-project version that every ingest bumps. An overview
    only depends on "now" through its UTC day, so a hit is always equal to a
    fresh computation.

    The key must be taken before reading events: an ingest that lands while
    the overview is computed bumps the version, and the result is stored
    under the old key, which no later request asks for.
    """

    def __init__(self, ttl: int, redis_url: Optional[str] = None):
        """
        Args:
            ttl: Entry lifetime in seconds
            redis_url: Redis connection URL, None for in-memory only
        """
        self.ttl = ttl
        self.use_redis = False

        if redis_url:
            try:
                self.redis_client = redis.from_url(redis_url, decode_responses=True)
                self.redis_client.ping()
                self.use_redis = True
                logger.info("overview_cache_using_redis")
            except redis.RedisError as e:
                logger.warning("overview_cache_redis_failed_using_memory", error=str(e))

        if not self.use_redis:
            # One counter per project that has received an ingest
            self.versions: Dict[UUID, int] = {}
            self.entries: Dict[str, Tuple[float, OverviewKey, str]] = {}

    @staticmethod
    def _version_key(project_id: UUID) -> str:
        return f"overview:version:{project_id}"

    def _versions(self, project_ids: list[UUID]) -> list[int]:
        if self.use_redis:
            raw = self.redis_client.mget([self._version_key(p) for p in project_ids])
            return [int(v) if v else 0 for v in raw]
        return [self.versions.get(p, 0) for p in project_ids]

    def key(
            self,
            project_ids: Collection[UUID],
            window_days: int,
            now: datetime
    ) -> Optional[OverviewKey]:
        """Current key for the request, None when Redis cannot be read"""
        ordered = sorted(project_ids, key=str)
        try:
            versions = tuple(zip(ordered, self._versions(ordered)))
        except redis.RedisError as e:
            logger.warning("overview_cache_read_failed", error=str(e))
            return None

        day = today_utc(now)
        parts = [f"{p}@{v}" for p, v in versions]
        raw = f"{day.isoformat()}|{window_days}|{','.join(parts)}"
        digest = "overview:" + hashlib.sha256(raw.encode("utf-8")).hexdigest()
        return OverviewKey(digest, day, versions)

    def get(self, key: Optional[OverviewKey]) -> Optional[EventsOverview]:
        if key is None:
            return None

        try:
            if self.use_redis:
                payload = self.redis_client.get(key.digest)
            else:
                payload = self._get_memory(key)
        except redis.RedisError as e:
            logger.warning("overview_cache_read_failed", error=str(e))
            return None

        if payload is None:
            return None
        return EventsOverview.model_validate_json(payload)

    def _get_memory(self, key: OverviewKey) -> Optional[str]:
        entry = self.entries.get(key.digest)
        if entry is None:
            return None

        expires_at, _, payload = entry
        if expires_at <= time.time():
            del self.entries[key.digest]
            return None
        return payload

    def set(self, key: Optional[OverviewKey], overview: EventsOverview):
        if key is None:
            return

        payload = overview.model_dump_json()
        if self.use_redis:
            try:
                self.redis_client.setex(key.digest, self.ttl, payload)
            except redis.RedisError as e:
                logger.warning("overview_cache_write_failed", error=str(e))
            return

        self._sweep(key.day)
        if self._is_stale(key, key.day):
            return
        self.entries[key.digest] = (time.time() + self.ttl, key, payload)

    def _is_stale(self, key: OverviewKey, today: date) -> bool:
        return key.day != today or any(
            self.versions.get(project_id, 0) != version
            for project_id, version in key.versions
        )

    def _sweep(self, today: date):
        """Drop expired entries and entries no current key can reach"""
        now = time.time()
        stale = [
            digest
            for digest, (expires_at, key, _) in self.entries.items()
            if expires_at <= now or self._is_stale(key, today)
        ]
        for digest in stale:
            del self.entries[digest]

    def invalidate(self, project_id: UUID):
        """Bump the project's version so every overview including it misses"""
        if self.use_redis:
            try:
                self.redis_client.incr(self._version_key(project_id))
            except redis.RedisError as e:
                logger.error("overview_cache_invalidate_failed", project_id=str(project_id), error=str(e))
        else:
            self.versions[project_id] = self.versions.get(project_id, 0) + 1


# Initialize cache if enabled
overview_cache: Optional[OverviewCache] = None

if settings.overview_cache_enabled:
    overview_cache = OverviewCache(
        ttl=settings.overview_cache_ttl,
        redis_url=settings.redis_url
    )
