import uuid
from datetime import datetime, timedelta, timezone

from app.services.analytics import summarize
from app.services.cache import OverviewCache

UTC = timezone.utc
NOW = datetime(2024, 3, 10, 12, tzinfo=UTC)


def empty_overview(window_days=3):
    return summarize([], window_days, NOW)


def put(cache, project_ids, window_days=3, now=NOW):
    cache.set(cache.key(project_ids, window_days, now), empty_overview(window_days))


def lookup(cache, project_ids, window_days=3, now=NOW):
    return cache.get(cache.key(project_ids, window_days, now))


def test_memory_cache_round_trip():
    cache = OverviewCache(ttl=60)
    project = uuid.uuid4()
    overview = empty_overview()

    assert lookup(cache, {project}) is None
    cache.set(cache.key({project}, 3, NOW), overview)

    assert cache.use_redis is False
    assert lookup(cache, {project}) == overview


def test_key_ignores_project_order():
    cache = OverviewCache(ttl=60)
    a, b = uuid.uuid4(), uuid.uuid4()
    put(cache, [a, b])

    assert lookup(cache, [b, a]) is not None


def test_window_size_and_day_are_part_of_the_key():
    cache = OverviewCache(ttl=3600 * 48)
    project = uuid.uuid4()
    put(cache, {project})

    assert lookup(cache, {project}, window_days=4) is None
    assert lookup(cache, {project}, now=NOW + timedelta(hours=11, minutes=59)) is not None
    assert lookup(cache, {project}, now=NOW + timedelta(hours=12)) is None


def test_invalidate_only_affects_sets_containing_the_project():
    cache = OverviewCache(ttl=60)
    a, b = uuid.uuid4(), uuid.uuid4()
    put(cache, {a})
    put(cache, {b})
    put(cache, {a, b})

    cache.invalidate(a)

    assert lookup(cache, {a}) is None
    assert lookup(cache, {a, b}) is None
    assert lookup(cache, {b}) is not None


def test_expired_entries_are_dropped():
    cache = OverviewCache(ttl=0)
    project = uuid.uuid4()
    put(cache, {project})

    assert lookup(cache, {project}) is None


def test_result_stored_under_an_outdated_key_is_never_served():
    cache = OverviewCache(ttl=3600)
    project = uuid.uuid4()
    key = cache.key({project}, 3, NOW)

    cache.invalidate(project)
    cache.set(key, empty_overview())

    assert lookup(cache, {project}) is None
    assert cache.entries == {}


def test_memory_store_does_not_grow_with_ingests():
    cache = OverviewCache(ttl=3600)
    project = uuid.uuid4()

    for _ in range(500):
        put(cache, {project})
        cache.invalidate(project)

    assert len(cache.entries) == 1
    put(cache, {project})
    assert len(cache.entries) == 1


def test_memory_store_drops_previous_days():
    cache = OverviewCache(ttl=3600 * 48)
    a, b = uuid.uuid4(), uuid.uuid4()
    put(cache, {a})
    put(cache, {b})

    put(cache, {a}, now=NOW + timedelta(days=1))

    assert len(cache.entries) == 1
    assert lookup(cache, {a}, now=NOW + timedelta(days=1)) is not None
