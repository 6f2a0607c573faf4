from redis.exceptions import ConnectionError

from fulfillment.infrastructure.report_cache import KEY_PREFIX, ReportCache


class FakeTimer:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class BrokenRedis:
    def get(self, key):
        raise ConnectionError("redis went away")

    def setex(self, key, ttl, value):
        raise ConnectionError("redis went away")


class DictRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)

    def scan_iter(self, match):
        prefix = match.rstrip("*")
        return [k for k in self.data if k.startswith(prefix)]


def test_entries_expire_after_ttl():
    timer = FakeTimer()
    cache = ReportCache(ttl=60, clock=timer)
    cache.set("summary", {"total_orders": 3})

    timer.now = 59.0
    assert cache.get("summary") == {"total_orders": 3}

    timer.now = 60.0
    assert cache.get("summary") is None
    assert cache.size() == 0


def test_invalidate_and_clear():
    cache = ReportCache(ttl=60, clock=FakeTimer())
    cache.set("a", 1)
    cache.set("b", 2)

    cache.invalidate("a")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear()
    assert cache.size() == 0


def test_uses_redis_with_ttl_when_available():
    client = DictRedis()
    cache = ReportCache(ttl=30, redis_client=client, clock=FakeTimer())

    cache.set("summary", {"total_orders": 1})

    assert client.ttls[KEY_PREFIX + "summary"] == 30
    assert cache.get("summary") == {"total_orders": 1}
    cache.clear()
    assert client.data == {}


def test_falls_back_to_ram_when_redis_fails():
    cache = ReportCache(ttl=60, redis_client=BrokenRedis(), clock=FakeTimer())

    cache.set("summary", {"total_orders": 2})

    assert cache.redis_available is False
    assert cache.get("summary") == {"total_orders": 2}


def test_from_url_without_redis_is_ram_only():
    cache = ReportCache.from_url(None, ttl=5)
    assert cache.redis_available is False
    assert cache.ttl == 5
