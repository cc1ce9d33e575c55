import itertools
import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from coin_price_bot.cache import PriceCache, ReadWriteLock
from coin_price_bot.errors import UnavailableError
from coin_price_bot.models import PriceQuote


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fetch(clock):
    return MagicMock(side_effect=lambda symbol: PriceQuote(symbol, 42.0, "coingecko", clock()))


@pytest.fixture
def cache(fetch, clock):
    return PriceCache(fetch, ttl=timedelta(minutes=5), clock=clock)


def test_memoized_within_ttl(cache, fetch, clock):
    first = cache.get("zcash")
    clock.advance(minutes=4, seconds=59)
    second = cache.get("zcash")

    assert second is first
    assert second.fetched_at == first.fetched_at
    assert fetch.call_count == 1


def test_refetch_after_ttl(cache, fetch, clock):
    first = cache.get("zcash")
    clock.advance(minutes=5)
    second = cache.get("zcash")

    assert fetch.call_count == 2
    assert second.fetched_at > first.fetched_at

    # the refreshed quote is memoized again
    assert cache.get("zcash") is second
    assert fetch.call_count == 2


def test_symbols_cached_separately(cache, fetch):
    cache.get("zcash")
    cache.get("bitcoin")
    cache.get("zcash")

    assert [c.args[0] for c in fetch.call_args_list] == ["zcash", "bitcoin"]


def test_errors_are_not_cached(clock):
    quote = PriceQuote("zcash", 30.0, "coingecko", clock())
    fetch = MagicMock(side_effect=[UnavailableError("coingecko returned HTTP 503"), quote])
    cache = PriceCache(fetch, ttl=timedelta(minutes=5), clock=clock)

    with pytest.raises(UnavailableError):
        cache.get("zcash")
    assert cache.peek("zcash") is None

    assert cache.get("zcash") is quote


def test_invalidate(cache, fetch):
    cache.get("zcash")
    cache.get("bitcoin")

    cache.invalidate("zcash")
    assert cache.peek("zcash") is None
    assert cache.peek("bitcoin") is not None

    cache.invalidate()
    assert cache.peek("bitcoin") is None

    cache.get("zcash")
    assert fetch.call_count == 3


def test_peek_ignores_expired(cache, clock):
    cache.get("zcash")
    clock.advance(minutes=6)
    assert cache.peek("zcash") is None


class TestReadWriteLock:
    def test_readers_share(self):
        lock = ReadWriteLock()
        barrier = threading.Barrier(2, timeout=2)
        errors = []

        def reader():
            try:
                with lock.read():
                    barrier.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert errors == []

    def test_writer_waits_for_reader(self):
        lock = ReadWriteLock()
        written = threading.Event()

        def writer():
            with lock.write():
                written.set()

        with lock.read():
            t = threading.Thread(target=writer)
            t.start()
            assert not written.wait(timeout=0.1)

        t.join(timeout=5)
        assert written.is_set()


def test_concurrent_misses_both_fetch_and_last_write_wins(clock):
    barrier = threading.Barrier(2, timeout=2)
    first_stored = threading.Event()
    calls = itertools.count()

    def slow_fetch(symbol):
        n = next(calls)
        # both callers are inside fetch at once, so neither holds the lock
        barrier.wait()
        if n == 1:
            first_stored.wait(timeout=2)
        return PriceQuote(symbol, 40.0 + n, "coingecko", clock())

    fetch = MagicMock(side_effect=slow_fetch)
    cache = PriceCache(fetch, ttl=timedelta(minutes=5), clock=clock)
    results = []
    errors = []

    def caller():
        try:
            results.append(cache.get("zcash"))
        except threading.BrokenBarrierError as e:
            errors.append(e)
        finally:
            first_stored.set()

    threads = [threading.Thread(target=caller) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert errors == []
    assert fetch.call_count == 2
    assert [q.price for q in results] == [40.0, 41.0]
    assert cache.peek("zcash").price == 41.0
