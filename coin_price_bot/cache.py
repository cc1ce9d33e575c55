import logging
import threading
from contextlib import contextmanager
from datetime import timedelta
from typing import Callable, Dict, Optional

from coin_price_bot import config
from coin_price_bot.models import PriceQuote
from coin_price_bot.utils import utcnow

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class PriceCache:
    """Last quote per symbol, served while younger than ``ttl``."""

    def __init__(
        self,
        fetch: Callable[[str], PriceQuote],
        ttl: timedelta = config.CACHE_TTL,
        clock: Callable = utcnow,
    ):
        self._fetch = fetch
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, PriceQuote] = {}
        self._lock = ReadWriteLock()

    def _is_fresh(self, quote: PriceQuote) -> bool:
        return self._clock() - quote.fetched_at < self.ttl

    def peek(self, symbol: str) -> Optional[PriceQuote]:
        with self._lock.read():
            quote = self._entries.get(symbol)
            if quote is not None and self._is_fresh(quote):
                return quote
        return None

    def get(self, symbol: str) -> PriceQuote:
        quote = self.peek(symbol)
        if quote is not None:
            logger.debug(f"Cache hit for {symbol}: ${quote.price}")
            return quote

        quote = self._fetch(symbol)

        with self._lock.write():
            self._entries[symbol] = quote
        logger.info(f"Cached price for {symbol}: ${quote.price} from {quote.source}")
        return quote

    def invalidate(self, symbol: Optional[str] = None) -> None:
        with self._lock.write():
            if symbol is None:
                self._entries.clear()
            else:
                self._entries.pop(symbol, None)
