import logging

from coin_price_bot import config
from coin_price_bot.errors import PriceSourceError
from coin_price_bot.models import CollectionStats, PriceQuote
from coin_price_bot.parsers.binance import parse_binance
from coin_price_bot.parsers.coingecko import parse_coingecko
from coin_price_bot.parsers.magiceden import parse_magiceden
from coin_price_bot.utils import normalize_coin_id, utcnow

logger = logging.getLogger(__name__)

# тикер -> coingecko id
COIN_ALIASES = {
    "btc": "bitcoin",
    "zec": "zcash",
    "eth": "ethereum",
    "sol": "solana",
}

# coingecko id -> пара на binance (быстрый путь)
BINANCE_PAIRS = {
    "bitcoin": "BTCUSDT",
    "zcash": "ZECUSDT",
    "ethereum": "ETHUSDT",
    "solana": "SOLUSDT",
}


def resolve_coin_id(symbol: str) -> str:
    coin_id = normalize_coin_id(symbol)
    return COIN_ALIASES.get(coin_id, coin_id)


def ticker_for(coin_id: str) -> str:
    for ticker, alias in COIN_ALIASES.items():
        if alias == coin_id:
            return ticker.upper()
    return coin_id.upper()


class PriceSourceAdapter:
    def __init__(self, timeout: float = config.REQUEST_TIMEOUT, pairs: dict | None = None, clock=utcnow):
        self.timeout = timeout
        self.pairs = BINANCE_PAIRS if pairs is None else pairs
        self._clock = clock

    def fetch(self, symbol: str) -> PriceQuote:
        coin_id = resolve_coin_id(symbol)

        pair = self.pairs.get(coin_id)
        if pair:
            try:
                price = parse_binance(pair, self.timeout)
                return PriceQuote(coin_id, price, "binance", self._clock())
            except PriceSourceError as e:
                logger.warning(f"Binance failed for {pair} ({e}), falling back to CoinGecko")

        price = parse_coingecko(coin_id, self.timeout)
        return PriceQuote(coin_id, price, "coingecko", self._clock())

    def fetch_collection(self, symbol: str) -> CollectionStats:
        return parse_magiceden(symbol, self.timeout)
