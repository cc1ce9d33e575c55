import asyncio

from coin_price_bot.cache import PriceCache
from coin_price_bot.models import CollectionStats, PriceQuote
from coin_price_bot.sources import PriceSourceAdapter, resolve_coin_id


class PriceService:
    def __init__(self, adapter: PriceSourceAdapter, cache: PriceCache | None = None):
        self.adapter = adapter
        self.cache = cache or PriceCache(adapter.fetch)

    async def get_price(self, symbol: str) -> PriceQuote:
        return await asyncio.to_thread(self.cache.get, resolve_coin_id(symbol))

    async def get_collection_stats(self, symbol: str) -> CollectionStats:
        return await asyncio.to_thread(self.adapter.fetch_collection, symbol)
