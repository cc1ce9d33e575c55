import asyncio
import logging

from aiogram import Bot, Dispatcher

from coin_price_bot import config
from coin_price_bot.cache import PriceCache
from coin_price_bot.handlers import router
from coin_price_bot.health import start_health_server
from coin_price_bot.prices import PriceService
from coin_price_bot.scheduler import PriceScheduler
from coin_price_bot.sources import PriceSourceAdapter
from coin_price_bot.storage import NotificationRegistry

logger = logging.getLogger(__name__)


async def main():
    token = config.get_token()

    registry = NotificationRegistry(default_interval=config.DEFAULT_INTERVAL)
    adapter = PriceSourceAdapter(timeout=config.REQUEST_TIMEOUT)
    prices = PriceService(adapter, PriceCache(adapter.fetch, ttl=config.CACHE_TTL))

    bot = Bot(token=token)
    dp = Dispatcher(registry=registry, prices=prices)
    dp.include_router(router)

    scheduler = PriceScheduler(bot, registry, prices)
    runner = await start_health_server(config.PORT)
    scheduler.start()

    try:
        me = await bot.get_me()
        logger.info(f"✅ Бот {me.username} запущен! 🚀")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        scheduler.shutdown()
        await runner.cleanup()
        await bot.session.close()


def run():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    run()
