import asyncio
import logging
from datetime import timedelta

from aiogram.exceptions import TelegramAPIError
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from coin_price_bot import config
from coin_price_bot.errors import PriceSourceError, RateLimitedError
from coin_price_bot.models import PriceQuote
from coin_price_bot.sources import ticker_for
from coin_price_bot.utils import format_interval

logger = logging.getLogger(__name__)

JOB_ID = "price_notifications"


class SkippedTickFilter(logging.Filter):
    # ticks that overlap a running pass are dropped silently
    def filter(self, record: logging.LogRecord) -> bool:
        return "maximum number of running instances reached" not in record.getMessage()


_skipped_tick_filter = SkippedTickFilter()


def format_update(quote: PriceQuote, interval: timedelta) -> str:
    return (
        f"⏰ {ticker_for(quote.symbol)} Price Update\n"
        f"💰 ${quote.price:,.2f}\n"
        f"📊 Интервал: {format_interval(interval)}"
    )


class PriceScheduler:
    """Sends the tracked coin price to enabled chats, one chat after another."""

    def __init__(
        self,
        bot,
        registry,
        prices,
        coin: str = config.TRACKED_COIN,
        tick_seconds: int = config.NOTIFY_TICK_SECONDS,
        price_floor: float = config.PRICE_FLOOR,
    ):
        self.bot = bot
        self.registry = registry
        self.prices = prices
        self.coin = coin
        self.tick_seconds = tick_seconds
        self.price_floor = price_floor
        self.scheduler = AsyncIOScheduler()

    def start(self):
        self.scheduler.add_job(
            self.run_pass,
            "interval",
            seconds=self.tick_seconds,
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        logging.getLogger("apscheduler.scheduler").addFilter(_skipped_tick_filter)
        logging.getLogger("apscheduler.executors.default").setLevel(logging.WARNING)
        self.scheduler.start()
        logger.info(f"Notifications for {self.coin} scheduled every {self.tick_seconds}s")

    def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    async def run_pass(self):
        for chat_id, setting in self.registry.snapshot():
            if not setting.enabled:
                continue

            # /stop мог прийти после снимка
            current = self.registry.get(chat_id)
            if current is None or not current.enabled:
                continue

            try:
                quote = await self.prices.get_price(self.coin)
            except RateLimitedError as e:
                logger.info(f"Rate limited fetching {self.coin} for chat {chat_id}: {e}")
                continue
            except PriceSourceError as e:
                logger.warning(f"Failed to get {self.coin} price for chat {chat_id}: {e}")
                continue

            if quote.price < self.price_floor:
                logger.warning(f"Skipping suspicious {self.coin} price ${quote.price:.2f} for chat {chat_id}")
                continue

            await self.send(chat_id, format_update(quote, current.interval))
            # next chat waits for this one's interval
            await asyncio.sleep(current.interval.total_seconds())

    async def send(self, chat_id: int, text: str) -> bool:
        try:
            await self.bot.send_message(chat_id, text)
            return True
        except TelegramAPIError as e:
            logger.error(f"Failed to send update to chat {chat_id}: {e}")
            return False
