import logging

from aiogram import Router, types
from aiogram.filters import Command, CommandObject

from coin_price_bot import config
from coin_price_bot.errors import NotFoundError, PriceSourceError, RateLimitedError
from coin_price_bot.keyboards import POPULAR_COLLECTIONS, interval_kb, popular_kb
from coin_price_bot.prices import PriceService
from coin_price_bot.sources import resolve_coin_id, ticker_for
from coin_price_bot.storage import NotificationRegistry
from coin_price_bot.utils import (
    INTERVAL_HELP,
    format_collection_name,
    format_interval,
    normalize_collection_symbol,
    parse_interval,
)

logger = logging.getLogger(__name__)

router = Router()

COIN_EMOJI = {"bitcoin": "💰", "zcash": "🛡️"}

RATE_LIMITED_TEXT = "⏳ Слишком много запросов к API, попробуй через минуту"
UNAVAILABLE_TEXT = "❌ Не удалось получить цену, попробуй позже"


def start_text() -> str:
    ticker = ticker_for(config.TRACKED_COIN)
    return (
        "👋 Crypto & NFT Tracker Bot\n\n"
        "💰 Криптовалюты:\n"
        "/btc - цена Bitcoin\n"
        "/zec - цена Zcash\n"
        "/price <монета> - цена любой монеты\n"
        f"/notify - уведомления {ticker} (интервал: {format_interval(config.DEFAULT_INTERVAL)})\n"
        "/interval <время> - изменить интервал\n"
        "/stop - остановить уведомления\n\n"
        "🎨 NFT коллекции:\n"
        "/nft <символ> - цена любой коллекции\n"
        "/popular - популярные коллекции"
    )


async def price_text(prices: PriceService, symbol: str) -> str:
    coin_id = resolve_coin_id(symbol)
    try:
        quote = await prices.get_price(coin_id)
    except NotFoundError:
        return f"❌ Монета '{symbol}' не найдена"
    except RateLimitedError as e:
        logger.info(f"Rate limited on /price {coin_id}: {e}")
        return RATE_LIMITED_TEXT
    except PriceSourceError as e:
        logger.warning(f"Price lookup failed for {coin_id}: {e}")
        return UNAVAILABLE_TEXT

    emoji = COIN_EMOJI.get(coin_id, "💰")
    return f"{emoji} {coin_id.title()} ({ticker_for(coin_id)}): ${quote.price:,.2f}"


async def nft_text(prices: PriceService, symbol: str) -> str:
    symbol = normalize_collection_symbol(symbol)
    try:
        stats = await prices.get_collection_stats(symbol)
    except NotFoundError:
        return f"❌ Коллекция '{symbol}' не найдена"
    except RateLimitedError as e:
        logger.info(f"Rate limited on /nft {symbol}: {e}")
        return RATE_LIMITED_TEXT
    except PriceSourceError as e:
        logger.warning(f"Collection lookup failed for {symbol}: {e}")
        return "❌ Не удалось получить данные коллекции, попробуй позже"

    return (
        f"🎨 {format_collection_name(symbol)}\n\n"
        f"🏷️ Floor Price: {stats.floor_price_sol:.2f} SOL\n"
        f"📊 Listed: {stats.listed_count} NFTs"
    )


def apply_interval(registry: NotificationRegistry, chat_id: int, raw: str) -> str:
    try:
        interval = parse_interval(raw)
    except ValueError as e:
        return f"❌ {e}"

    if interval < config.MIN_INTERVAL:
        return f"❌ Минимальный интервал: {format_interval(config.MIN_INTERVAL)}"
    if interval > config.MAX_INTERVAL:
        return f"❌ Максимальный интервал: {format_interval(config.MAX_INTERVAL)}"

    setting = registry.set_interval(chat_id, interval)
    text = f"✅ Интервал уведомлений установлен: {format_interval(interval)}"
    if not setting.enabled:
        text += "\nИспользуйте /notify для включения"
    return text


@router.message(Command("start"))
async def start(m: types.Message):
    await m.answer(start_text())


@router.message(Command("popular"))
async def popular(m: types.Message):
    lines = "\n".join(f"• {s} - {format_collection_name(s)}" for s in POPULAR_COLLECTIONS)
    await m.answer(f"🌟 Популярные коллекции:\n\n{lines}", reply_markup=popular_kb())


@router.message(Command("btc"))
async def btc(m: types.Message, prices: PriceService):
    await m.answer(await price_text(prices, "bitcoin"))


@router.message(Command("zec"))
async def zec(m: types.Message, prices: PriceService):
    await m.answer(await price_text(prices, "zcash"))


@router.message(Command("price"))
async def price(m: types.Message, command: CommandObject, prices: PriceService):
    if not command.args or not command.args.strip():
        await m.answer("❌ Укажи монету\nПример: /price ethereum")
        return
    await m.answer(await price_text(prices, command.args.strip()))


@router.message(Command("notify", "notify_zec"))
async def notify(m: types.Message, registry: NotificationRegistry):
    setting = registry.enable(m.chat.id)
    ticker = ticker_for(config.TRACKED_COIN)
    await m.answer(f"✅ Уведомления {ticker} включены!\nИнтервал: {format_interval(setting.interval)}")


@router.message(Command("stop"))
async def stop(m: types.Message, registry: NotificationRegistry):
    ticker = ticker_for(config.TRACKED_COIN)
    if registry.disable(m.chat.id):
        await m.answer(f"⏹️ Уведомления {ticker} остановлены")
    else:
        await m.answer(f"ℹ️ Уведомления {ticker} не были включены")


@router.message(Command("interval"))
async def interval(m: types.Message, command: CommandObject, registry: NotificationRegistry):
    if not command.args or not command.args.strip():
        setting = registry.get(m.chat.id)
        current = setting.interval if setting else registry.default_interval
        await m.answer(
            f"Текущий интервал: {format_interval(current)}\nВыбери или укажи свой ({INTERVAL_HELP}):",
            reply_markup=interval_kb(),
        )
        return
    await m.answer(apply_interval(registry, m.chat.id, command.args))


@router.message(Command("nft"))
async def nft(m: types.Message, command: CommandObject, prices: PriceService):
    if not command.args or not command.args.strip():
        await m.answer("❌ Укажи символ коллекции\nПример: /nft mad_lads")
        return
    await m.answer(await nft_text(prices, command.args))


@router.callback_query(lambda c: c.data and c.data.startswith("interval:"))
async def set_interval_cb(c: types.CallbackQuery, registry: NotificationRegistry):
    minutes = c.data.split(":", 1)[1]
    await c.message.edit_text(apply_interval(registry, c.message.chat.id, minutes))
    await c.answer()


@router.callback_query(lambda c: c.data and c.data.startswith("nft:"))
async def nft_cb(c: types.CallbackQuery, prices: PriceService):
    symbol = c.data.split(":", 1)[1]
    await c.message.answer(await nft_text(prices, symbol))
    await c.answer()


@router.message()
async def fallback(m: types.Message):
    await m.answer("Напиши /start для списка команд 🚀")
