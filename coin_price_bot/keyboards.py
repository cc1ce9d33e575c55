from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from coin_price_bot.utils import format_collection_name

POPULAR_COLLECTIONS = (
    "mad_lads",
    "degods",
    "famous_fox_federation",
    "solana_monkey_business",
)

INTERVAL_PRESETS_MIN = (1, 2, 5, 15, 30, 60)


def popular_kb():
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=format_collection_name(symbol), callback_data=f"nft:{symbol}")]
        for symbol in POPULAR_COLLECTIONS
    ])


def interval_kb():
    buttons = [
        InlineKeyboardButton(text=f"{m} мин", callback_data=f"interval:{m}")
        for m in INTERVAL_PRESETS_MIN
    ]
    # по 3 в ряд
    return InlineKeyboardMarkup(inline_keyboard=[buttons[i:i + 3] for i in range(0, len(buttons), 3)])
