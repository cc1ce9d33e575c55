import math

import requests

from coin_price_bot.errors import MalformedError, UnavailableError
from coin_price_bot.parsers import HEADERS, check_response

SOURCE = "binance"
TICKER_URL = "https://api.binance.com/api/v3/ticker/price"


def parse_binance(pair: str, timeout: float) -> float:
    try:
        resp = requests.get(TICKER_URL, params={"symbol": pair}, headers=HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise UnavailableError(f"binance request failed: {e}", SOURCE) from e

    check_response(resp, SOURCE)

    # {"symbol": "BTCUSDT", "price": "50000.12000000"}
    try:
        price = float(resp.json()["price"])
    except (ValueError, KeyError, TypeError) as e:
        raise MalformedError(f"unexpected binance payload for {pair}: {e}", SOURCE) from e

    if not math.isfinite(price) or price < 0:
        raise MalformedError(f"invalid binance price for {pair}: {price}", SOURCE)
    return price
