import math

import requests

from coin_price_bot.errors import MalformedError, NotFoundError, UnavailableError
from coin_price_bot.parsers import HEADERS, check_response

SOURCE = "coingecko"
SIMPLE_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"


def parse_coingecko(coin_id: str, timeout: float) -> float:
    try:
        resp = requests.get(
            SIMPLE_PRICE_URL,
            params={"ids": coin_id, "vs_currencies": "usd"},
            headers=HEADERS,
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise UnavailableError(f"coingecko request failed: {e}", SOURCE) from e

    check_response(resp, SOURCE)

    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedError(f"coingecko returned invalid JSON: {e}", SOURCE) from e

    if not isinstance(data, dict):
        raise MalformedError("coingecko payload is not an object", SOURCE)

    # неизвестный id -> пустой объект
    coin = data.get(coin_id)
    if not coin:
        raise NotFoundError(f"price not found for {coin_id}", SOURCE)

    try:
        price = float(coin["usd"])
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedError(f"unexpected coingecko payload for {coin_id}: {e}", SOURCE) from e

    if not math.isfinite(price) or price < 0:
        raise MalformedError(f"invalid coingecko price for {coin_id}: {price}", SOURCE)
    return price
