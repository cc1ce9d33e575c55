from urllib.parse import quote

import requests

from coin_price_bot.errors import MalformedError, UnavailableError
from coin_price_bot.models import CollectionStats
from coin_price_bot.parsers import HEADERS, check_response
from coin_price_bot.utils import normalize_collection_symbol

SOURCE = "magiceden"
STATS_URL = "https://api-mainnet.magiceden.dev/v2/collections/{symbol}/stats"


def parse_magiceden(symbol: str, timeout: float) -> CollectionStats:
    symbol = normalize_collection_symbol(symbol)
    url = STATS_URL.format(symbol=quote(symbol, safe=""))

    try:
        resp = requests.get(url, headers=HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise UnavailableError(f"magiceden request failed: {e}", SOURCE) from e

    check_response(resp, SOURCE, not_found=True)

    try:
        data = resp.json()
        return CollectionStats(
            symbol=data.get("symbol") or symbol,
            floor_price=int(data.get("floorPrice") or 0),
            listed_count=int(data.get("listedCount") or 0),
            volume_all=float(data.get("volumeAll") or 0),
        )
    except (ValueError, TypeError, AttributeError) as e:
        raise MalformedError(f"unexpected magiceden payload for {symbol}: {e}", SOURCE) from e
