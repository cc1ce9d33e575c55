from coin_price_bot.errors import NotFoundError, RateLimitedError, UnavailableError

USER_AGENT = "Mozilla/5.0 (compatible; coin-price-bot)"
HEADERS = {"User-Agent": USER_AGENT, "Accept": "application/json"}


def _retry_after(resp) -> float | None:
    value = resp.headers.get("Retry-After")
    try:
        return float(value) if value else None
    except ValueError:
        return None


def check_response(resp, source: str, not_found: bool = False) -> None:
    # 429 is always RateLimitedError; unknown keys answer non-2xx where not_found is set
    status = resp.status_code
    if 200 <= status < 300:
        return
    if status == 429:
        raise RateLimitedError(f"{source} rate limit exceeded", source, _retry_after(resp))
    if not_found:
        raise NotFoundError(f"{source} returned HTTP {status}", source)
    raise UnavailableError(f"{source} returned HTTP {status}", source)
