import re
from datetime import datetime, timedelta, timezone

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1, "ms": 0.001}

INTERVAL_HELP = "Примеры: 5 (минут), 30s, 5m, 1h, 1h30m"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_coin_id(symbol: str) -> str:
    return symbol.strip().lower()


def normalize_collection_symbol(symbol: str) -> str:
    return symbol.strip().lower().replace(" ", "_")


def format_collection_name(symbol: str) -> str:
    return symbol.replace("_", " ").title()


def parse_interval(value: str) -> timedelta:
    # bare integer = minutes, otherwise "30s", "5m", "1h30m", "1.5h"
    value = value.strip().lower()
    if value.isascii() and value.isdigit():
        return _to_timedelta(minutes=int(value))

    pos = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()

    if not value or pos != len(value):
        raise ValueError(f"неверный формат интервала. {INTERVAL_HELP}")
    return _to_timedelta(seconds=seconds)


def _to_timedelta(**kwargs) -> timedelta:
    try:
        return timedelta(**kwargs)
    except OverflowError:
        raise ValueError("слишком большой интервал") from None


def format_interval(interval: timedelta) -> str:
    total = int(interval.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)

    parts = []
    if hours:
        parts.append(f"{hours} ч")
    if minutes:
        parts.append(f"{minutes} мин")
    if seconds or not parts:
        parts.append(f"{seconds} сек")
    return " ".join(parts)
