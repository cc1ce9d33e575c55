import threading
from dataclasses import replace
from datetime import timedelta

from coin_price_bot import config
from coin_price_bot.models import NotificationSetting


class NotificationRegistry:
    def __init__(self, default_interval: timedelta = config.DEFAULT_INTERVAL):
        self.default_interval = default_interval
        self._settings: dict[int, NotificationSetting] = {}
        self._lock = threading.Lock()

    def enable(self, chat_id: int) -> NotificationSetting:
        with self._lock:
            current = self._settings.get(chat_id)
            if current is None:
                current = NotificationSetting(enabled=True, interval=self.default_interval)
            else:
                current = replace(current, enabled=True)
            self._settings[chat_id] = current
            return current

    def disable(self, chat_id: int) -> bool:
        """Return False when the chat never had notifications configured."""
        with self._lock:
            current = self._settings.get(chat_id)
            if current is None:
                return False
            self._settings[chat_id] = replace(current, enabled=False)
            return True

    def set_interval(self, chat_id: int, interval: timedelta) -> NotificationSetting:
        with self._lock:
            current = self._settings.get(chat_id)
            if current is None:
                current = NotificationSetting(enabled=False, interval=interval)
            else:
                current = replace(current, interval=interval)
            self._settings[chat_id] = current
            return current

    def get(self, chat_id: int) -> NotificationSetting | None:
        with self._lock:
            return self._settings.get(chat_id)

    def snapshot(self) -> list[tuple[int, NotificationSetting]]:
        with self._lock:
            return list(self._settings.items())
