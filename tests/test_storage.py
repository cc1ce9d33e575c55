from datetime import timedelta

import pytest

from coin_price_bot.models import NotificationSetting
from coin_price_bot.storage import NotificationRegistry

DEFAULT = timedelta(minutes=2)


@pytest.fixture
def registry():
    return NotificationRegistry(default_interval=DEFAULT)


def test_enable_creates_with_default_interval(registry):
    setting = registry.enable(1)

    assert setting.enabled is True
    assert setting.interval == DEFAULT
    assert registry.get(1) == setting


def test_set_interval_does_not_enable(registry):
    setting = registry.set_interval(1, timedelta(minutes=5))

    assert setting.enabled is False
    assert registry.get(1).interval == timedelta(minutes=5)


def test_interval_survives_toggles(registry):
    registry.enable(1)
    registry.disable(1)
    registry.set_interval(1, timedelta(minutes=10))
    setting = registry.enable(1)

    assert setting.enabled is True
    assert setting.interval == timedelta(minutes=10)


def test_set_interval_keeps_enabled_flag(registry):
    registry.enable(1)
    setting = registry.set_interval(1, timedelta(seconds=45))

    assert setting.enabled is True


def test_disable_unknown_chat(registry):
    assert registry.disable(99) is False
    assert registry.get(99) is None


def test_disable_keeps_record(registry):
    registry.enable(1)

    assert registry.disable(1) is True
    assert registry.get(1).enabled is False
    assert [chat_id for chat_id, _ in registry.snapshot()] == [1]


def test_snapshot_is_a_copy(registry):
    registry.enable(1)
    snapshot = registry.snapshot()

    registry.enable(2)
    registry.disable(1)

    assert snapshot == [(1, NotificationSetting(enabled=True, interval=DEFAULT))]
    assert len(registry.snapshot()) == 2
