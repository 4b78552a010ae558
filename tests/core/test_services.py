"""
test_services.py
----------------
Event bus and config loader tests.
"""

import json

import pytest
from unittest.mock import MagicMock

from birddash.core.services import config_manager
from birddash.core.services.config_manager import load_config
from birddash.core.services.event_manager import FloatingTextEvent, ScreenShakeEvent


# ===========================================================
# Event Manager
# ===========================================================

class TestEventManager:

    def test_dispatch_reaches_subscribers_of_that_type_only(self, fresh_events):
        text_cb, shake_cb = MagicMock(), MagicMock()
        fresh_events.subscribe(FloatingTextEvent, text_cb)
        fresh_events.subscribe(ScreenShakeEvent, shake_cb)

        event = FloatingTextEvent("+20", (0, 0))
        fresh_events.dispatch(event)

        text_cb.assert_called_once_with(event)
        shake_cb.assert_not_called()

    def test_duplicate_subscription_is_ignored(self, fresh_events):
        cb = MagicMock()
        fresh_events.subscribe(ScreenShakeEvent, cb)
        fresh_events.subscribe(ScreenShakeEvent, cb)
        assert fresh_events.get_subscriber_count(ScreenShakeEvent) == 1

    def test_failing_callback_does_not_block_others(self, fresh_events):
        broken = MagicMock(side_effect=RuntimeError("boom"))
        healthy = MagicMock()
        fresh_events.subscribe(ScreenShakeEvent, broken)
        fresh_events.subscribe(ScreenShakeEvent, healthy)

        fresh_events.dispatch(ScreenShakeEvent())
        healthy.assert_called_once()

    def test_unsubscribe_all(self, fresh_events):
        cb = MagicMock()
        fresh_events.subscribe(ScreenShakeEvent, cb)
        fresh_events.subscribe(FloatingTextEvent, cb)
        fresh_events.unsubscribe_all(cb)
        assert fresh_events.get_subscriber_count() == 0

    def test_events_are_immutable(self):
        event = ScreenShakeEvent(4.0, 0.1)
        with pytest.raises(Exception):
            event.intensity = 10.0


# ===========================================================
# Config Manager
# ===========================================================

class TestConfigManager:

    def test_bundled_tables_are_indexed(self):
        files = config_manager.get_indexed_files()
        for name in ("collectibles.json", "power_ups.json", "obstacles.json", "hud.yaml"):
            assert name in files

    def test_notes_are_dropped(self):
        data = load_config("obstacles.json")
        assert "_notes" not in data

    def test_extension_is_optional(self):
        assert load_config("power_ups") == load_config("power_ups.json")

    def test_defaults_merge_recursively(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"a": {"x": 2}, "_notes": "ignored"}))

        merged = load_config(str(path), default_dict={"a": {"x": 1, "y": 1}, "b": 3})
        assert merged == {"a": {"x": 2, "y": 1}, "b": 3}

    def test_missing_file_returns_defaults(self):
        assert load_config("does_not_exist.json", default_dict={"k": 1}) == {"k": 1}

    def test_missing_file_strict_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.json", strict=True)

    def test_yaml_layout_loads(self):
        layout = load_config("hud.yaml")
        assert isinstance(layout["elements"], list)
        assert layout["floating_text"]["lifetime_ms"] == 900
