"""Tests for the command channel."""

from __future__ import annotations

import pytest

from archiver import Outcome
from commands import CommandChannel
from tests.conftest import FakeMessagingPage


@pytest.fixture
def make_channel(config, sleep):
    def _make(page, **kwargs):
        return CommandChannel(page, config=config, sleep=sleep, **kwargs)
    return _make


class TestCommandChannel:
    def test_start_reports_result(self, make_channel):
        events = []
        finished = []
        page = FakeMessagingPage(n_items=7, loaded=3, batch=2, growth_steps=2)
        channel = make_channel(page, on_progress=events.append, on_finished=finished.append)

        resp = channel.handle({"action": "start", "delay": 0})

        assert resp == {"success": True, "count": 7, "message": "7 messages archived"}
        assert events == list(range(1, 8))
        assert finished == [channel.last_result]
        assert not channel.running

    def test_start_accepts_message_delay_key(self, make_channel, sleep):
        channel = make_channel(FakeMessagingPage(n_items=1))
        channel.handle({"action": "start", "messageDelay": 200})
        assert sum(sleep.calls) == pytest.approx(0.2)

    def test_start_error_response(self, make_channel):
        channel = make_channel(FakeMessagingPage(n_items=2, action_bar=False))
        resp = channel.handle({"action": "start", "delay": 0})
        assert resp == {"success": False, "error": "Error: Archive button not found"}

    def test_start_rejects_invalid_delay(self, make_channel):
        channel = make_channel(FakeMessagingPage(n_items=2))
        resp = channel.handle({"action": "start", "delay": "soon"})
        assert resp["success"] is False
        assert "soon" in resp["error"]

    def test_start_while_running(self, make_channel):
        channel = make_channel(FakeMessagingPage(n_items=2))
        channel.running = True
        resp = channel.handle({"action": "start", "delay": 0})
        assert resp == {"success": False, "error": "An archive run is already in progress"}

    def test_pause_resume_stop_ack(self, make_channel):
        channel = make_channel(FakeMessagingPage())
        assert channel.handle({"action": "pause"}) == {"success": True}
        assert channel.state.paused
        assert channel.handle({"action": "resume"}) == {"success": True}
        assert not channel.state.paused

        channel.handle({"action": "pause"})
        assert channel.handle({"action": "stop"}) == {"success": True}
        assert channel.state.stopped
        assert not channel.state.paused

    def test_toggle_pause(self, make_channel):
        channel = make_channel(FakeMessagingPage())
        channel.toggle_pause()
        assert channel.state.paused
        channel.toggle_pause()
        assert not channel.state.paused

    def test_stop_during_run(self, make_channel):
        channel = None

        def on_click(n):
            if n == 2:
                channel.handle({"action": "stop"})

        page = FakeMessagingPage(n_items=7, on_click=on_click)
        channel = make_channel(page)
        resp = channel.handle({"action": "start", "delay": 0})
        assert resp == {"success": True, "count": 2, "message": "Processing stopped by user"}

    def test_set_language(self, make_channel):
        channel = make_channel(FakeMessagingPage(n_items=3))
        assert channel.handle({"action": "setLanguage", "language": "es"}) == {"success": True}

        resp = channel.handle({"action": "start", "delay": 0})
        assert resp["message"] == "3 mensajes archivados"
        # locale survives the run reset
        assert channel.state.locale == "es"

    def test_set_unsupported_language_falls_back_to_default(self, make_channel):
        channel = make_channel(FakeMessagingPage(n_items=2))
        assert channel.handle({"action": "setLanguage", "language": "fr"}) == {"success": True}
        assert channel.state.locale == "fr"

        resp = channel.handle({"action": "start", "delay": 0})
        assert resp["message"] == "2 messages archived"
        assert channel.state.locale == "fr"

    def test_unknown_action(self, make_channel):
        channel = make_channel(FakeMessagingPage())
        assert channel.handle({"action": "explode"}) == {"success": False, "error": "Unknown action: explode"}

    def test_finished_hook_errors_do_not_break_response(self, make_channel):
        def boom(result):
            raise RuntimeError("notifier down")

        channel = make_channel(FakeMessagingPage(n_items=1), on_finished=boom)
        assert channel.handle({"action": "start", "delay": 0})["success"] is True

    def test_lost_browser_is_error_response(self, make_channel, monkeypatch):
        def lost_browser(el):
            raise ConnectionRefusedError("browser gone")

        finished = []
        page = FakeMessagingPage(n_items=2)
        monkeypatch.setattr(page, "scroll_height", lost_browser)
        channel = make_channel(page, on_finished=finished.append)

        resp = channel.handle({"action": "start", "delay": 0})

        assert resp == {"success": False, "error": "Error: browser gone"}
        assert [r.outcome for r in finished] == [Outcome.ERROR]
        assert not channel.running
