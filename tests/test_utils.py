"""Unit tests for the generic observer list."""

import threading
from unittest.mock import Mock

import pytest

from milight.protocols import TimerListener
from milight.utils import ObserverManager


class TestObserverManager:
    """Test registration and notification."""

    @pytest.mark.unit
    def test_register_is_idempotent(self):
        """Test an observer is only added once."""
        manager = ObserverManager[TimerListener](observer_type_name="timer")
        listener = Mock(spec=TimerListener)

        manager.register(listener)
        manager.register(listener)

        assert len(manager) == 1
        assert listener in manager
        assert manager

    @pytest.mark.unit
    def test_notify_calls_callback(self):
        """Test notify forwards arguments."""
        manager = ObserverManager[TimerListener]()
        listener = Mock(spec=TimerListener)
        manager.register(listener)

        manager.notify("on_timer_finished", "timer")

        listener.on_timer_finished.assert_called_once_with("timer")

    @pytest.mark.unit
    def test_unregister_unknown_warns(self, caplog):
        """Test removing an unknown observer only logs."""
        manager = ObserverManager[TimerListener](observer_type_name="timer")
        manager.unregister(Mock(spec=TimerListener))
        assert "unknown timer observer" in caplog.text

    @pytest.mark.unit
    def test_missing_callback_logged(self, caplog):
        """Test observers without the callback are skipped."""
        manager = ObserverManager[object]()
        manager.register(object())
        manager.notify("on_timer_finished")
        assert "has no method 'on_timer_finished'" in caplog.text

    @pytest.mark.unit
    def test_callback_may_unregister_itself(self):
        """Test the list can change during notification."""
        manager = ObserverManager[TimerListener]()

        class OneShot:
            calls = 0

            def on_timer_finished(self, timer):
                OneShot.calls += 1
                manager.unregister(self)

        manager.register(OneShot())
        manager.notify("on_timer_finished", None)
        manager.notify("on_timer_finished", None)

        assert OneShot.calls == 1
        assert len(manager) == 0

    @pytest.mark.unit
    def test_clear(self):
        """Test clear removes everything."""
        manager = ObserverManager[TimerListener]()
        manager.register(Mock(spec=TimerListener))
        manager.clear()
        assert not manager

    @pytest.mark.unit
    def test_concurrent_registration(self):
        """Test registration from many threads keeps every observer."""
        manager = ObserverManager[TimerListener]()
        listeners = [Mock(spec=TimerListener) for _ in range(50)]
        threads = [threading.Thread(target=manager.register, args=(listener,)) for listener in listeners]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(manager) == 50
