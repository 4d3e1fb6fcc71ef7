"""
Unit Tests for Events Module

Tests ordered, fail-fast observer dispatch of EventBus.
"""

import pytest

from tdgrid.events import EPISODE_END, EVENT_KINDS, REWARD, STEP, EventBus


@pytest.fixture
def bus():
    """Create an empty event bus."""
    return EventBus()


class TestEventBus:
    """Tests for EventBus."""
    
    def test_kinds(self):
        """Test the three supported event kinds."""
        assert EVENT_KINDS == ("reward", "step", "episode_end")
    
    def test_emit_without_observers(self, bus):
        """Test emitting with no observers is a no-op."""
        bus.emit(REWARD, 1.0, (0, 0), "up", (0, 1))
    
    def test_registration_order(self, bus):
        """Test observers are called in registration order."""
        calls = []
        for name in ["a", "b", "c"]:
            bus.subscribe(STEP, lambda pos, name=name: calls.append((name, pos)))
        bus.emit(STEP, (1, 2))
        assert calls == [("a", (1, 2)), ("b", (1, 2)), ("c", (1, 2))]
    
    def test_kinds_are_independent(self, bus):
        """Test observers only see their own kind."""
        rewards, ends = [], []
        bus.subscribe(REWARD, lambda *payload: rewards.append(payload))
        bus.subscribe(EPISODE_END, ends.append)
        bus.emit(EPISODE_END, 3)
        assert rewards == []
        assert ends == [3]
    
    def test_same_observer_twice(self, bus):
        """Test an observer registered twice is called twice."""
        calls = []
        bus.subscribe(EPISODE_END, calls.append)
        bus.subscribe(EPISODE_END, calls.append)
        bus.emit(EPISODE_END, 1)
        assert calls == [1, 1]
    
    def test_fail_fast(self, bus):
        """Test an observer exception stops delivery and propagates."""
        calls = []
        
        def failing(n):
            raise KeyError("boom")
        
        bus.subscribe(EPISODE_END, calls.append)
        bus.subscribe(EPISODE_END, failing)
        bus.subscribe(EPISODE_END, lambda n: calls.append(-n))
        
        with pytest.raises(KeyError):
            bus.emit(EPISODE_END, 2)
        assert calls == [2]
    
    def test_delivery_resumes_on_next_occurrence(self, bus):
        """Test a failed occurrence does not unsubscribe anyone."""
        calls = []
        fail = [True]
        
        def sometimes(n):
            if fail[0]:
                raise RuntimeError("first time")
        
        bus.subscribe(EPISODE_END, sometimes)
        bus.subscribe(EPISODE_END, calls.append)
        with pytest.raises(RuntimeError):
            bus.emit(EPISODE_END, 1)
        fail[0] = False
        bus.emit(EPISODE_END, 2)
        assert calls == [2]
    
    def test_unknown_kind(self, bus):
        """Test error on an unknown event kind."""
        with pytest.raises(ValueError, match="Unknown event kind"):
            bus.subscribe("done", print)
        with pytest.raises(ValueError, match="Unknown event kind"):
            bus.emit("done")
    
    def test_non_callable_observer(self, bus):
        """Test error when registering something that cannot be called."""
        with pytest.raises(TypeError, match="callable"):
            bus.subscribe(REWARD, 42)
    
    def test_observers_snapshot(self, bus):
        """Test observers returns an immutable copy."""
        bus.subscribe(STEP, print)
        observers = bus.observers(STEP)
        assert observers == (print,)
        assert bus.observers(REWARD) == ()
