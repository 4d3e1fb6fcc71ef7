"""
Event dispatch for agent observers.

Three event kinds are supported:
    
    ============  ============================  ====================================
    kind          fired by                      payload
    ============  ============================  ====================================
    reward        every update                  (reward, state, action, next_state)
    step          every on-policy update        (position,)
    episode_end   every episode reset           (episode_count,)
    ============  ============================  ====================================

Observers are called synchronously in registration order. If an observer
raises, the exception propagates to the caller and the remaining observers
for that occurrence are not called. Subscriptions cannot be removed.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Tuple

REWARD = "reward"
STEP = "step"
EPISODE_END = "episode_end"

EVENT_KINDS = (REWARD, STEP, EPISODE_END)

Observer = Callable[..., object]


class EventBus:
    """Append-only, ordered observer lists keyed by event kind."""
    
    def __init__(self) -> None:
        self._observers: Dict[str, List[Observer]] = {kind: [] for kind in EVENT_KINDS}
    
    def _observer_list(self, kind: str) -> List[Observer]:
        try:
            return self._observers[kind]
        except KeyError:
            raise ValueError(
                f"Unknown event kind '{kind}'. Must be one of: {list(EVENT_KINDS)}"
            ) from None
    
    def subscribe(self, kind: str, observer: Observer) -> None:
        """
        Register an observer for an event kind.
        
        Args:
            kind: One of "reward", "step", "episode_end".
            observer: Callable invoked with the event payload.
        
        Raises:
            ValueError: If the kind is unknown.
            TypeError: If the observer is not callable.
        """
        if not callable(observer):
            raise TypeError(f"Observer must be callable, got {observer!r}")
        self._observer_list(kind).append(observer)
    
    def emit(self, kind: str, *payload) -> None:
        """Call every observer of a kind with the payload, in order."""
        for observer in tuple(self._observer_list(kind)):
            observer(*payload)
    
    def observers(self, kind: str) -> Tuple[Observer, ...]:
        """Return the registered observers of a kind."""
        return tuple(self._observer_list(kind))
