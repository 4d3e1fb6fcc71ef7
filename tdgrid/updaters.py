"""
Temporal-Difference Target Strategies

The agent applies the same TD(0) update for every algorithm:
    
    Q(s, a) <- Q(s, a) + α * (r + γ * target - Q(s, a))

and only the bootstrap target differs:
    
    - Q-learning (off-policy): target = max_a' Q(s', a')
    - SARSA (on-policy):       target = Q(s', a') for the next action a'
                               actually selected, or 0 when no next action
                               is given (s' is treated as terminal)
"""

from __future__ import annotations

from typing import Hashable, Optional, Sequence, TYPE_CHECKING

from tdgrid.config import QLEARNING, SARSA
from tdgrid.exceptions import ConfigurationError

if TYPE_CHECKING:
    from tdgrid.value_store import ValueStore


class QLearningTarget:
    """Off-policy target: the greedy estimate at the next state."""
    
    name = QLEARNING
    on_policy = False
    
    def bootstrap(
        self,
        store: "ValueStore",
        next_state: Sequence[int],
        next_action: Optional[Hashable] = None
    ) -> float:
        # next_action is irrelevant off-policy
        return store.max_value(next_state)


class SarsaTarget:
    """On-policy target: the estimate of the next action actually taken."""
    
    name = SARSA
    on_policy = True
    
    def bootstrap(
        self,
        store: "ValueStore",
        next_state: Sequence[int],
        next_action: Optional[Hashable] = None
    ) -> float:
        if next_action is None:
            return 0.0
        return store.get(next_state, next_action)


_STRATEGIES = {
    QLEARNING: QLearningTarget,
    SARSA: SarsaTarget,
}


def make_target_strategy(algorithm: str):
    """
    Create the target strategy for an algorithm identifier.
    
    Args:
        algorithm: "qlearning" or "sarsa".
    
    Returns:
        A QLearningTarget or SarsaTarget instance.
    
    Raises:
        ConfigurationError: If the algorithm is not recognized.
    """
    try:
        return _STRATEGIES[algorithm]()
    except KeyError:
        raise ConfigurationError(
            f"Invalid algorithm '{algorithm}'. Must be one of: {sorted(_STRATEGIES)}"
        ) from None


def td_update(old_q: float, reward: float, target: float, alpha: float, gamma: float) -> float:
    """
    Apply one TD(0) correction.
    
    Args:
        old_q: Current estimate Q(s, a).
        reward: Observed reward r.
        target: Bootstrap value from the next state.
        alpha: Learning rate.
        gamma: Discount factor.
    
    Returns:
        old_q + alpha * (reward + gamma * target - old_q)
    """
    delta = reward + gamma * target - old_q
    return old_q + alpha * delta
