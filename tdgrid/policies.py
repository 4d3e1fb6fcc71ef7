"""
Policy Module

This module provides action selection over a learned ValueStore.

Available policies:
    - EpsilonGreedyPolicy: explores uniformly with probability epsilon,
      otherwise picks uniformly among the actions with the highest estimate

Utility functions:
    - greedy_actions: the set of maximizing actions at a state
    - greedy_policy: convert a value table into a policy array π of shape
      (n_states, n_actions), where π[s, a] is the probability of taking
      action a in state s and each row sums to 1
"""

from __future__ import annotations

from typing import Hashable, List, Optional, Sequence, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from tdgrid.value_store import ValueStore


def greedy_actions(store: "ValueStore", state: Sequence[int]) -> List[Hashable]:
    """
    Return every action whose estimate at a state equals the maximum.
    
    Ties are detected with exact equality. For an unvisited state all
    estimates are 0.0, so every action is returned.
    
    Args:
        store: The value table.
        state: (x, y) grid coordinate.
    
    Returns:
        Maximizing actions, in configured action order.
    """
    values = store.row(state)
    best = np.flatnonzero(values == values.max())
    return [store.actions[i] for i in best]


class EpsilonGreedyPolicy:
    """
    Epsilon-greedy action selection over a ValueStore.
    
    With probability epsilon an action is drawn uniformly from the full
    action set, independent of the stored values. Otherwise one of the
    maximizing actions is drawn uniformly.
    
    Attributes:
        store: The value table consulted for greedy choices.
        epsilon: Exploration rate.
        rng: Random number generator used for every draw.
    
    Example:
        >>> store = ValueStore(3, 3, ["up", "down", "left", "right"])
        >>> policy = EpsilonGreedyPolicy(store, epsilon=0.0, rng=np.random.default_rng(0))
        >>> store.set((0, 0), "right", 1.0)
        >>> policy.choose((0, 0))
        'right'
    """
    
    def __init__(
        self,
        store: "ValueStore",
        epsilon: float,
        rng: Optional[np.random.Generator] = None
    ) -> None:
        self.store = store
        self.epsilon = epsilon
        self.rng: np.random.Generator = rng if rng is not None else np.random.default_rng()
    
    def choose(self, state: Sequence[int]) -> Hashable:
        """
        Choose an action for a state.
        
        Args:
            state: (x, y) grid coordinate.
        
        Returns:
            One of the configured actions.
        """
        actions = self.store.actions
        self.store.state_index(state)
        if self.rng.random() < self.epsilon:
            return actions[self.rng.integers(len(actions))]
        
        best = greedy_actions(self.store, state)
        return best[self.rng.integers(len(best))]


def greedy_policy(store: "ValueStore") -> np.ndarray:
    """
    Build the greedy policy array induced by a value table.
    
    For each state s (row-major index y * width + x), the probability mass
    is split uniformly among the maximizing actions. Unvisited states
    therefore get the uniform policy.
    
    Unlike EpsilonGreedyPolicy, this reads the table without materializing
    entries.
    
    Args:
        store: The value table.
    
    Returns:
        Policy array of shape (n_states, n_actions) where each row sums to 1.
    
    Example:
        >>> pi = greedy_policy(agent.store)
        >>> assert np.allclose(pi.sum(axis=1), 1.0)
    """
    values = store.as_array().reshape(store.n_states, store.n_actions)
    is_best = values == values.max(axis=1, keepdims=True)
    policy = is_best.astype(np.float64)
    policy /= policy.sum(axis=1, keepdims=True)
    return policy
