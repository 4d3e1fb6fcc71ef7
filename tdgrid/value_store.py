"""
Value Store Module

This module provides the action-value table of the agent.

States are integer grid coordinates (x, y). Each coordinate pair is encoded
into a single row-major state index, and the table is a dense numpy array
of shape (n_states, n_actions) where Q[s, a] is the current estimate for
taking action a in state s.

Entries are lazily materialized: an entry that has never been read or
written reads as 0.0, and the first access marks it as present so that
size and iteration queries see it. Entries are never removed.
"""

from __future__ import annotations

import operator
from typing import Dict, Hashable, Iterator, NamedTuple, Sequence, Tuple

import numpy as np

from tdgrid.exceptions import InvalidActionError


class GridPosition(NamedTuple):
    """An immutable (x, y) grid coordinate."""
    x: int
    y: int


def as_position(state: Sequence[int]) -> GridPosition:
    """
    Copy a caller-supplied (x, y) pair into a GridPosition.
    
    Args:
        state: Any two-element sequence of integers.
    
    Returns:
        A new GridPosition holding the same coordinates.
    
    Raises:
        ValueError: If the state does not have exactly two integer coordinates.
    """
    try:
        x, y = state
    except (TypeError, ValueError):
        raise ValueError(f"Invalid state {state!r}. Expected an (x, y) pair") from None
    try:
        return GridPosition(operator.index(x), operator.index(y))
    except TypeError:
        raise ValueError(
            f"Invalid state {state!r}. Coordinates must be integers"
        ) from None


def encode_state(x: int, y: int, width: int) -> int:
    """
    Encode a grid coordinate into a row-major state index.
    
    The encoding is injective over 0 <= x < width, y >= 0.
    
    Args:
        x: Column coordinate.
        y: Row coordinate.
        width: Grid width.
    
    Returns:
        State index y * width + x.
    
    Example:
        >>> encode_state(1, 0, width=3)
        1
        >>> encode_state(0, 1, width=3)
        3
    """
    return y * width + x


class ValueStore:
    """
    Dense, lazily materialized action-value table for a 2D grid.
    
    Attributes:
        width: Grid width.
        height: Grid height.
        actions: Ordered tuple of action identifiers.
        n_states: Number of grid cells (width * height).
        n_actions: Number of actions.
    
    Example:
        >>> store = ValueStore(3, 3, ["up", "down", "left", "right"])
        >>> store.get((0, 0), "right")
        0.0
        >>> store.set((0, 0), "right", 0.5)
        >>> len(store)
        1
    """
    
    def __init__(self, width: int, height: int, actions: Sequence[Hashable]) -> None:
        self.width: int = width
        self.height: int = height
        self.actions: Tuple[Hashable, ...] = tuple(actions)
        self.n_states: int = width * height
        self.n_actions: int = len(self.actions)
        self._action_index: Dict[Hashable, int] = {
            a: i for i, a in enumerate(self.actions)
        }
        
        self._values: np.ndarray = np.zeros((self.n_states, self.n_actions), dtype=np.float64)
        self._present: np.ndarray = np.zeros((self.n_states, self.n_actions), dtype=bool)
    
    def state_index(self, state: Sequence[int]) -> int:
        """
        Return the encoded index of a state.
        
        Raises:
            ValueError: If the state is outside the grid.
        """
        x, y = as_position(state)
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise ValueError(
                f"Invalid state ({x}, {y}). Must be in "
                f"[0, {self.width - 1}] x [0, {self.height - 1}]"
            )
        return encode_state(x, y, self.width)
    
    def action_index(self, action: Hashable) -> int:
        """
        Return the position of an action in the configured action order.
        
        Raises:
            InvalidActionError: If the action is not configured.
        """
        try:
            return self._action_index[action]
        except (KeyError, TypeError):
            raise InvalidActionError(action, self.actions) from None
    
    def position(self, index: int) -> GridPosition:
        """Decode a state index back into a GridPosition."""
        y, x = divmod(index, self.width)
        return GridPosition(x, y)
    
    def get(self, state: Sequence[int], action: Hashable) -> float:
        """
        Return the estimate for (state, action), materializing it if unset.
        
        Args:
            state: (x, y) grid coordinate.
            action: Configured action identifier.
        
        Returns:
            The stored value, or 0.0 if the pair has never been written.
        """
        s = self.state_index(state)
        a = self.action_index(action)
        self._present[s, a] = True
        return float(self._values[s, a])
    
    def set(self, state: Sequence[int], action: Hashable, value: float) -> None:
        """Overwrite the estimate for (state, action)."""
        s = self.state_index(state)
        a = self.action_index(action)
        self._values[s, a] = value
        self._present[s, a] = True
    
    def row(self, state: Sequence[int]) -> np.ndarray:
        """
        Return the estimates of every action at a state.
        
        All entries of the row are materialized.
        
        Args:
            state: (x, y) grid coordinate.
        
        Returns:
            Array of shape (n_actions,), in action order. A copy.
        """
        s = self.state_index(state)
        self._present[s] = True
        return self._values[s].copy()
    
    def max_value(self, state: Sequence[int]) -> float:
        """Return the largest estimate at a state over all actions."""
        return float(np.max(self.row(state)))
    
    def items(self) -> Iterator[Tuple[Tuple[GridPosition, Hashable], float]]:
        """
        Iterate over materialized entries in (state index, action) order.
        
        Yields:
            ((position, action), value) pairs.
        """
        for s, a in zip(*np.nonzero(self._present)):
            yield (self.position(int(s)), self.actions[a]), float(self._values[s, a])
    
    def as_array(self) -> np.ndarray:
        """
        Return a copy of the full table.
        
        Returns:
            Array of shape (height, width, n_actions) where entry [y, x, a]
            is the estimate of action a at (x, y).
        """
        return self._values.reshape(self.height, self.width, self.n_actions).copy()
    
    def load_array(self, values: np.ndarray) -> None:
        """
        Overwrite the full table, e.g. from a snapshot taken with as_array().
        
        Every entry becomes materialized.
        
        Raises:
            ValueError: If the array shape doesn't match the grid.
        """
        values = np.asarray(values, dtype=np.float64)
        expected = (self.height, self.width, self.n_actions)
        if values.shape != expected:
            raise ValueError(
                f"Value array shape {values.shape} doesn't match expected {expected}"
            )
        self._values[:] = values.reshape(self.n_states, self.n_actions)
        self._present[:] = True
    
    def __len__(self) -> int:
        return int(np.count_nonzero(self._present))
    
    def __contains__(self, key) -> bool:
        try:
            state, action = key
            s = self.state_index(state)
            a = self.action_index(action)
        except (TypeError, ValueError):
            return False
        return bool(self._present[s, a])
    
    def __repr__(self) -> str:
        return (
            f"ValueStore(width={self.width}, height={self.height}, "
            f"n_actions={self.n_actions}, entries={len(self)})"
        )
