"""
Agent Configuration

Defines the static configuration of a TDAgent: grid dimensions, the action
set, the learning hyperparameters and the TD algorithm variant.

The configuration is validated once, at construction, and never changes
afterwards. Hyperparameters are expected in [0, 1] but are not enforced;
out-of-range values only produce a warning.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, fields
from typing import Any, Hashable, Mapping, Tuple

from tdgrid.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

QLEARNING = "qlearning"
SARSA = "sarsa"

VALID_ALGORITHMS = frozenset([QLEARNING, SARSA])

# Keys accepted by AgentConfig.from_dict in addition to the field names
_KEY_ALIASES = {
    "gridWidth": "grid_width",
    "gridHeight": "grid_height",
}


@dataclass(frozen=True)
class AgentConfig:
    """Configuration for a tabular TD agent.
    
    Attributes:
        grid_width: Number of columns (x coordinates) of the grid.
        grid_height: Number of rows (y coordinates) of the grid.
        actions: Non-empty ordered tuple of distinct, hashable action identifiers.
        alpha: Learning rate.
        gamma: Discount factor.
        epsilon: Exploration rate of the epsilon-greedy policy.
        algorithm: Either "qlearning" (off-policy) or "sarsa" (on-policy).
    """
    grid_width: int
    grid_height: int
    actions: Tuple[Hashable, ...]
    alpha: float = 0.1
    gamma: float = 0.9
    epsilon: float = 0.2
    algorithm: str = QLEARNING
    
    def __post_init__(self):
        """Validate configuration after initialization."""
        for name in ("grid_width", "grid_height"):
            value = getattr(self, name)
            if isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            try:
                value = operator.index(value)
            except TypeError:
                raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
            object.__setattr__(self, name, value)
        
        try:
            actions = tuple(self.actions)
        except TypeError:
            raise ConfigurationError(
                f"actions must be an ordered collection, got {self.actions!r}"
            ) from None
        if not actions:
            raise ConfigurationError("actions cannot be empty")
        if any(a is None for a in actions):
            # None is reserved for "no next action" in SARSA updates
            raise ConfigurationError("actions cannot contain None")
        try:
            distinct = len(set(actions))
        except TypeError:
            raise ConfigurationError("actions must be hashable identifiers") from None
        if distinct != len(actions):
            raise ConfigurationError(f"actions must be distinct, got {list(actions)}")
        object.__setattr__(self, "actions", actions)
        
        if self.algorithm not in VALID_ALGORITHMS:
            raise ConfigurationError(
                f"Invalid algorithm '{self.algorithm}'. "
                f"Must be one of: {sorted(VALID_ALGORITHMS)}"
            )
        
        for name in ("alpha", "gamma", "epsilon"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                logger.warning("%s=%r is outside [0, 1]", name, value)
    
    @property
    def n_actions(self) -> int:
        """Number of configured actions."""
        return len(self.actions)
    
    @property
    def n_states(self) -> int:
        """Number of grid cells."""
        return self.grid_width * self.grid_height
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AgentConfig":
        """
        Build a configuration from a plain mapping.
        
        Accepts the field names as well as the camelCase spellings
        ``gridWidth`` and ``gridHeight``.
        
        Args:
            data: Mapping of option name to value.
        
        Returns:
            A validated AgentConfig.
        
        Raises:
            ConfigurationError: If a key is unknown, a required key is missing,
                or a value is invalid.
        
        Example:
            >>> cfg = AgentConfig.from_dict(
            ...     {"gridWidth": 3, "gridHeight": 3, "actions": ["up", "down"]}
            ... )
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown configuration option '{key}'")
            kwargs[name] = value
        
        missing = [
            name for name in ("grid_width", "grid_height", "actions")
            if name not in kwargs
        ]
        if missing:
            raise ConfigurationError(f"Missing configuration options: {missing}")
        
        return cls(**kwargs)
