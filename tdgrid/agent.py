"""
Tabular TD Agent

This module provides TDAgent, a tabular reinforcement-learning agent for a
discrete 2D grid. The agent learns action values with either Q-learning
(off-policy) or SARSA (on-policy), selects actions epsilon-greedily and
keeps per-episode reward statistics.

The environment is owned by the host. A typical loop:
    
    >>> agent = TDAgent(5, 5, ["up", "down", "left", "right"], algorithm="sarsa")
    >>> state = (0, 0)
    >>> action = agent.choose_action(state)
    >>> while not done:
    ...     next_state, reward, done = env_step(state, action)
    ...     next_action = None if done else agent.choose_action(next_state)
    ...     agent.update(state, action, reward, next_state, next_action)
    ...     state, action = next_state, next_action
    >>> agent.reset_episode()
"""

from __future__ import annotations

import logging
from typing import Callable, Hashable, List, Optional, Sequence

import numpy as np

from tdgrid.config import AgentConfig, QLEARNING
from tdgrid.episodes import EpisodeTracker
from tdgrid.events import EPISODE_END, REWARD, STEP, EventBus
from tdgrid.policies import EpsilonGreedyPolicy
from tdgrid.updaters import make_target_strategy, td_update
from tdgrid.value_store import GridPosition, ValueStore, as_position

logger = logging.getLogger(__name__)


class TDAgent:
    """
    A Q-learning / SARSA agent over a grid of integer (x, y) states.
    
    Attributes:
        config: The validated AgentConfig.
        store: The action-value table.
        policy: The epsilon-greedy action selector.
        events: Observer registry for reward, step and episode-end events.
    
    Not thread-safe: a single host loop is expected to drive the agent.
    """
    
    def __init__(
        self,
        grid_width: int,
        grid_height: int,
        actions: Sequence[Hashable],
        alpha: float = 0.1,
        gamma: float = 0.9,
        epsilon: float = 0.2,
        algorithm: str = QLEARNING,
        rng: Optional[np.random.Generator] = None
    ) -> None:
        """
        Initialize the agent.
        
        Args:
            grid_width: Number of columns of the grid.
            grid_height: Number of rows of the grid.
            actions: Non-empty ordered collection of distinct action identifiers.
            alpha: Learning rate.
            gamma: Discount factor.
            epsilon: Exploration rate.
            algorithm: "qlearning" or "sarsa".
            rng: Random number generator for action selection. If None, uses default.
        
        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        config = AgentConfig(
            grid_width=grid_width,
            grid_height=grid_height,
            actions=actions,
            alpha=alpha,
            gamma=gamma,
            epsilon=epsilon,
            algorithm=algorithm,
        )
        self.config: AgentConfig = config
        self.store = ValueStore(config.grid_width, config.grid_height, config.actions)
        self.policy = EpsilonGreedyPolicy(self.store, config.epsilon, rng=rng)
        self.events = EventBus()
        
        self._strategy = make_target_strategy(config.algorithm)
        self._tracker = EpisodeTracker()
        self._next_action: Optional[Hashable] = None
        
        logger.info(
            "Created %s agent: grid=%dx%d actions=%s alpha=%s gamma=%s epsilon=%s",
            config.algorithm, config.grid_width, config.grid_height,
            list(config.actions), config.alpha, config.gamma, config.epsilon,
        )
    
    @classmethod
    def from_config(
        cls,
        config: AgentConfig,
        rng: Optional[np.random.Generator] = None
    ) -> "TDAgent":
        """Create an agent from an existing AgentConfig."""
        return cls(
            config.grid_width,
            config.grid_height,
            config.actions,
            alpha=config.alpha,
            gamma=config.gamma,
            epsilon=config.epsilon,
            algorithm=config.algorithm,
            rng=rng,
        )
    
    # Hyperparameters
    
    @property
    def actions(self):
        return self.config.actions
    
    @property
    def alpha(self) -> float:
        return self.config.alpha
    
    @property
    def gamma(self) -> float:
        return self.config.gamma
    
    @property
    def epsilon(self) -> float:
        return self.config.epsilon
    
    @property
    def algorithm(self) -> str:
        return self.config.algorithm
    
    # Learning
    
    def get_q(self, state: Sequence[int], action: Hashable) -> float:
        """Return Q(state, action), 0.0 if never written."""
        return self.store.get(state, action)
    
    def choose_action(self, state: Sequence[int]) -> Hashable:
        """
        Select an action for a state with the epsilon-greedy policy.
        
        Args:
            state: (x, y) grid coordinate.
        
        Returns:
            One of the configured actions.
        """
        return self.policy.choose(state)
    
    def update(
        self,
        state: Sequence[int],
        action: Hashable,
        reward: float,
        next_state: Sequence[int],
        next_action: Optional[Hashable] = None
    ) -> float:
        """
        Apply one TD update for the transition (state, action, reward, next_state).
        
        Under SARSA, next_action is the action the agent will take from
        next_state; leaving it out treats next_state as terminal and the
        bootstrap target is 0. Under Q-learning next_action is ignored.
        
        Observers are notified after the table and bookkeeping have been
        updated: first "reward", then (SARSA only) "step". An observer
        exception propagates to the caller without undoing the update.
        
        Args:
            state: (x, y) grid coordinate the action was taken in.
            action: Action taken.
            reward: Reward received.
            next_state: Resulting (x, y) grid coordinate.
            next_action: Next action selected (SARSA). None marks a terminal
                next_state, which is why None cannot be a configured action.
        
        Returns:
            The new estimate Q(state, action).
        
        Raises:
            InvalidActionError: If action or next_action is not configured.
            ValueError: If a state lies outside the grid.
        """
        state = as_position(state)
        next_state = as_position(next_state)
        self.store.action_index(action)
        if next_action is not None:
            self.store.action_index(next_action)
        self.store.state_index(next_state)
        
        old_q = self.store.get(state, action)
        target = self._strategy.bootstrap(self.store, next_state, next_action)
        new_q = td_update(old_q, reward, target, self.config.alpha, self.config.gamma)
        self.store.set(state, action, new_q)
        
        if self._strategy.on_policy and next_action is not None:
            self._next_action = next_action
        self._tracker.record(reward, next_state)
        
        self.events.emit(REWARD, reward, state, action, next_state)
        if self._strategy.on_policy:
            self.events.emit(STEP, self._tracker.position)
        return new_q
    
    def reset_episode(self) -> int:
        """
        End the current episode.
        
        Appends the episode's total reward to the history, clears the
        accumulator and the pending next action, moves the agent back to
        (0, 0) and notifies "episode_end" observers.
        
        Returns:
            The new episode count.
        """
        finished = self._tracker.current_episode_reward
        count = self._tracker.reset()
        self._next_action = None
        logger.debug("Episode %d finished with reward %s", count, finished)
        
        self.events.emit(EPISODE_END, count)
        return count
    
    # Observers
    
    def on_reward(self, callback: Callable[..., object]) -> None:
        """Register callback(reward, state, action, next_state)."""
        self.events.subscribe(REWARD, callback)
    
    def on_step(self, callback: Callable[..., object]) -> None:
        """Register callback(position), fired on SARSA updates."""
        self.events.subscribe(STEP, callback)
    
    def on_episode_end(self, callback: Callable[..., object]) -> None:
        """Register callback(episode_count)."""
        self.events.subscribe(EPISODE_END, callback)
    
    # Bookkeeping accessors
    
    @property
    def episode_count(self) -> int:
        return self._tracker.episode_count
    
    @property
    def position(self) -> GridPosition:
        return self._tracker.position
    
    @property
    def last_reward(self) -> float:
        return self._tracker.last_reward
    
    @property
    def current_episode_reward(self) -> float:
        return self._tracker.current_episode_reward
    
    @property
    def reward_history(self) -> List[float]:
        """Total reward of each completed episode. A copy."""
        return list(self._tracker.reward_history)
    
    @property
    def next_action(self) -> Optional[Hashable]:
        """The pending on-policy next action, or None."""
        return self._next_action
    
    def __repr__(self) -> str:
        return (
            f"TDAgent(algorithm={self.algorithm!r}, "
            f"grid={self.config.grid_width}x{self.config.grid_height}, "
            f"episodes={self.episode_count}, entries={len(self.store)})"
        )
