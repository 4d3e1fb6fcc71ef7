"""
tdgrid: Tabular temporal-difference learning agents for 2D gridworld environments.

This package provides tools for:
- Learning action values with Q-learning (off-policy) or SARSA (on-policy)
- Selecting actions with an epsilon-greedy policy
- Tracking per-episode rewards and notifying observers of learning events
- Summarizing reward histories and inspecting learned value tables
"""

from tdgrid.agent import TDAgent
from tdgrid.config import AgentConfig, QLEARNING, SARSA
from tdgrid.events import EventBus
from tdgrid.exceptions import ConfigurationError, InvalidActionError
from tdgrid.policies import EpsilonGreedyPolicy, greedy_policy
from tdgrid.value_store import GridPosition, ValueStore, encode_state
from tdgrid.utils import (
    estimate_average_reward,
    moving_average_reward,
    summarize_rewards,
    visualize_values,
)

__version__ = "0.1.0"
__all__ = [
    "TDAgent",
    "AgentConfig",
    "QLEARNING",
    "SARSA",
    "EventBus",
    "ConfigurationError",
    "InvalidActionError",
    "EpsilonGreedyPolicy",
    "greedy_policy",
    "GridPosition",
    "ValueStore",
    "encode_state",
    "estimate_average_reward",
    "moving_average_reward",
    "summarize_rewards",
    "visualize_values",
]
