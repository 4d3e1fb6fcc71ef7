"""
Episode bookkeeping: episode counter, reward accumulation and position.
"""

from __future__ import annotations

from typing import List, Sequence

from tdgrid.value_store import GridPosition, as_position

ORIGIN = GridPosition(0, 0)


class EpisodeTracker:
    """
    Tracks the agent's position and per-episode rewards.
    
    Attributes:
        episode_count: Number of completed episodes.
        current_episode_reward: Sum of rewards since the last reset.
        reward_history: Total reward of each completed episode, in order.
        position: Most recent next state, or the origin after a reset.
        last_reward: Most recent reward received.
    """
    
    def __init__(self) -> None:
        self.episode_count: int = 0
        self.current_episode_reward: float = 0.0
        self.reward_history: List[float] = []
        self.position: GridPosition = ORIGIN
        self.last_reward: float = 0.0
    
    def record(self, reward: float, next_state: Sequence[int]) -> None:
        """Account for one transition ending in next_state."""
        self.last_reward = reward
        self.position = as_position(next_state)
        self.current_episode_reward += reward
    
    def reset(self) -> int:
        """
        Close the current episode.
        
        Returns:
            The new episode count.
        """
        self.episode_count += 1
        self.reward_history.append(self.current_episode_reward)
        self.current_episode_reward = 0.0
        self.position = ORIGIN
        return self.episode_count
