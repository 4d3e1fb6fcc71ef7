"""
Utility Module

This module provides helper functions for analysing reward histories and
inspecting learned value tables.

Key functions:
    - estimate_average_reward: Mean reward, optionally after a burn-in
    - running_average_reward: Cumulative mean over a reward sequence
    - moving_average_reward: Windowed mean over a reward sequence
    - summarize_rewards: Summary statistics of a reward history
    - print_value_table: Display values and greedy actions for debugging
    - visualize_values: Create a matplotlib heatmap of the value table
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np

from tdgrid.policies import greedy_policy

if TYPE_CHECKING:
    from tdgrid.value_store import ValueStore


def estimate_average_reward(rewards: Sequence[float], burn_in: int = 0) -> float:
    """
    Estimate the average reward from a sequence of rewards.
    
    Computes the sample mean of rewards, optionally discarding initial
    burn-in samples (e.g. the first episodes of training).
    
    Args:
        rewards: Rewards, one per step or one per episode.
        burn_in: Number of initial samples to discard. Default 0.
    
    Returns:
        Estimated average reward.
    
    Example:
        >>> estimate_average_reward(agent.reward_history, burn_in=10)
    """
    rewards = np.asarray(rewards, dtype=np.float64)
    if burn_in >= len(rewards):
        raise ValueError(
            f"burn_in ({burn_in}) must be less than length of rewards ({len(rewards)})"
        )
    
    return float(np.mean(rewards[burn_in:]))


def running_average_reward(rewards: Sequence[float]) -> np.ndarray:
    """
    Compute the running average of a reward sequence.
    
    Element t is the average of rewards[0..t]. Useful for visualizing
    convergence of episode returns.
    
    Args:
        rewards: Reward sequence.
    
    Returns:
        Array of shape (len(rewards),) with running averages.
    """
    rewards = np.asarray(rewards, dtype=np.float64)
    return np.cumsum(rewards) / np.arange(1, len(rewards) + 1)


def moving_average_reward(rewards: Sequence[float], window: int) -> np.ndarray:
    """
    Compute the moving average of a reward sequence.
    
    Args:
        rewards: Reward sequence.
        window: Number of consecutive samples per average.
    
    Returns:
        Array of shape (len(rewards) - window + 1,); empty if the sequence
        is shorter than the window.
    
    Raises:
        ValueError: If window is not positive.
    """
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")
    rewards = np.asarray(rewards, dtype=np.float64)
    if len(rewards) < window:
        return np.zeros(0, dtype=np.float64)
    
    cumsum = np.cumsum(np.insert(rewards, 0, 0.0))
    return (cumsum[window:] - cumsum[:-window]) / window


def summarize_rewards(rewards: Sequence[float]) -> Dict[str, float]:
    """
    Summarize a reward history.
    
    Args:
        rewards: Reward history, typically TDAgent.reward_history.
    
    Returns:
        Dictionary with keys episodes, mean, std, min, max and last.
        For an empty history, episodes is 0 and the statistics are NaN.
    """
    rewards = np.asarray(rewards, dtype=np.float64)
    if len(rewards) == 0:
        nan = float("nan")
        return {"episodes": 0, "mean": nan, "std": nan, "min": nan, "max": nan, "last": nan}
    
    return {
        "episodes": int(len(rewards)),
        "mean": float(np.mean(rewards)),
        "std": float(np.std(rewards)),
        "min": float(np.min(rewards)),
        "max": float(np.max(rewards)),
        "last": float(rewards[-1]),
    }


def print_value_table(store: "ValueStore") -> None:
    """
    Print the value of every action in every cell, with the greedy action.
    
    Only cells with at least one materialized entry are listed.
    
    Args:
        store: The value table to inspect.
    
    Example:
        >>> print_value_table(agent.store)
    """
    values = store.as_array().reshape(store.n_states, store.n_actions)
    policy = greedy_policy(store)
    visited = {pos for (pos, _), _ in store.items()}
    
    names = [str(a) for a in store.actions]
    width = 12 + 9 * len(names) + 10
    print("Value table:")
    print("-" * width)
    print(f"{'Position':>10} | " + " ".join(f"{n:>8}" for n in names) + " | greedy")
    print("-" * width)
    
    for s in range(store.n_states):
        pos = store.position(s)
        if pos not in visited:
            continue
        best = [names[a] for a in np.flatnonzero(policy[s])]
        row = " ".join(f"{v:>8.3f}" for v in values[s])
        print(f"{str(tuple(pos)):>10} | {row} | {','.join(best)}")
    
    print("-" * width)
    print(f"{len(store)} entries")


def visualize_values(
    store: "ValueStore",
    ax=None,
    title: Optional[str] = None,
    show_greedy: bool = True,
    figsize: Tuple[float, float] = (8, 8)
):
    """
    Visualize the value table using matplotlib.
    
    Each cell (x, y) is coloured by max_a Q((x, y), a). Optionally each
    cell is annotated with its greedy action(s).
    
    Args:
        store: The value table.
        ax: Matplotlib axes to plot on. If None, creates new figure.
        title: Title for the plot.
        show_greedy: Whether to annotate greedy actions on cells.
        figsize: Figure size if creating new figure.
    
    Returns:
        Matplotlib axes object.
    
    Example:
        >>> import matplotlib.pyplot as plt
        >>> ax = visualize_values(agent.store, title="Q-learning after 500 episodes")
        >>> plt.show()
    """
    import matplotlib.pyplot as plt
    
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    
    values = store.as_array()
    max_values = values.max(axis=2)
    
    image = ax.imshow(max_values, cmap='viridis', origin='upper', aspect='equal')
    ax.figure.colorbar(image, ax=ax, label='max Q')
    
    # Draw grid lines
    for x in range(store.width + 1):
        ax.axvline(x - 0.5, color='gray', linewidth=0.5)
    for y in range(store.height + 1):
        ax.axhline(y - 0.5, color='gray', linewidth=0.5)
    
    if show_greedy:
        policy = greedy_policy(store)
        for s in range(store.n_states):
            best = np.flatnonzero(policy[s])
            if len(best) == store.n_actions:
                # all tied, nothing learned
                continue
            x, y = store.position(s)
            label = "\n".join(str(store.actions[a]) for a in best)
            ax.text(x, y, label, ha='center', va='center', fontsize=8, color='white')
    
    ax.set_xlim(-0.5, store.width - 0.5)
    ax.set_ylim(store.height - 0.5, -0.5)
    ax.set_xticks(range(store.width))
    ax.set_yticks(range(store.height))
    ax.set_xlabel('x')
    ax.set_ylabel('y')
    
    if title:
        ax.set_title(title)
    
    return ax


def plot_reward_history(
    rewards: Sequence[float],
    window: int = 10,
    ax=None,
    figsize: Tuple[float, float] = (10, 4)
):
    """
    Plot per-episode rewards together with their moving average.
    
    Args:
        rewards: Reward history, typically TDAgent.reward_history.
        window: Moving-average window.
        ax: Matplotlib axes to plot on. If None, creates new figure.
        figsize: Figure size if creating new figure.
    
    Returns:
        Matplotlib axes object.
    """
    import matplotlib.pyplot as plt
    
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    
    episodes = np.arange(1, len(rewards) + 1)
    ax.plot(episodes, rewards, color='steelblue', alpha=0.4, label='Episode reward')
    
    smoothed = moving_average_reward(rewards, window)
    if len(smoothed) > 0:
        ax.plot(episodes[window - 1:], smoothed, color='navy', label=f'{window}-episode mean')
    
    ax.set_xlabel('Episode')
    ax.set_ylabel('Reward')
    ax.legend(loc='lower right')
    
    return ax
