"""
Unit Tests for Utils Module

Tests reward statistics and value-table diagnostics.
"""

import math

import pytest
import numpy as np

from tdgrid.utils import (
    estimate_average_reward,
    running_average_reward,
    moving_average_reward,
    summarize_rewards,
    print_value_table,
    visualize_values,
    plot_reward_history,
)
from tdgrid.value_store import ValueStore


@pytest.fixture
def store():
    """Create a 3x2 value store with a few learned entries."""
    store = ValueStore(3, 2, ["up", "down", "left", "right"])
    store.set((0, 0), "right", 0.5)
    store.set((1, 0), "right", 0.9)
    store.set((2, 1), "up", -0.3)
    return store


class TestEstimateAverageReward:
    """Tests for estimate_average_reward function."""
    
    def test_mean(self):
        """Test the plain sample mean."""
        assert estimate_average_reward([1.0, 2.0, 3.0, 6.0]) == pytest.approx(3.0)
    
    def test_burn_in(self):
        """Test burn-in samples are discarded."""
        assert estimate_average_reward([100.0, 1.0, 3.0], burn_in=1) == pytest.approx(2.0)
    
    def test_burn_in_too_large(self):
        """Test error when burn-in leaves no samples."""
        with pytest.raises(ValueError, match="burn_in"):
            estimate_average_reward([1.0, 2.0], burn_in=2)
    
    def test_accepts_list(self):
        """Test a plain list history is accepted."""
        assert isinstance(estimate_average_reward([0, 1]), float)


class TestRunningAverageReward:
    """Tests for running_average_reward function."""
    
    def test_values(self):
        """Test element t is the mean of the first t+1 rewards."""
        result = running_average_reward([2.0, 0.0, 4.0])
        np.testing.assert_allclose(result, [2.0, 1.0, 2.0])
    
    def test_last_equals_mean(self):
        """Test the final running average equals the overall mean."""
        rng = np.random.default_rng(42)
        rewards = rng.normal(size=50)
        assert running_average_reward(rewards)[-1] == pytest.approx(rewards.mean())


class TestMovingAverageReward:
    """Tests for moving_average_reward function."""
    
    def test_values(self):
        """Test windowed means."""
        result = moving_average_reward([1.0, 2.0, 3.0, 4.0], window=2)
        np.testing.assert_allclose(result, [1.5, 2.5, 3.5])
    
    def test_window_one_is_identity(self):
        """Test a window of one returns the input."""
        np.testing.assert_allclose(moving_average_reward([3.0, -1.0], window=1), [3.0, -1.0])
    
    def test_short_history(self):
        """Test an empty result when history is shorter than the window."""
        assert moving_average_reward([1.0], window=3).shape == (0,)
    
    def test_invalid_window(self):
        """Test error on a non-positive window."""
        with pytest.raises(ValueError, match="window"):
            moving_average_reward([1.0, 2.0], window=0)


class TestSummarizeRewards:
    """Tests for summarize_rewards function."""
    
    def test_summary(self):
        """Test summary statistics."""
        summary = summarize_rewards([1.0, 3.0, -1.0])
        assert summary["episodes"] == 3
        assert summary["mean"] == pytest.approx(1.0)
        assert summary["std"] == pytest.approx(np.std([1.0, 3.0, -1.0]))
        assert summary["min"] == -1.0
        assert summary["max"] == 3.0
        assert summary["last"] == -1.0
    
    def test_empty(self):
        """Test an empty history yields NaN statistics."""
        summary = summarize_rewards([])
        assert summary["episodes"] == 0
        assert math.isnan(summary["mean"])
        assert math.isnan(summary["last"])


class TestPrintValueTable:
    """Tests for print_value_table function."""
    
    def test_lists_visited_cells(self, store, capsys):
        """Test visited cells and their greedy actions are printed."""
        print_value_table(store)
        out = capsys.readouterr().out
        assert "(0, 0)" in out
        assert "(1, 0)" in out
        assert "(2, 1)" in out
        assert "(0, 1)" not in out
        assert "3 entries" in out
    
    def test_greedy_column(self, store, capsys):
        """Test ties are listed together in the greedy column."""
        print_value_table(store)
        lines = capsys.readouterr().out.splitlines()
        row = next(line for line in lines if line.strip().startswith("(2, 1)"))
        assert row.endswith("down,left,right")


class TestVisualization:
    """Tests for the matplotlib helpers."""
    
    @pytest.fixture(autouse=True)
    def agg_backend(self):
        matplotlib = pytest.importorskip("matplotlib")
        matplotlib.use("Agg")
        yield
        import matplotlib.pyplot as plt
        plt.close("all")
    
    def test_visualize_values(self, store):
        """Test the heatmap covers the grid and annotates learned cells."""
        ax = visualize_values(store, title="Values")
        assert ax.get_title() == "Values"
        texts = [t.get_text() for t in ax.texts]
        assert "right" in texts
        assert ax.images[0].get_array().shape == (2, 3)
    
    def test_visualize_values_without_greedy(self, store):
        """Test annotations can be disabled."""
        ax = visualize_values(store, show_greedy=False)
        assert len(ax.texts) == 0
    
    def test_plot_reward_history(self):
        """Test raw and smoothed curves are drawn."""
        ax = plot_reward_history([0.0, 1.0, 0.0, 1.0, 1.0], window=2)
        assert len(ax.lines) == 2
