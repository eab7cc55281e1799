"""Episode statistics tracking for experiment runs.

Keeps the history of completed episodes and computes the moving average and
end-of-run summary that the experiment runner reports.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

import numpy as np

if TYPE_CHECKING:
    from rlharness.core.episode import EpisodeStats

MOVING_AVERAGE_WINDOW = 100


@dataclass
class ExperimentSummary:
    """Aggregate statistics over a whole run.

    Attributes:
        total_episodes: Number of episodes in the run
        mean_reward: Mean total reward per episode
        mean_steps: Mean steps per episode
        termination_rate: Fraction of episodes whose ``terminated`` flag was set
    """
    total_episodes: int = 0
    mean_reward: float = 0.0
    mean_steps: float = 0.0
    termination_rate: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'total_episodes': self.total_episodes,
            'mean_reward': self.mean_reward,
            'mean_steps': self.mean_steps,
            'termination_rate': self.termination_rate,
        }


class MetricsTracker:
    """Tracks episode statistics across a run.

    Example:
        >>> tracker = MetricsTracker()
        >>> tracker.add(EpisodeStats(episode=1, steps=12, total_reward=12.0, terminated=True))
        >>> tracker.moving_average()
        12.0
        >>> tracker.summary().termination_rate
        1.0
    """

    def __init__(self):
        """Initialize empty tracker."""
        self.episodes: List["EpisodeStats"] = []

    def add(self, stats: "EpisodeStats") -> "EpisodeStats":
        """Record a completed episode and return it."""
        self.episodes.append(stats)
        return stats

    def latest(self) -> Optional["EpisodeStats"]:
        """Most recent episode, or None if nothing was recorded."""
        return self.episodes[-1] if self.episodes else None

    def window_size(self, window: int = MOVING_AVERAGE_WINDOW) -> int:
        """Number of episodes a moving average over ``window`` actually covers."""
        return min(window, len(self.episodes))

    def moving_average(self, window: int = MOVING_AVERAGE_WINDOW) -> float:
        """Mean total reward over the last ``min(window, n)`` episodes.

        Args:
            window: Maximum number of trailing episodes to include

        Returns:
            Moving average, or 0.0 if no episodes were recorded
        """
        size = self.window_size(window)
        if size <= 0:
            return 0.0
        rewards = [ep.total_reward for ep in self.episodes[-size:]]
        return sum(rewards) / size

    def summary(self) -> ExperimentSummary:
        """Compute mean reward, mean steps and termination rate over all episodes."""
        if not self.episodes:
            return ExperimentSummary()

        rewards = np.array([ep.total_reward for ep in self.episodes], dtype=np.float64)
        steps = np.array([ep.steps for ep in self.episodes], dtype=np.float64)
        terminated = sum(1 for ep in self.episodes if ep.terminated)

        return ExperimentSummary(
            total_episodes=len(self.episodes),
            mean_reward=float(np.mean(rewards)),
            mean_steps=float(np.mean(steps)),
            termination_rate=terminated / len(self.episodes),
        )

    def clear(self):
        """Clear all tracked episodes."""
        self.episodes.clear()

    def __len__(self) -> int:
        return len(self.episodes)


__all__ = ['ExperimentSummary', 'MetricsTracker', 'MOVING_AVERAGE_WINDOW']
