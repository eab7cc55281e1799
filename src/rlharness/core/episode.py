"""Single-episode loop: reset, then alternate agent.act / env.step until done or the step cap."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict

from .protocol import Agent, AgentStats, Environment, Experience

DEFAULT_FRAME_DELAY = 1.0 / 60.0


@dataclass
class EpisodeStats:
    """Statistics for a single episode.

    Attributes:
        episode: Episode number (1-based, stamped by the experiment runner)
        steps: Number of environment steps taken
        total_reward: Sum of rewards over the episode
        terminated: Whether the environment signalled ``done``
        termination_reason: ``info`` string of the terminal step (empty otherwise)
        agent_stats: Agent diagnostic counters snapshotted at episode end
    """
    episode: int = 0
    steps: int = 0
    total_reward: float = 0.0
    terminated: bool = False
    termination_reason: str = ""
    agent_stats: AgentStats = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging (fixed column order)."""
        return {
            'episode': self.episode,
            'steps': self.steps,
            'total_reward': self.total_reward,
            'terminated': self.terminated,
            'termination_reason': self.termination_reason,
        }


def run_episode(
    env: Environment,
    agent: Agent,
    max_steps: int,
    render: bool = False,
    frame_delay: float = DEFAULT_FRAME_DELAY,
) -> EpisodeStats:
    """Run one episode from ``env.reset()`` to termination or ``max_steps``.

    Every transition is delivered to ``agent.learn``. The loop stops at the
    first step reporting ``done``; if the cap is hit first the episode is left
    unterminated with no reason. Exceptions from the agent or environment
    propagate unchanged.

    Args:
        env: Environment to drive
        agent: Agent choosing actions
        max_steps: Step cap for the episode
        render: Call ``env.render()`` before each step
        frame_delay: Seconds to sleep after each rendered frame

    Returns:
        EpisodeStats with ``episode`` left at 0
    """
    stats = EpisodeStats()
    state = env.reset()

    for step in range(max_steps):
        if render:
            env.render()
            if frame_delay > 0:
                time.sleep(frame_delay)

        action = agent.act(state)
        next_state, reward, done, info = env.step(action)

        agent.learn(Experience(state, action, reward, next_state, done))

        stats.total_reward += float(reward)
        stats.steps = step + 1
        state = next_state

        if done:
            stats.terminated = True
            stats.termination_reason = "" if info is None else str(info)
            break

    stats.agent_stats = list(agent.get_stats())
    return stats


__all__ = ["EpisodeStats", "run_episode", "DEFAULT_FRAME_DELAY"]
