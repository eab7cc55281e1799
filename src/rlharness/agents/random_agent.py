"""Baseline agent that ignores the state and samples actions uniformly."""
from __future__ import annotations

from typing import Optional

from rlharness.core.config import Config
from rlharness.core.protocol import Action, Agent, AgentStats, Experience, State
from rlharness.core.utils import make_rng


class RandomAgent(Agent):
    """Chooses actions uniformly at random from ``[action_low, action_high)``.

    Config keys:
        action_low (real, -1.0), action_high (real, 1.0), seed (int, unseeded)
    """

    def __init__(self, action_low: float = -1.0, action_high: float = 1.0, seed: Optional[int] = None):
        super().__init__()
        if action_high < action_low:
            raise ValueError(f"action_high ({action_high}) must be >= action_low ({action_low})")
        self.action_low = float(action_low)
        self.action_high = float(action_high)
        self.rng = make_rng(seed)
        self.total_actions = 0
        self.last_action = 0.0

    @classmethod
    def from_config(cls, config: Config) -> "RandomAgent":
        return cls(
            action_low=config.get_float("action_low", -1.0),
            action_high=config.get_float("action_high", 1.0),
            seed=config.get_int("seed", None),
        )

    @property
    def name(self) -> str:
        return "RandomAgent"

    @property
    def description(self) -> str:
        return "Baseline agent that chooses actions uniformly at random"

    def act(self, state: State) -> Action:
        self.last_action = float(self.rng.uniform(self.action_low, self.action_high))
        self.total_actions += 1
        return self.last_action

    def learn(self, experience: Experience) -> None:
        # nothing to learn
        return None

    def get_stats(self) -> AgentStats:
        return [
            ("total_actions", float(self.total_actions)),
            ("last_action", self.last_action),
            ("action_range_low", self.action_low),
            ("action_range_high", self.action_high),
        ]
