"""Bang-bang cart-pole controller: push the cart toward the side the pole leans."""
from __future__ import annotations

from rlharness.core.config import Config
from rlharness.core.protocol import Action, Agent, AgentStats, Experience, State


class RuleBasedAgent(Agent):
    """Pushes right with ``max_force`` when the pole angle is positive, left otherwise.

    Expects the cart-pole state layout ``[x, x_dot, theta, theta_dot]``; any
    shorter state yields a zero action.

    Config keys:
        max_force (real, 10.0)
    """

    def __init__(self, max_force: float = 10.0):
        super().__init__()
        self.max_force = float(max_force)
        self.total_actions = 0
        self.last_action = 0.0
        self.left_actions = 0
        self.right_actions = 0

    @classmethod
    def from_config(cls, config: Config) -> "RuleBasedAgent":
        return cls(max_force=config.get_float("max_force", 10.0))

    @property
    def name(self) -> str:
        return "RuleBasedAgent"

    @property
    def description(self) -> str:
        return "Simple bang-bang controller for CartPole based on pole angle"

    def act(self, state: State) -> Action:
        if len(state) < 4:
            self.last_action = 0.0
            return self.last_action

        theta = state[2]
        if theta > 0.0:
            self.last_action = self.max_force
            self.right_actions += 1
        else:
            self.last_action = -self.max_force
            self.left_actions += 1

        self.total_actions += 1
        return self.last_action

    def learn(self, experience: Experience) -> None:
        # fixed rules
        return None

    def get_stats(self) -> AgentStats:
        return [
            ("total_actions", float(self.total_actions)),
            ("last_action", self.last_action),
            ("left_actions", float(self.left_actions)),
            ("right_actions", float(self.right_actions)),
            ("max_force", self.max_force),
        ]
