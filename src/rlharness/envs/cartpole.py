"""Classic cart-pole balancing task with a continuous force action.

State layout: ``[x, x_dot, theta, theta_dot]``. The action is a horizontal
force clipped to ``[-max_force, max_force]``; dynamics are integrated with an
explicit Euler step of ``tau`` seconds.

Episodes end when the cart leaves ``[-x_threshold, x_threshold]``, the pole
angle leaves ``[-theta_threshold, theta_threshold]`` (``info="Terminated"``,
reward 0), or after ``max_episode_steps`` steps (``info="TimeLimit"``,
reward 1). Every other step yields reward 1.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from rlharness.core.config import Config
from rlharness.core.protocol import Action, Environment, State, StepResult, as_state
from rlharness.core.utils import make_rng

logger = logging.getLogger(__name__)

_TRACK_WIDTH = 41


class CartPoleEnv(Environment):
    """Cart-pole environment implemented directly in numpy."""

    def __init__(
        self,
        max_force: float = 10.0,
        x_threshold: float = 2.4,
        theta_threshold_degrees: float = 12.0,
        max_episode_steps: int = 500,
        seed: Optional[int] = None,
        render: bool = False,
        gravity: float = 9.8,
        masscart: float = 1.0,
        masspole: float = 0.1,
        length: float = 0.5,
        tau: float = 0.02,
    ):
        if max_force <= 0:
            raise ValueError(f"max_force must be > 0, got {max_force}")
        if max_episode_steps < 1:
            raise ValueError(f"max_episode_steps must be >= 1, got {max_episode_steps}")
        self.max_force = float(max_force)
        self.x_threshold = float(x_threshold)
        self.theta_threshold_radians = math.radians(theta_threshold_degrees)
        self.max_episode_steps = int(max_episode_steps)

        self.gravity = float(gravity)
        self.masscart = float(masscart)
        self.masspole = float(masspole)
        self.total_mass = self.masscart + self.masspole
        self.length = float(length)  # half the pole's length
        self.polemass_length = self.masspole * self.length
        self.tau = float(tau)

        self.rng = make_rng(seed)
        self.render_enabled = bool(render)
        self.current_step = 0
        self._state: Optional[np.ndarray] = None
        self._closed = False

    @classmethod
    def from_config(cls, config: Config) -> "CartPoleEnv":
        return cls(
            max_force=config.get_float("max_force", 10.0),
            x_threshold=config.get_float("x_threshold", 2.4),
            theta_threshold_degrees=config.get_float("theta_threshold_degrees", 12.0),
            max_episode_steps=config.get_int("max_episode_steps", 500),
            seed=config.get_int("seed", None),
            render=config.get_bool("render", False),
            gravity=config.get_float("gravity", 9.8),
            masscart=config.get_float("masscart", 1.0),
            masspole=config.get_float("masspole", 0.1),
            length=config.get_float("length", 0.5),
            tau=config.get_float("tau", 0.02),
        )

    # Environment interface ----------------------------------------------
    def reset(self) -> State:
        self._state = self.rng.uniform(-0.05, 0.05, size=4)
        self.current_step = 0
        return as_state(self._state)

    def step(self, action: Action) -> StepResult:
        if self._state is None:
            raise RuntimeError("Environment not reset.")
        force = self.clip_action(action)

        x, x_dot, theta, theta_dot = self._state
        costheta = math.cos(theta)
        sintheta = math.sin(theta)

        temp = (force + self.polemass_length * theta_dot ** 2 * sintheta) / self.total_mass
        thetaacc = (self.gravity * sintheta - costheta * temp) / (
            self.length * (4.0 / 3.0 - self.masspole * costheta ** 2 / self.total_mass)
        )
        xacc = temp - self.polemass_length * thetaacc * costheta / self.total_mass

        x = x + self.tau * x_dot
        x_dot = x_dot + self.tau * xacc
        theta = theta + self.tau * theta_dot
        theta_dot = theta_dot + self.tau * thetaacc
        self._state = np.array([x, x_dot, theta, theta_dot], dtype=np.float64)
        self.current_step += 1

        time_limit = self.current_step >= self.max_episode_steps
        failed = self._failed()
        done = failed or time_limit

        if time_limit:
            info = "TimeLimit"
        elif failed:
            info = "Terminated"
        else:
            info = ""
        reward = 0.0 if failed and not time_limit else 1.0

        return StepResult(as_state(self._state), reward, done, info)

    def render(self) -> None:
        if not self.render_enabled or self._state is None:
            return
        x, _, theta, _ = self._state
        frac = (x + self.x_threshold) / (2 * self.x_threshold)
        pos = int(round(np.clip(frac, 0.0, 1.0) * (_TRACK_WIDTH - 1)))
        track = ["-"] * _TRACK_WIDTH
        track[pos] = "#"
        logger.info(
            "step %4d |%s| theta=%+.3f rad (%+.1f deg)",
            self.current_step, "".join(track), theta, math.degrees(theta),
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._state = None

    def set_render_mode(self, render: bool) -> None:
        self.render_enabled = bool(render)

    def get_current_state(self) -> State:
        if self._state is None:
            return as_state(np.zeros(4))
        return as_state(self._state)

    def _failed(self) -> bool:
        x, _, theta, _ = self._state
        return bool(
            x < -self.x_threshold
            or x > self.x_threshold
            or theta < -self.theta_threshold_radians
            or theta > self.theta_threshold_radians
        )

    # Metadata ------------------------------------------------------------
    @property
    def observation_space_size(self) -> int:
        return 4

    @property
    def action_space_size(self) -> int:
        return 1

    @property
    def observation_low(self) -> np.ndarray:
        return np.array(
            [-self.x_threshold * 2, -np.inf, -self.theta_threshold_radians * 2, -np.inf]
        )

    @property
    def observation_high(self) -> np.ndarray:
        return np.array(
            [self.x_threshold * 2, np.inf, self.theta_threshold_radians * 2, np.inf]
        )

    @property
    def action_low(self) -> float:
        return -self.max_force

    @property
    def action_high(self) -> float:
        return self.max_force

    @property
    def name(self) -> str:
        return "CartPole-v1"

    @property
    def description(self) -> str:
        return "Classic cart-pole control task with continuous force"


__all__ = ["CartPoleEnv"]
