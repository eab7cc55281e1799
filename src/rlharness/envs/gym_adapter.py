"""Adapter exposing a Gymnasium environment through the harness Environment contract.

Only environments with a single continuous action (a ``Box`` with one
element) fit the scalar-action contract. Actions are clipped to the box
bounds before being forwarded.
"""
from __future__ import annotations

import logging
from typing import Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from rlharness.core.config import Config
from rlharness.core.protocol import Action, Environment, State, StepResult, as_state

logger = logging.getLogger(__name__)


class GymEnvironment(Environment):
    """Wraps a ``gymnasium.Env`` with a one-element ``Box`` action space."""

    def __init__(
        self,
        env_id: str = "Pendulum-v1",
        seed: Optional[int] = None,
        render: bool = False,
        max_episode_steps: Optional[int] = None,
        env: Optional[gym.Env] = None,
    ):
        self._env: Optional[gym.Env] = None
        self._closed = False
        self.env_id = env_id
        self.render_enabled = bool(render)
        self._seed = seed
        self._last_obs: Optional[np.ndarray] = None

        if env is None:
            make_kwargs: dict = {}
            if render:
                make_kwargs["render_mode"] = "human"
            if max_episode_steps:
                make_kwargs["max_episode_steps"] = max_episode_steps
            env = gym.make(env_id, **make_kwargs)
        self._env = env

        action_space = env.action_space
        if not isinstance(action_space, spaces.Box) or int(np.prod(action_space.shape)) != 1:
            self.close()
            raise ValueError(
                f"{env_id} must have a single continuous action, got {action_space}"
            )
        observation_space = env.observation_space
        if not isinstance(observation_space, spaces.Box):
            self.close()
            raise ValueError(f"{env_id} must have a Box observation space, got {observation_space}")

        self._action_space = action_space
        self._observation_space = observation_space
        logger.debug("Wrapped %s (action bounds [%s, %s])", env_id, self.action_low, self.action_high)

    @classmethod
    def from_config(cls, config: Config) -> "GymEnvironment":
        return cls(
            env_id=config.get_str("env_id", "Pendulum-v1"),
            seed=config.get_int("seed", None),
            render=config.get_bool("render", False),
            max_episode_steps=config.get_int("max_episode_steps", None),
        )

    def _require_env(self) -> gym.Env:
        if self._env is None:
            raise RuntimeError(f"{self.env_id} is closed")
        return self._env

    def reset(self) -> State:
        env = self._require_env()
        # seed only the first reset so later episodes differ
        obs, _ = env.reset(seed=self._seed)
        self._seed = None
        self._last_obs = np.asarray(obs, dtype=np.float64).reshape(-1)
        return as_state(self._last_obs)

    def step(self, action: Action) -> StepResult:
        env = self._require_env()
        clipped = self.clip_action(action)
        forwarded = np.full(self._action_space.shape, clipped, dtype=self._action_space.dtype)
        obs, reward, terminated, truncated, _ = env.step(forwarded)
        self._last_obs = np.asarray(obs, dtype=np.float64).reshape(-1)

        if terminated:
            info = "Terminated"
        elif truncated:
            info = "TimeLimit"
        else:
            info = ""
        return StepResult(as_state(self._last_obs), float(reward), bool(terminated or truncated), info)

    def render(self) -> None:
        if self.render_enabled and self._env is not None:
            self._env.render()

    def set_render_mode(self, render: bool) -> None:
        # the gymnasium render_mode itself is fixed at gym.make time
        self.render_enabled = bool(render)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._env is not None:
            self._env.close()
            self._env = None

    def get_current_state(self) -> State:
        if self._last_obs is None:
            return as_state(np.zeros(self.observation_space_size))
        return as_state(self._last_obs)

    # Metadata ------------------------------------------------------------
    @property
    def observation_space_size(self) -> int:
        return int(np.prod(self._observation_space.shape))

    @property
    def action_space_size(self) -> int:
        return 1

    @property
    def observation_low(self) -> np.ndarray:
        return np.asarray(self._observation_space.low, dtype=np.float64).reshape(-1)

    @property
    def observation_high(self) -> np.ndarray:
        return np.asarray(self._observation_space.high, dtype=np.float64).reshape(-1)

    @property
    def action_low(self) -> float:
        return float(np.asarray(self._action_space.low).reshape(-1)[0])

    @property
    def action_high(self) -> float:
        return float(np.asarray(self._action_space.high).reshape(-1)[0])

    @property
    def name(self) -> str:
        return f"Gym:{self.env_id}"

    @property
    def description(self) -> str:
        return f"Gymnasium environment '{self.env_id}' behind the harness contract"

    @property
    def unwrapped(self) -> gym.Env:
        """The wrapped Gymnasium environment."""
        return self._require_env()


__all__ = ["GymEnvironment"]
