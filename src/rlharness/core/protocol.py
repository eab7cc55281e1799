"""Agent and Environment contracts - the interface every implementation must satisfy.

The harness only ever holds references typed as ``Agent`` / ``Environment``.
Anything an experiment needs to ask of an implementation (including "has the
user asked to stop?") lives on these base classes, with a sensible default,
so no caller has to type-test a concrete class.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Sequence, Tuple

import numpy as np

State = np.ndarray
Action = float
Reward = float
AgentStats = List[Tuple[str, float]]


def as_state(values: Sequence[float]) -> State:
    """Return a read-only float64 copy of ``values``."""
    state = np.array(values, dtype=np.float64).reshape(-1)
    state.flags.writeable = False
    return state


@dataclass(frozen=True)
class Experience:
    """One ``(state, action, reward, next_state, done)`` transition."""

    state: State
    action: Action
    reward: Reward
    next_state: State
    done: bool

    def __post_init__(self):
        object.__setattr__(self, "state", as_state(self.state))
        object.__setattr__(self, "next_state", as_state(self.next_state))
        object.__setattr__(self, "action", float(self.action))
        object.__setattr__(self, "reward", float(self.reward))
        object.__setattr__(self, "done", bool(self.done))


class StepResult(NamedTuple):
    """Result of ``Environment.step``; unpacks as ``(next_state, reward, done, info)``."""

    next_state: State
    reward: Reward
    done: bool
    info: str = ""


class Agent(ABC):
    """Base class for all agents.

    Subclasses must implement ``act``, ``learn``, ``name`` and
    ``description``. Everything else has a default that a concrete agent
    may override.
    """

    def __init__(self) -> None:
        self._training = True

    @abstractmethod
    def act(self, state: State) -> Action:
        """Select an action for ``state``."""

    @abstractmethod
    def learn(self, experience: Experience) -> None:
        """Consume a single transition."""

    def learn_trajectory(self, trajectory: Iterable[Experience]) -> None:
        """Consume a sequence of transitions.

        Folds into repeated ``learn`` calls; batch or episodic learners
        override this directly.
        """
        for experience in trajectory:
            self.learn(experience)

    def set_training_mode(self, training: bool) -> None:
        self._training = bool(training)

    def is_training(self) -> bool:
        return self._training

    def reset(self) -> None:
        """Clear per-episode state. Called between episodes."""

    def get_stats(self) -> AgentStats:
        """Return diagnostic counters as ordered ``(name, value)`` pairs."""
        return []

    def save_model(self, path: str) -> None:
        """Persist the agent. No-op unless overridden."""

    def load_model(self, path: str) -> None:
        """Restore the agent. No-op unless overridden."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...


class Environment(ABC):
    """Base class for all environments (Gym-style reset/step/render/close)."""

    @abstractmethod
    def reset(self) -> State:
        """Start a new episode and return the initial observation."""

    @abstractmethod
    def step(self, action: Action) -> StepResult:
        """Advance one control step.

        Implementations clip ``action`` to ``[action_low, action_high]``
        (see ``clip_action``) before using it.
        """

    def render(self) -> None:
        """Best-effort visualization. No-op unless overridden."""

    def close(self) -> None:
        """Release resources. Must be safe to call more than once."""

    def set_render_mode(self, render: bool) -> None:
        """Enable or disable visualization. No-op unless overridden."""

    def stop_requested(self) -> bool:
        """Whether an external stop was requested (e.g. a window was closed)."""
        return False

    def clip_action(self, action: Action) -> Action:
        return float(np.clip(action, self.action_low, self.action_high))

    @abstractmethod
    def get_current_state(self) -> State:
        """Return the current observation without stepping."""

    # Space metadata ------------------------------------------------------
    @property
    @abstractmethod
    def observation_space_size(self) -> int:
        ...

    @property
    @abstractmethod
    def action_space_size(self) -> int:
        ...

    @property
    @abstractmethod
    def observation_low(self) -> np.ndarray:
        ...

    @property
    @abstractmethod
    def observation_high(self) -> np.ndarray:
        ...

    @property
    @abstractmethod
    def action_low(self) -> float:
        ...

    @property
    @abstractmethod
    def action_high(self) -> float:
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        ...


__all__ = [
    "State",
    "Action",
    "Reward",
    "AgentStats",
    "Experience",
    "StepResult",
    "Agent",
    "Environment",
    "as_state",
]
