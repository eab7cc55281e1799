"""Pytest configuration and shared fixtures."""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src/ to path so the package imports without installation
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from rlharness.core.protocol import Agent, Environment, StepResult, as_state  # noqa: E402
from rlharness.core.registry import AgentRegistry, EnvironmentRegistry  # noqa: E402


class ConstantAgent(Agent):
    """Agent returning a fixed action and recording every call it receives."""

    def __init__(self, action=0.0):
        super().__init__()
        self.action = action
        self.act_calls = 0
        self.experiences = []
        self.reset_calls = 0
        self.saved_paths = []
        self.training_modes_seen = []

    def act(self, state):
        self.act_calls += 1
        self.training_modes_seen.append(self.is_training())
        return self.action

    def learn(self, experience):
        self.experiences.append(experience)

    def reset(self):
        self.reset_calls += 1

    def get_stats(self):
        return [("act_calls", float(self.act_calls))]

    def save_model(self, path):
        self.saved_paths.append(path)

    @property
    def name(self):
        return "ConstantAgent"

    @property
    def description(self):
        return "Returns the same action every step"


class ScriptedEnvironment(Environment):
    """Environment that ends each episode after ``episode_length`` steps.

    Every step yields ``reward``; the terminal step reports ``done_info``.
    ``stop_after`` makes ``stop_requested`` return True once that many
    episodes have been reset.
    """

    def __init__(self, episode_length=1, reward=1.0, done_info="Terminated", stop_after=None, render=False):
        self.episode_length = episode_length
        self.reward = reward
        self.done_info = done_info
        self.stop_after = stop_after
        self.resets = 0
        self.steps_this_episode = 0
        self.total_steps = 0
        self.render_calls = 0
        self.render_log = []
        self.close_calls = 0
        self.actions = []
        self.render_enabled = render
        self.render_modes = []

    def reset(self):
        self.resets += 1
        self.steps_this_episode = 0
        return as_state([0.0, 0.0])

    def step(self, action):
        self.actions.append(action)
        self.steps_this_episode += 1
        self.total_steps += 1
        done = self.steps_this_episode >= self.episode_length
        info = self.done_info if done else ""
        return StepResult(as_state([float(self.steps_this_episode), 0.0]), self.reward, done, info)

    def render(self):
        self.render_calls += 1
        self.render_log.append(self.resets)

    def close(self):
        self.close_calls += 1

    def set_render_mode(self, render):
        self.render_enabled = render
        self.render_modes.append(render)

    def stop_requested(self):
        return self.stop_after is not None and self.resets >= self.stop_after

    def get_current_state(self):
        return as_state([float(self.steps_this_episode), 0.0])

    @property
    def observation_space_size(self):
        return 2

    @property
    def action_space_size(self):
        return 1

    @property
    def observation_low(self):
        return np.array([0.0, 0.0])

    @property
    def observation_high(self):
        return np.array([np.inf, 0.0])

    @property
    def action_low(self):
        return -1.0

    @property
    def action_high(self):
        return 1.0

    @property
    def name(self):
        return "ScriptedEnvironment"

    @property
    def description(self):
        return "Deterministic episodes of fixed length"


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="function")
def seed_rng():
    """Seed random number generators for reproducibility."""
    np.random.seed(42)


@pytest.fixture
def constant_agent():
    return ConstantAgent()


@pytest.fixture
def scripted_env():
    return ScriptedEnvironment()


@pytest.fixture
def quiet_console():
    """Console logger that prints nothing."""
    from rlharness.loggers import ConsoleLogger
    return ConsoleLogger(verbose=False)


@pytest.fixture
def stub_registries():
    """Registry pair holding only the stub implementations above."""
    agents = AgentRegistry()
    environments = EnvironmentRegistry()
    agents.register("constant", lambda config: ConstantAgent(config.get_float("action", 0.0)))
    environments.register(
        "scripted",
        lambda config: ScriptedEnvironment(
            episode_length=config.get_int("episode_length", 1),
            render=config.get_bool("render", False),
        ),
    )
    return agents, environments
