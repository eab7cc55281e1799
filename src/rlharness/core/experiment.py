"""Experiment controller: runs many episodes, tracks statistics, reports results."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import List, Optional, Union

from rlharness.loggers import ConsoleLogger, CSVLogger
from rlharness.metrics import MOVING_AVERAGE_WINDOW, ExperimentSummary, MetricsTracker

from .config import Config, load_config
from .episode import DEFAULT_FRAME_DELAY, EpisodeStats, run_episode
from .errors import ConfigError
from .protocol import Agent, Environment
from .registry import AgentRegistry, EnvironmentRegistry, default_registries

logger = logging.getLogger(__name__)


@dataclass
class ExperimentConfig:
    """Run parameters for ``ExperimentRunner.run``.

    Attributes:
        num_episodes: Number of episodes to run
        max_steps_per_episode: Step cap per episode
        render: Enable rendering at all
        render_frequency: Render every N-th episode (episodes 1, N+1, 2N+1, ...)
        log_frequency: Report progress every N episodes
        log_file: CSV output path; empty string disables it
        save_model: Call ``agent.save_model`` once after the run
        model_save_path: Path handed to ``agent.save_model``
        frame_delay: Seconds to sleep after each rendered frame
    """
    num_episodes: int = 1000
    max_steps_per_episode: int = 1000
    render: bool = False
    render_frequency: int = 10
    log_frequency: int = 100
    log_file: str = "experiment.log"
    save_model: bool = False
    model_save_path: str = "model.bin"
    frame_delay: float = DEFAULT_FRAME_DELAY

    def __post_init__(self):
        if self.num_episodes < 0:
            raise ConfigError(f"num_episodes must be >= 0, got {self.num_episodes}")
        for name in ("max_steps_per_episode", "render_frequency", "log_frequency"):
            value = getattr(self, name)
            if value < 1:
                raise ConfigError(f"{name} must be >= 1, got {value}")
        if self.frame_delay < 0:
            raise ConfigError(f"frame_delay must be >= 0, got {self.frame_delay}")

    @classmethod
    def from_config(cls, config: Config) -> "ExperimentConfig":
        """Read every field from ``config``, falling back to the defaults.

        Each field is looked up with its default's kind, so a mistyped value
        (e.g. ``"num_episodes": 10.0``) silently keeps the default.
        """
        return cls(**{f.name: config.get(f.name, f.default) for f in fields(cls)})

    def to_dict(self) -> dict:
        return asdict(self)


class ExperimentRunner:
    """Drives an agent against an environment for many episodes.

    The runner owns both instances for its lifetime and closes the
    environment on ``close()`` (or when used as a context manager).

    Example:
        >>> with ExperimentRunner(env, agent) as runner:
        ...     stats = runner.run(ExperimentConfig(num_episodes=50, log_file=""))
    """

    def __init__(
        self,
        env: Environment,
        agent: Agent,
        console: Optional[ConsoleLogger] = None,
        tracker: Optional[MetricsTracker] = None,
    ):
        if env is None or agent is None:
            raise ValueError("Environment and Agent must be valid")
        self.env = env
        self.agent = agent
        self.console = console if console is not None else ConsoleLogger()
        self.tracker = tracker if tracker is not None else MetricsTracker()

    def run(self, config: ExperimentConfig) -> List[EpisodeStats]:
        """Run ``config.num_episodes`` episodes and report the results.

        Returns:
            Per-episode statistics in episode order
        """
        self.tracker.clear()
        all_stats: List[EpisodeStats] = []

        self.console.print_header(
            "Experiment",
            f"{self.env.name} / {self.agent.name} - {config.num_episodes} episodes",
        )

        for index in range(config.num_episodes):
            if self.env.stop_requested():
                logger.info("Stop requested by environment; ending after %d episodes", index)
                self.console.print_warning(f"Stopped early after {index} episodes")
                break

            render = config.render and index % config.render_frequency == 0
            self.env.set_render_mode(render)
            stats = self.run_episode(config.max_steps_per_episode, render, config.frame_delay)
            stats.episode = index + 1

            all_stats.append(stats)
            self.tracker.add(stats)

            if (index + 1) % config.log_frequency == 0:
                self._report_progress(stats)

            self.agent.reset()

        if all_stats:
            self.console.print_summary(self.summarize().to_dict())

        if config.log_file:
            CSVLogger(config.log_file).write_all(all_stats)

        if config.save_model and config.model_save_path:
            self.agent.save_model(config.model_save_path)
            logger.info("Model saved to: %s", config.model_save_path)
            self.console.print_success(f"Model saved to: {config.model_save_path}")

        return all_stats

    def run_episode(
        self,
        max_steps: int = 1000,
        render: bool = False,
        frame_delay: float = DEFAULT_FRAME_DELAY,
    ) -> EpisodeStats:
        """Run a single episode (useful for evaluation)."""
        return run_episode(self.env, self.agent, max_steps, render=render, frame_delay=frame_delay)

    def run_from_config(self, path: Union[str, Path]) -> List[EpisodeStats]:
        """Load an ``ExperimentConfig`` from a config file and run it."""
        return self.run(ExperimentConfig.from_config(load_config(path)))

    def evaluate(self, num_episodes: int, max_steps: int = 1000) -> List[EpisodeStats]:
        """Run episodes with training mode off, restoring the previous mode afterwards."""
        was_training = self.agent.is_training()
        self.agent.set_training_mode(False)
        results: List[EpisodeStats] = []
        try:
            for index in range(num_episodes):
                if self.env.stop_requested():
                    break
                stats = self.run_episode(max_steps)
                stats.episode = index + 1
                results.append(stats)
                self.agent.reset()
        finally:
            self.agent.set_training_mode(was_training)
        return results

    def summarize(self) -> ExperimentSummary:
        return self.tracker.summary()

    def moving_average(self, window: int = MOVING_AVERAGE_WINDOW) -> float:
        return self.tracker.moving_average(window)

    def _report_progress(self, stats: EpisodeStats):
        self.console.log_episode(
            episode=stats.episode,
            steps=stats.steps,
            reward=stats.total_reward,
            terminated=stats.terminated,
            reason=stats.termination_reason,
        )
        window = self.tracker.window_size(MOVING_AVERAGE_WINDOW)
        self.console.log_moving_average(window, self.tracker.moving_average(window))

    def close(self):
        self.env.close()

    def __enter__(self) -> "ExperimentRunner":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return None


DEFAULT_AGENT = "random"
DEFAULT_ENVIRONMENT = "cartpole"


def _component_config(config: Config, section: str) -> Config:
    if config.has_section(section):
        return config.get_section(section)
    return config


def _environment_config(config: Config) -> Config:
    """Environment parameters, inheriting the top-level ``render`` switch when the section omits it."""
    env_config = _component_config(config, "environment_config")
    if env_config is config or env_config.has("render") or not config.has("render"):
        return env_config
    env_config = env_config.copy()
    env_config.set("render", config.get_value("render"))
    return env_config


def build_runner(
    config: Config,
    agents: Optional[AgentRegistry] = None,
    environments: Optional[EnvironmentRegistry] = None,
    console: Optional[ConsoleLogger] = None,
) -> ExperimentRunner:
    """Create the named environment and agent from ``config`` and wrap them in a runner.

    ``config`` names the implementations under the ``agent`` and
    ``environment`` keys (defaults ``random`` / ``cartpole``). Their parameters
    come from the ``agent_config`` / ``environment_config`` sections, or from the top-level
    config when a section is absent. A top-level ``render`` flag is passed
    on to an ``environment_config`` section that does not set its own. If the
    agent cannot be built the environment is closed before the error propagates.

    Args:
        config: Experiment configuration
        agents: Agent registry (built-ins when omitted)
        environments: Environment registry (built-ins when omitted)
        console: Console logger passed to the runner
    """
    if agents is None or environments is None:
        default_agents, default_envs = default_registries()
        agents = agents if agents is not None else default_agents
        environments = environments if environments is not None else default_envs

    env_name = config.get_str("environment", DEFAULT_ENVIRONMENT)
    agent_name = config.get_str("agent", DEFAULT_AGENT)

    env = environments.create(env_name, _environment_config(config))
    try:
        agent = agents.create(agent_name, _component_config(config, "agent_config"))
    except BaseException:
        env.close()
        raise
    return ExperimentRunner(env, agent, console=console)


def run_experiment(
    config: Config,
    agents: Optional[AgentRegistry] = None,
    environments: Optional[EnvironmentRegistry] = None,
    console: Optional[ConsoleLogger] = None,
) -> List[EpisodeStats]:
    """Build agent and environment from ``config`` (see ``build_runner``) and run.

    The experiment config is validated before anything is constructed, and
    the environment is closed whether the run completes or raises.
    """
    experiment_config = ExperimentConfig.from_config(config)
    with build_runner(config, agents, environments, console) as runner:
        return runner.run(experiment_config)


__all__ = [
    "DEFAULT_AGENT",
    "DEFAULT_ENVIRONMENT",
    "ExperimentConfig",
    "ExperimentRunner",
    "build_runner",
    "run_experiment",
]
