"""Pluggable reinforcement-learning experiment harness.

Agents and environments implement the contracts in ``rlharness.core.protocol``,
are registered by name on an ``AgentRegistry`` / ``EnvironmentRegistry``, and
are driven episode by episode by ``ExperimentRunner``.
"""

from rlharness.core import (
    Agent,
    AgentRegistry,
    Config,
    ConfigError,
    DuplicateRegistrationError,
    Environment,
    EnvironmentRegistry,
    EpisodeStats,
    Experience,
    ExperimentConfig,
    ExperimentRunner,
    HarnessError,
    StepResult,
    UnknownNameError,
    default_registries,
    load_config,
    run_episode,
    run_experiment,
)

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentRegistry",
    "Config",
    "ConfigError",
    "DuplicateRegistrationError",
    "Environment",
    "EnvironmentRegistry",
    "EpisodeStats",
    "Experience",
    "ExperimentConfig",
    "ExperimentRunner",
    "HarnessError",
    "StepResult",
    "UnknownNameError",
    "default_registries",
    "load_config",
    "run_episode",
    "run_experiment",
]
