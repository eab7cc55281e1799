"""Core infrastructure for the experimentation harness.

This module provides:
- Agent / Environment contracts
- Typed configuration (text format and YAML)
- Agent and environment registries
- Episode loop and experiment runner
"""

from rlharness.core.errors import (
    HarnessError,
    ConfigError,
    RegistryError,
    DuplicateRegistrationError,
    UnknownNameError,
)
from rlharness.core.config import Config, ConfigValue, ValueKind, load_config
from rlharness.core.protocol import (
    Agent,
    AgentStats,
    Environment,
    Experience,
    StepResult,
    as_state,
)
from rlharness.core.registry import (
    Registry,
    AgentRegistry,
    EnvironmentRegistry,
    default_registries,
)
from rlharness.core.episode import EpisodeStats, run_episode
from rlharness.core.experiment import (
    ExperimentConfig,
    ExperimentRunner,
    build_runner,
    run_experiment,
)
from rlharness.core.utils import make_rng, set_random_seeds

__all__ = [
    # Errors
    "HarnessError",
    "ConfigError",
    "RegistryError",
    "DuplicateRegistrationError",
    "UnknownNameError",
    # Config
    "Config",
    "ConfigValue",
    "ValueKind",
    "load_config",
    # Contracts
    "Agent",
    "AgentStats",
    "Environment",
    "Experience",
    "StepResult",
    "as_state",
    # Registries
    "Registry",
    "AgentRegistry",
    "EnvironmentRegistry",
    "default_registries",
    # Loops
    "EpisodeStats",
    "run_episode",
    "ExperimentConfig",
    "ExperimentRunner",
    "build_runner",
    "run_experiment",
    # Utils
    "make_rng",
    "set_random_seeds",
]
