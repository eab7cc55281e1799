"""Name -> constructor registries for agents and environments.

Registries are plain objects built by the caller and handed to experiment
setup; there is no process-wide registry. ``default_registries()`` returns a
fresh pair with the built-in implementations already registered.

Example:
    >>> agents, environments = default_registries()
    >>> env = environments.create("cartpole", Config.create({"seed": 1}))
    >>> agent = agents.create("rule_based", Config())
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from .config import Config
from .errors import DuplicateRegistrationError, UnknownNameError
from .protocol import Agent, Environment

logger = logging.getLogger(__name__)

T = TypeVar("T")
Constructor = Callable[[Config], T]


class Registry(Generic[T]):
    """Add-only mapping from a unique name to a ``(Config) -> instance`` constructor."""

    kind = "component"

    def __init__(self) -> None:
        self._constructors: Dict[str, Constructor] = {}

    def register(self, name: str, constructor: Constructor) -> None:
        """Bind ``name`` to ``constructor``.

        Raises:
            DuplicateRegistrationError: If ``name`` is already bound
        """
        if name in self._constructors:
            raise DuplicateRegistrationError(self.kind, name)
        self._constructors[name] = constructor
        logger.debug("Registered %s '%s'", self.kind, name)

    def register_as(self, name: str) -> Callable[[Constructor], Constructor]:
        """Decorator form of ``register``; returns the constructor unchanged."""

        def decorator(constructor: Constructor) -> Constructor:
            self.register(name, constructor)
            return constructor

        return decorator

    def create(self, name: str, config: Optional[Config] = None) -> T:
        """Instantiate the implementation bound to ``name``.

        Raises:
            UnknownNameError: If ``name`` has not been registered
        """
        constructor = self._constructors.get(name)
        if constructor is None:
            raise UnknownNameError(self.kind, name, self._constructors)
        return constructor(config if config is not None else Config())

    def list_registered(self) -> List[str]:
        return list(self._constructors)

    def is_registered(self, name: str) -> bool:
        return name in self._constructors

    def clear(self) -> None:
        """Drop every registration. Intended for test isolation only."""
        self._constructors.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self._constructors)!r})"


class AgentRegistry(Registry[Agent]):
    kind = "agent"


class EnvironmentRegistry(Registry[Environment]):
    kind = "environment"


def default_registries() -> Tuple[AgentRegistry, EnvironmentRegistry]:
    """Build a new registry pair holding the built-in agents and environments."""
    from rlharness.agents import register_builtin_agents
    from rlharness.envs import register_builtin_environments

    agents = AgentRegistry()
    environments = EnvironmentRegistry()
    register_builtin_agents(agents)
    register_builtin_environments(environments)
    return agents, environments


__all__ = [
    "Constructor",
    "Registry",
    "AgentRegistry",
    "EnvironmentRegistry",
    "default_registries",
]
