"""Built-in environments.

- ``cartpole``: numpy cart-pole with a continuous force action
- ``gym``: adapter for Gymnasium environments with a single continuous action
"""

from rlharness.envs.cartpole import CartPoleEnv
from rlharness.envs.gym_adapter import GymEnvironment


def register_builtin_environments(registry):
    """Register all built-in environments on ``registry``."""
    registry.register("cartpole", CartPoleEnv.from_config)
    registry.register("gym", GymEnvironment.from_config)


__all__ = ["CartPoleEnv", "GymEnvironment", "register_builtin_environments"]
