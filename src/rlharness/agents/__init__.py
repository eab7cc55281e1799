"""Built-in agents.

- ``random``: uniform random baseline
- ``rule_based``: bang-bang cart-pole controller
"""

from rlharness.agents.random_agent import RandomAgent
from rlharness.agents.rule_based import RuleBasedAgent


def register_builtin_agents(registry):
    """Register all built-in agents on ``registry``."""
    registry.register("random", RandomAgent.from_config)
    registry.register("rule_based", RuleBasedAgent.from_config)


__all__ = ["RandomAgent", "RuleBasedAgent", "register_builtin_agents"]
