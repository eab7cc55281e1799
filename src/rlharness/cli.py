#!/usr/bin/env python3
"""Command-line entry point for running experiments.

Usage:
    rlharness --config configs/cartpole_rule_based.json
    rlharness --agent rule_based --env cartpole --episodes 20 --max-steps 500
    rlharness --config configs/pendulum_random.yaml --eval
    rlharness --list

Example config (text format):
    {
      # which implementations to build
      "agent": "rule_based",
      "environment": "cartpole",
      // experiment settings
      "num_episodes": 20,
      "max_steps_per_episode": 500,
      "log_frequency": 5,
      "log_file": "outputs/cartpole.csv",
      "max_force": 10.0,
    }

Agent and environment parameters are read from the ``agent_config`` /
``environment_config`` sections of a YAML config, or from the top level when a
section is missing.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rlharness.core.config import Config, load_config
from rlharness.core.errors import HarnessError
from rlharness.core.experiment import ExperimentConfig, build_runner
from rlharness.core.registry import AgentRegistry, EnvironmentRegistry, default_registries
from rlharness.core.utils import set_random_seeds
from rlharness.loggers import ConsoleLogger, setup_logging
from rlharness.metrics import MetricsTracker

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Pluggable RL experiment harness',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a config file (.json-like text or .yaml)',
    )

    parser.add_argument(
        '--agent',
        type=str,
        default=None,
        help='Registered agent name (overrides config)',
    )

    parser.add_argument(
        '--env',
        type=str,
        default=None,
        help='Registered environment name (overrides config)',
    )

    parser.add_argument(
        '--episodes',
        type=int,
        default=None,
        help='Number of episodes (overrides config)',
    )

    parser.add_argument(
        '--max-steps',
        type=int,
        default=None,
        help='Step cap per episode (overrides config)',
    )

    parser.add_argument(
        '--render',
        action='store_true',
        help='Enable rendering (default: False)',
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for numpy, the agent and the environment',
    )

    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='CSV output path; pass an empty string to disable',
    )

    parser.add_argument(
        '--eval',
        action='store_true',
        help='Run with training mode off and skip CSV/model output',
    )

    parser.add_argument(
        '--list',
        action='store_true',
        help='List registered agents and environments, then exit',
    )

    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        help='Logging level (LOG_LEVEL env var takes precedence)',
    )

    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Disable console output',
    )

    return parser.parse_args(argv)


def resolve_cli_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply CLI argument overrides to ``config`` (in place) and return it."""
    overrides = {
        'agent': args.agent,
        'environment': args.env,
        'num_episodes': args.episodes,
        'max_steps_per_episode': args.max_steps,
        'log_file': args.log_file,
    }
    for key, value in overrides.items():
        if value is not None:
            config.set(key, value)

    if args.render:
        config.set('render', True)

    if args.seed is not None:
        config.set('seed', args.seed)
        for section in ('agent_config', 'environment_config'):
            if config.has_section(section):
                config.get_section(section).set('seed', args.seed)

    return config


def list_registered(console: ConsoleLogger, agents: AgentRegistry, environments: EnvironmentRegistry):
    console.print_config(
        {name: 'agent' for name in sorted(agents.list_registered())},
        title="Registered Agents",
    )
    console.print_config(
        {name: 'environment' for name in sorted(environments.list_registered())},
        title="Registered Environments",
    )


def evaluate(config: Config, agents, environments, console: ConsoleLogger):
    """Run the configured agent with training off and print the summary."""
    experiment = ExperimentConfig.from_config(config)
    with build_runner(config, agents, environments, console) as runner:
        console.print_header(
            "Evaluation",
            f"{runner.env.name} / {runner.agent.name} - {experiment.num_episodes} episodes",
        )
        results = runner.evaluate(experiment.num_episodes, experiment.max_steps_per_episode)

    tracker = MetricsTracker()
    for stats in results:
        tracker.add(stats)
    console.print_summary(tracker.summary().to_dict(), title="Evaluation Summary")
    return results


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    console = ConsoleLogger(verbose=not args.quiet)
    agents, environments = default_registries()

    if args.list:
        list_registered(console, agents, environments)
        return 0

    try:
        config = load_config(args.config) if args.config else Config()
        config = resolve_cli_overrides(config, args)

        if args.seed is not None:
            set_random_seeds(args.seed)

        if args.eval:
            evaluate(config, agents, environments, console)
        else:
            experiment = ExperimentConfig.from_config(config)
            with build_runner(config, agents, environments, console) as runner:
                runner.run(experiment)
    except HarnessError as exc:
        logger.debug("Experiment aborted", exc_info=True)
        console.print_error(str(exc))
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
