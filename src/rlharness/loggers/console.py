"""Rich console reporting for experiment runs.

Prints the run header, periodic episode lines with the moving average, and
the end-of-run summary table.
"""

from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table


def _format_metric(key: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, float):
        return str(value)
    if 'rate' in key.lower():
        return f"{value:.1%}"
    return f"{value:.2f}"


class ConsoleLogger:
    """Logger for rich terminal output during experiments.

    Example:
        >>> from rlharness.loggers import ConsoleLogger
        >>>
        >>> logger = ConsoleLogger()
        >>> logger.print_header("Experiment", "CartPole-v1 / RuleBasedAgent - 100 episodes")
        >>> logger.log_episode(episode=10, steps=200, reward=200.0, terminated=True,
        ...                    reason="TimeLimit")
        >>> logger.log_moving_average(window=10, value=187.5)
    """

    def __init__(self, verbose: bool = True, console: Optional[Console] = None):
        """Initialize console logger.

        Args:
            verbose: Whether to print anything at all
            console: Console to print to (a new stdout console by default)
        """
        self.console = console if console is not None else Console()
        self.verbose = verbose

    def print_header(self, title: str, subtitle: Optional[str] = None):
        """Print formatted header."""
        if not self.verbose:
            return
        self.console.rule(f"[bold blue]{title}[/bold blue]")
        if subtitle:
            self.console.print(f"[dim]{subtitle}[/dim]")
        self.console.print()

    def print_config(self, config: Dict[str, Any], title: str = "Configuration"):
        """Print configuration as formatted table."""
        if not self.verbose:
            return
        table = Table(title=title, show_header=True)
        table.add_column("Parameter", style="cyan")
        table.add_column("Value", style="yellow")

        for key, value in config.items():
            table.add_row(str(key), str(value))

        self.console.print(table)
        self.console.print()

    def log_episode(
        self,
        episode: int,
        steps: int,
        reward: float,
        terminated: bool,
        reason: str = "",
    ):
        """Log a single episode line.

        Args:
            episode: Episode number (1-based)
            steps: Number of steps taken
            reward: Total episode reward
            terminated: Whether the environment signalled done
            reason: Termination reason reported by the environment
        """
        if not self.verbose:
            return

        if terminated:
            status = "[green]Yes[/green]" + (f" ({reason})" if reason else "")
        else:
            status = "[yellow]No[/yellow]"
        self.console.print(
            f"[dim]Episode {episode:4d}[/dim] | Steps: {steps:4d} | "
            f"Reward: {reward:8.2f} | Terminated: {status}"
        )

    def log_moving_average(self, window: int, value: float):
        """Log the trailing moving average of total reward."""
        if not self.verbose:
            return
        self.console.print(
            f"[dim]Moving average (last {window} episodes):[/dim] {value:.2f}"
        )

    def print_summary(self, stats: Dict[str, Any], title: str = "Experiment Summary"):
        """Print run summary as formatted table.

        Float values whose key mentions ``rate`` are shown as percentages.
        """
        if not self.verbose:
            return
        self.console.print()
        table = Table(title=title, show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="yellow", justify="right")

        for key, value in stats.items():
            table.add_row(key.replace('_', ' ').title(), _format_metric(key, value))

        self.console.print(table)

    def print_success(self, message: str):
        if self.verbose:
            self.console.print(f"[green]✓[/green] {message}")

    def print_warning(self, message: str):
        if self.verbose:
            self.console.print(f"[yellow]⚠[/yellow] {message}")

    def print_error(self, message: str):
        # errors are shown even when not verbose
        self.console.print(f"[red]✗[/red] {message}")

    def print_info(self, message: str):
        if self.verbose:
            self.console.print(f"[blue]ℹ[/blue] {message}")


__all__ = ['ConsoleLogger']
