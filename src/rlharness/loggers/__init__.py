"""Logging system for experiment runs.

Provides rich console output, CSV export of per-episode rows, and the
process-wide logging setup.

Example usage:
    >>> from rlharness.loggers import ConsoleLogger, CSVLogger, setup_logging
    >>>
    >>> setup_logging("INFO")
    >>> console_logger = ConsoleLogger()
    >>> console_logger.print_header("Experiment")
    >>> CSVLogger("experiment.log").write_all(all_stats)
"""

from .console import ConsoleLogger
from .csv_logger import CSVLogger, FIELDNAMES
from .setup import get_log_level, setup_logging

__all__ = ['ConsoleLogger', 'CSVLogger', 'FIELDNAMES', 'get_log_level', 'setup_logging']
