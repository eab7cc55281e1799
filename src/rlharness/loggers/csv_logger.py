"""CSV export of per-episode statistics.

Writes one row per episode with a fixed header::

    episode,steps,total_reward,terminated,termination_reason

Booleans are written as ``true`` / ``false``.
"""

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Union

if TYPE_CHECKING:
    from rlharness.core.episode import EpisodeStats

logger = logging.getLogger(__name__)

FIELDNAMES = ['episode', 'steps', 'total_reward', 'terminated', 'termination_reason']


class CSVLogger:
    """Logger for exporting episode statistics to a CSV file.

    Rows can be streamed with ``log_episode`` or written in one go with
    ``write_all``.

    Example:
        >>> with CSVLogger("outputs/run_001/experiment.csv") as csv_logger:
        ...     for stats in all_stats:
        ...         csv_logger.log_episode(stats)
    """

    def __init__(self, path: Union[str, Path], enabled: bool = True):
        """Initialize CSV logger.

        Args:
            path: Output CSV file (parent directories are created)
            enabled: Enable/disable logging (default: True)
        """
        self.path = Path(path)
        self.enabled = enabled

        # Opened on first write
        self._file = None
        self._writer = None

    def log_episode(self, stats: "EpisodeStats"):
        """Append one episode row."""
        if not self.enabled:
            return
        if self._writer is None:
            self._open()
        self._writer.writerow(self._row(stats))
        self._file.flush()

    def write_all(self, all_stats: Iterable["EpisodeStats"]):
        """Write the header and every row, replacing any previous content."""
        if not self.enabled:
            return
        self.close()
        self._open()
        for stats in all_stats:
            self._writer.writerow(self._row(stats))
        self.close()
        logger.info("Statistics logged to: %s", self.path)

    def _open(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, 'w', newline='', encoding='utf-8')
        self._writer = csv.DictWriter(
            self._file, fieldnames=FIELDNAMES, extrasaction='ignore', lineterminator='\n'
        )
        self._writer.writeheader()

    @staticmethod
    def _row(stats: "EpisodeStats") -> dict:
        row = stats.to_dict()
        row['terminated'] = 'true' if stats.terminated else 'false'
        return row

    def close(self):
        """Close the CSV file and flush buffers."""
        if self._file is not None:
            self._file.close()
        self._file = None
        self._writer = None

    def __enter__(self) -> "CSVLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ['CSVLogger', 'FIELDNAMES']
