"""
Snapshot Scheduler

Decides when the surrogate writes a visualization snapshot. A call with a
negative iteration is the final call of a run; any other call is an
intermediate (per-iteration) call.

    mode    | final call | intermediate call
    --------+------------+------------------
    final   | write      | skip
    all     | skip       | write
    none    | skip       | skip
"""

import contextlib
import logging
import os
from typing import Optional, Protocol

from surrogate_th.exceptions import SnapshotIOError

logger = logging.getLogger(__name__)


SNAPSHOT_MODES = ("final", "all", "none")
SNAPSHOT_EXTENSION = ".vtk"


class SnapshotWriter(Protocol):
    """Anything that can serialize the current field state to a file."""

    def write(self, filename: str) -> None:
        ...


class SnapshotScheduler:
    """Maps (timestep, iteration) calls onto snapshot writes.

    Example:
        >>> scheduler = SnapshotScheduler("final", "bundle", writer)
        >>> scheduler.maybe_write(5, -1)
        'bundle.vtk'
        >>> scheduler.maybe_write(5, 2) is None
        True
    """

    def __init__(self, mode: str, basename: Optional[str], writer: Optional[SnapshotWriter]):
        """
        Args:
            mode: 'final', 'all' or 'none'
            basename: Output file name without extension; None disables output
            writer: Serializer invoked with the target filename
        """
        if mode not in SNAPSHOT_MODES:
            raise ValueError(f"Unknown snapshot mode '{mode}', expected one of {SNAPSHOT_MODES}")
        if basename is None or writer is None:
            mode = "none"
        self.mode = mode
        self.basename = basename
        self.writer = writer

    @staticmethod
    def is_final(iteration: int) -> bool:
        return iteration < 0

    def should_write(self, timestep: int, iteration: int) -> bool:
        if self.mode == "none":
            return False
        if self.is_final(iteration):
            return self.mode == "final"
        return self.mode == "all"

    def filename(self, timestep: int, iteration: int) -> str:
        name = self.basename
        if iteration >= 0 and timestep >= 0:
            name += f"_t{timestep}_i{iteration}"
        return name + SNAPSHOT_EXTENSION

    def maybe_write(self, timestep: int, iteration: int) -> Optional[str]:
        """
        Write a snapshot if the configured mode asks for this call.

        Returns:
            The written filename, or None if the call was skipped

        Raises:
            SnapshotIOError: If the writer fails; a partial file is removed
        """
        if not self.should_write(timestep, iteration):
            return None

        filename = self.filename(timestep, iteration)
        logger.info(f"Writing VTK file: {filename}")
        try:
            self.writer.write(filename)
        except (OSError, UnicodeError) as e:
            with contextlib.suppress(OSError):
                if os.path.exists(filename):
                    os.remove(filename)
            raise SnapshotIOError(f"Failed to write snapshot {filename}: {e}", filename) from e
        return filename
