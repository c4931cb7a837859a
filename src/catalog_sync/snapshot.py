"""
Snapshot file loading.

The first line of a snapshot is a header and is never validated as data.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import SnapshotLoadError

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Raw rows of a snapshot file, header split off."""

    path: str
    header: str | None
    rows: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)


def load_snapshot(path: str | Path, encoding: str = "utf-8") -> Snapshot:
    """
    Read a snapshot file into memory.

    Rows end at ``"\n"`` only; a trailing ``"\r"`` is dropped from each row.
    The newline terminating the last row does not produce an extra empty row.
    Blank lines inside the file are kept and fail parsing individually.

    Args:
        path: Snapshot file path
        encoding: File encoding

    Returns:
        Loaded snapshot

    Raises:
        SnapshotLoadError: If the file cannot be read
    """
    path = Path(path)
    try:
        # newline="" keeps line endings untranslated
        with path.open(encoding=encoding, newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotLoadError(str(path), str(e)) from e

    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    lines = [line.removesuffix("\r") for line in lines]
    if not lines:
        logger.warning(f"Snapshot {path} is empty")
        return Snapshot(path=str(path), header=None, rows=[])

    snapshot = Snapshot(path=str(path), header=lines[0], rows=lines[1:])
    logger.debug(f"Loaded {len(snapshot)} data rows from {path}")
    return snapshot
