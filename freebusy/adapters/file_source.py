"""
Snapshot source backed by a local JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..domain.exceptions import SnapshotError
from ..schemas import FreeBusySnapshot

logger = logging.getLogger(__name__)

SAMPLE_SNAPSHOT_PATH = Path(__file__).parent / "sample_snapshot.json"


class FileSnapshotSource:
    """
    Reads a free/busy snapshot from disk.

    Without a path the bundled sample snapshot is used, which makes the CLI
    usable without access to the availability API.
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize the source.

        Args:
            path: JSON file in the availability API response format
        """
        self.path = Path(path) if path is not None else SAMPLE_SNAPSHOT_PATH

    def load(self) -> FreeBusySnapshot:
        """
        Load and validate the snapshot.

        Raises:
            SnapshotError: If the file is missing, unreadable or invalid
        """
        logger.debug("Loading snapshot from %s", self.path)

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except FileNotFoundError as exc:
            raise SnapshotError(f"Snapshot file not found: {self.path}") from exc
        except OSError as exc:
            raise SnapshotError(f"Could not read snapshot file {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Invalid JSON in {self.path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise SnapshotError(f"Snapshot file {self.path} is not valid UTF-8: {exc}") from exc

        return FreeBusySnapshot.from_payload(payload)

    async def fetch_snapshot(self) -> FreeBusySnapshot:
        return self.load()
