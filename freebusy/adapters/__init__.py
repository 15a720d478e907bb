"""
Adapters layer - snapshot sources (local file, availability API).
"""

from .file_source import FileSnapshotSource
from .http_source import HttpSnapshotSource

__all__ = ["FileSnapshotSource", "HttpSnapshotSource"]
