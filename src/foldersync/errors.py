from __future__ import annotations

from pathlib import Path


class FolderSyncError(Exception):
    pass


class ConfigurationError(FolderSyncError):
    pass


class SourceMissingError(FolderSyncError):
    def __init__(self, source: Path) -> None:
        super().__init__(f"Source folder does not exist : {source}")
        self.source = source


class TraversalError(FolderSyncError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class CountingError(FolderSyncError):
    pass
