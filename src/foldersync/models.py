from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SyncJob:
    source: Path
    destination: Path
    overwrite: bool = False


@dataclass(frozen=True, slots=True)
class FolderJob:
    source: Path
    destination: Path


class CopyDecision(str, Enum):
    EXCLUDED = "excluded"
    DIRECTORY_CREATE = "directory-create"
    FILE_COPY = "file-copy"
    FILE_SKIP_UNCHANGED = "file-skip-unchanged"
    FILE_SKIP_NO_OVERWRITE = "file-skip-no-overwrite"


@dataclass(slots=True)
class CopyStats:
    copied: int = 0
    skipped_unchanged: int = 0
    skipped_no_overwrite: int = 0
    excluded: int = 0
    directories: int = 0

    @property
    def skipped(self) -> int:
        return self.skipped_unchanged + self.skipped_no_overwrite

    def record(self, decision: CopyDecision) -> None:
        if decision is CopyDecision.FILE_COPY:
            self.copied += 1
        elif decision is CopyDecision.FILE_SKIP_UNCHANGED:
            self.skipped_unchanged += 1
        elif decision is CopyDecision.FILE_SKIP_NO_OVERWRITE:
            self.skipped_no_overwrite += 1
        elif decision is CopyDecision.EXCLUDED:
            self.excluded += 1
        elif decision is CopyDecision.DIRECTORY_CREATE:
            self.directories += 1


@dataclass(slots=True)
class JobResult:
    job: SyncJob
    stats: CopyStats


@dataclass(slots=True)
class JobFailure:
    job: SyncJob
    error: Exception


@dataclass(slots=True)
class BackupReport:
    total_files: int = 0
    ticks: int = 0
    results: list[JobResult] = field(default_factory=list)
    failures: list[JobFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def failed_jobs(self) -> list[SyncJob]:
        return [failure.job for failure in self.failures]

    @property
    def copied(self) -> int:
        return sum(result.stats.copied for result in self.results)

    @property
    def skipped(self) -> int:
        return sum(result.stats.skipped for result in self.results)
