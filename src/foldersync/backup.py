from __future__ import annotations

from pathlib import Path
import logging
import threading
from typing import Iterable

from foldersync.config import load_config, require_backup, require_create_folders
from foldersync.copy_engine import copy_recursive
from foldersync.counter import count_files
from foldersync.errors import ConfigurationError, FolderSyncError, SourceMissingError
from foldersync.exclusion import ExclusionMatcher
from foldersync.folders import create_folders
from foldersync.models import BackupReport, CopyStats, JobFailure, JobResult, SyncJob
from foldersync.progress import MSG_BACKUP_COMPLETE, ProgressCounter


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_PARTIAL_FAILURES = 2
EXIT_INVALID_CONFIG = 3


def backup_job(
    job: SyncJob,
    exclusions: Iterable[str] | ExclusionMatcher,
    progress: ProgressCounter | None = None,
    logger: logging.Logger | None = None,
) -> CopyStats:
    if not job.source.exists():
        raise SourceMissingError(job.source)
    return copy_recursive(job.source, job.destination, job.overwrite, exclusions, progress, logger=logger)


def execute_backup(
    jobs: Iterable[SyncJob],
    exclusions: Iterable[str],
    logger: logging.Logger | None = None,
    show_progress: bool = False,
) -> BackupReport:
    log = logger or logging.getLogger("foldersync.backup")
    jobs = list(jobs)
    matcher = ExclusionMatcher(exclusions)

    report = BackupReport(total_files=count_files(jobs, logger=log))
    report_lock = threading.Lock()
    progress = ProgressCounter(report.total_files, show=show_progress)

    def _run(job: SyncJob) -> None:
        log.info("Backup started: %s -> %s (overwrite=%s)", job.source, job.destination, job.overwrite)
        try:
            stats = backup_job(job, matcher, progress, logger=log)
        except FolderSyncError as exc:
            log.error("Backup failed: %s", exc)
            with report_lock:
                report.failures.append(JobFailure(job=job, error=exc))
            return
        except Exception as exc:
            log.exception("Backup failed unexpectedly for %s", job.source)
            with report_lock:
                report.failures.append(JobFailure(job=job, error=exc))
            return

        with report_lock:
            report.results.append(JobResult(job=job, stats=stats))
        log.info(
            "Backup finished: %s -> %s | copied=%s skipped_unchanged=%s skipped_existing=%s excluded=%s",
            job.source,
            job.destination,
            stats.copied,
            stats.skipped_unchanged,
            stats.skipped_no_overwrite,
            stats.excluded,
        )

    threads = [
        threading.Thread(target=_run, args=(job,), name=f"backup-{index}", daemon=True)
        for index, job in enumerate(jobs)
    ]
    with progress:
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        report.ticks = progress.value
        progress.close(MSG_BACKUP_COMPLETE)

    log.info(
        "%s: %s/%s file(s) processed, %s job(s) failed",
        MSG_BACKUP_COMPLETE,
        report.ticks,
        report.total_files,
        len(report.failures),
    )
    return report


def run_backup(
    config_path: Path,
    show_progress: bool = False,
    logger: logging.Logger | None = None,
) -> tuple[int, BackupReport]:
    log = logger or logging.getLogger("foldersync.run")

    try:
        backup = require_backup(load_config(config_path))
    except ConfigurationError as exc:
        log.error("Config error: %s", exc)
        return EXIT_INVALID_CONFIG, BackupReport()

    report = execute_backup(backup.jobs, backup.exclude, logger=log, show_progress=show_progress)
    exit_code = EXIT_SUCCESS if report.succeeded else EXIT_PARTIAL_FAILURES
    return exit_code, report


def run_create_folders(config_path: Path, logger: logging.Logger | None = None) -> tuple[int, int]:
    log = logger or logging.getLogger("foldersync.run")

    try:
        job = require_create_folders(load_config(config_path))
    except ConfigurationError as exc:
        log.error("Config error: %s", exc)
        return EXIT_INVALID_CONFIG, 0

    try:
        created = create_folders(job, logger=log)
    except FolderSyncError as exc:
        log.error("Create folders failed: %s", exc)
        return EXIT_RUNTIME_ERROR, 0

    log.info("Create folders finished: %s -> %s (%s folder(s))", job.source, job.destination, created)
    return EXIT_SUCCESS, created
