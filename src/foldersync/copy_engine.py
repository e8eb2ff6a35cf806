from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import Iterable

from foldersync.errors import TraversalError
from foldersync.exclusion import ExclusionMatcher
from foldersync.models import CopyDecision, CopyStats
from foldersync.progress import ProgressCounter


def _is_unchanged(source_file: Path, destination_file: Path) -> bool:
    try:
        source_stat = source_file.stat()
        destination_stat = destination_file.stat()
    except OSError:
        return False

    return (
        source_stat.st_size == destination_stat.st_size
        and source_stat.st_mtime_ns == destination_stat.st_mtime_ns
        and source_file.name == destination_file.name
    )


def _safe_copy(source_file: Path, destination_file: Path) -> None:
    destination_file.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(delete=False, dir=str(destination_file.parent)) as tmp:
        tmp_path = Path(tmp.name)
    try:
        shutil.copy2(source_file, tmp_path)
        tmp_path.replace(destination_file)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def decide(source: Path, destination: Path, overwrite: bool, matcher: ExclusionMatcher) -> CopyDecision:
    if matcher.matches(source):
        return CopyDecision.EXCLUDED
    if source.is_dir():
        return CopyDecision.DIRECTORY_CREATE
    if not destination.exists():
        return CopyDecision.FILE_COPY
    if not overwrite:
        return CopyDecision.FILE_SKIP_NO_OVERWRITE
    if _is_unchanged(source, destination):
        return CopyDecision.FILE_SKIP_UNCHANGED
    return CopyDecision.FILE_COPY


def _children(source: Path, destination: Path) -> list[tuple[Path, Path]]:
    try:
        with os.scandir(source) as entries:
            return [(Path(entry.path), destination / entry.name) for entry in entries]
    except OSError as exc:
        raise TraversalError(source, f"Failed to read directory ({exc.strerror or exc})") from exc


def copy_recursive(
    source: Path,
    destination: Path,
    overwrite: bool,
    exclusions: Iterable[str] | ExclusionMatcher,
    progress: ProgressCounter | None = None,
    logger: logging.Logger | None = None,
) -> CopyStats:
    log = logger or logging.getLogger("foldersync.copy")
    matcher = exclusions if isinstance(exclusions, ExclusionMatcher) else ExclusionMatcher(exclusions)
    stats = CopyStats()

    pending: list[tuple[Path, Path]] = [(Path(source), Path(destination))]
    while pending:
        current_source, current_destination = pending.pop()
        decision = decide(current_source, current_destination, overwrite, matcher)
        stats.record(decision)

        if decision is CopyDecision.EXCLUDED:
            log.info("Skipping excluded item : %s", current_source)
            continue

        if decision is CopyDecision.DIRECTORY_CREATE:
            try:
                current_destination.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise TraversalError(
                    current_destination, f"Failed to create directory ({exc.strerror or exc})"
                ) from exc
            # reversed so the stack pops children in listing order
            pending.extend(reversed(_children(current_source, current_destination)))
            continue

        if decision is CopyDecision.FILE_SKIP_NO_OVERWRITE:
            log.info("Skipping existing file: %s", current_destination)
        elif decision is CopyDecision.FILE_SKIP_UNCHANGED:
            log.info("Skipping unchanged file: %s", current_destination)
        else:
            try:
                _safe_copy(current_source, current_destination)
            except OSError as exc:
                raise TraversalError(current_source, f"Failed to copy ({exc.strerror or exc})") from exc
            log.info("Copied: %s to %s", current_source, current_destination)

        if progress is not None:
            progress.tick()

    return stats
