from __future__ import annotations

import logging
import os
from pathlib import Path

from foldersync.errors import SourceMissingError, TraversalError
from foldersync.models import FolderJob


def create_folders(job: FolderJob, logger: logging.Logger | None = None) -> int:
    log = logger or logging.getLogger("foldersync.folders")

    if not job.source.exists():
        raise SourceMissingError(job.source)

    created = 0
    pending: list[tuple[Path, Path]] = [(job.source, job.destination)]
    while pending:
        source, destination = pending.pop()
        if not source.is_dir():
            continue

        if not destination.exists():
            try:
                destination.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise TraversalError(destination, f"Failed to create directory ({exc.strerror or exc})") from exc
            log.info("Created folder: %s", destination)
        else:
            log.debug("Folder already exists: %s", destination)
        created += 1

        try:
            with os.scandir(source) as entries:
                children = [
                    (Path(entry.path), destination / entry.name) for entry in entries if entry.is_dir()
                ]
        except OSError as exc:
            raise TraversalError(source, f"Failed to read directory ({exc.strerror or exc})") from exc
        pending.extend(reversed(children))

    return created
