from __future__ import annotations

import logging
import os
from pathlib import Path
import threading
from typing import Iterable

from foldersync.errors import CountingError
from foldersync.models import SyncJob


def count_tree(root: Path) -> int:
    if not root.exists():
        return 0
    if not root.is_dir():
        return 1

    count = 0
    pending = [root]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    if entry.is_dir():
                        pending.append(Path(entry.path))
                    else:
                        count += 1
        except OSError as exc:
            raise CountingError(f"Failed to count files in {current}: {exc}") from exc
    return count


def count_files(jobs: Iterable[SyncJob], logger: logging.Logger | None = None) -> int:
    log = logger or logging.getLogger("foldersync.counter")
    jobs = list(jobs)
    counts = [0] * len(jobs)

    def _count(index: int, source: Path) -> None:
        try:
            counts[index] = count_tree(source)
        except CountingError as exc:
            log.warning("%s; counting it as 0", exc)

    threads = [
        threading.Thread(target=_count, args=(index, job.source), name=f"count-{index}", daemon=True)
        for index, job in enumerate(jobs)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    total = sum(counts)
    log.debug("Counted %s file(s) across %s source(s)", total, len(jobs))
    return total
