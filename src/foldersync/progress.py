from __future__ import annotations

import sys
import threading

from tqdm import tqdm


MSG_BACKING_UP = "Backing up"
MSG_BACKUP_COMPLETE = "Backup complete"


class ProgressCounter:
    def __init__(self, total: int, description: str = MSG_BACKING_UP, show: bool = False) -> None:
        if total < 0:
            raise ValueError("total must not be negative")
        self._total = total
        self._value = 0
        self._lock = threading.Lock()
        self._bar: tqdm | None = None
        if show:
            self._bar = tqdm(
                total=total,
                desc=description,
                unit="file",
                dynamic_ncols=True,
                leave=True,
                file=sys.stderr,
            )

    @property
    def total(self) -> int:
        return self._total

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def tick(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError("progress only moves forward")
        with self._lock:
            self._value += count
            if self._bar is not None:
                self._bar.update(count)

    def close(self, message: str | None = MSG_BACKUP_COMPLETE) -> None:
        with self._lock:
            if self._bar is None:
                return
            if message:
                self._bar.set_description_str(message)
            self._bar.close()
            self._bar = None

    def __enter__(self) -> "ProgressCounter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close(MSG_BACKUP_COMPLETE if exc_type is None else None)
