import contextlib
import errno
import logging
import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _reset_foldersync_logger():
    yield
    logger = logging.getLogger("foldersync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def deny_scandir(monkeypatch):
    real_scandir = os.scandir

    def _deny(*names: str) -> None:
        def _scandir(path):
            if Path(path).name in names:
                raise PermissionError(errno.EACCES, "Permission denied", str(path))
            with real_scandir(path) as entries:
                ordered = sorted(entries, key=lambda entry: entry.name)
            return contextlib.nullcontext(ordered)

        monkeypatch.setattr(os, "scandir", _scandir)

    return _deny
