from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import json
import yaml

from foldersync.errors import ConfigurationError
from foldersync.models import FolderJob, SyncJob


DEFAULT_CONFIG_FILE = Path("config.json")


@dataclass(slots=True)
class BackupConfig:
    jobs: list[SyncJob] = field(default_factory=list)
    exclude: tuple[str, ...] = ()


@dataclass(slots=True)
class AppConfig:
    backup: BackupConfig | None = None
    create_folders: FolderJob | None = None


def _as_path(value: Any, field_name: str) -> Path:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{field_name} must be a non-empty string path")
    return Path(value).expanduser()


def _as_bool(value: Any, field_name: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ConfigurationError(f"{field_name} must be a boolean")


def _as_list_of_strings(value: Any, field_name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or any(not isinstance(item, str) for item in value):
        raise ConfigurationError(f"{field_name} must be a list of strings")
    return [item for item in value if item.strip()]


def load_structured_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Config file does not exist: {path}")

    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
        if suffix in {".yml", ".yaml"}:
            loaded = yaml.safe_load(text)
        elif suffix == ".json":
            loaded = json.loads(text)
        else:
            raise ConfigurationError(f"Config file must be .yaml/.yml or .json: {path}")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Config root must be an object: {path}")
    return loaded


def _parse_backup(raw: Any) -> BackupConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError("bts must be an object")

    raw_configs = raw.get("configs")
    if not isinstance(raw_configs, list) or not raw_configs:
        raise ConfigurationError("bts.configs must be a non-empty list")

    jobs: list[SyncJob] = []
    for index, raw_job in enumerate(raw_configs):
        if not isinstance(raw_job, dict):
            raise ConfigurationError(f"bts.configs[{index}] must be an object")
        jobs.append(
            SyncJob(
                source=_as_path(raw_job.get("source"), f"bts.configs[{index}].source"),
                destination=_as_path(raw_job.get("destination"), f"bts.configs[{index}].destination"),
                overwrite=_as_bool(raw_job.get("overwrite"), f"bts.configs[{index}].overwrite", default=False),
            )
        )

    exclude = _as_list_of_strings(raw.get("exclude"), "bts.exclude")
    return BackupConfig(jobs=jobs, exclude=tuple(exclude))


def _parse_create_folders(raw: Any) -> FolderJob:
    if not isinstance(raw, dict):
        raise ConfigurationError("cdf must be an object")
    return FolderJob(
        source=_as_path(raw.get("source"), "cdf.source"),
        destination=_as_path(raw.get("destination"), "cdf.destination"),
    )


def load_config(config_path: Path) -> AppConfig:
    raw = load_structured_file(config_path)

    raw_backup = raw.get("bts")
    raw_folders = raw.get("cdf")
    if raw_backup is None and raw_folders is None:
        raise ConfigurationError("Config must contain a 'bts' or 'cdf' section")

    return AppConfig(
        backup=_parse_backup(raw_backup) if raw_backup is not None else None,
        create_folders=_parse_create_folders(raw_folders) if raw_folders is not None else None,
    )


def require_backup(config: AppConfig) -> BackupConfig:
    if config.backup is None:
        raise ConfigurationError("Config has no 'bts' section")
    return config.backup


def require_create_folders(config: AppConfig) -> FolderJob:
    if config.create_folders is None:
        raise ConfigurationError("Config has no 'cdf' section")
    return config.create_folders
