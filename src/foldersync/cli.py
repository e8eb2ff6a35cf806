from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from foldersync.backup import (
    EXIT_INVALID_CONFIG,
    EXIT_PARTIAL_FAILURES,
    EXIT_SUCCESS,
    run_backup,
    run_create_folders,
)
from foldersync.config import DEFAULT_CONFIG_FILE, AppConfig, load_config
from foldersync.errors import ConfigurationError
from foldersync.logging_setup import DEFAULT_LOG_DIR, configure_logging


LOG_START = "Start folder sync app"
LOG_FINISH = "Finish folder sync app"
LOG_BACKUP_MODE = "Backup mode"
LOG_CREATE_FOLDERS_MODE = "Create folders mode"
MSG_PRESS_ENTER_TO_EXIT = "Press Enter to exit..."

COMMAND_ALIASES = {
    "bts": "backup",
    "cdf": "create-folders",
}

MENU_CHOICES = {
    "1": "backup",
    "backup": "backup",
    "2": "create-folders",
    "create-folders": "create-folders",
    "q": None,
    "quit": None,
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="foldersync",
        description="Back up folder trees or replicate their folder structure",
    )
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_FILE)
    parser.add_argument("-v", "--verbose", action="store_true", help="Write detailed logs")
    parser.add_argument("--log-dir", type=Path, default=DEFAULT_LOG_DIR)
    parser.add_argument("--log-config", type=Path, help="YAML/JSON logging dictConfig file")
    parser.add_argument("--wait", action="store_true", help="Wait for Enter before exiting")
    subparsers = parser.add_subparsers(dest="command")

    backup_parser = subparsers.add_parser("backup", aliases=["bts"], help="Run backup jobs")
    backup_parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    backup_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with a non-zero code when any backup job fails",
    )

    subparsers.add_parser("create-folders", aliases=["cdf"], help="Create the destination folder structure")
    subparsers.add_parser("validate-config", help="Validate config")
    subparsers.add_parser("list", help="List backup jobs and folder mappings")

    return parser


def _prompt_command() -> str | None:
    print("Select a mode:")
    print("  1) backup")
    print("  2) create-folders")
    print("  q) quit")
    while True:
        try:
            choice = input("> ").strip().lower()
        except EOFError:
            return None
        if choice in MENU_CHOICES:
            return MENU_CHOICES[choice]
        print(f"Unknown choice: {choice}")


def _load_or_report(config_path: Path) -> AppConfig | None:
    try:
        return load_config(config_path)
    except ConfigurationError as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return None


def cmd_validate(config_path: Path) -> int:
    config = _load_or_report(config_path)
    if config is None:
        return EXIT_INVALID_CONFIG

    print(f"Valid config: {config_path}")
    if config.backup is not None:
        print(f"  - bts: jobs={len(config.backup.jobs)} exclude={len(config.backup.exclude)}")
    if config.create_folders is not None:
        print(f"  - cdf: {config.create_folders.source} -> {config.create_folders.destination}")
    return EXIT_SUCCESS


def cmd_list(config_path: Path) -> int:
    config = _load_or_report(config_path)
    if config is None:
        return EXIT_INVALID_CONFIG

    if config.backup is not None:
        print(f"backup (exclude: {', '.join(config.backup.exclude) or '-'})")
        for job in config.backup.jobs:
            print(f"  - {job.source} -> {job.destination} (overwrite={str(job.overwrite).lower()})")
    if config.create_folders is not None:
        print("create-folders")
        print(f"  - {config.create_folders.source} -> {config.create_folders.destination}")
    return EXIT_SUCCESS


def cmd_backup(config_path: Path, show_progress: bool, strict: bool, logger: logging.Logger) -> int:
    logger.info(LOG_BACKUP_MODE)
    exit_code, report = run_backup(config_path, show_progress=show_progress, logger=logger)
    if exit_code == EXIT_INVALID_CONFIG:
        return exit_code

    print(
        f"Backup complete: {report.ticks}/{report.total_files} file(s) | copied={report.copied} "
        f"skipped={report.skipped} failed_jobs={len(report.failures)}"
    )
    if exit_code == EXIT_PARTIAL_FAILURES and not strict:
        return EXIT_SUCCESS
    return exit_code


def cmd_create_folders(config_path: Path, logger: logging.Logger) -> int:
    logger.info(LOG_CREATE_FOLDERS_MODE)
    exit_code, created = run_create_folders(config_path, logger=logger)
    if exit_code == EXIT_SUCCESS:
        print(f"Create folders complete: {created} folder(s)")
    return exit_code


def _run_logged(args: argparse.Namespace, command: str) -> int:
    try:
        logger = configure_logging(log_dir=args.log_dir, verbose=args.verbose, log_config=args.log_config)
    except ConfigurationError as exc:
        print(f"Failed to set up logging: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    logger.info(LOG_START)
    if command == "backup":
        exit_code = cmd_backup(
            config_path=args.config,
            show_progress=not getattr(args, "no_progress", False),
            strict=getattr(args, "strict", False),
            logger=logger,
        )
    else:
        exit_code = cmd_create_folders(config_path=args.config, logger=logger)
    logger.info(LOG_FINISH)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    command = COMMAND_ALIASES.get(args.command, args.command)
    if command is None:
        command = _prompt_command()
        if command is None:
            return EXIT_SUCCESS

    if command == "validate-config":
        exit_code = cmd_validate(args.config)
    elif command == "list":
        exit_code = cmd_list(args.config)
    else:
        exit_code = _run_logged(args, command)

    if args.wait:
        print(MSG_PRESS_ENTER_TO_EXIT)
        try:
            input()
        except EOFError:
            pass
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
