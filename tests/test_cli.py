import json
from pathlib import Path

from foldersync.cli import EXIT_INVALID_CONFIG, EXIT_PARTIAL_FAILURES, EXIT_SUCCESS, main


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _config(tmp_path: Path, source: Path, extra_job: dict | None = None) -> Path:
    configs = [{"source": str(source), "destination": str(tmp_path / "out"), "overwrite": True}]
    if extra_job:
        configs.append(extra_job)
    payload = {
        "bts": {"exclude": ["skip"], "configs": configs},
        "cdf": {"source": str(source), "destination": str(tmp_path / "skeleton")},
    }
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(payload), encoding="utf-8")
    return config_file


def test_backup_command_copies_and_writes_log(tmp_path: Path, capsys) -> None:
    source = tmp_path / "src"
    _write(source / "a.txt", "a")
    _write(source / "skip" / "b.txt", "b")
    config_file = _config(tmp_path, source)
    log_dir = tmp_path / "log"

    exit_code = main(["--config", str(config_file), "--log-dir", str(log_dir), "backup", "--no-progress"])

    output = capsys.readouterr().out
    assert exit_code == EXIT_SUCCESS
    assert "Backup complete: 1/2 file(s) | copied=1" in output
    assert (tmp_path / "out" / "a.txt").exists()
    assert not (tmp_path / "out" / "skip").exists()
    log_text = (log_dir / "foldersync.log").read_text(encoding="utf-8")
    assert "Start folder sync app" in log_text
    assert "Skipping excluded item" in log_text
    assert "Finish folder sync app" in log_text


def test_backup_alias_reports_success_despite_failed_job(tmp_path: Path, capsys) -> None:
    source = tmp_path / "src"
    _write(source / "a.txt", "a")
    config_file = _config(
        tmp_path,
        source,
        extra_job={"source": str(tmp_path / "missing"), "destination": str(tmp_path / "out2")},
    )

    exit_code = main(["--config", str(config_file), "--log-dir", str(tmp_path / "log"), "bts", "--no-progress"])

    assert exit_code == EXIT_SUCCESS
    assert "failed_jobs=1" in capsys.readouterr().out


def test_backup_strict_returns_partial_failures(tmp_path: Path) -> None:
    source = tmp_path / "src"
    _write(source / "a.txt", "a")
    config_file = _config(
        tmp_path,
        source,
        extra_job={"source": str(tmp_path / "missing"), "destination": str(tmp_path / "out2")},
    )

    exit_code = main(
        ["--config", str(config_file), "--log-dir", str(tmp_path / "log"), "backup", "--no-progress", "--strict"]
    )

    assert exit_code == EXIT_PARTIAL_FAILURES


def test_create_folders_alias(tmp_path: Path, capsys) -> None:
    source = tmp_path / "src"
    _write(source / "x" / "file.txt", "x")
    config_file = _config(tmp_path, source)

    exit_code = main(["--config", str(config_file), "--log-dir", str(tmp_path / "log"), "cdf"])

    assert exit_code == EXIT_SUCCESS
    assert "Create folders complete: 2 folder(s)" in capsys.readouterr().out
    assert (tmp_path / "skeleton" / "x").is_dir()
    assert not (tmp_path / "skeleton" / "x" / "file.txt").exists()


def test_validate_config_prints_summary(tmp_path: Path, capsys) -> None:
    config_file = _config(tmp_path, tmp_path / "src")

    exit_code = main(["--config", str(config_file), "validate-config"])

    output = capsys.readouterr().out
    assert exit_code == EXIT_SUCCESS
    assert "bts: jobs=1 exclude=1" in output
    assert "cdf:" in output


def test_list_prints_mappings(tmp_path: Path, capsys) -> None:
    source = tmp_path / "src"
    config_file = _config(tmp_path, source)

    exit_code = main(["--config", str(config_file), "list"])

    output = capsys.readouterr().out
    assert exit_code == EXIT_SUCCESS
    assert f"{source} -> {tmp_path / 'out'} (overwrite=true)" in output
    assert "exclude: skip" in output


def test_invalid_config_is_reported(tmp_path: Path, capsys) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text("{}", encoding="utf-8")

    exit_code = main(["--config", str(config_file), "validate-config"])

    assert exit_code == EXIT_INVALID_CONFIG
    assert "Invalid config" in capsys.readouterr().err


def test_backup_with_invalid_config_exits_with_config_error(tmp_path: Path) -> None:
    config_file = tmp_path / "config.json"
    config_file.write_text("{broken", encoding="utf-8")

    exit_code = main(["--config", str(config_file), "--log-dir", str(tmp_path / "log"), "backup", "--no-progress"])

    assert exit_code == EXIT_INVALID_CONFIG


def test_log_config_file_is_applied(tmp_path: Path) -> None:
    source = tmp_path / "src"
    _write(source / "a.txt", "a")
    config_file = _config(tmp_path, source)
    log_file = tmp_path / "custom.log"
    log_config = tmp_path / "logging.yaml"
    log_config.write_text(
        f"""
version: 1
disable_existing_loggers: false
handlers:
  file:
    class: logging.FileHandler
    filename: {log_file.as_posix()}
loggers:
  foldersync:
    level: INFO
    handlers: [file]
""".strip(),
        encoding="utf-8",
    )

    exit_code = main(["--config", str(config_file), "--log-config", str(log_config), "backup", "--no-progress"])

    assert exit_code == EXIT_SUCCESS
    assert "Copied:" in log_file.read_text(encoding="utf-8")


def test_no_command_opens_menu_and_quits(tmp_path: Path, capsys, monkeypatch) -> None:
    answers = iter(["nonsense", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    exit_code = main(["--config", str(tmp_path / "config.json")])

    output = capsys.readouterr().out
    assert exit_code == EXIT_SUCCESS
    assert "Select a mode:" in output
    assert "Unknown choice: nonsense" in output


def test_menu_choice_runs_create_folders(tmp_path: Path, monkeypatch) -> None:
    source = tmp_path / "src"
    (source / "x").mkdir(parents=True)
    config_file = _config(tmp_path, source)
    monkeypatch.setattr("builtins.input", lambda prompt="": "2")

    exit_code = main(["--config", str(config_file), "--log-dir", str(tmp_path / "log")])

    assert exit_code == EXIT_SUCCESS
    assert (tmp_path / "skeleton" / "x").is_dir()
