import json
from pathlib import Path

import pytest

from deferred_apps.cli import main


def _write_config(tmp_path: Path, theme_dir: Path, **payload: object) -> Path:
    path = tmp_path / "apps.json"
    payload.setdefault("iconTheme", {"package": str(theme_dir)})
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_check(
    tmp_path: Path, theme_dir: Path, repository_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write_config(tmp_path, theme_dir, apps=["hello", "obs-studio"])
    code = main(["check", "--config", str(config), "--repository", str(repository_file)])
    assert code == 0
    assert "OK: 2 apps" in capsys.readouterr().out


def test_check_reports_collisions(
    tmp_path: Path, theme_dir: Path, repository_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write_config(
        tmp_path,
        theme_dir,
        apps=["hello"],
        extraApps={"greeter": {"exe": "hello"}},
    )
    code = main(["check", "--config", str(config), "--repository", str(repository_file)])
    assert code == 1
    err = capsys.readouterr().err
    assert "Terminal command collision detected!" in err
    assert "'hello' -> 'hello' (name-reference), 'greeter' (name-reference)" in err


def test_describe(
    tmp_path: Path, theme_dir: Path, repository_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write_config(tmp_path, theme_dir, apps=["obs-studio"])
    code = main(["describe", "--config", str(config), "--repository", str(repository_file)])
    assert code == 0
    (payload,) = json.loads(capsys.readouterr().out)
    assert payload["terminal_command"] == "obs"
    assert payload["acquisition"] == {
        "kind": "registry-fetch",
        "repository_ref": "default-registry",
        "attr_path": "obs-studio",
    }


def test_build(tmp_path: Path, theme_dir: Path, repository_file: Path) -> None:
    config = _write_config(tmp_path, theme_dir, apps=["hello", "tree"])
    out = tmp_path / "result"
    code = main(
        [
            "build",
            "--config",
            str(config),
            "--repository",
            str(repository_file),
            "--out",
            str(out),
        ]
    )
    assert code == 0
    assert (out / "hello" / "libexec" / "deferred-hello").is_file()
    assert (out / "tree" / "share" / "applications" / "tree.desktop").is_file()
    assert (out / "tree" / "bin" / "tree").is_symlink()


def test_missing_files_exit_nonzero(
    tmp_path: Path, repository_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main(
        ["check", "--config", str(tmp_path / "nope.json"), "--repository", str(repository_file)]
    )
    assert code == 1
    assert "does not exist" in capsys.readouterr().err


def test_unknown_package_exit_nonzero(
    tmp_path: Path, theme_dir: Path, repository_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write_config(tmp_path, theme_dir, apps=["does-not-exist"])
    code = main(["describe", "--config", str(config), "--repository", str(repository_file)])
    assert code == 1
    assert "not found in the package repository" in capsys.readouterr().err


def test_log_file_is_written_even_on_failure(
    tmp_path: Path, theme_dir: Path, repository_file: Path
) -> None:
    config = _write_config(
        tmp_path,
        theme_dir,
        apps=["hello"],
        extraApps={"greeter": {"exe": "hello"}},
    )
    log = tmp_path / "events.jsonl"
    code = main(
        [
            "check",
            "--config",
            str(config),
            "--repository",
            str(repository_file),
            "--log",
            str(log),
        ]
    )
    assert code == 1
    (record,) = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert record["operation"] == "detect_collisions"
    assert record["extra"] == {"commands": ["hello"]}


def test_build_reports_icon_fallbacks(
    tmp_path: Path, theme_dir: Path, repository_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write_config(tmp_path, theme_dir, apps=["bc"])
    with pytest.warns(UserWarning):
        code = main(
            [
                "build",
                "--config",
                str(config),
                "--repository",
                str(repository_file),
                "--out",
                str(tmp_path / "result"),
            ]
        )
    assert code == 0
    assert "Icons not found in theme: bc" in capsys.readouterr().err
