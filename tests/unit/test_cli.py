"""
CLI (typer) tests. The interactive loop is driven through CliRunner input.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from explorer.cli import app
from explorer.config import load_config

runner = CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty working directory with no configuration file in reach."""
    root = (tmp_path / "ws").resolve()
    root.mkdir()
    monkeypatch.chdir(root)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    return root


def _shell(workspace: Path, keys: list[str], *options: str):
    return runner.invoke(app, [*options, "--start-dir", str(workspace)],
                         input="".join(f"{k}\n" for k in keys))


# ------------------------- interactive loop -------------------------


def test_exit_command(workspace: Path) -> None:
    result = _shell(workspace, ["0"])
    assert result.exit_code == 0
    assert f"Current Directory: {workspace}" in result.stdout
    assert "TYPE    PERMS       SIZE(B)     MODIFIED                NAME" in result.stdout
    assert "Goodbye!" in result.stdout


def test_exit_words(workspace: Path) -> None:
    assert _shell(workspace, ["exit"]).exit_code == 0
    assert _shell(workspace, ["QUIT"]).exit_code == 0


def test_end_of_input_exits_cleanly(workspace: Path) -> None:
    result = runner.invoke(app, ["--start-dir", str(workspace)], input="")
    assert result.exit_code == 0
    assert "Goodbye!" not in result.stdout


def test_invalid_choice(workspace: Path) -> None:
    result = _shell(workspace, ["42", "0"])
    assert result.exit_code == 0
    assert "Invalid choice." in result.stdout


def test_listing_shows_entries(workspace: Path) -> None:
    (workspace / "notes.txt").write_text("hello")
    (workspace / "docs").mkdir()

    result = _shell(workspace, ["1", "0"])

    lines = result.stdout.splitlines()
    assert any(line.startswith("[FILE]") and line.endswith("notes.txt") for line in lines)
    assert any(line.startswith("[DIR]") and line.endswith("docs") for line in lines)


def test_create_file(workspace: Path) -> None:
    result = _shell(workspace, ["4", "new.txt", "0"])

    assert result.exit_code == 0
    assert (workspace / "new.txt").is_file()
    assert f"File created: {workspace / 'new.txt'}" in result.stdout


def test_create_existing_file_reports_error(workspace: Path) -> None:
    (workspace / "dup.txt").write_text("x")

    result = _shell(workspace, ["4", "dup.txt", "0"])

    assert result.exit_code == 0
    assert "error: Path already exists" in result.output


def test_blank_answer_cancels(workspace: Path) -> None:
    result = _shell(workspace, ["4", "", "0"])
    assert result.exit_code == 0
    assert list(workspace.iterdir()) == []


def test_path_answer_keeps_surrounding_spaces(workspace: Path) -> None:
    result = _shell(workspace, ["4", " padded.txt ", "0"])

    assert result.exit_code == 0
    assert (workspace / " padded.txt ").is_file()
    assert not (workspace / "padded.txt").exists()


def test_nul_byte_answer_reports_error(workspace: Path) -> None:
    result = _shell(workspace, ["4", "a\x00b", "5", "c\x00d", "8", "a\x00b", "e", "0"])

    assert result.exit_code == 0
    assert result.output.count("error: Path contains a NUL byte") == 3
    assert "Goodbye!" in result.stdout
    assert list(workspace.iterdir()) == []


def test_create_enter_and_go_up(workspace: Path) -> None:
    result = _shell(workspace, ["5", "sub/inner", "2", "sub", "2", "inner", "3", "0"])

    assert result.exit_code == 0
    assert (workspace / "sub" / "inner").is_dir()
    assert f"Current Directory: {workspace / 'sub' / 'inner'}" in result.stdout
    # last listing before exit is back in sub
    last_header = [line for line in result.stdout.splitlines() if line.startswith("Current Directory:")][-1]
    assert last_header == f"Current Directory: {workspace / 'sub'}"


def test_enter_non_directory(workspace: Path) -> None:
    (workspace / "file.txt").write_text("x")

    result = _shell(workspace, ["2", "file.txt", "0"])

    assert "error: Not a directory" in result.output
    headers = [line for line in result.stdout.splitlines() if line.startswith("Current Directory:")]
    assert all(h == f"Current Directory: {workspace}" for h in headers)


def test_delete(workspace: Path) -> None:
    tree = workspace / "tree"
    (tree / "sub").mkdir(parents=True)
    (tree / "sub" / "f.txt").write_text("f")

    result = _shell(workspace, ["6", "tree", "0"])

    assert "Deleted entries: 3" in result.stdout
    assert not tree.exists()


def test_delete_missing(workspace: Path) -> None:
    result = _shell(workspace, ["6", "missing", "0"])
    assert result.exit_code == 0
    assert "error: Path does not exist" in result.output


def test_delete_confirmation(workspace: Path, tmp_path: Path) -> None:
    config = tmp_path / "explorer.yaml"
    config.write_text("operations:\n  confirm_destructive: true\n")
    (workspace / "keep.txt").write_text("keep")
    (workspace / "drop.txt").write_text("drop")

    result = _shell(workspace, ["6", "keep.txt", "n", "6", "drop.txt", "y", "0"],
                    "--config", str(config))

    assert result.exit_code == 0
    assert "Cancelled." in result.stdout
    assert (workspace / "keep.txt").exists()
    assert not (workspace / "drop.txt").exists()


def test_copy_and_move(workspace: Path) -> None:
    (workspace / "a.txt").write_text("payload")

    result = _shell(workspace, ["7", "a.txt", "b.txt", "8", "b.txt", "c.txt", "0"])

    assert result.exit_code == 0
    assert "Copied to:" in result.stdout
    assert "Moved/Renamed to:" in result.stdout
    assert (workspace / "a.txt").read_text() == "payload"
    assert (workspace / "c.txt").read_text() == "payload"
    assert not (workspace / "b.txt").exists()


def test_search(workspace: Path) -> None:
    for rel in ["x/abc.txt", "y/zzabc", "z/noMatch"]:
        (workspace / rel).parent.mkdir(parents=True, exist_ok=True)
        (workspace / rel).write_text(rel)

    result = _shell(workspace, ["9", "abc", "0"])

    assert str(workspace / "x" / "abc.txt") in result.stdout
    assert str(workspace / "y" / "zzabc") in result.stdout
    assert "noMatch" not in result.stdout.split("Enter name to search:")[-1]
    assert "2 match(es)." in result.stdout


def test_search_blank_needle_does_nothing(workspace: Path) -> None:
    result = _shell(workspace, ["9", "", "0"])
    assert result.exit_code == 0
    assert "match(es)" not in result.stdout


def test_search_space_needle(workspace: Path) -> None:
    (workspace / "my file.txt").write_text("x")
    (workspace / "myfile.txt").write_text("x")

    result = _shell(workspace, ["9", " ", "0"])

    assert result.exit_code == 0
    assert str(workspace / "my file.txt") in result.stdout
    assert "1 match(es)." in result.stdout


# ------------------------- options -------------------------


def test_bad_start_dir(workspace: Path) -> None:
    result = runner.invoke(app, ["--start-dir", str(workspace / "missing")], input="0\n")
    assert result.exit_code == 1
    assert "error:" in result.output


def test_bad_config(workspace: Path, tmp_path: Path) -> None:
    config = tmp_path / "bad.yaml"
    config.write_text("logging:\n  level: LOUD\n")

    result = runner.invoke(app, ["--config", str(config)], input="0\n")

    assert result.exit_code == 1
    assert "Configuration validation failed" in result.output


def test_bad_log_level(workspace: Path) -> None:
    result = runner.invoke(app, ["--log-level", "chatty", "ls"])
    assert result.exit_code == 1
    assert "invalid log level" in result.output


def test_log_level_option_is_case_insensitive(workspace: Path) -> None:
    result = runner.invoke(app, ["--log-level", " info ", "ls"])
    assert result.exit_code == 0


def test_start_directory_from_config(workspace: Path, tmp_path: Path) -> None:
    start = workspace / "start"
    start.mkdir()
    config = tmp_path / "explorer.yaml"
    config.write_text(f"start_directory: {start}\n")

    result = runner.invoke(app, ["--config", str(config)], input="0\n")

    assert result.exit_code == 0
    assert f"Current Directory: {start}" in result.stdout


# ------------------------- one-shot commands -------------------------


def test_ls_command(workspace: Path) -> None:
    (workspace / "one.txt").write_text("1")

    result = runner.invoke(app, ["ls"])

    assert result.exit_code == 0
    assert f"Current Directory: {workspace}" in result.stdout
    assert "one.txt" in result.stdout


def test_ls_missing_directory(workspace: Path) -> None:
    result = runner.invoke(app, ["ls", "missing"])
    assert result.exit_code == 1
    assert "error: Error listing directory" in result.output


def test_find_command(workspace: Path) -> None:
    (workspace / "deep" / "er").mkdir(parents=True)
    (workspace / "deep" / "er" / "target.log").write_text("x")

    result = runner.invoke(app, ["find", "target"])

    assert result.exit_code == 0
    assert str(workspace / "deep" / "er" / "target.log") in result.stdout
    assert "1 match(es)." in result.stdout


def test_find_missing_root(workspace: Path) -> None:
    result = runner.invoke(app, ["find", "x", "--root", "missing"])
    assert result.exit_code == 1
    assert "Search root does not exist" in result.output


def test_init_config(workspace: Path) -> None:
    result = runner.invoke(app, ["init-config", "conf/explorer.yaml"])

    assert result.exit_code == 0
    assert (workspace / "conf" / "explorer.yaml").exists()

    again = runner.invoke(app, ["init-config", "conf/explorer.yaml"])
    assert again.exit_code == 1
    assert "already exists" in again.output

    forced = runner.invoke(app, ["init-config", "conf/explorer.yaml", "--force"])
    assert forced.exit_code == 0


def test_init_config_current(workspace: Path, tmp_path: Path) -> None:
    config = tmp_path / "explorer.yaml"
    config.write_text("display:\n  color: false\nsearch:\n  max_results: 7\n")

    result = runner.invoke(app, ["--config", str(config), "--log-level", "debug",
                                 "init-config", "saved.yaml", "--current"])

    assert result.exit_code == 0
    saved = load_config(workspace / "saved.yaml").config
    assert saved.display.color is False
    assert saved.search.max_results == 7
    assert saved.logging.level == "DEBUG"


def test_validate_config(workspace: Path) -> None:
    (workspace / "good.yaml").write_text("display:\n  color: true\n")
    (workspace / "bad.yaml").write_text("logging:\n  level: LOUD\n")

    good = runner.invoke(app, ["validate-config", "good.yaml"])
    assert good.exit_code == 0
    assert "good.yaml: OK." in good.stdout

    bad = runner.invoke(app, ["validate-config", "bad.yaml"])
    assert bad.exit_code == 1
    assert "error:" in bad.output

    missing = runner.invoke(app, ["validate-config", "missing.yaml"])
    assert missing.exit_code == 1
    assert "not found" in missing.output


def test_ls_json(workspace: Path) -> None:
    (workspace / "one.txt").write_text("1")
    (workspace / "sub").mkdir()

    result = runner.invoke(app, ["ls", "--json"])

    assert result.exit_code == 0
    entries = {e["name"]: e for e in json.loads(result.stdout)}
    assert entries["one.txt"]["kind"] == "file"
    assert entries["one.txt"]["size"] == 1
    assert entries["sub"]["kind"] == "directory"
