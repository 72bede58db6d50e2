import io
import os
import time

import pytest
from rich.progress import Progress

from yamlmend.cli.main import YamlMendCLI
from yamlmend.core.engine import BACKUP_SUFFIX


def run(*argv):
    return YamlMendCLI().run(list(argv))


def test_fix_file_prints_healed_yaml(tmp_path, capsys):
    target = tmp_path / "broken.yaml"
    target.write_text("a:\n- 1\n- 2\n")

    assert run("fix", str(target), "--raw") == 0
    assert capsys.readouterr().out == "a:\n  - 1\n  - 2\n"
    assert target.read_text() == "a:\n- 1\n- 2\n"


def test_fix_write_with_yes(tmp_path, capsys):
    target = tmp_path / "broken.yaml"
    target.write_text("a:\n\t- 1\n")

    assert run("fix", str(target), "--write", "--yes", "--raw") == 0
    assert target.read_text() == "a:\n  - 1\n"


def test_check_reports_location_on_stderr(tmp_path, capsys):
    target = tmp_path / "bad.yaml"
    target.write_text("a: [1, 2\n")

    assert run("check", str(target), "--raw") == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "(line " in captured.err


def test_stdin_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("- 1\n  - 2\n- 3\n"))
    assert run("fix", "-", "--raw") == 0
    assert "- 3" in capsys.readouterr().out


def test_format_refuses_to_repair(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("a: [1, 2\n"))
    assert run("format", "-", "--raw") == 1


def test_rich_rendering_returns_status(tmp_path):
    target = tmp_path / "broken.yaml"
    target.write_text("a:\n- 1\n")
    assert run("fix", str(target), "--diff") == 0
    assert run("check", str(target)) == 0


def test_directory_run(tmp_path):
    (tmp_path / "one.yaml").write_text("a:\n- 1\n")
    (tmp_path / "two.yaml").write_text("b: [1,\n")
    assert run("fix", str(tmp_path)) == 1


def test_missing_path(tmp_path):
    assert run("check", str(tmp_path / "nope.yaml")) == 2


def test_no_command_prints_help(capsys):
    assert run() == 2
    assert "yamlmend" in capsys.readouterr().out


@pytest.mark.parametrize("content", ["a: !!int abc\n", "a: !!bool maybe\n"])
def test_check_rejects_unconvertible_tagged_value(tmp_path, capsys, content):
    target = tmp_path / "tagged.yaml"
    target.write_text(content)

    assert run("check", str(target), "--raw") == 1
    assert capsys.readouterr().err.strip()


def test_directory_progress_counts_every_processed_file(tmp_path, monkeypatch):
    (tmp_path / "one.yaml").write_text("a: 1\n")
    (tmp_path / "TWO.YAML").write_text("b: 2\n")
    totals = []
    original_add_task = Progress.add_task

    def record_total(self, description, total=None, **kwargs):
        totals.append(total)
        return original_add_task(self, description, total=total, **kwargs)

    monkeypatch.setattr(Progress, "add_task", record_total)
    assert run("check", str(tmp_path)) == 0
    assert totals == [2]


def test_clean_removes_old_backups(tmp_path, capsys):
    target = tmp_path / "broken.yaml"
    target.write_text("a:\n- 1\n")
    assert run("fix", str(target), "--write", "--yes", "--raw") == 0
    backup = tmp_path / ("broken.yaml" + BACKUP_SUFFIX)
    assert backup.exists()

    assert run("clean", str(tmp_path)) == 0
    assert backup.exists()

    old = time.time() - 3 * 3600
    os.utime(backup, (old, old))
    assert run("clean", str(tmp_path), "--max-age", "1") == 0
    assert not backup.exists()
    assert target.read_text() == "a:\n  - 1\n"
