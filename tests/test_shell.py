import subprocess

from pocodegen import shell


def test_run_passes_argument_list(monkeypatch):
    seen = {}

    def fake_run(command, **kwargs):
        seen["command"] = command
        seen["kwargs"] = kwargs
        return subprocess.CompletedProcess(command, 0, "out", "")

    monkeypatch.setattr(shell.subprocess, "run", fake_run)
    result = shell.run("msgmerge", "-U", "a file; rm -rf /", timeout=5)

    assert seen["command"] == ["msgmerge", "-U", "a file; rm -rf /"]
    assert seen["kwargs"]["timeout"] == 5
    assert seen["kwargs"]["capture_output"] is True
    assert "shell" not in seen["kwargs"]
    assert result.ok
    assert result.stdout == "out"


def test_run_reports_failure(monkeypatch):
    monkeypatch.setattr(
        shell.subprocess,
        "run",
        lambda command, **kwargs: subprocess.CompletedProcess(command, 2, "", "bad"),
    )
    result = shell.run("xgettext")
    assert result.returncode == 2
    assert result.stderr == "bad"
    assert not result.ok


def test_run_timeout(monkeypatch):
    def slow_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs["timeout"], output=b"partial")

    monkeypatch.setattr(shell.subprocess, "run", slow_run)
    result = shell.run("xgettext", timeout=0.1)
    assert result.returncode is None
    assert result.stdout == "partial"


def test_run_missing_executable(monkeypatch):
    def missing(command, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", command[0])

    monkeypatch.setattr(shell.subprocess, "run", missing)
    result = shell.run("no-such-tool")
    assert result.returncode is None
    assert not result.ok


def test_which(monkeypatch):
    monkeypatch.setattr(shell.shutil, "which", lambda tool: None)
    assert shell.which("xgettext") is None
