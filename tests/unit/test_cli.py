from typer.testing import CliRunner

import pytest

from skipgate.cli import app

ENV_VARS = [
    "GITHUB_SHA",
    "GITHUB_REF",
    "GITHUB_WORKFLOW",
    "GITHUB_REPOSITORY",
    "GITHUB_TOKEN",
    "GITHUB_OUTPUT",
    "GITHUB_API_URL",
    "SKIPGATE_CACHE_BACKEND",
    "SKIPGATE_DIFF_BACKEND",
    "SKIPGATE_TIMEOUT",
]


class Resp:
    def __init__(self, files):
        self.status_code = 200
        self._files = files

    def raise_for_status(self):
        pass

    def json(self):
        return {"files": self._files}


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SKIPGATE_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("GITHUB_OUTPUT", str(tmp_path / "github_output"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _set_run(monkeypatch, commit):
    monkeypatch.setenv("GITHUB_SHA", commit)
    monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
    monkeypatch.setenv("GITHUB_WORKFLOW", "ci")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    monkeypatch.setenv("GITHUB_TOKEN", "token")


def test_decide_without_commit_runs_and_reports_error(workspace, monkeypatch):
    _set_run(monkeypatch, "abc123")
    monkeypatch.delenv("GITHUB_SHA")

    result = CliRunner().invoke(app, ["decide"])

    assert result.exit_code == 0, result.output
    assert "::error::Run identity field 'commit' is not defined" in result.output
    assert (workspace / "github_output").read_text() == "skip=false\n"


def test_decide_without_any_identity_fails_pipeline(workspace):
    result = CliRunner().invoke(app, ["decide"])

    assert result.exit_code == 1
    assert "Pipeline failed" in result.output
    assert (workspace / "github_output").read_text() == "skip=false\n"


def test_decide_prints_output_without_output_file(workspace, monkeypatch):
    _set_run(monkeypatch, "abc123")
    monkeypatch.delenv("GITHUB_OUTPUT")

    result = CliRunner().invoke(app, ["decide"])

    assert result.exit_code == 0, result.output
    assert "skip=false" in result.output
    assert "Running workflow" in result.output


def test_decide_with_unsupported_backend_fails(workspace, monkeypatch):
    _set_run(monkeypatch, "abc123")
    monkeypatch.setenv("SKIPGATE_CACHE_BACKEND", "s3")

    result = CliRunner().invoke(app, ["decide"])

    assert result.exit_code == 1
    assert "Unsupported cache backend: s3" in result.output
    assert (workspace / "github_output").read_text() == "skip=false\n"


def test_finalize_then_decide_skips_unrelated_changes(workspace, monkeypatch):
    (workspace / "Gemfile").write_text("source 'https://rubygems.org'\n")
    runner = CliRunner()

    _set_run(monkeypatch, "c1")
    result = runner.invoke(app, ["finalize"])
    assert result.exit_code == 0, result.output
    assert "Recorded 1 files under ci-refs/heads/main-c1" in result.output

    (workspace / "filelist.txt").unlink()
    monkeypatch.setattr(
        "requests.get",
        lambda url, headers=None, timeout=None: Resp(
            [{"filename": "README.md", "status": "modified"}]
        ),
    )
    _set_run(monkeypatch, "c2")
    result = runner.invoke(app, ["decide"])

    assert result.exit_code == 0, result.output
    assert "Cache restored with key: ci-refs/heads/main-c1" in result.output
    assert "Skipping workflow run" in result.output
    assert (workspace / "github_output").read_text() == "skip=true\n"


def test_finalize_then_decide_runs_on_dependency_change(workspace, monkeypatch):
    (workspace / "Gemfile").write_text("")
    runner = CliRunner()
    _set_run(monkeypatch, "c1")
    assert runner.invoke(app, ["finalize"]).exit_code == 0

    monkeypatch.setattr(
        "requests.get",
        lambda url, headers=None, timeout=None: Resp(
            [{"filename": "Gemfile", "status": "modified"}]
        ),
    )
    _set_run(monkeypatch, "c2")
    result = runner.invoke(app, ["decide"])

    assert result.exit_code == 0, result.output
    assert "Running workflow: Dependency changed: Gemfile" in result.output
    assert (workspace / "github_output").read_text() == "skip=false\n"


def test_finalize_without_identity_does_not_fail(workspace):
    result = CliRunner().invoke(app, ["finalize"])

    assert result.exit_code == 0
    assert "Not recording footprint" in result.output


def test_cache_list(workspace, monkeypatch):
    runner = CliRunner()
    result = runner.invoke(app, ["cache", "list"])
    assert result.exit_code == 0
    assert "No cache entries found" in result.output

    (workspace / "Gemfile").write_text("")
    (workspace / "main.rb").write_text("")
    _set_run(monkeypatch, "c1")
    runner.invoke(app, ["finalize"])

    result = runner.invoke(app, ["cache", "list"])
    assert result.exit_code == 0
    assert "ci-refs/heads/main-c1" in result.output
    assert "2 files" in result.output


def test_unwritable_output_file_falls_back_to_stdout(workspace, monkeypatch):
    monkeypatch.setenv("GITHUB_OUTPUT", str(workspace / "missing" / "out"))
    monkeypatch.setenv("SKIPGATE_CACHE_BACKEND", "s3")
    _set_run(monkeypatch, "abc123")

    result = CliRunner().invoke(app, ["decide"])

    assert result.exit_code == 1
    assert "Pipeline failed" in result.output
    assert "skip=false" in result.output
    assert not isinstance(result.exception, OSError)
