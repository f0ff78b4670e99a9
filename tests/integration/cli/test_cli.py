"""Integration tests for the check, list, and build commands"""

import json

import pytest
from typer.testing import CliRunner

from mdpost.cli.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    """Run each command from a clean tmp directory with default settings."""
    monkeypatch.chdir(tmp_path)
    for name in ("CONTENT_DIR", "OUTPUT_DIR", "STRICT", "WORKERS"):
        monkeypatch.delenv(f"MDPOST_{name}", raising=False)


def test_help():
    """The app prints help and exits cleanly."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "check" in result.output


def test_check_reports_failures(posts_dir):
    """check lists the broken file and exits 1."""
    result = runner.invoke(app, ["check", str(posts_dir)])
    assert result.exit_code == 1
    assert "2019-01-01-broken.md" in result.output
    assert "MalformedMetadata" in result.output
    assert "Loaded 2 document(s), 1 failed, 0 body error(s)" in result.output


def test_check_clean_file(posts_dir):
    """check on a valid post exits 0."""
    result = runner.invoke(app, ["check", str(posts_dir / "2020-02-12-asa-windows.md")])
    assert result.exit_code == 0, result.output
    assert "Loaded 1 document(s), 0 failed, 0 body error(s)" in result.output


def test_check_strict_fails_on_body_errors(tmp_path, make_post):
    """Body errors only fail the run with --strict."""
    post = tmp_path / "note.md"
    post.write_text(make_post(body="Note[^1].\n"), encoding="utf-8")

    lenient = runner.invoke(app, ["check", str(post)])
    assert lenient.exit_code == 0, lenient.output
    assert "footnote-undefined" in lenient.output

    strict = runner.invoke(app, ["check", str(post), "--strict"])
    assert strict.exit_code == 1


def test_check_uses_content_dir_default(posts_dir):
    """With no path argument, check scans content_dir (_posts)."""
    result = runner.invoke(app, ["check"])
    assert "Loaded 2 document(s)" in result.output


def test_check_missing_path(tmp_path):
    """A missing path is a user-facing error."""
    result = runner.invoke(app, ["check", str(tmp_path / "nope")])
    assert result.exit_code == 1
    assert "Path not found" in result.output


def test_check_unknown_parser_preset(posts_dir, monkeypatch):
    """An unknown MDPOST_PARSER_CONFIG preset is reported as a settings error."""
    monkeypatch.setenv("MDPOST_PARSER_CONFIG", "nope")
    result = runner.invoke(app, ["check", str(posts_dir)])
    assert result.exit_code == 1
    assert "Unknown markdown-it preset" in result.output


def test_list_newest_first(posts_dir):
    """list prints date, slug and title, newest first."""
    (posts_dir / "2019-01-01-broken.md").unlink()
    result = runner.invoke(app, ["list", str(posts_dir)])
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines == [
        "2021-05-01  cpp-templates  C++20 template parameters",
        "2020-02-12  asa-windows  Windowing in Azure Stream Analytics",
    ]


def test_build_writes_index(tmp_path, posts_dir):
    """build writes index.json for loaded posts and reports the excluded file."""
    out = tmp_path / "dist"
    result = runner.invoke(app, ["build", str(posts_dir), "--out-dir", str(out)])
    assert result.exit_code == 1  # the broken post still fails the run
    data = json.loads((out / "index.json").read_text(encoding="utf-8"))
    assert [p["slug"] for p in data["posts"]] == ["cpp-templates", "asa-windows"]
    assert "Wrote 2 document(s)" in result.output
