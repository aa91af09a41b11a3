"""Tests for the command-line interface."""

import json
import logging
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from mailsift import cli
from mailsift.config import get_settings
from tests.conftest import PDF_BYTES, build_multipart_email, build_plain_email


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch: pytest.MonkeyPatch):
    """Record configure_logging calls and keep log lines out of command output."""
    calls: list[dict] = []
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: calls.append(kwargs))
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL))
    get_settings.cache_clear()
    yield calls
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def multipart_file(tmp_path: Path) -> Path:
    path = tmp_path / "multi.eml"
    path.write_bytes(build_multipart_email())
    return path


def test_show(runner: CliRunner, multipart_file: Path):
    result = runner.invoke(cli.main, ["show", str(multipart_file)])
    assert result.exit_code == 0
    assert "Subject:      Report" in result.output
    assert "report.pdf" in result.output
    assert "application/pdf" in result.output


def test_show_json(runner: CliRunner, multipart_file: Path):
    result = runner.invoke(cli.main, ["show", "--json", str(multipart_file)])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["subject"] == "Report"
    assert data["text"] == "Plain body"
    assert len(data["parts"]) == 3


def test_show_reports_fatal_error(runner: CliRunner, tmp_path: Path):
    path = tmp_path / "broken.eml"
    path.write_bytes(b"Subject: no separator")
    result = runner.invoke(cli.main, ["show", str(path)])
    assert result.exit_code == 1
    assert "Cannot parse" in result.output


def test_show_ignore_header_errors(runner: CliRunner, tmp_path: Path):
    path = tmp_path / "bad-to.eml"
    path.write_bytes(build_plain_email(to_addr=b"not-an-address"))
    assert runner.invoke(cli.main, ["show", str(path)]).exit_code == 1

    result = runner.invoke(cli.main, ["show", "--ignore-header-errors", str(path)])
    assert result.exit_code == 0
    assert "AddressParseError" in result.output


def test_headers(runner: CliRunner, tmp_path: Path):
    path = tmp_path / "plain.eml"
    path.write_bytes(build_plain_email(subject=b"=?utf-8?q?caf=C3=A9?="))
    result = runner.invoke(cli.main, ["headers", str(path)])
    assert result.exit_code == 0
    assert "Subject: café" in result.output
    assert result.output.splitlines()[0] == "From: sender@example.com"


def test_attachments_list(runner: CliRunner, multipart_file: Path):
    result = runner.invoke(cli.main, ["attachments", str(multipart_file)])
    assert result.exit_code == 0
    assert f"report.pdf\tapplication/pdf\t{len(PDF_BYTES)}" in result.output


def test_attachments_extract(runner: CliRunner, multipart_file: Path, tmp_path: Path):
    target = tmp_path / "out"
    result = runner.invoke(cli.main, ["attachments", str(multipart_file), "--extract", str(target)])
    assert result.exit_code == 0
    assert (target / "report.pdf").read_bytes() == PDF_BYTES


def test_attachments_none(runner: CliRunner, tmp_path: Path):
    path = tmp_path / "plain.eml"
    path.write_bytes(build_plain_email())
    result = runner.invoke(cli.main, ["attachments", str(path)])
    assert result.exit_code == 0
    assert "No attachments." in result.output


def test_logging_defaults_from_settings(
    runner: CliRunner, multipart_file: Path, monkeypatch: pytest.MonkeyPatch, logging_calls
):
    monkeypatch.setenv("MAILSIFT_LOG_FORMAT", "json")
    monkeypatch.setenv("MAILSIFT_DEBUG", "true")
    result = runner.invoke(cli.main, ["headers", str(multipart_file)])
    assert result.exit_code == 0
    assert logging_calls == [{"json_format": True, "debug": True}]


def test_logging_flags_override_settings(
    runner: CliRunner, multipart_file: Path, monkeypatch: pytest.MonkeyPatch, logging_calls
):
    monkeypatch.setenv("MAILSIFT_LOG_FORMAT", "json")
    result = runner.invoke(cli.main, ["--no-json-logs", "--debug", "headers", str(multipart_file)])
    assert result.exit_code == 0
    assert logging_calls == [{"json_format": False, "debug": True}]


def test_invalid_settings_exit(
    runner: CliRunner, multipart_file: Path, monkeypatch: pytest.MonkeyPatch, logging_calls
):
    monkeypatch.setenv("MAILSIFT_MAX_DEPTH", "0")
    result = runner.invoke(cli.main, ["show", str(multipart_file)])
    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert logging_calls == []
