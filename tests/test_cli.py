"""Tests for the chatextract CLI."""

import json

import pytest
from click.testing import CliRunner

from chatextract import __version__
from chatextract.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def response_file(tmp_path, sample_response):
    path = tmp_path / "response.txt"
    path.write_text(sample_response, encoding="utf-8")
    return str(path)


class TestIntrospection:
    """Test configuration listing commands."""

    def test_help_without_subcommand(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "chatextract render" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_tags(self, runner):
        result = runner.invoke(cli, ["tags"])
        assert result.exit_code == 0
        assert "- {think}" in result.output
        assert "- {relationship}" in result.output

    def test_tags_empty(self, runner, monkeypatch):
        monkeypatch.setenv("CHATEXTRACT_TAGS", "[]")
        result = runner.invoke(cli, ["tags"])
        assert "当前没有配置任何标签。" in result.output

    def test_commands(self, runner):
        result = runner.invoke(cli, ["commands"])
        assert result.exit_code == 0
        assert "think" in result.output
        assert "extract" in result.output

    def test_invalid_config(self, runner, monkeypatch):
        monkeypatch.setenv("CHATEXTRACT_TAGS", json.dumps([""]))
        result = runner.invoke(cli, ["tags"])
        assert result.exit_code != 0
        assert "Invalid configuration" in result.output

    def test_usage(self, runner):
        result = runner.invoke(cli, ["usage"])
        assert result.exit_code == 0


class TestPreview:
    """Test offline extract/render."""

    def test_extract(self, runner, response_file):
        result = runner.invoke(cli, ["extract", response_file])
        assert result.exit_code == 0
        assert "刚认识" in result.output

    def test_extract_single_tag(self, runner, response_file):
        result = runner.invoke(cli, ["extract", response_file, "--tag", "think"])
        assert result.exit_code == 0
        assert "relationship" not in result.output

    def test_render(self, runner, response_file, monkeypatch):
        monkeypatch.setenv("CHATEXTRACT_CHARACTER_NAME", "syn")
        result = runner.invoke(cli, ["render", "think", response_file])
        assert result.exit_code == 0
        assert result.output.strip() == "syn在想：\n嗯？新人？"

    def test_render_unknown_command(self, runner, response_file):
        result = runner.invoke(cli, ["render", "nope", response_file])
        assert result.exit_code != 0
        assert "Unknown command: nope" in result.output

    def test_render_missing_file(self, runner):
        result = runner.invoke(cli, ["render", "think", "missing.txt"])
        assert result.exit_code != 0
