# File: tests/test_cli.py
"""CLI tests with click.testing.CliRunner: `run`, `config`, `--version` and error handling."""
import json
from pathlib import Path

import pytest
import site_mirror.cli as cli_module
from click.testing import CliRunner
from site_mirror.cli import cli
from site_mirror.crawler.models import PageFailure, PageResult
from site_mirror.errors import FetchError
from site_mirror.logger import init_logging
from site_mirror.report import MirrorReport


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    # handlers created by the CLI point at CliRunner's streams
    init_logging()


@pytest.fixture()
def captured(monkeypatch):
    """Replace start_mirror with a stub recording the config it receives."""
    seen = {}

    async def fake_mirror(cfg):
        seen["config"] = cfg
        root = str(cfg.root_url)
        return MirrorReport(
            root,
            cfg.output_dir,
            pages=[PageResult(root, cfg.output_dir, 0, [f"{root}a"])],
            failures=[PageFailure(f"{root}a", cfg.output_dir / "a", "FetchError", "HTTP 500")],
        )

    monkeypatch.setattr(cli_module, "start_mirror", fake_mirror)
    return seen


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SiteMirror" in result.output


def test_package_keeps_command_module():
    import site_mirror

    assert site_mirror.cli is cli_module
    assert callable(cli_module.start_mirror)
    assert cli_module.cli is cli


def test_run_keeps_bare_origin_root(captured):
    result = CliRunner().invoke(cli, ["run", "https://example.com", "--strategy", "recursive"])
    assert result.exit_code == 0, result.output
    assert captured["config"].root == "https://example.com"


def test_run_passes_options(captured, tmp_path):
    result = CliRunner().invoke(
        cli,
        [
            "run", "https://example.com/",
            "-o", str(tmp_path / "mirror"),
            "--strategy", "worklist",
            "--scope", "prefix",
            "--naming", "relative",
            "--max-depth", "2",
            "--lenient-status",
        ],
    )
    assert result.exit_code == 0, result.output
    cfg = captured["config"]
    assert cfg.output_dir == tmp_path / "mirror"
    assert cfg.scope == "prefix"
    assert cfg.naming == "relative"
    assert cfg.max_depth == 2
    assert cfg.strict_status is False
    assert "Mirrored 1 pages, 1 failed" in result.output
    assert "HTTP 500" in result.output


def test_run_uses_config_file(captured, tmp_path):
    cfg_file = tmp_path / "mirror.yaml"
    cfg_file.write_text("root_url: https://example.com/\nconcurrency: 7\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "run", "--concurrency", "2"])
    assert result.exit_code == 0, result.output
    assert str(captured["config"].root_url) == "https://example.com/"
    assert captured["config"].concurrency == 2


def test_run_writes_report(captured, tmp_path):
    out = tmp_path / "reports" / "mirror.json"
    result = CliRunner().invoke(cli, ["run", "https://example.com/", "--report", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["root_url"] == "https://example.com/"
    assert data["failures"][0]["error"] == "HTTP 500"
    assert data["pages"][0]["links"] == ["https://example.com/a"]


def test_run_requires_root_url(captured):
    result = CliRunner().invoke(cli, ["run"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
    assert "config" not in captured


def test_run_root_failure_exits_nonzero(monkeypatch):
    async def failed(cfg):
        root = str(cfg.root_url)
        return MirrorReport(root, cfg.output_dir, failures=[PageFailure(root, cfg.output_dir, "FetchError", "refused")])

    monkeypatch.setattr(cli_module, "start_mirror", failed)
    result = CliRunner().invoke(cli, ["run", "https://example.com/"])
    assert result.exit_code == 1


def test_run_fatal_error(monkeypatch):
    async def boom(cfg):
        raise FetchError("https://example.com/", "connection refused")

    monkeypatch.setattr(cli_module, "start_mirror", boom)
    result = CliRunner().invoke(cli, ["run", "https://example.com/", "--strategy", "recursive"])
    assert result.exit_code == 1
    assert "Mirror aborted" in result.output
    assert "https://example.com/" in result.output


def test_show_config(tmp_path):
    cfg_file = tmp_path / "mirror.json"
    cfg_file.write_text(json.dumps({"root_url": "https://example.com/", "max_pages": 5}), encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["root_url"] == "https://example.com/"
    assert data["max_pages"] == 5
    assert data["output_dir"] == "output"


def test_bad_config_file(tmp_path):
    cfg_file = tmp_path / "mirror.yaml"
    cfg_file.write_text("- not\n- a mapping", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output
