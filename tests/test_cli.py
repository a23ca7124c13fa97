"""Тесты для CLI (`seo_scout/cli.py`) с использованием click.testing.CliRunner.
Проверяют команды `crawl`, `config`, `--version`, а также обработку ошибок.
"""
import asyncio
import importlib
import json

import pytest
from click.testing import CliRunner

cli_module = importlib.import_module("seo_scout.cli")
from seo_scout.aggregator import aggregate_report
from seo_scout.cli import cli
from seo_scout.crawler.models import PageRecord


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Не подключаем обработчики логов к потокам CliRunner."""
    monkeypatch.setattr(cli_module, "init_logging", lambda **kwargs: None)


@pytest.fixture(autouse=True)
def patch_run_audit(monkeypatch):
    """Патчим run_audit: фиктивный отчёт без сетевых запросов."""
    calls = []

    async def fake_run_audit(cfg, *, audit=True, stop_event=None):
        calls.append((cfg, audit))
        records = [
            PageRecord(url=cfg.start_url, status=200, depth=0, title="Home", description="",
                       h1=1, h2=0, canonical="", noindex=False, images_without_alt=0),
            PageRecord(url=cfg.start_url + "about", status=404, depth=1),
        ]
        return aggregate_report(cfg.start_url, records)

    monkeypatch.setattr(cli_module, "run_audit", fake_run_audit)
    return calls


@pytest.fixture()
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"start_url": "https://example.com/", "max_depth": 1, "timeout": 1.0, "user_agent": "Agent/1.0"}),
        encoding="utf-8",
    )
    return path


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "SeoScout" in result.output


def test_show_config(config_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["start_url"] == "https://example.com/"
    assert data["max_depth"] == 1


def test_show_config_without_file_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["config"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_show_config_reads_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("start_url: https://default.example/\nmax_depth: 4\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli, ["config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["start_url"] == "https://default.example/"
    assert data["max_depth"] == 4


def test_crawl_stdout(patch_run_audit):
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "https://example.com/", "--depth", "2"])
    assert result.exit_code == 0
    output = json.loads(result.output.splitlines()[-1])
    assert output["pages"][0] == {
        "url": "https://example.com/", "status": 200, "title": "Home", "description": "",
        "h1": 1, "h2": 0, "canonical": "", "noindex": False, "images_without_alt": 0, "depth": 0,
    }
    assert output["urls_404"] == ["https://example.com/about"]
    cfg, audit = patch_run_audit[0]
    assert cfg.max_depth == 2 and audit is True


def test_cli_options_override_config_file(config_file, patch_run_audit):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["--config", str(config_file), "crawl", "https://other.example/", "--concurrency", "3", "--no-audit"],
    )
    assert result.exit_code == 0
    cfg, audit = patch_run_audit[0]
    assert cfg.start_url == "https://other.example/"
    assert cfg.max_depth == 1
    assert cfg.concurrency == 3
    assert audit is False


def test_crawl_json_file(tmp_path):
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "https://example.com/", "--json", str(out)])
    assert result.exit_code == 0
    assert out.exists()
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["pages"][1] == {"url": "https://example.com/about", "status": 404, "depth": 1}
    assert data["summary"]["failed"] == 1


def test_crawl_html_file(tmp_path):
    out = tmp_path / "report.html"
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "https://example.com/", "--html", str(out)])
    assert result.exit_code == 0
    assert out.exists()
    assert "https://example.com/about" in out.read_text(encoding="utf-8")


def test_crawl_invalid_url():
    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "not-a-url"])
    assert result.exit_code == 1
    assert "Ошибка загрузки конфигурации" in result.output


def test_crawl_timeout(monkeypatch):
    async def slow(cfg, *, audit=True, stop_event=None):
        await asyncio.sleep(2)

    monkeypatch.setattr(cli_module, "run_audit", slow)

    runner = CliRunner()
    result = runner.invoke(cli, ["crawl", "https://example.com/", "--crawl-timeout", "0.2"])
    assert result.exit_code != 0
    assert "не завершён" in result.output
