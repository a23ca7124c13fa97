from __future__ import annotations

import json

import pytest

from seo_scout.aggregator import aggregate_report
from seo_scout.audit import AuditIssue, MISSING_TITLE, NOT_FOUND
from seo_scout.crawler.models import ERROR_MARKER, PageRecord
from seo_scout.engine import Engine, run_audit
from seo_scout.report import render_html, render_json

SITE = {
    "/": '<title>Home</title><meta name="description" content="d"><h2>x</h2><a href="/about">About</a><a href="/blog">Blog</a>',
    "/blog": '<h2>Posts</h2><img src="p.png">',
    "/robots.txt": "User-agent: *\nDisallow: /blog",
}


@pytest.mark.asyncio()
async def test_run_audit_end_to_end(site_server, make_config):
    base = await site_server.start(SITE)

    report = await run_audit(make_config(f"{base}/"))

    assert [p["url"] for p in report.pages] == [f"{base}/", f"{base}/about", f"{base}/blog"]
    assert report.urls_404 == [f"{base}/about"]
    assert report.summary == {"pages": 3, "ok": 2, "failed": 1, "max_depth_reached": 1}
    assert [(i["kind"], i["url"]) for i in report.issues] == [
        ("blocked_by_robots", f"{base}/blog"),
        ("missing_title", f"{base}/blog"),
        ("missing_description", f"{base}/blog"),
        ("images_without_alt", f"{base}/blog"),
        ("not_found", f"{base}/about"),
    ]


@pytest.mark.asyncio()
async def test_run_audit_without_audit(site_server, make_config):
    base = await site_server.start(SITE)

    report = await run_audit(make_config(f"{base}/"), audit=False)

    assert report.issues == []
    assert "/robots.txt" not in site_server.hits


def test_engine_run_sync(unused_tcp_port, make_config):
    url = f"http://localhost:{unused_tcp_port}/"

    report = Engine(make_config(url)).run(timeout=10)

    assert report.pages == [{"url": url, "status": ERROR_MARKER, "depth": 0}]
    assert report.summary["failed"] == 1


def _sample_report():
    records = [
        PageRecord(url="https://example.test/", status=200, depth=0, title="<Home>", description="",
                   h1=1, h2=1, canonical="", noindex=False, images_without_alt=0),
        PageRecord(url="https://example.test/x", status=404, depth=1),
    ]
    issues = [AuditIssue(MISSING_TITLE, "https://example.test/"), AuditIssue(NOT_FOUND, "https://example.test/x")]
    return aggregate_report("https://example.test/", records, issues)


def test_report_json_roundtrip(tmp_path):
    report = _sample_report()

    path = render_json(report, tmp_path / "nested" / "report.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == json.loads(report.json())
    assert data["pages"][1] == {"url": "https://example.test/x", "status": 404, "depth": 1}
    assert data["issues"][1] == {"kind": "not_found", "url": "https://example.test/x"}


def test_report_html_escapes_content(tmp_path):
    path = render_html(_sample_report(), None, tmp_path / "report.html")

    html = path.read_text(encoding="utf-8")
    assert "&lt;Home&gt;" in html
    assert "not_found: https://example.test/x" in html
    assert "Broken pages (404)" in html


def test_report_html_custom_template(tmp_path):
    (tmp_path / "report.html.j2").write_text("{{ pages | length }} pages, {{ issues | length }} issues")

    path = render_html(_sample_report(), tmp_path, tmp_path / "out" / "r.html")

    assert path.read_text(encoding="utf-8") == "2 pages, 2 issues"
