from __future__ import annotations

import pytest
from pydantic import ValidationError

from bookmark_mirror.config import RendererConfig, ScanConfig, SearchConfig, load_config


class TestLoadConfig:
    def test_defaults(self, monkeypatch):
        for name in ("SCAN_MAX_CONCURRENCY", "SCAN_CHECKPOINT_INTERVAL", "SEARCH_RESULT_LIMIT"):
            monkeypatch.delenv(name, raising=False)

        cfg = load_config()

        assert cfg.scan.max_concurrency == 8
        assert cfg.scan.checkpoint_interval == 10
        assert cfg.scan.remove_weight == 0.1
        assert cfg.scan.acquire_weight == 0.9
        assert cfg.renderer.initial_delay_ms == 5000
        assert cfg.renderer.timeout_ms == 15000
        assert cfg.renderer.pdf_viewer_url == "https://drive.google.com/viewerng/viewer?url="
        assert cfg.search.result_limit == 20

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SCAN_MAX_CONCURRENCY", "3")
        monkeypatch.setenv("SCAN_CHECKPOINT_INTERVAL", "25")
        monkeypatch.setenv("BOOKMARKS_FILE", "  /tmp/Bookmarks  ")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        cfg = load_config()

        assert cfg.scan.max_concurrency == 3
        assert cfg.scan.checkpoint_interval == 25
        assert cfg.bookmarks.bookmarks_file == "/tmp/Bookmarks"
        assert cfg.runtime.log_level == "DEBUG"

    def test_overrides_take_precedence(self, monkeypatch):
        monkeypatch.setenv("DB_PATH", "/env/bookmarks.db")

        cfg = load_config(DB_PATH="/override/bookmarks.db")

        assert cfg.runtime.db_path == "/override/bookmarks.db"

    def test_invalid_value_is_wrapped(self, monkeypatch):
        monkeypatch.setenv("SCAN_MAX_CONCURRENCY", "0")

        with pytest.raises(RuntimeError, match="Configuration validation failed"):
            load_config()


def test_scan_weights_must_be_positive():
    with pytest.raises(ValidationError):
        ScanConfig(remove_weight=0)


def test_renderer_rejects_non_http_viewer():
    with pytest.raises(ValidationError):
        RendererConfig(pdf_viewer_url="ftp://viewer.example/?url=")


def test_search_cutoff_bounds():
    assert SearchConfig(fuzzy_cutoff="0.6").fuzzy_cutoff == 0.6
    with pytest.raises(ValidationError):
        SearchConfig(fuzzy_cutoff=1.5)
