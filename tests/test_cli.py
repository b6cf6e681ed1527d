from __future__ import annotations

import json

import pytest

from bookmark_mirror.adapters.storage import CorpusStore, SqliteKeyValueStore
from bookmark_mirror.cli.reset import run_reset
from bookmark_mirror.cli.scan import run_scan
from bookmark_mirror.cli.search import run_search
from bookmark_mirror.db.session import DatabaseSessionManager
from tests.conftest import make_entry


@pytest.fixture(autouse=True)
def _plain_logging(monkeypatch):
    monkeypatch.setenv("LOG_JSON", "false")
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.delenv("BOOKMARKS_FILE", raising=False)


def _seed(db_path: str) -> None:
    session = DatabaseSessionManager(db_path)
    session.migrate()
    CorpusStore(SqliteKeyValueStore(session)).persist_corpus(
        {"https://a.example": make_entry("https://a.example", "Sourdough guide", "levain")}
    )
    session.close()


@pytest.mark.asyncio
async def test_search_prints_results(tmp_path, capsys):
    db_path = str(tmp_path / "bookmarks.db")
    _seed(db_path)

    exit_code = await run_search("sourdough", db_path=db_path)

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Sourdough guide" in out
    assert "https://a.example" in out


@pytest.mark.asyncio
async def test_search_json_output(tmp_path, capsys):
    db_path = str(tmp_path / "bookmarks.db")
    _seed(db_path)

    assert await run_search("levain", db_path=db_path, as_json=True) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [item["url"] for item in payload["results"]] == ["https://a.example"]


@pytest.mark.asyncio
async def test_scan_requires_bookmarks_file(tmp_path, capsys):
    exit_code = await run_scan(db_path=str(tmp_path / "bookmarks.db"))

    assert exit_code == 1
    assert "no bookmarks file" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_scan_reports_unreadable_bookmarks(tmp_path, capsys):
    exit_code = await run_scan(
        bookmarks_file=str(tmp_path / "missing" / "Bookmarks"),
        db_path=str(tmp_path / "bookmarks.db"),
    )

    assert exit_code == 1
    assert "Scan failed" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_scan_skips_bookmarklets(tmp_path, capsys):
    bookmarks = tmp_path / "Bookmarks"
    bookmarks.write_text(
        json.dumps(
            {
                "roots": {
                    "bookmark_bar": {
                        "type": "folder",
                        "name": "Bar",
                        "children": [{"type": "url", "name": "Tool", "url": "javascript:go()"}],
                    }
                }
            }
        ),
        encoding="utf-8",
    )

    exit_code = await run_scan(bookmarks_file=str(bookmarks), db_path=str(tmp_path / "b.db"))

    assert exit_code == 0
    assert "Entries in corpus: 0" in capsys.readouterr().out


def test_reset_clears_corpus(tmp_path, capsys):
    db_path = str(tmp_path / "bookmarks.db")
    _seed(db_path)

    assert run_reset(db_path=db_path, assume_yes=True) == 0
    assert "Removed 1 entries" in capsys.readouterr().out

    session = DatabaseSessionManager(db_path)
    assert CorpusStore(SqliteKeyValueStore(session)).fetch_corpus() == {}
    session.close()


def test_reset_can_be_declined(tmp_path, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "n")

    assert run_reset(db_path=str(tmp_path / "bookmarks.db")) == 1
