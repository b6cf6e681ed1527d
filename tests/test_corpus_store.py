from __future__ import annotations

from bookmark_mirror.adapters.storage import CORPUS_KEY, CorpusStore, InMemoryKeyValueStore

from tests.conftest import make_entry


def test_missing_key_is_written_as_empty_corpus():
    kv = InMemoryKeyValueStore()
    store = CorpusStore(kv)

    assert store.fetch_corpus() == {}
    assert kv.get(CORPUS_KEY) == "{}"


def test_corrupt_blob_reads_as_empty(caplog):
    kv = InMemoryKeyValueStore({CORPUS_KEY: "{not json"})
    store = CorpusStore(kv)

    with caplog.at_level("WARNING"):
        assert store.fetch_corpus() == {}

    assert any(record.message == "corpus_blob_unreadable" for record in caplog.records)
    # The unreadable blob is left in place for inspection
    assert kv.get(CORPUS_KEY) == "{not json"


def test_persist_then_fetch_on_sqlite(corpus_store):
    corpus = {
        "https://a.example": make_entry("https://a.example", "A", "alpha text"),
        "https://b.example": make_entry("https://b.example", "B", "beta text"),
    }

    corpus_store.persist_corpus(corpus)

    assert corpus_store.fetch_corpus() == corpus
    assert corpus_store.raw_corpus_size() > 0


def test_persist_overwrites_previous_blob(corpus_store):
    corpus_store.persist_corpus({"https://a.example": make_entry("https://a.example", "A")})
    corpus_store.persist_corpus({"https://b.example": make_entry("https://b.example", "B")})

    assert list(corpus_store.fetch_corpus()) == ["https://b.example"]


def test_reset_empties_corpus(corpus_store):
    corpus_store.persist_corpus({"https://a.example": make_entry("https://a.example", "A")})

    corpus_store.reset_corpus()

    assert corpus_store.fetch_corpus() == {}
