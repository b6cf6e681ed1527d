"""Full-text index over bookmark titles and content, backed by SQLite FTS5."""

from __future__ import annotations

import contextlib
import difflib
import logging
import re
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, NamedTuple

import peewee

from bookmark_mirror.config import SearchConfig
from bookmark_mirror.db.models import BookmarkSearchIndex
from bookmark_mirror.models.bookmarks import ScoredEntry
from bookmark_mirror.services.ranked_merger import merge_field_hits

if TYPE_CHECKING:
    from bookmark_mirror.db.session import DatabaseSessionManager
    from bookmark_mirror.models.bookmarks import BookmarkEntry

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("title", "content")
VOCAB_TABLE = "bookmark_search_vocab"

# bm25 weights per column: url, title, content
_FIELD_WEIGHTS = {
    "title": (0.0, 1.0, 0.0),
    "content": (0.0, 0.0, 1.0),
}


class FieldHit(NamedTuple):
    url: str
    rank: float


def tokenize(query: str) -> list[str]:
    """Split a query into casefolded search terms, dropping duplicates."""
    terms: list[str] = []
    for piece in re.findall(r"[\w-]+", query.casefold()):
        term = re.sub(r"[\W_]+", " ", piece).strip()
        if term and term not in terms:
            terms.append(term)
    return terms


class SearchIndex:
    """Incrementally maintained two-field index with bucket-ordered search.

    Mutations are single-writer; each batch is applied inside one transaction so
    readers never see half of an entry.
    """

    def __init__(
        self,
        session: DatabaseSessionManager,
        config: SearchConfig | None = None,
    ) -> None:
        self._database = session.database
        self._config = config or SearchConfig()
        self._table = BookmarkSearchIndex._meta.table_name
        self.ensure_index()

    def ensure_index(self) -> None:
        self._database.create_tables([BookmarkSearchIndex], safe=True)
        self._database.execute_sql(
            f"CREATE VIRTUAL TABLE IF NOT EXISTS {VOCAB_TABLE} "
            f"USING fts5vocab('{self._table}', 'col')"
        )

    def recreate(self) -> None:
        """Drop the index structure and create an empty one."""
        with contextlib.suppress(peewee.DatabaseError):
            self._database.execute_sql(f"DROP TABLE IF EXISTS {VOCAB_TABLE}")
        BookmarkSearchIndex.drop_table(safe=True)
        self.ensure_index()
        logger.info("search_index_recreated", extra={"table": self._table})

    def clear(self) -> int:
        removed = BookmarkSearchIndex.delete().execute()
        logger.info("search_index_cleared", extra={"removed": removed})
        return removed

    def count(self) -> int:
        return BookmarkSearchIndex.select().count()

    def add_or_update(self, entries: Mapping[str, BookmarkEntry]) -> int:
        """Insert entries, replacing the indexed fields of URLs already present."""
        if not entries:
            return 0

        with self._database.atomic():
            for url, entry in entries.items():
                BookmarkSearchIndex.delete().where(BookmarkSearchIndex.url == url).execute()
                BookmarkSearchIndex.insert(
                    url=url,
                    title=entry.title or "",
                    content=entry.content or "",
                ).execute()

        logger.debug("search_index_upserted", extra={"entries": len(entries)})
        return len(entries)

    def remove(self, urls: Iterable[str]) -> int:
        """Drop each URL from the index. Unknown URLs are ignored."""
        urls = list(urls)
        if not urls:
            return 0

        removed = 0
        with self._database.atomic():
            for url in urls:
                removed += (
                    BookmarkSearchIndex.delete().where(BookmarkSearchIndex.url == url).execute()
                )

        logger.debug(
            "search_index_removed", extra={"requested": len(urls), "removed": removed}
        )
        return removed

    def search(self, query: str, limit: int | None = None) -> list[ScoredEntry]:
        """Run ``query`` against title and content and merge the per-field hits.

        Terms are OR-combined within a field. The result is bucket ordered
        (both fields, title only, content only) and capped at ``limit``.
        """
        terms = tokenize(query or "")
        if not terms:
            return []

        limit = self._config.result_limit if limit is None else limit
        candidate_limit = max(self._config.candidate_limit, limit)

        hits_by_field: dict[str, list[FieldHit]] = {}
        for field_name in SEARCH_FIELDS:
            expression = self._build_match_expression(field_name, terms)
            hits_by_field[field_name] = self._field_hits(
                field_name, expression, candidate_limit
            )

        ordered = merge_field_hits(
            [hit.url for hit in hits_by_field["title"]],
            [hit.url for hit in hits_by_field["content"]],
            limit,
        )
        if not ordered:
            return []

        best_rank: dict[str, float] = {}
        for hits in hits_by_field.values():
            for hit in hits:
                current = best_rank.get(hit.url)
                if current is None or hit.rank < current:
                    best_rank[hit.url] = hit.rank

        return self._hydrate(ordered, best_rank)

    def _build_match_expression(self, field_name: str, terms: list[str]) -> str:
        vocabulary: list[str] | None = None
        alternatives: list[str] = []
        for term in terms:
            alternatives.append(f'"{term}"*')
            if (
                self._config.fuzzy_max_expansions <= 0
                or " " in term
                or len(term) < self._config.min_fuzzy_length
            ):
                continue
            if vocabulary is None:
                vocabulary = self._vocabulary(field_name)
            for candidate in difflib.get_close_matches(
                term,
                vocabulary,
                n=self._config.fuzzy_max_expansions + 1,
                cutoff=self._config.fuzzy_cutoff,
            ):
                phrase = f'"{candidate}"'
                if candidate != term and phrase not in alternatives:
                    alternatives.append(phrase)
        return "{%s} : (%s)" % (field_name, " OR ".join(alternatives))

    def _vocabulary(self, field_name: str) -> list[str]:
        cursor = self._database.execute_sql(
            f"SELECT term FROM {VOCAB_TABLE} WHERE col = ?", (field_name,)
        )
        return [row[0] for row in cursor]

    def _field_hits(self, field_name: str, expression: str, limit: int) -> list[FieldHit]:
        rank = BookmarkSearchIndex.bm25(*_FIELD_WEIGHTS[field_name])
        query = (
            BookmarkSearchIndex.select(BookmarkSearchIndex.url, rank.alias("score"))
            .where(BookmarkSearchIndex.match(expression))
            .order_by(rank, BookmarkSearchIndex.url)
            .limit(limit)
            .tuples()
        )
        try:
            rows = list(query)
        except peewee.OperationalError as exc:
            logger.warning(
                "search_field_query_failed",
                extra={"field": field_name, "expression": expression, "error": str(exc)},
            )
            return []

        hits: list[FieldHit] = []
        seen: set[str] = set()
        for url, value in rows:
            if url in seen:
                continue
            seen.add(url)
            hits.append(FieldHit(url=url, rank=float(value)))
        return hits

    def _hydrate(self, urls: list[str], ranks: Mapping[str, float]) -> list[ScoredEntry]:
        rows = (
            BookmarkSearchIndex.select(
                BookmarkSearchIndex.url,
                BookmarkSearchIndex.title,
                BookmarkSearchIndex.content,
            )
            .where(BookmarkSearchIndex.url.in_(urls))
            .tuples()
        )
        stored = {url: (title, content) for url, title, content in rows}

        results: list[ScoredEntry] = []
        for url in urls:
            if url not in stored:
                continue
            title, content = stored[url]
            rank = ranks.get(url)
            results.append(
                ScoredEntry(
                    url=url,
                    title=title or "",
                    content=content or "",
                    score=-rank if rank is not None else None,
                )
            )
        return results
