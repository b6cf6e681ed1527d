from __future__ import annotations

import random

import pytest

from bookmark_mirror.models.bookmarks import BookmarkNode
from bookmark_mirror.services.corpus_differ import collect_bookmark_urls, diff_urls


def _random_url_sets(seed: int) -> tuple[set[str], set[str]]:
    rng = random.Random(seed)
    universe = [f"https://example.com/{n}" for n in range(40)]
    return set(rng.sample(universe, rng.randint(0, 40))), set(rng.sample(universe, rng.randint(0, 40)))


@pytest.mark.parametrize("seed", range(25))
def test_diff_partitions_the_union(seed):
    previous, current = _random_url_sets(seed)

    diff = diff_urls(previous, current)

    assert diff.added == current - previous
    assert diff.removed == previous - current
    assert not diff.added & diff.removed
    assert diff.added | diff.removed | (previous & current) == previous | current


def test_identical_sets_produce_empty_diff():
    urls = {"https://a.example", "https://b.example"}

    diff = diff_urls(urls, urls)

    assert diff.added == frozenset()
    assert diff.removed == frozenset()


def test_empty_previous_marks_everything_added():
    diff = diff_urls(set(), ["https://a.example", "https://b.example"])

    assert diff.added == {"https://a.example", "https://b.example"}
    assert diff.removed == frozenset()


def test_collect_walks_depth_first_and_skips_folders():
    tree = [
        BookmarkNode(
            title="Bar",
            children=[
                BookmarkNode(title="one", url="https://one.example"),
                BookmarkNode(
                    title="Nested",
                    children=[
                        BookmarkNode(title="two", url="https://two.example"),
                        BookmarkNode(title="Empty folder", children=[]),
                    ],
                ),
                BookmarkNode(title="three", url="https://three.example"),
            ],
        ),
        BookmarkNode(title="Other", children=[BookmarkNode(title="four", url="javascript:void(0)")]),
    ]

    urls = collect_bookmark_urls(tree)

    assert urls == [
        "https://one.example",
        "https://two.example",
        "https://three.example",
        "javascript:void(0)",
    ]


def test_collect_ignores_leaves_without_url():
    tree = [BookmarkNode(title="separator"), BookmarkNode(title="ok", url="https://ok.example")]

    assert collect_bookmark_urls(tree) == ["https://ok.example"]
