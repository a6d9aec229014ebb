"""Unit tests for the article store and author loader."""

from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from magazine.config import DEFAULT_CATEGORIES
from magazine.models import ArticlesData
from magazine.store import (
    StoreError,
    dedupe_by_id,
    load_articles,
    load_articles_or_empty,
    load_authors,
    load_site_data,
    merge_articles,
    save_articles,
)
from magazine.tests.helpers import AUTHOR_PROFILES, make_article, write_authors

NOW = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


class TestLoadArticles(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_yields_default_document(self) -> None:
        data = load_articles(self.dir / "articles.json")
        self.assertEqual(data.articles, [])
        self.assertEqual(data.categories, DEFAULT_CATEGORIES)
        self.assertEqual(data.metadata.total_articles, 0)
        self.assertEqual(data.metadata.version, "1.0.0")
        self.assertFalse(data.metadata.articles_limit_reached)

    def test_invalid_json_raises_store_error(self) -> None:
        path = self.dir / "articles.json"
        path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(StoreError):
            load_articles(path)

    def test_read_only_loader_degrades_to_empty(self) -> None:
        path = self.dir / "articles.json"
        path.write_text("{not json", encoding="utf-8")
        data = load_articles_or_empty(path)
        self.assertEqual(data.articles, [])
        self.assertEqual(data.categories, [])
        self.assertEqual(load_articles_or_empty(self.dir / "missing.json").articles, [])

    def test_round_trip_keeps_camel_case_and_unknown_keys(self) -> None:
        path = self.dir / "articles.json"
        raw = {
            "articles": [
                {
                    "id": "a1",
                    "title": "One",
                    "readingTime": 7,
                    "publishedAt": "2025-01-01T00:00:00Z",
                    "customField": {"kept": True},
                }
            ],
            "metadata": {"lastUpdated": "2025-01-01T00:00:00Z", "totalArticles": 1, "version": "1.0.0"},
            "categories": ["AI Tools"],
        }
        path.write_text(json.dumps(raw), encoding="utf-8")

        data = load_articles(path)
        self.assertEqual(data.articles[0].reading_time, 7)
        save_articles(data, path)

        saved = json.loads(path.read_text(encoding="utf-8"))
        article = saved["articles"][0]
        self.assertEqual(article["readingTime"], 7)
        self.assertEqual(article["customField"], {"kept": True})
        self.assertIn("totalArticles", saved["metadata"])
        self.assertFalse((self.dir / "articles.json.tmp").exists())

    def test_site_data_falls_back_to_sample_file(self) -> None:
        sample = self.dir / "sample-articles.json"
        save_articles(ArticlesData(articles=[make_article("sample")], categories=["Testing"]), sample)
        data = load_site_data(self.dir / "articles.json", sample)
        self.assertEqual([a.id for a in data.articles], ["sample"])

        data = load_site_data(self.dir / "articles.json", self.dir / "nope.json")
        self.assertEqual(data.categories, DEFAULT_CATEGORIES)


class TestMergeArticles(unittest.TestCase):
    def test_new_articles_are_prepended_and_deduped(self) -> None:
        data = ArticlesData(articles=[make_article("old-1"), make_article("shared", title="stale")])
        merged = merge_articles(data, [make_article("shared", title="fresh"), make_article("new-1")], now=NOW)

        self.assertEqual([a.id for a in merged.articles], ["shared", "new-1", "old-1"])
        self.assertEqual(merged.articles[0].title, "fresh")
        self.assertEqual(merged.metadata.total_articles, 3)
        self.assertEqual(merged.metadata.new_articles_added, 2)
        self.assertEqual(merged.metadata.last_updated, "2025-10-01T12:00:00.000Z")
        self.assertFalse(merged.metadata.articles_limit_reached)

    def test_merge_is_idempotent(self) -> None:
        batch = [make_article("n1"), make_article("n2")]
        data = ArticlesData(articles=[make_article("o1"), make_article("o2")])

        once = [a.id for a in merge_articles(data, batch, now=NOW).articles]
        twice = [a.id for a in merge_articles(data, batch, now=NOW).articles]
        self.assertEqual(once, twice)
        self.assertEqual(once, ["n1", "n2", "o1", "o2"])

    def test_cap_truncates_and_sets_flag(self) -> None:
        data = ArticlesData(articles=[make_article(f"o{i}") for i in range(5)])
        merged = merge_articles(data, [make_article("n1"), make_article("n2")], limit=4, now=NOW)

        self.assertEqual([a.id for a in merged.articles], ["n1", "n2", "o0", "o1"])
        self.assertEqual(merged.metadata.total_articles, 4)
        self.assertTrue(merged.metadata.articles_limit_reached)

    def test_default_cap_is_two_hundred(self) -> None:
        data = ArticlesData(articles=[make_article(f"o{i}") for i in range(200)])
        merged = merge_articles(data, [make_article("n1")], now=NOW)
        self.assertEqual(len(merged.articles), 200)
        self.assertEqual(merged.articles[0].id, "n1")
        self.assertTrue(merged.metadata.articles_limit_reached)

    def test_dedupe_keeps_first_occurrence(self) -> None:
        articles = [make_article("a", title="first"), make_article("b"), make_article("a", title="second")]
        out = dedupe_by_id(articles)
        self.assertEqual([(a.id, a.title) for a in out], [("a", "first"), ("b", "Title b")])


class TestLoadAuthors(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_loads_profiles_in_index_order(self) -> None:
        write_authors(self.dir)
        authors = load_authors(self.dir)
        self.assertEqual([a.id for a in authors], [p["id"] for p in AUTHOR_PROFILES])
        self.assertEqual(authors[0].search_terms[0], "AI code completion")
        self.assertTrue(authors[0].agent_prompt.startswith("You are Maya Chen"))

    def test_missing_index_yields_no_authors(self) -> None:
        self.assertEqual(load_authors(self.dir), [])

    def test_missing_profile_is_skipped(self) -> None:
        write_authors(self.dir)
        (self.dir / "profiles" / "maya-chen.json").unlink()
        authors = load_authors(self.dir)
        self.assertEqual([a.id for a in authors], ["sofia-andersson"])

    def test_malformed_index_entries_are_skipped(self) -> None:
        write_authors(self.dir)
        index = {"authors": ["maya-chen", {"profilePath": "profiles/maya-chen.json"}, {"id": "sofia-andersson"}]}
        (self.dir / "index.json").write_text(json.dumps(index), encoding="utf-8")
        self.assertEqual([a.id for a in load_authors(self.dir)], ["sofia-andersson"])

    def test_non_object_index_raises_store_error(self) -> None:
        (self.dir / "index.json").write_text(json.dumps(["maya-chen"]), encoding="utf-8")
        with self.assertRaises(StoreError):
            load_authors(self.dir)

    def test_profile_path_defaults_to_profiles_dir(self) -> None:
        write_authors(self.dir)
        (self.dir / "index.json").write_text(json.dumps({"authors": [{"id": "sofia-andersson"}]}), encoding="utf-8")
        self.assertEqual([a.id for a in load_authors(self.dir)], ["sofia-andersson"])


if __name__ == "__main__":
    unittest.main()
