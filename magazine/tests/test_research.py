"""Tests for source-article research and trending topics."""

from __future__ import annotations

import json
import unittest
from datetime import datetime, timezone

from langchain_core.language_models import FakeListChatModel

from magazine.models import ResearchFinding
from magazine.pipeline.research import (
    FALLBACK_TOPICS,
    MOCK_SOURCES,
    generate_trending_topics,
    mock_source_for,
    rank_findings,
    research_articles_for_author,
    select_best_source,
)
from magazine.tests.helpers import FailingChatModel, make_author

NOW = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


def _findings_json(*items: tuple[str, int, str]) -> str:
    return json.dumps(
        {
            "articles": [
                {
                    "title": title,
                    "url": f"https://example.com/{title.lower().replace(' ', '-')}",
                    "source": "Example Blog",
                    "summary": f"Summary of {title}.",
                    "relevance": relevance,
                    "publishDate": published,
                }
                for title, relevance, published in items
            ]
        }
    )


class TestResearchArticles(unittest.TestCase):
    def test_keeps_relevant_findings_best_first(self) -> None:
        llm = FakeListChatModel(
            responses=[
                _findings_json(("Low", 4, "2025-09-01"), ("Good", 8, "2025-09-10")),
                _findings_json(("Best", 9, "2025-08-20"), ("Good Newer", 8, "2025-09-20")),
                _findings_json(("Edge", 6, "2025-09-05")),
            ]
        )
        author = make_author(0)
        findings = research_articles_for_author(author, llm=llm, now=NOW)

        self.assertEqual([f.title for f in findings], ["Best", "Good Newer", "Good", "Edge"])
        self.assertTrue(all(f.relevance_score >= 6 for f in findings))
        self.assertEqual(findings[0].research_query, "AI pair programming")
        self.assertEqual(findings[0].research_date, "2025-10-01T12:00:00.000Z")

    def test_only_first_three_terms_are_researched(self) -> None:
        llm = FakeListChatModel(responses=[_findings_json(("A", 7, "2025-09-01"))] * 5)
        calls: list[object] = []
        original = llm.invoke

        class _Recorder:
            def invoke(self, messages: object) -> object:
                calls.append(messages)
                return original(messages)

        research_articles_for_author(make_author(0), llm=_Recorder(), now=NOW)
        self.assertEqual(len(calls), 3)

    def test_failing_terms_are_skipped(self) -> None:
        llm = FailingChatModel()
        findings = research_articles_for_author(make_author(0), llm=llm, now=NOW)
        self.assertEqual(findings, [])
        self.assertEqual(llm.calls, 3)

    def test_unparseable_response_is_skipped(self) -> None:
        llm = FakeListChatModel(responses=["not json at all", _findings_json(("Kept", 7, "2025-09-01"))])
        findings = research_articles_for_author(
            make_author(0), llm=llm, search_terms=["first", "second"], now=NOW
        )
        self.assertEqual([f.title for f in findings], ["Kept"])
        self.assertEqual(findings[0].research_query, "second")

    def test_rank_caps_at_five(self) -> None:
        findings = [ResearchFinding(title=f"t{i}", relevance_score=7) for i in range(8)]
        self.assertEqual(len(rank_findings(findings)), 5)


class TestSourceSelection(unittest.TestCase):
    def test_no_findings_means_no_source(self) -> None:
        self.assertIsNone(select_best_source(make_author(0), []))

    def test_best_is_first(self) -> None:
        findings = [ResearchFinding(title="a", relevance_score=9), ResearchFinding(title="b", relevance_score=7)]
        self.assertEqual(select_best_source(make_author(0), findings).title, "a")

    def test_mock_source_per_author(self) -> None:
        source = mock_source_for(make_author(1), now=NOW)
        self.assertEqual(source.title, MOCK_SOURCES["sofia-andersson"]["title"])
        self.assertEqual(source.relevance_score, 9)
        self.assertEqual(source.research_query, "DevOps automation")

    def test_mock_source_unknown_author_uses_default(self) -> None:
        author = make_author(0, id="someone-else", researchInterests={"searchTerms": []})
        source = mock_source_for(author, now=NOW)
        self.assertEqual(source.title, MOCK_SOURCES["maya-chen"]["title"])
        self.assertEqual(source.research_query, "AI development")


class TestTrendingTopics(unittest.TestCase):
    def test_parses_topics(self) -> None:
        llm = FakeListChatModel(responses=[json.dumps({"topics": ["Agents in CI", "  ", "Eval harnesses"]})])
        self.assertEqual(generate_trending_topics(llm=llm, now=NOW), ["Agents in CI", "Eval harnesses"])

    def test_falls_back_on_error(self) -> None:
        self.assertEqual(generate_trending_topics(llm=FailingChatModel(), now=NOW), FALLBACK_TOPICS)


if __name__ == "__main__":
    unittest.main()
