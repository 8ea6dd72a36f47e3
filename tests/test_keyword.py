"""Tests for the three-step keyword search."""

from __future__ import annotations

from datetime import datetime, timezone

from src.corpus.classifier import classify_document
from src.corpus.models import Document
from src.retrieval.keyword import MatchLevel, heading_sections, keyword_search, search_units
from conftest import COCKTAIL_TRANSCRIPT, GTM_MARKDOWN, PLAIN_NOTES

MTIME = datetime(2024, 5, 1, tzinfo=timezone.utc)

BUDGET_MARKDOWN = "# Budget\n## Q1\nnumbers are fine\n## Q2\nmore numbers\n"


def _doc(name: str, text: str) -> Document:
    return Document(
        id=name,
        type=classify_document(name, text),
        size=len(text),
        modified_at=MTIME,
        raw_text=text,
    )


def _corpus() -> list[Document]:
    return [
        _doc("Diggnation E013_transcript.txt", COCKTAIL_TRANSCRIPT),
        _doc("gtm_plan.md", GTM_MARKDOWN),
        _doc("notes.txt", PLAIN_NOTES),
    ]


class TestSearchUnits:
    def test_transcript_units_are_blocks(self) -> None:
        units = search_units(_doc("ep_transcript.txt", COCKTAIL_TRANSCRIPT))
        assert [label for label, _ in units] == ["[0:00:01]", "[0:05:30]", "[0:12:10]", "[0:20:00]"]

    def test_markdown_units_are_sections(self) -> None:
        units = search_units(_doc("gtm_plan.md", GTM_MARKDOWN))
        assert units[1][0] == "Phase 1: Launch"
        assert units[1][1].startswith("## Phase 1: Launch\n")

    def test_plain_units_are_paragraphs(self) -> None:
        units = search_units(_doc("notes.txt", PLAIN_NOTES))
        assert [label for label, _ in units] == ["paragraph 1", "paragraph 2", "paragraph 3"]

    def test_markdown_preamble_is_a_unit(self) -> None:
        units = search_units(_doc("guide.md", "The zeppelin arrives at noon.\n\n# Schedule\nlunch at one\n"))
        assert units == [
            ("preamble", "The zeppelin arrives at noon."),
            ("Schedule", "# Schedule\nlunch at one"),
        ]

    def test_transcript_preamble_is_a_unit(self) -> None:
        units = search_units(_doc("ep_transcript.txt", "Intro from the host.\n[0:00:01]\nhello there\n"))
        assert units == [("preamble", "Intro from the host."), ("[0:00:01]", "hello there")]

    def test_transcript_without_timestamps_uses_paragraphs(self) -> None:
        units = search_units(_doc("show_transcript.txt", "The zeppelin lands.\n\nThen lunch."))
        assert units == [("paragraph 1", "The zeppelin lands."), ("paragraph 2", "Then lunch.")]


class TestHeadingSections:
    def test_sections_include_subsections(self) -> None:
        assert heading_sections(BUDGET_MARKDOWN) == [
            ("Budget", "# Budget\n## Q1\nnumbers are fine\n## Q2\nmore numbers"),
            ("Q1", "## Q1\nnumbers are fine"),
            ("Q2", "## Q2\nmore numbers"),
        ]

    def test_no_headings(self) -> None:
        assert heading_sections(PLAIN_NOTES) == []


class TestKeywordSearch:
    def test_heading_match_returns_whole_section(self) -> None:
        result = keyword_search(_corpus(), "What is in the launch phase?")
        assert result.level is MatchLevel.HEADING
        assert len(result.hits) == 1
        hit = result.hits[0]
        assert hit.file == "gtm_plan.md"
        assert "Ship the beta to early adopters" in hit.text

    def test_chunk_match(self) -> None:
        result = keyword_search(_corpus(), "landing page")
        assert result.level is MatchLevel.CHUNK
        assert [(h.file, h.label) for h in result.hits] == [("gtm_plan.md", "Phase 1: Launch")]

    def test_chunks_ranked_by_distinct_terms(self) -> None:
        result = keyword_search(_corpus(), "hiring plan budget")
        assert result.level is MatchLevel.CHUNK
        assert [(h.file, h.label) for h in result.hits] == [
            ("notes.txt", "paragraph 3"),
            ("gtm_plan.md", "GTM Strategy"),
            ("notes.txt", "paragraph 2"),
        ]

    def test_terms_are_word_bounded(self) -> None:
        result = keyword_search(_corpus(), "plan")
        assert [(h.file, h.label) for h in result.hits] == [
            ("gtm_plan.md", "GTM Strategy"),
            ("notes.txt", "paragraph 3"),
        ]

    def test_loose_pass_admits_short_terms(self) -> None:
        documents = [_doc("ai.txt", "Our AI roadmap.\n\nUnrelated paragraph.")]
        result = keyword_search(documents, "AI")
        assert result.level is MatchLevel.LOOSE
        assert [h.label for h in result.hits] == ["paragraph 1"]

    def test_chunk_limit(self) -> None:
        text = "\n\n".join(f"budget item {i}" for i in range(30))
        result = keyword_search([_doc("many.txt", text)], "budget", limit=15)
        assert len(result.hits) == 15

    def test_no_match(self) -> None:
        result = keyword_search(_corpus(), "xylophone zeppelin")
        assert result.level is None
        assert result.hits == []

    def test_heading_without_own_content_matches(self) -> None:
        result = keyword_search([_doc("plan.md", BUDGET_MARKDOWN)], "budget")
        assert result.level is MatchLevel.HEADING
        assert [(h.label, h.text) for h in result.hits] == [
            ("Budget", "# Budget\n## Q1\nnumbers are fine\n## Q2\nmore numbers"),
        ]

    def test_text_outside_sections_is_searchable(self) -> None:
        documents = [
            _doc("guide.md", "The zeppelin arrives at noon.\n\n# Schedule\nlunch at one\n"),
            _doc("show_transcript.txt", "Tonight the zeppelin lands.\n\nThen lunch."),
        ]
        result = keyword_search(documents, "zeppelin")
        assert result.level is MatchLevel.CHUNK
        assert [(h.file, h.label) for h in result.hits] == [
            ("guide.md", "preamble"),
            ("show_transcript.txt", "paragraph 1"),
        ]

    def test_explicit_terms_override_query(self) -> None:
        result = keyword_search(_corpus(), "unrelated wording", terms=["landing"])
        assert result.level is MatchLevel.CHUNK
        assert result.terms == ("landing",)
        assert [(h.file, h.label) for h in result.hits] == [("gtm_plan.md", "Phase 1: Launch")]
