"""Tests for term occurrence counting and document selection."""

from __future__ import annotations

from datetime import datetime, timezone

from src.corpus.models import Document, DocumentType
from src.retrieval.counting import (
    count_in_documents,
    count_occurrences,
    example_lines,
    select_documents,
)
from conftest import COCKTAIL_TRANSCRIPT

MTIME = datetime(2024, 5, 1, tzinfo=timezone.utc)

NAMES = ["Diggnation E013_transcript.txt", "Diggnation E0130_transcript.txt", "gtm_plan.md"]


def _doc(name: str, text: str) -> Document:
    return Document(id=name, type=DocumentType.PLAIN, size=len(text), modified_at=MTIME, raw_text=text)


class TestCountOccurrences:
    def test_case_insensitive(self) -> None:
        assert count_occurrences("Cocktail cocktail COCKTAIL", "cocktail") == 3

    def test_non_overlapping(self) -> None:
        assert count_occurrences("aaaa", "aa") == 2
        assert count_occurrences("aaa", "aa") == 1

    def test_substring_matches(self) -> None:
        assert count_occurrences("cocktails and mocktails", "cocktail") == 1

    def test_empty_term(self) -> None:
        assert count_occurrences("anything", "") == 0

    def test_fixture_transcript(self) -> None:
        assert count_occurrences(COCKTAIL_TRANSCRIPT, "cocktail") == 7


class TestExampleLines:
    def test_file_order_and_stripped(self) -> None:
        text = "  first beer  \nno match\nsecond Beer\n"
        assert example_lines(text, "beer") == ["first beer", "second Beer"]

    def test_limit(self) -> None:
        text = "\n".join(f"line {i} beer" for i in range(10))
        assert len(example_lines(text, "beer")) == 5
        assert len(example_lines(text, "beer", limit=2)) == 2


class TestSelectDocuments:
    def test_no_filter(self) -> None:
        assert select_documents(NAMES) == NAMES

    def test_episode_filter_is_exact_token(self) -> None:
        assert select_documents(NAMES, episode_filter="013") == ["Diggnation E013_transcript.txt"]

    def test_episode_filter_accepts_int(self) -> None:
        assert select_documents(NAMES, episode_filter=13) == ["Diggnation E013_transcript.txt"]

    def test_document_filter_substring(self) -> None:
        assert select_documents(NAMES, document_filter="GTM") == ["gtm_plan.md"]

    def test_document_filter_takes_precedence(self) -> None:
        assert select_documents(NAMES, document_filter="gtm", episode_filter="013") == ["gtm_plan.md"]


class TestCountInDocuments:
    def test_totals_and_ordering(self) -> None:
        documents = [
            _doc("a.txt", "beer"),
            _doc("b.txt", "no match"),
            _doc("c.txt", "beer beer beer"),
        ]
        result = count_in_documents(documents, "beer")
        assert result.total_count == 4
        assert [(fc.file, fc.count) for fc in result.per_file] == [("c.txt", 3), ("a.txt", 1)]
        assert result.searched == 3

    def test_total_is_sum_of_files(self) -> None:
        documents = [_doc(f"{i}.txt", "x " * i) for i in range(5)]
        result = count_in_documents(documents, "x")
        assert result.total_count == sum(fc.count for fc in result.per_file) == 10

    def test_examples_capped(self) -> None:
        text = "\n".join("cocktail" for _ in range(8))
        result = count_in_documents([_doc("a.txt", text)], "cocktail")
        assert len(result.per_file[0].examples) == 5

    def test_zero_matches(self) -> None:
        result = count_in_documents([_doc("a.txt", "nothing")], "cocktail")
        assert result.total_count == 0
        assert result.per_file == []

    def test_idempotent(self) -> None:
        documents = [_doc("ep.txt", COCKTAIL_TRANSCRIPT)]
        assert count_in_documents(documents, "cocktail") == count_in_documents(documents, "cocktail")
