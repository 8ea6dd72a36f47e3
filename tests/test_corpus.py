"""Tests for corpus access, document classification, and structural parsing."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

import pytest

from src.corpus.accessor import FileSystemCorpus, load_corpus
from src.corpus.classifier import CLASSIFICATION_RULES, classify_document
from src.corpus.models import DocumentType
from src.corpus.parsers import (
    extract_authors,
    extract_quotes,
    parse_document,
    parse_markdown,
    parse_plain,
    parse_transcript,
)
from src.errors import CorpusIOError


class TestClassifier:
    def test_transcript_by_filename(self) -> None:
        assert classify_document("Show E001_transcript.txt", "hello") is DocumentType.TRANSCRIPT

    def test_transcript_filename_case_insensitive(self) -> None:
        assert classify_document("TRANSCRIPT-final.txt", "hello") is DocumentType.TRANSCRIPT

    def test_transcript_by_timestamp(self) -> None:
        assert classify_document("notes.txt", "intro\n[0:01:02] hi") is DocumentType.TRANSCRIPT

    def test_markdown_by_extension(self) -> None:
        assert classify_document("plan.md", "no headings") is DocumentType.MARKDOWN

    def test_markdown_by_heading(self) -> None:
        assert classify_document("plan.txt", "intro\n## Goals\ntext") is DocumentType.MARKDOWN

    def test_hash_without_space_is_not_heading(self) -> None:
        assert classify_document("tags.txt", "#hashtag only") is DocumentType.PLAIN

    def test_transcript_wins_over_markdown(self) -> None:
        """Timestamps outrank headings when both appear."""
        content = "# Episode notes\n[0:00:05] hello there"
        assert classify_document("episode.md", content) is DocumentType.TRANSCRIPT

    def test_plain_default(self) -> None:
        assert classify_document("readme.txt", "just words") is DocumentType.PLAIN

    def test_rules_are_ordered(self) -> None:
        assert [doc_type for doc_type, _ in CLASSIFICATION_RULES] == [
            DocumentType.TRANSCRIPT,
            DocumentType.MARKDOWN,
        ]


class TestTranscriptParser:
    def test_blocks_and_lines(self) -> None:
        text = "[0:00:01]\nHello.\nWorld.\n[0:00:10]\nSecond block."
        blocks = parse_transcript(text)
        assert [b.timestamp for b in blocks] == ["0:00:01", "0:00:10"]
        assert blocks[0].lines == ["Hello.", "World."]
        assert blocks[1].lines == ["Second block."]

    def test_residual_text_is_first_line(self) -> None:
        blocks = parse_transcript("[1:02:03] Speaker A: hi there\nmore")
        assert blocks[0].timestamp == "1:02:03"
        assert blocks[0].lines == ["Speaker A: hi there", "more"]

    def test_empty_blocks_not_emitted(self) -> None:
        blocks = parse_transcript("[0:00:01]\n\n[0:00:02]\ncontent")
        assert [b.timestamp for b in blocks] == ["0:00:02"]

    def test_lines_before_first_timestamp_dropped(self) -> None:
        blocks = parse_transcript("Title line\n[0:00:01]\nbody")
        assert len(blocks) == 1
        assert blocks[0].lines == ["body"]

    def test_line_count_matches_source(self) -> None:
        timestamps = ["0:00:01", "0:01:15", "0:03:40", "1:10:00"]
        source_lines: list[str] = []
        expected_lines = 0
        for i, ts in enumerate(timestamps):
            source_lines.append(f"[{ts}]")
            for j in range(i + 2):
                source_lines.append(f"line {i}-{j}")
                source_lines.append("")
                expected_lines += 1
        text = "\n".join(source_lines)

        blocks = parse_transcript(text)

        non_empty_non_timestamp = [
            line for line in text.splitlines() if line.strip() and not re.search(r"\[\d+:\d{2}:\d{2}\]", line)
        ]
        assert sum(len(b.lines) for b in blocks) == len(non_empty_non_timestamp) == expected_lines
        assert [b.timestamp for b in blocks] == timestamps

    def test_block_text_joins_lines(self) -> None:
        blocks = parse_transcript("[0:00:01]\na\nb")
        assert blocks[0].text == "a b"


class TestMarkdownParser:
    def test_levels_follow_markers(self) -> None:
        text = "# One\na\n## Two\nb\n## Three\nc\n# Four\nd"
        sections = parse_markdown(text)
        assert len(sections) == 4
        assert [s.level for s in sections] == [1, 2, 2, 1]
        assert [s.title for s in sections] == ["One", "Two", "Three", "Four"]

    def test_parent_links(self) -> None:
        text = "# One\na\n## Two\nb\n### Deep\nx\n## Three\nc\n# Four\nd"
        sections = parse_markdown(text)
        assert [s.parent for s in sections] == [None, 0, 1, 0, None]

    def test_sections_without_content_dropped(self) -> None:
        sections = parse_markdown("# Empty\n\n# Full\ncontent")
        assert [s.title for s in sections] == ["Full"]

    def test_content_lines_stripped(self) -> None:
        sections = parse_markdown("## Notes\n   indented line   \n\nnext")
        assert sections[0].content == ["indented line", "next"]

    def test_seven_hashes_is_not_heading(self) -> None:
        sections = parse_markdown("# Top\n####### not a heading")
        assert len(sections) == 1
        assert sections[0].content == ["####### not a heading"]


class TestQuotesAndAuthors:
    def test_quotes_deduplicated_and_filtered(self) -> None:
        text = 'She said "this is a long quotation" and "short". Again "this is a long quotation".'
        assert extract_quotes(text) == ["this is a long quotation"]

    def test_emphasis_is_quote(self) -> None:
        assert extract_quotes("*an emphasised remark here*") == ["an emphasised remark here"]

    def test_apostrophes_are_not_quotes(self) -> None:
        assert extract_quotes("we don't know what it's about, really") == []

    def test_quote_cap(self) -> None:
        text = " ".join(f'"quotation number {i:02d}"' for i in range(15))
        assert len(extract_quotes(text)) == 10

    def test_authors_bold_and_by(self) -> None:
        text = "**Jane Doe**, Book Title\nAn essay by Will Storr and friends.\n**Jane Doe** again"
        assert extract_authors(text) == ["Jane Doe", "Will Storr"]


class TestPlainAndDispatch:
    def test_plain_stats(self) -> None:
        stats = parse_plain("One two three\nfour five")
        assert stats.line_count == 2
        assert stats.words == ["one", "two", "three", "four", "five"]
        assert stats.word_count == 5

    def test_dispatch(self) -> None:
        assert len(parse_document("[0:00:01]\nhi", DocumentType.TRANSCRIPT)) == 1
        assert len(parse_document("# A\nb", DocumentType.MARKDOWN)) == 1
        assert parse_document("anything", DocumentType.PLAIN) == []


class TestFileSystemCorpus:
    def test_lists_sorted_and_skips_sidecars(
        self, write_corpus: Callable[[dict[str, str | bytes]], Path]
    ) -> None:
        root = write_corpus(
            {
                "b.txt": "b",
                "a.md": "# a\nx",
                "a.md.meta.json": "{}",
                ".hidden": "x",
            }
        )
        (root / "subdir").mkdir()
        corpus = FileSystemCorpus(root)
        assert [d.name for d in corpus.list_documents()] == ["a.md", "b.txt"]

    def test_missing_dir_lists_nothing(self, tmp_path: Path) -> None:
        assert FileSystemCorpus(tmp_path / "nope").list_documents() == []

    def test_read_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusIOError):
            FileSystemCorpus(tmp_path).read_document("missing.txt")

    def test_read_outside_root_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusIOError):
            FileSystemCorpus(tmp_path).read_document("../etc/passwd")

    def test_unreadable_document_skipped(
        self, write_corpus: Callable[[dict[str, str | bytes]], Path]
    ) -> None:
        root = write_corpus({"good.txt": "fine", "bad.txt": b"\xff\xfe\xfa\xfb"})
        snapshot = load_corpus(FileSystemCorpus(root))
        assert snapshot.names() == ["good.txt"]
        assert snapshot.skipped == ["bad.txt"]

    def test_snapshot_classifies(self, sample_corpus: Path) -> None:
        snapshot = load_corpus(FileSystemCorpus(sample_corpus))
        types = {d.id: d.type for d in snapshot.documents}
        assert types == {
            "Diggnation E013_transcript.txt": DocumentType.TRANSCRIPT,
            "gtm_plan.md": DocumentType.MARKDOWN,
            "notes.txt": DocumentType.PLAIN,
        }

    def test_load_subset(self, sample_corpus: Path) -> None:
        snapshot = load_corpus(FileSystemCorpus(sample_corpus), ["notes.txt"])
        assert snapshot.names() == ["notes.txt"]
