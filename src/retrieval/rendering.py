"""Render retrieval results as plain-text context blocks."""

from __future__ import annotations

from src.analysis.analyzer import DocumentAnalysis
from src.corpus.models import Document, DocumentInfo, Section, TimeBlock
from src.retrieval.counting import CountResult
from src.retrieval.keyword import KeywordSearchResult
from src.retrieval.search import VectorMatch

TRUNCATION_MARKER = "\n[... context truncated ...]"

# Below this fraction of the limit a boundary is considered too early to cut at.
_MIN_BOUNDARY_FRACTION = 0.5


def truncate_context(text: str, limit: int, marker: str = TRUNCATION_MARKER) -> tuple[str, bool]:
    """Cut *text* to at most *limit* characters at a content boundary.

    Prefers a blank line, then a line break, then whitespace, as long as the
    boundary falls in the second half of the window; otherwise cuts hard.
    The marker is appended when text is cut and counts against *limit*.

    Returns:
        ``(text, truncated)``.
    """
    if len(text) <= limit:
        return text, False
    if limit <= len(marker):
        return text[:limit], True

    window = text[: limit - len(marker)]
    floor = int(len(window) * _MIN_BOUNDARY_FRACTION)
    for separator in ("\n\n", "\n", " "):
        cut = window.rfind(separator)
        if cut >= floor and cut > 0:
            window = window[:cut]
            break
    return window.rstrip() + marker, True


def render_count(result: CountResult) -> str:
    scope = "all documents"
    if result.document_filter:
        scope = f'documents matching "{result.document_filter}"'
    elif result.episode_filter:
        scope = f"episode {int(result.episode_filter)} (E{result.episode_filter})"

    lines = [
        f'Occurrence count for "{result.term}"',
        f"Scope: {scope} ({result.searched} searched)",
        f"Total occurrences: {result.total_count} across {len(result.per_file)} file(s)",
    ]
    if not result.per_file:
        lines.append(f'No occurrences of "{result.term}" were found.')
        return "\n".join(lines)

    lines.append("")
    lines.append("Per-file counts:")
    lines.extend(f"- {fc.file}: {fc.count}" for fc in result.per_file)

    top = result.per_file[0]
    if top.examples:
        lines.append("")
        lines.append(f"Example lines from {top.file}:")
        lines.extend(f"- {example}" for example in top.examples)
    return "\n".join(lines)


def _header(analysis: DocumentAnalysis) -> list[str]:
    return [
        f"Document: {analysis.name}",
        f"Type: {analysis.type.value} | lines: {analysis.line_count} | words: {analysis.word_count}",
    ]


def _outline(sections: list[Section]) -> list[str]:
    return [f"{'  ' * (s.level - 1)}- {s.title}" for s in sections]


def render_markdown_analysis(analysis: DocumentAnalysis) -> str:
    lines = _header(analysis)
    if analysis.authors:
        lines += ["", "Authors:"] + [f"- {a}" for a in analysis.authors]
    if analysis.quotes:
        lines += ["", "Quotes:"] + [f'- "{q}"' for q in analysis.quotes]
    if analysis.key_points:
        lines += ["", "Key points:"] + [f"- [{kp.title}] {kp.content}" for kp in analysis.key_points]
    sections = [u for u in analysis.structural_units if isinstance(u, Section)]
    if sections:
        lines += ["", "Section outline:"] + _outline(sections)
    return "\n".join(lines)


def render_transcript_analysis(analysis: DocumentAnalysis, sample: list[int]) -> str:
    blocks = [u for u in analysis.structural_units if isinstance(u, TimeBlock)]
    lines = _header(analysis)
    lines.append(f"Time-blocks: {len(blocks)}")
    if analysis.topics:
        lines += ["", "Main topics:"]
        lines += [f"- [{t.timestamp}] {t.title}: {t.summary}" for t in analysis.topics]
    if blocks and sample:
        lines += ["", "Representative excerpts (chronological):"]
        lines += [f"[{blocks[i].timestamp}] {blocks[i].text}" for i in sample if i < len(blocks)]
    return "\n".join(lines)


def render_plain_analysis(analysis: DocumentAnalysis, preview: str) -> str:
    lines = _header(analysis)
    if analysis.top_terms:
        lines += ["", "Top terms: " + ", ".join(f"{t.term} ({t.count})" for t in analysis.top_terms)]
    if preview:
        lines += ["", "Content:", preview]
    return "\n".join(lines)


def render_file_metadata(
    info: DocumentInfo,
    document: Document,
    analysis: DocumentAnalysis,
    preview_chars: int,
    term_counts: dict[str, int],
) -> str:
    lines = [
        f"File: {info.name}",
        f"Type: {document.type.value}",
        f"Size: {info.size} bytes",
        f"Last modified: {info.modified_at.isoformat()}",
        f"Lines: {analysis.line_count} | words: {analysis.word_count}",
    ]
    if term_counts:
        lines.append("Term occurrences: " + ", ".join(f"{t}: {c}" for t, c in term_counts.items()))
    if analysis.top_terms:
        lines.append("Top terms: " + ", ".join(t.term for t in analysis.top_terms[:10]))
    preview = document.raw_text[:preview_chars]
    if preview:
        suffix = "..." if len(document.raw_text) > preview_chars else ""
        lines += ["", "Preview:", preview + suffix]
    return "\n".join(lines)


def render_keyword_hits(result: KeywordSearchResult) -> str:
    parts = [f"=== {hit.file} :: {hit.label} ===\n{hit.text}" for hit in result.hits]
    return "\n\n".join(parts)


def render_semantic_matches(matches: list[VectorMatch]) -> str:
    parts: list[str] = []
    for match in matches:
        source = match.metadata.get("filename")
        suffix = f" (source: {source})" if source else ""
        parts.append(f"[Score: {match.score:.2f}]{suffix} {match.text}")
    return "\n\n".join(parts)


def render_corpus_dump(documents: list[Document], per_document_chars: int | None = None) -> str:
    parts: list[str] = []
    for document in documents:
        text = document.raw_text
        if per_document_chars is not None:
            text, _ = truncate_context(text, per_document_chars)
        parts.append(f"=== File: {document.id} ===\n{text}\n=== End of {document.id} ===")
    return "\n\n".join(parts)
