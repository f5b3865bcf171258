"""
Tests for context formatting and source references.
"""

from rag.context import NO_CONTEXT_AVAILABLE, build_source_references, format_context
from rag.schemas import RetrievalResult


class TestFormatContext:
    """Tests for format_context."""

    def test_empty_returns_sentinel(self):
        assert format_context([]) == "No specific context available. Using general F1 knowledge."
        assert format_context([]) == NO_CONTEXT_AVAILABLE

    def test_single_document(self, sample_documents):
        context = format_context([sample_documents["drs"]])
        assert context == (
            "[Source 1: Understanding DRS]\n"
            "DRS opens a flap in the rear wing to reduce drag."
        )

    def test_falls_back_to_source_without_title(self, sample_documents):
        context = format_context([sample_documents["untitled"]])
        assert context.startswith("[Source 1: autosport]\n")

    def test_numbering_and_separator(self, sample_documents):
        context = format_context([sample_documents["monaco"], sample_documents["drs"]])

        blocks = context.split("\n\n---\n\n")
        assert len(blocks) == 2
        assert blocks[0].startswith("[Source 1: 2024 Monaco Grand Prix Results]")
        assert blocks[1].startswith("[Source 2: Understanding DRS]")

    def test_accepts_mappings(self):
        context = format_context([
            {"content": "Body text", "metadata": {"title": "Headline", "source": "bbc"}},
            {"content": "Other text", "metadata": {"source": "espn"}},
        ])
        assert "[Source 1: Headline]\nBody text" in context
        assert "[Source 2: espn]\nOther text" in context

    def test_does_not_truncate(self):
        long_content = "lap " * 5000
        context = format_context([{"content": long_content, "metadata": {"source": "x"}}])
        assert context.endswith(long_content)


class TestBuildSourceReferences:
    """Tests for build_source_references."""

    def test_none(self):
        assert build_source_references(None) == []

    def test_one_reference_per_document(self, sample_documents):
        result = RetrievalResult.from_pairs([
            (sample_documents["monaco"], 0.91),
            (sample_documents["untitled"], 0.75),
        ])

        references = build_source_references(result)

        assert [r.title for r in references] == ["2024 Monaco Grand Prix Results", "autosport"]
        assert [r.source for r in references] == ["ergast", "autosport"]
        assert [r.relevance_score for r in references] == [0.91, 0.75]


def test_minimal_mapping_document():
    assert format_context([{"content": "A", "metadata": {"source": "x"}}]) == "[Source 1: x]\nA"
