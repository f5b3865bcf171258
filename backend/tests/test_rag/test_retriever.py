"""
Tests for document retrieval and max-score fusion.
"""

import pytest

from conftest import build_retriever, make_document
from rag.exceptions import RetrievalError
from rag.retriever import fuse_max_scores


@pytest.fixture
def docs():
    return {
        "a": make_document("doc-a", content="Hamilton wins at Silverstone", entities=["Hamilton"]),
        "b": make_document("doc-b", content="Ferrari upgrade package", entities=["Ferrari"]),
        "c": make_document("doc-c", content="Safety car rules explained"),
    }


class TestFuseMaxScores:
    """Tests for the fusion step."""

    def test_keeps_maximum_score(self, docs):
        fused = fuse_max_scores(
            [[(docs["a"], 0.81)], [(docs["a"], 0.74)]],
            limit=5,
        )
        assert fused == [(docs["a"], 0.81)]

    def test_sorted_descending(self, docs):
        fused = fuse_max_scores(
            [[(docs["a"], 0.72), (docs["b"], 0.9)], [(docs["c"], 0.8)]],
            limit=5,
        )
        assert [score for _, score in fused] == [0.9, 0.8, 0.72]

    def test_order_of_result_sets_does_not_matter(self, docs):
        first = [(docs["a"], 0.75), (docs["b"], 0.8)]
        second = [(docs["b"], 0.85), (docs["c"], 0.75)]

        assert fuse_max_scores([first, second], 5) == fuse_max_scores([second, first], 5)

    def test_limit_applied(self, docs):
        fused = fuse_max_scores(
            [[(docs["a"], 0.9), (docs["b"], 0.8), (docs["c"], 0.75)]],
            limit=2,
        )
        assert [doc.id for doc, _ in fused] == [docs["a"].id, docs["b"].id]

    def test_empty(self):
        assert fuse_max_scores([], 5) == []
        assert fuse_max_scores([[], []], 5) == []


class TestRetrieveDocuments:
    """Tests for single-query retrieval."""

    @pytest.mark.asyncio
    async def test_applies_score_floor(self, docs):
        retriever, _, _ = build_retriever({
            "hamilton": [(docs["a"], 0.82), (docs["b"], 0.69), (docs["c"], 0.7)],
        })

        result = await retriever.retrieve_documents("hamilton")

        assert result.documents == [docs["a"], docs["c"]]
        assert result.scores == [0.82, 0.7]

    @pytest.mark.asyncio
    async def test_no_hits(self):
        retriever, _, _ = build_retriever({})

        result = await retriever.retrieve_documents("nothing here")

        assert len(result) == 0

    @pytest.mark.asyncio
    async def test_explicit_limit_overrides_default(self, docs):
        retriever, _, store = build_retriever({"q": [(docs["a"], 0.9), (docs["b"], 0.8)]})

        assert len(await retriever.retrieve_documents("q", limit=0)) == 0
        assert len(await retriever.retrieve_documents("q", limit=1)) == 1
        assert [limit for _, limit, _ in store.searches] == [1]

    @pytest.mark.asyncio
    async def test_passes_limit_and_filters(self, docs):
        retriever, _, store = build_retriever({"q": [(docs["a"], 0.9)]})

        await retriever.retrieve_documents("q", limit=3, filters={"metadata.source": "test"})

        assert store.searches == [("q", 3, {"metadata.source": "test"})]

    @pytest.mark.asyncio
    async def test_embedding_error_propagates(self):
        retriever, _, _ = build_retriever({}, failing={"q"})

        with pytest.raises(ConnectionError):
            await retriever.retrieve_documents("q")


class TestScopedRetrieval:
    """Tests for type- and entity-scoped retrieval."""

    @pytest.mark.asyncio
    async def test_retrieve_by_type(self, sample_documents):
        retriever, _, store = build_retriever({
            "monaco": [(sample_documents["monaco"], 0.9), (sample_documents["drs"], 0.85)],
        })

        result = await retriever.retrieve_by_type("monaco", "news")

        assert result.documents == [sample_documents["drs"]]
        assert store.searches[0][2] == {"metadata.type": "news"}

    @pytest.mark.asyncio
    async def test_retrieve_by_entity_keeps_scores_paired(self, docs):
        retriever, _, store = build_retriever({
            "who is fast": [(docs["b"], 0.95), (docs["a"], 0.8), (docs["c"], 0.75)],
        })

        result = await retriever.retrieve_by_entity("who is fast", "hamilton", limit=2)

        assert result.documents == [docs["a"]]
        assert result.scores == [0.8]
        # Over-fetches twice the limit
        assert store.searches[0][1] == 4

    @pytest.mark.asyncio
    async def test_retrieve_by_entity_matches_metadata_entities(self):
        doc = make_document("tagged", content="Race report", entities=["Lando Norris"])
        retriever, _, _ = build_retriever({"report": [(doc, 0.9)]})

        result = await retriever.retrieve_by_entity("report", "norris")

        assert result.documents == [doc]

    @pytest.mark.asyncio
    async def test_retrieve_by_entity_does_not_pad(self, docs):
        retriever, _, _ = build_retriever({
            "q": [(docs["b"], 0.9), (docs["c"], 0.8)],
        })

        result = await retriever.retrieve_by_entity("q", "Hamilton", limit=5)

        assert len(result) == 0


class TestMultiQueryRetrieve:
    """Tests for multi-query retrieval with fusion."""

    @pytest.mark.asyncio
    async def test_fuses_variants(self, docs):
        retriever, _, _ = build_retriever({
            "q1": [(docs["a"], 0.81), (docs["b"], 0.72)],
            "q2": [(docs["a"], 0.74), (docs["c"], 0.78)],
        })

        result = await retriever.multi_query_retrieve(["q1", "q2"])

        assert result.documents == [docs["a"], docs["c"], docs["b"]]
        assert result.scores == [0.81, 0.78, 0.72]
        assert len(result.documents) == len(result.scores)

    @pytest.mark.asyncio
    async def test_variant_order_does_not_matter(self, docs):
        hits = {
            "q1": [(docs["a"], 0.8), (docs["b"], 0.8)],
            "q2": [(docs["c"], 0.8)],
        }
        retriever, _, _ = build_retriever(hits)

        forward = await retriever.multi_query_retrieve(["q1", "q2"])
        backward = await retriever.multi_query_retrieve(["q2", "q1"])

        assert forward == backward

    @pytest.mark.asyncio
    async def test_failed_variant_contributes_nothing(self, docs):
        retriever, _, _ = build_retriever(
            {"q1": [(docs["a"], 0.9)], "q2": [(docs["b"], 0.95)]},
            failing={"q2"},
        )

        result = await retriever.multi_query_retrieve(["q1", "q2"])

        assert result.documents == [docs["a"]]

    @pytest.mark.asyncio
    async def test_all_variants_failing_raises(self):
        retriever, _, _ = build_retriever({}, failing={"q1", "q2"})

        with pytest.raises(RetrievalError):
            await retriever.multi_query_retrieve(["q1", "q2"])

    @pytest.mark.asyncio
    async def test_empty_variant_list(self):
        retriever, embedder, _ = build_retriever({})

        result = await retriever.multi_query_retrieve([])

        assert len(result) == 0
        assert embedder.calls == []

    @pytest.mark.asyncio
    async def test_zero_limit_returns_nothing(self, docs):
        retriever, embedder, _ = build_retriever({"q": [(docs["a"], 0.9), (docs["b"], 0.8)]})

        result = await retriever.multi_query_retrieve(["q"], limit=0)

        assert len(result) == 0
        assert embedder.calls == []

    @pytest.mark.asyncio
    async def test_limit_applies_to_fused_result(self, docs):
        retriever, _, _ = build_retriever({
            "q1": [(docs["a"], 0.9)],
            "q2": [(docs["b"], 0.85)],
            "q3": [(docs["c"], 0.8)],
        })

        result = await retriever.multi_query_retrieve(["q1", "q2", "q3"], limit=2)

        assert result.documents == [docs["a"], docs["b"]]


class TestHybridRetrieve:
    """Tests for expansion plus multi-query retrieval."""

    @pytest.mark.asyncio
    async def test_searches_each_variant(self, sample_documents):
        question = "Tell me about Verstappen"
        retriever, embedder, _ = build_retriever({
            question: [(sample_documents["verstappen"], 0.74)],
            "Verstappen Formula 1": [(sample_documents["verstappen"], 0.88)],
        })

        result = await retriever.hybrid_retrieve(question)

        assert sorted(embedder.calls) == sorted([question, "Verstappen Formula 1"])
        assert result.documents == [sample_documents["verstappen"]]
        assert result.scores == [0.88]

    @pytest.mark.asyncio
    async def test_question_without_entities(self, sample_documents):
        question = "What does the safety car do?"
        retriever, embedder, _ = build_retriever({question: [(sample_documents["drs"], 0.71)]})

        result = await retriever.hybrid_retrieve(question)

        assert embedder.calls == [question]
        assert len(result) == 1

    @pytest.mark.asyncio
    async def test_two_entity_question_issues_three_searches(self, sample_documents):
        question = "Tell me about Verstappen and Ferrari"
        retriever, embedder, store = build_retriever({
            "Ferrari Formula 1": [(sample_documents["monaco"], 0.83)],
            "Verstappen Formula 1": [(sample_documents["verstappen"], 0.9)],
        })

        result = await retriever.hybrid_retrieve(question, limit=5)

        assert len(store.searches) == 3
        assert result.documents == [sample_documents["verstappen"], sample_documents["monaco"]]
        assert result.scores == sorted(result.scores, reverse=True)
