"""
Tests for the Qdrant transcript index, run against an in-memory Qdrant.
"""
import pytest

from mocks.mock_embedding import FailingEmbedding
from podcast_qna.db import TranscriptIndex, manifest_id, point_id
from podcast_qna.exceptions import BackendError, OperationCancelled
from podcast_qna.models import TranscriptChunk


COLLECTION = "Transcript_1000"


def make_chunks(*texts, collection_id=COLLECTION):
    return [
        TranscriptChunk(collection_id=collection_id, ordinal=i, text=text)
        for i, text in enumerate(texts)
    ]


CHUNKS = make_chunks(
    "Our guest today works on Blazor at Microsoft.",
    "We talked about MAUI and mobile apps.",
    "Rust keeps coming up in the industry.",
    "The weather was nice during the recording.",
)


class TestPointIds:
    def test_ids_are_deterministic(self):
        assert point_id(COLLECTION, 3) == point_id(COLLECTION, 3)
        assert point_id(COLLECTION, 3) != point_id(COLLECTION, 4)
        assert manifest_id(COLLECTION) != manifest_id("Transcript_1001")


class TestExists:
    def test_missing_collection(self, transcript_index):
        assert transcript_index.exists(COLLECTION) is False

    def test_indexed_collection(self, transcript_index):
        transcript_index.index(COLLECTION, CHUNKS)

        assert transcript_index.exists(COLLECTION) is True
        assert transcript_index.exists("Transcript_1001") is False


class TestIndex:
    def test_returns_written_count(self, transcript_index, qdrant_client):
        assert transcript_index.index(COLLECTION, CHUNKS) == 4
        # chunks plus the manifest
        assert qdrant_client.count(collection_name=COLLECTION).count == 5

    def test_second_index_is_a_no_op(self, transcript_index, qdrant_client):
        transcript_index.index(COLLECTION, CHUNKS)

        assert transcript_index.index(COLLECTION, make_chunks("Something else")) == 0
        assert qdrant_client.count(collection_name=COLLECTION).count == 5

    def test_small_batches(self, qdrant_client, embed_model):
        index = TranscriptIndex(qdrant_client, embed_model, batch_size=1)

        assert index.index(COLLECTION, CHUNKS) == 4
        assert index.exists(COLLECTION)

    def test_foreign_chunk_is_rejected(self, transcript_index):
        chunks = CHUNKS + make_chunks("stray", collection_id="Transcript_1001")

        with pytest.raises(ValueError):
            transcript_index.index(COLLECTION, chunks)
        assert transcript_index.exists(COLLECTION) is False

    def test_empty_transcript_is_committed(self, transcript_index):
        assert transcript_index.index(COLLECTION, []) == 0

        assert transcript_index.exists(COLLECTION) is True
        assert transcript_index.search(COLLECTION, "guest") == []

    def test_interrupted_indexing_is_rebuilt(self, qdrant_client, embed_model, monkeypatch):
        index = TranscriptIndex(qdrant_client, embed_model, batch_size=2)
        real_embed = index._embed_texts
        calls = []

        def flaky_embed(texts):
            calls.append(texts)
            if len(calls) == 2:
                raise BackendError("Embedding backend failed: timeout")
            return real_embed(texts)

        monkeypatch.setattr(index, "_embed_texts", flaky_embed)
        with pytest.raises(BackendError):
            index.index(COLLECTION, CHUNKS)

        # first batch landed, but without a manifest the collection is not committed
        assert qdrant_client.collection_exists(collection_name=COLLECTION)
        assert index.exists(COLLECTION) is False

        monkeypatch.setattr(index, "_embed_texts", real_embed)
        assert index.index(COLLECTION, CHUNKS) == 4
        assert index.exists(COLLECTION) is True
        assert qdrant_client.count(collection_name=COLLECTION).count == 5

    def test_embedding_failure_is_backend_error(self, qdrant_client):
        index = TranscriptIndex(qdrant_client, FailingEmbedding(vocabulary=["guest"]))

        with pytest.raises(BackendError, match="Embedding backend failed"):
            index.index(COLLECTION, CHUNKS)
        assert index.exists(COLLECTION) is False


class TestSearch:
    def test_most_similar_first(self, transcript_index):
        transcript_index.index(COLLECTION, CHUNKS)

        passages = transcript_index.search(COLLECTION, "Who is the guest working on Blazor?", k=3)

        assert passages[0] == CHUNKS[0].text

    def test_irrelevant_passages_are_filtered(self, transcript_index):
        transcript_index.index(COLLECTION, CHUNKS)

        passages = transcript_index.search(COLLECTION, "What about Rust?", k=3)

        assert passages == [CHUNKS[2].text]

    def test_no_relevant_passage(self, transcript_index):
        transcript_index.index(COLLECTION, CHUNKS)

        assert transcript_index.search(COLLECTION, "Tell me about Azure") == []

    def test_manifest_is_never_returned(self, transcript_index):
        transcript_index.index(COLLECTION, CHUNKS)

        for query in ["blazor", "maui", "rust", "guest", "anything"]:
            passages = transcript_index.search(COLLECTION, query, k=10)
            assert set(passages) <= {chunk.text for chunk in CHUNKS}
            assert len(passages) <= len(CHUNKS)

    def test_limit(self, qdrant_client, embed_model):
        index = TranscriptIndex(qdrant_client, embed_model, min_relevance=0.0)
        index.index(COLLECTION, CHUNKS)

        assert len(index.search(COLLECTION, "guest", k=2)) == 2

    def test_missing_collection(self, transcript_index):
        assert transcript_index.search("Transcript_404", "guest") == []


class TestGetInfo:
    def test_lists_transcript_collections(self, transcript_index, qdrant_client):
        transcript_index.index("Transcript_1001", make_chunks("b", collection_id="Transcript_1001"))
        transcript_index.index(COLLECTION, CHUNKS)

        info = transcript_index.get_info()

        assert info["collections"] == ["Transcript_1000", "Transcript_1001"]
        assert info["collection_count"] == 2

    def test_unreachable_store(self, embed_model):
        class DownClient:
            def get_collections(self):
                raise ConnectionError("connection refused")

        index = TranscriptIndex(DownClient(), embed_model)

        with pytest.raises(BackendError, match="connection refused"):
            index.get_info()


class TestIndexStop:
    def test_stop_before_next_batch_leaves_collection_uncommitted(
        self, qdrant_client, embed_model, monkeypatch
    ):
        index = TranscriptIndex(qdrant_client, embed_model, batch_size=1)
        real_embed = index._embed_texts
        calls = []

        def counting_embed(texts):
            calls.append(texts)
            return real_embed(texts)

        monkeypatch.setattr(index, "_embed_texts", counting_embed)
        with pytest.raises(OperationCancelled):
            index.index(COLLECTION, CHUNKS, should_stop=lambda: len(calls) >= 2)

        assert len(calls) == 2
        assert index.exists(COLLECTION) is False

    def test_stop_before_manifest(self, transcript_index):
        with pytest.raises(OperationCancelled):
            transcript_index.index(COLLECTION, [], should_stop=lambda: True)

        assert transcript_index.exists(COLLECTION) is False

    def test_never_stopping_commits(self, transcript_index):
        assert transcript_index.index(COLLECTION, CHUNKS, should_stop=lambda: False) == 4
        assert transcript_index.exists(COLLECTION) is True
