"""
Qdrant vector store holding one collection per transcribed episode.

Provides:
- Context-managed Qdrant connections (server URL, on-disk path or in-memory)
- TranscriptIndex: existence check, chunk indexing and passage search

Every collection ends with a manifest point written after all chunks. A
collection without its manifest was interrupted while indexing; it does not
count as transcribed and is rebuilt on the next run.

Usage:
    from podcast_qna.db import get_qdrant_client, TranscriptIndex

    with get_qdrant_client(url="http://localhost:6333") as client:
        index = TranscriptIndex(client, embed_model)
        if not index.exists("Transcript_1850"):
            index.index("Transcript_1850", chunks)
        passages = index.search("Transcript_1850", "Who is the guest?", k=3)
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional, Sequence

from llama_index.core.base.embeddings.base import BaseEmbedding
from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    MatchValue,
    PointStruct,
    VectorParams,
)

from podcast_qna.exceptions import BackendError, OperationCancelled
from podcast_qna.logger import get_logger, log_function
from podcast_qna.models import COLLECTION_PREFIX, TranscriptChunk


DEFAULT_QDRANT_URL = "http://localhost:6333"
DEFAULT_MIN_RELEVANCE = 0.2
DEFAULT_BATCH_SIZE = 64

KIND_CHUNK = "chunk"
KIND_MANIFEST = "manifest"

qdrant_logger = get_logger("qdrant_client")


@contextmanager
def get_qdrant_client(
    url: Optional[str] = None,
    path: Optional[str] = None,
    api_key: Optional[str] = None,
    location: Optional[str] = None,
) -> Generator[QdrantClient, None, None]:
    """
    Context manager for Qdrant client connections.

    Args:
        url: Qdrant server URL (default: http://localhost:6333)
        path: Directory for an embedded on-disk store; takes precedence over url
        api_key: Optional Qdrant API key for server mode
        location: Explicit location such as ":memory:"; takes precedence over path

    Yields:
        QdrantClient: An active Qdrant client instance

    Raises:
        BackendError: If the client cannot be created
    """
    client = None
    try:
        if location:
            qdrant_logger.debug(f"Opening Qdrant at location {location}")
            client = QdrantClient(location=location)
        elif path:
            qdrant_logger.debug(f"Opening embedded Qdrant store at {path}")
            client = QdrantClient(path=path)
        else:
            target = url or DEFAULT_QDRANT_URL
            qdrant_logger.debug(f"Connecting to Qdrant at {target}")
            client = QdrantClient(url=target, api_key=api_key)
    except Exception as e:
        qdrant_logger.error(f"Qdrant client error: {e}")
        raise BackendError(f"Cannot open Qdrant vector store: {e}") from e

    try:
        yield client
    finally:
        client.close()
        qdrant_logger.debug("Qdrant client connection closed")


def point_id(collection_id: str, ordinal: int) -> str:
    """Deterministic point id of a chunk, stable across re-indexing."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{collection_id}/{ordinal}"))


def manifest_id(collection_id: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{collection_id}/manifest"))


def _chunks_only() -> Filter:
    return Filter(
        must_not=[FieldCondition(key="kind", match=MatchValue(value=KIND_MANIFEST))]
    )


class TranscriptIndex:
    """
    Per-episode transcript collections in Qdrant.

    Chunks are embedded with a llama-index embedding model and stored one
    point per chunk, so each passage is retrieved on its own.
    """

    def __init__(
        self,
        client: QdrantClient,
        embed_model: BaseEmbedding,
        min_relevance: float = DEFAULT_MIN_RELEVANCE,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        self.client = client
        self.embed_model = embed_model
        self.min_relevance = min_relevance
        self.batch_size = batch_size

    @log_function(logger_name="podcast_qna.qdrant_client", level=logging.DEBUG)
    def exists(self, collection_id: str) -> bool:
        """
        Check whether a collection has been fully indexed.

        Args:
            collection_id: Collection name, e.g. "Transcript_1850"

        Returns:
            True if the collection exists and carries its completion manifest
        """
        try:
            if not self.client.collection_exists(collection_name=collection_id):
                return False
            records = self.client.retrieve(
                collection_name=collection_id,
                ids=[manifest_id(collection_id)],
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            qdrant_logger.error(f"Error checking collection '{collection_id}': {e}")
            raise BackendError(
                f"Cannot check collection {collection_id}: {e}",
                {"collection_id": collection_id},
            ) from e

        if not records:
            qdrant_logger.warning(
                f"Collection '{collection_id}' exists but was never completed"
            )
            return False
        return True

    def _embed_texts(self, texts: list[str]) -> list[list[float]]:
        try:
            return self.embed_model.get_text_embedding_batch(texts)
        except Exception as e:
            qdrant_logger.error(f"Error generating embeddings: {e}")
            raise BackendError(f"Embedding backend failed: {e}") from e

    def _create_collection(self, collection_id: str, dimension: int) -> None:
        if self.client.collection_exists(collection_name=collection_id):
            qdrant_logger.warning(
                f"Dropping incomplete collection '{collection_id}' before re-indexing"
            )
            self.client.delete_collection(collection_name=collection_id)
        qdrant_logger.info(
            f"Creating Qdrant collection: {collection_id} (dimension={dimension})"
        )
        self.client.create_collection(
            collection_name=collection_id,
            vectors_config=VectorParams(size=dimension, distance=Distance.COSINE),
        )

    @log_function(logger_name="podcast_qna.qdrant_client", log_execution_time=True)
    def index(
        self,
        collection_id: str,
        chunks: Sequence[TranscriptChunk],
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> int:
        """
        Embed and store a transcript's chunks, then commit the collection.

        A committed collection is left untouched. An incomplete leftover is
        dropped and rebuilt.

        Args:
            collection_id: Collection name
            chunks: Chunks in ordinal order
            should_stop: Polled before every embedding, upsert and the
                manifest write; once true nothing more is sent to the backends

        Returns:
            Number of chunks written (0 when the collection was already committed)

        Raises:
            ValueError: If a chunk belongs to another collection
            BackendError: If embedding or storage fails
            OperationCancelled: If should_stop turned true; the collection
                stays uncommitted
        """

        def check_stop() -> None:
            if should_stop is not None and should_stop():
                qdrant_logger.info(
                    f"Indexing '{collection_id}' stopped after {written} chunks, not committed"
                )
                raise OperationCancelled()

        if self.exists(collection_id):
            qdrant_logger.info(f"Collection '{collection_id}' already indexed, skipping")
            return 0

        for chunk in chunks:
            if chunk.collection_id != collection_id:
                raise ValueError(
                    f"Chunk {chunk.ordinal} belongs to {chunk.collection_id}, not {collection_id}"
                )

        created = False
        written = 0
        try:
            for start in range(0, len(chunks), self.batch_size):
                batch = chunks[start : start + self.batch_size]
                check_stop()
                vectors = self._embed_texts([chunk.text for chunk in batch])
                check_stop()
                if not created:
                    self._create_collection(collection_id, len(vectors[0]))
                    created = True
                self.client.upsert(
                    collection_name=collection_id,
                    points=[
                        PointStruct(
                            id=point_id(collection_id, chunk.ordinal),
                            vector=vector,
                            payload={
                                "kind": KIND_CHUNK,
                                "collection_id": collection_id,
                                "ordinal": chunk.ordinal,
                                "text": chunk.text,
                            },
                        )
                        for chunk, vector in zip(batch, vectors)
                    ],
                    wait=True,
                )
                written += len(batch)
                qdrant_logger.debug(
                    f"Indexed {written}/{len(chunks)} chunks into '{collection_id}'"
                )

            sizing_vector = None
            if not created:
                # Empty transcript: size the collection from one embedding
                check_stop()
                sizing_vector = self._embed_texts([collection_id])[0]
                self._create_collection(collection_id, len(sizing_vector))

            check_stop()
            self._write_manifest(collection_id, len(chunks), sizing_vector)
        except (BackendError, OperationCancelled):
            raise
        except Exception as e:
            qdrant_logger.error(
                f"Indexing '{collection_id}' failed after {written} chunks: {e}"
            )
            raise BackendError(
                f"Cannot index collection {collection_id}: {e}",
                {"collection_id": collection_id, "written": written},
            ) from e

        qdrant_logger.info(f"Committed {written} chunks into '{collection_id}'")
        return written

    def _write_manifest(
        self, collection_id: str, chunk_count: int, vector: Optional[list[float]]
    ) -> None:
        if vector is None:
            info = self.client.get_collection(collection_name=collection_id)
            dimension = info.config.params.vectors.size
            vector = [1.0] + [0.0] * (dimension - 1)
        self.client.upsert(
            collection_name=collection_id,
            points=[
                PointStruct(
                    id=manifest_id(collection_id),
                    vector=vector,
                    payload={
                        "kind": KIND_MANIFEST,
                        "collection_id": collection_id,
                        "chunk_count": chunk_count,
                    },
                )
            ],
            wait=True,
        )

    @log_function(logger_name="podcast_qna.qdrant_client", log_execution_time=True)
    def search(self, collection_id: str, query_text: str, k: int = 3) -> list[str]:
        """
        Retrieve the passages most similar to a query.

        Args:
            collection_id: Collection to search
            query_text: Question or free text
            k: Maximum number of passages

        Returns:
            Up to k passage texts, most similar first; empty when the collection
            does not exist or nothing reaches the relevance threshold
        """
        try:
            if not self.client.collection_exists(collection_name=collection_id):
                qdrant_logger.debug(
                    f"Collection '{collection_id}' does not exist, no passages"
                )
                return []
        except Exception as e:
            raise BackendError(f"Cannot search collection {collection_id}: {e}") from e

        try:
            query_vector = self.embed_model.get_query_embedding(query_text)
        except Exception as e:
            qdrant_logger.error(f"Error generating query embedding: {e}")
            raise BackendError(f"Embedding backend failed: {e}") from e

        try:
            response = self.client.query_points(
                collection_name=collection_id,
                query=query_vector,
                query_filter=_chunks_only(),
                limit=k,
                score_threshold=self.min_relevance,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            qdrant_logger.error(f"Error searching '{collection_id}': {e}")
            raise BackendError(f"Cannot search collection {collection_id}: {e}") from e

        points = sorted(response.points, key=lambda p: p.score, reverse=True)
        qdrant_logger.info(
            f"Retrieved {len(points)} passage(s) from '{collection_id}'"
        )
        return [point.payload["text"] for point in points]

    def get_info(self) -> dict[str, Any]:
        """
        Describe the transcript collections currently stored.

        Raises:
            BackendError: If the vector store cannot be reached
        """
        try:
            collections = self.client.get_collections().collections
        except Exception as e:
            qdrant_logger.error(f"Error listing collections: {e}")
            raise BackendError(f"Cannot list Qdrant collections: {e}") from e
        names = sorted(c.name for c in collections if c.name.startswith(COLLECTION_PREFIX))
        return {
            "collections": names,
            "collection_count": len(names),
            "min_relevance": self.min_relevance,
        }
