"""
Milvus vector index for learning-material chunks.

One process-wide collection holds every tenant's chunks. Tenant, subject and
document tags are scalar fields so searches and deletes can be scoped with
boolean expressions. All methods block on network I/O; async callers run
them with asyncio.to_thread.

Schema:
- id (INT64, auto), text (VARCHAR), embedding (FLOAT_VECTOR, dim D)
- tenant_id / subject_id / document_id (VARCHAR, filterable)
- chunk_index / ingestion_run (INT64), metadata (JSON)

Dependencies: pymilvus, learnability.configs, learnability.core.retrieval.filters
System role: Vector store adapter (collection lifecycle, insert, search, delete)
"""

import logging
from typing import Any, Sequence

from pymilvus import (
    Collection,
    CollectionSchema,
    DataType,
    FieldSchema,
    MilvusException,
    connections,
    utility,
)

from learnability.boundary.vdb.vector_schemas import ChunkRecord, VectorSearchResult
from learnability.configs.vector_store import VectorStoreSettings
from learnability.core.exceptions import ConfigurationError, IndexUnavailableError
from learnability.core.retrieval.filters import Eq, Filter

logger = logging.getLogger(__name__)

EMBEDDING_FIELD = "embedding"
OUTPUT_FIELDS = ["text", "tenant_id", "subject_id", "document_id", "chunk_index", "metadata"]

_MISSING_INDEX_MARKERS = ("index not found", "index doesn't exist", "index not exist", "indexnotexist")


def _is_missing_index(error: Exception) -> bool:
    text = str(error).lower()
    return any(marker in text for marker in _MISSING_INDEX_MARKERS)


class VectorIndex:
    """
    Collection abstraction over Milvus.

    The connection and collection handle are created lazily on first use and
    shared afterwards. Call close() on shutdown.
    """

    def __init__(self, settings: VectorStoreSettings) -> None:
        """
        Initialize the index adapter without touching the network.

        Args:
            settings: Milvus connection, schema and index parameters
        """
        self._settings = settings
        self._alias = settings.alias
        self._collection_name = settings.collection_name
        self._dimension = settings.embedding_dimension
        self._connected = False
        self._collection: Collection | None = None

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def collection_name(self) -> str:
        return self._collection_name

    def _connect(self) -> None:
        if self._connected:
            return
        params: dict[str, Any] = {"uri": self._settings.uri}
        if self._settings.token:
            params["token"] = self._settings.token
        try:
            connections.connect(alias=self._alias, **params)
        except MilvusException as e:
            raise IndexUnavailableError(
                f"Cannot connect to Milvus at {self._settings.uri}: {e}",
                operation="connect",
            ) from e
        self._connected = True
        logger.info(
            f"{__name__}:_connect - Connected to Milvus",
            extra={"uri": self._settings.uri, "alias": self._alias},
        )

    def _collection_exists(self) -> bool:
        self._connect()
        try:
            return utility.has_collection(self._collection_name, using=self._alias)
        except MilvusException as e:
            raise IndexUnavailableError(
                f"Cannot check collection {self._collection_name}: {e}",
                operation="has_collection",
            ) from e

    def _build_schema(self) -> CollectionSchema:
        tag_length = self._settings.tag_max_length
        fields = [
            FieldSchema(name="id", dtype=DataType.INT64, is_primary=True, auto_id=True),
            FieldSchema(name="text", dtype=DataType.VARCHAR, max_length=self._settings.text_max_length),
            FieldSchema(name=EMBEDDING_FIELD, dtype=DataType.FLOAT_VECTOR, dim=self._dimension),
            FieldSchema(name="tenant_id", dtype=DataType.VARCHAR, max_length=tag_length),
            FieldSchema(name="subject_id", dtype=DataType.VARCHAR, max_length=tag_length),
            FieldSchema(name="document_id", dtype=DataType.VARCHAR, max_length=tag_length),
            FieldSchema(name="chunk_index", dtype=DataType.INT64),
            FieldSchema(name="ingestion_run", dtype=DataType.INT64),
            FieldSchema(name="metadata", dtype=DataType.JSON),
        ]
        return CollectionSchema(fields=fields, description="Learning material chunks")

    def _index_params(self) -> dict[str, Any]:
        return {
            "index_type": self._settings.index_type,
            "metric_type": self._settings.metric_type,
            "params": {
                "M": self._settings.hnsw_m,
                "efConstruction": self._settings.hnsw_ef_construction,
            },
        }

    def _check_dimension(self, collection: Collection) -> None:
        for field in collection.schema.fields:
            if field.name == EMBEDDING_FIELD:
                existing = int(field.params.get("dim", 0))
                if existing != self._dimension:
                    raise ConfigurationError(
                        f"Collection {self._collection_name} has dimension {existing}, "
                        f"embedding model produces {self._dimension}",
                        {"collection": self._collection_name},
                    )
                return
        raise ConfigurationError(
            f"Collection {self._collection_name} has no '{EMBEDDING_FIELD}' vector field",
            {"collection": self._collection_name},
        )

    def ensure_collection(self) -> Collection:
        """
        Create the collection with the fixed schema if it is absent.

        Idempotent. A concurrent creator winning the race is treated as success.

        Returns:
            Collection: Handle to the existing or newly created collection

        Raises:
            ConfigurationError: Existing collection has a different embedding dimension
            IndexUnavailableError: Milvus cannot be reached
        """
        if self._collection is not None:
            return self._collection

        self._connect()
        try:
            if utility.has_collection(self._collection_name, using=self._alias):
                collection = Collection(self._collection_name, using=self._alias)
                self._check_dimension(collection)
            else:
                try:
                    collection = Collection(
                        name=self._collection_name,
                        schema=self._build_schema(),
                        using=self._alias,
                    )
                    logger.info(
                        f"{__name__}:ensure_collection - Created collection",
                        extra={"collection": self._collection_name, "dimension": self._dimension},
                    )
                except MilvusException:
                    if not utility.has_collection(self._collection_name, using=self._alias):
                        raise
                    logger.info(
                        f"{__name__}:ensure_collection - Collection created concurrently, reusing it",
                        extra={"collection": self._collection_name},
                    )
                    collection = Collection(self._collection_name, using=self._alias)
                    self._check_dimension(collection)
        except MilvusException as e:
            raise IndexUnavailableError(
                f"Cannot prepare collection {self._collection_name}: {e}",
                operation="ensure_collection",
            ) from e

        self._collection = collection
        return collection

    def ensure_embedding_index(self) -> None:
        """
        Build the similarity index on the embedding field if it is missing.

        Raises:
            IndexUnavailableError: Index could not be created
        """
        collection = self.ensure_collection()
        try:
            if collection.has_index():
                return
            collection.create_index(field_name=EMBEDDING_FIELD, index_params=self._index_params())
        except MilvusException as e:
            raise IndexUnavailableError(
                f"Cannot build index on {self._collection_name}: {e}",
                operation="ensure_embedding_index",
            ) from e
        logger.info(
            f"{__name__}:ensure_embedding_index - Created {self._settings.index_type} index",
            extra={"collection": self._collection_name, "metric": self._settings.metric_type},
        )

    def insert(self, records: Sequence[ChunkRecord]) -> int:
        """
        Append chunks to the collection.

        Args:
            records: Chunks with embeddings and filterable tags

        Returns:
            int: Number of rows inserted

        Raises:
            ConfigurationError: A vector does not match the collection dimension
            IndexUnavailableError: Insert failed
        """
        if not records:
            return 0

        rows = []
        for record in records:
            if len(record.embedding) != self._dimension:
                raise ConfigurationError(
                    f"Embedding has dimension {len(record.embedding)}, collection expects {self._dimension}",
                    {"document_id": record.document_id, "chunk_index": record.chunk_index},
                )
            rows.append({
                "text": record.text,
                EMBEDDING_FIELD: record.embedding,
                "tenant_id": record.tenant_id,
                "subject_id": record.subject_id or "",
                "document_id": record.document_id,
                "chunk_index": record.chunk_index,
                "ingestion_run": record.ingestion_run,
                "metadata": record.metadata,
            })

        collection = self.ensure_collection()
        try:
            result = collection.insert(rows)
        except MilvusException as e:
            raise IndexUnavailableError(f"Insert failed: {e}", operation="insert") from e

        logger.info(
            f"{__name__}:insert - Inserted {result.insert_count} chunks",
            extra={"document_id": records[0].document_id, "collection": self._collection_name},
        )
        return result.insert_count

    def _search_once(self, collection: Collection, vector: list[float], expr: str | None, top_k: int):
        collection.load()
        params = {
            "metric_type": self._settings.metric_type,
            "params": {"ef": max(self._settings.search_ef, top_k)},
        }
        results = collection.search(
            data=[vector],
            anns_field=EMBEDDING_FIELD,
            param=params,
            limit=top_k,
            expr=expr,
            output_fields=OUTPUT_FIELDS,
            consistency_level="Strong",
        )
        return list(results[0]) if results else []

    def search(
        self,
        vector: list[float],
        filter: Filter | None,
        top_k: int,
    ) -> list[VectorSearchResult]:
        """
        Filtered cosine similarity search.

        A missing similarity index is rebuilt once and the search retried.

        Args:
            vector: Query embedding
            filter: Scope filter (None searches everything)
            top_k: Maximum number of results

        Returns:
            list[VectorSearchResult]: At most top_k hits, highest score first.
            Empty when the collection does not exist or nothing matches.

        Raises:
            IndexUnavailableError: Search failed after the self-heal attempt
        """
        if not self._collection_exists():
            logger.info(
                f"{__name__}:search - Collection does not exist yet, returning no results",
                extra={"collection": self._collection_name},
            )
            return []

        collection = self.ensure_collection()
        expr = filter.to_expr() if filter is not None else None
        try:
            hits = self._search_once(collection, vector, expr, top_k)
        except MilvusException as e:
            if not _is_missing_index(e):
                raise IndexUnavailableError(f"Search failed: {e}", operation="search") from e
            logger.warning(
                f"{__name__}:search - Similarity index missing, rebuilding and retrying once",
                extra={"collection": self._collection_name},
            )
            self.ensure_embedding_index()
            try:
                hits = self._search_once(collection, vector, expr, top_k)
            except MilvusException as retry_error:
                raise IndexUnavailableError(
                    f"Search failed after index rebuild: {retry_error}",
                    operation="search",
                ) from retry_error

        results = [
            VectorSearchResult(
                text=hit.entity.get("text"),
                score=float(hit.score),
                document_id=hit.entity.get("document_id"),
                chunk_index=int(hit.entity.get("chunk_index")),
                subject_id=hit.entity.get("subject_id") or None,
                metadata=hit.entity.get("metadata") or {},
            )
            for hit in hits
        ]
        results.sort(key=lambda result: result.score, reverse=True)
        return results[:top_k]

    def _delete(self, filter: Filter, operation: str) -> int:
        if not self._collection_exists():
            return 0
        collection = self.ensure_collection()
        try:
            result = collection.delete(expr=filter.to_expr())
        except MilvusException as e:
            raise IndexUnavailableError(f"Delete failed: {e}", operation=operation) from e
        return result.delete_count

    def delete_by_document(self, document_id: str) -> int:
        """
        Delete every chunk of a document. No-op if the collection is missing.

        Returns:
            int: Number of chunks deleted
        """
        deleted = self._delete(Eq("document_id", document_id), "delete_by_document")
        logger.info(
            f"{__name__}:delete_by_document - Deleted {deleted} chunks",
            extra={"document_id": document_id},
        )
        return deleted

    def delete_by_subject(self, subject_id: str) -> int:
        """
        Delete every chunk tagged with a subject. No-op if the collection is missing.

        Returns:
            int: Number of chunks deleted
        """
        deleted = self._delete(Eq("subject_id", subject_id), "delete_by_subject")
        logger.info(
            f"{__name__}:delete_by_subject - Deleted {deleted} chunks",
            extra={"subject_id": subject_id},
        )
        return deleted

    def count(self, filter: Filter) -> int:
        """Count chunks matching a filter. Zero if the collection is missing."""
        if not self._collection_exists():
            return 0
        collection = self.ensure_collection()
        try:
            collection.load()
            rows = collection.query(
                expr=filter.to_expr(),
                output_fields=["count(*)"],
                consistency_level="Strong",
            )
        except MilvusException as e:
            raise IndexUnavailableError(f"Count failed: {e}", operation="count") from e
        return int(rows[0]["count(*)"]) if rows else 0

    def reset_index(self) -> dict[str, Any]:
        """
        Drop and rebuild the similarity index, keeping the stored chunks.

        Creates the collection first if it does not exist.

        Returns:
            dict: {"success": bool, "message": str}
        """
        try:
            created = not self._collection_exists()
            collection = self.ensure_collection()
            if not created:
                collection.release()
                if collection.has_index():
                    collection.drop_index()
            collection.create_index(field_name=EMBEDDING_FIELD, index_params=self._index_params())
            collection.load()
        except (MilvusException, IndexUnavailableError) as e:
            logger.error(
                f"{__name__}:reset_index - Failed: {type(e).__name__}: {e}",
                extra={"collection": self._collection_name},
            )
            return {"success": False, "message": f"Failed to reset index: {e}"}

        message = (
            f"Collection {self._collection_name} created and indexed"
            if created
            else f"Index on {self._collection_name} rebuilt and collection reloaded"
        )
        logger.info(f"{__name__}:reset_index - {message}")
        return {"success": True, "message": message}

    def ping(self) -> bool:
        """
        Check Milvus is reachable.

        Raises:
            IndexUnavailableError: Server not reachable
        """
        self._collection_exists()
        return True

    def close(self) -> None:
        """Disconnect from Milvus and drop the cached collection handle."""
        if self._connected:
            connections.disconnect(self._alias)
            self._connected = False
        self._collection = None
