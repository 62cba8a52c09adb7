from typing import Any, Dict, List, Optional, Tuple
import logging

from acceleraqa.core.config import settings as default_settings, Settings
from acceleraqa.core.errors import EmbeddingError, NotFoundError, ValidationError
from acceleraqa.models.document import (
    CandidateQuery, DocumentRecord, DocumentSummary, SearchOptions, SearchResponse, SearchResult,
    StoreStats, UploadResult, resolve_file_type,
)
from acceleraqa.services.document_processor import DocumentProcessor
from acceleraqa.services.document_store import DocumentStore
from acceleraqa.services.embedding_service import EmbeddingProvider
from acceleraqa.services.similarity import clamp_similarity, cosine_similarity, text_match_score
from acceleraqa.utils.placeholder_content import generate_placeholder_content

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

class RetrievalService:
    """
    Orchestrates document upload and similarity search for the chat layer.
    Holds no per-request state; everything persistent lives in the store.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        embedding_provider: EmbeddingProvider,
        config: Optional[Settings] = None,
        document_processor: Optional[DocumentProcessor] = None,
    ):
        """
        Initialize the Retrieval Service.

        Args:
            document_store: Tenant-scoped storage for documents and chunks
            embedding_provider: Remote embedding client
            config: Settings to read defaults from
            document_processor: Optional processor, built from config when omitted
        """
        self.document_store = document_store
        self.embedding_provider = embedding_provider
        self.config = config or default_settings
        self.document_processor = document_processor or DocumentProcessor(
            chunk_size=self.config.CHUNK_SIZE,
            chunk_overlap=self.config.CHUNK_OVERLAP,
        )

    def upload(
        self,
        owner_id: str,
        filename: str,
        text: Optional[str],
        metadata: Optional[Dict[str, Any]] = None,
        size_bytes: Optional[int] = None,
        content_type: Optional[str] = None,
    ) -> UploadResult:
        """
        Chunk, embed and persist one document.

        Args:
            owner_id: Tenant that owns the document
            filename: Display name, also used to infer the file type
            text: Raw document text
            metadata: Free-form metadata; "category" and "tags" are lifted onto the document
            size_bytes: Original file size, defaults to the UTF-8 size of the text
            content_type: MIME type, preferred over the extension when recognised

        Returns:
            UploadResult with identifiers, chunk count and a bounded preview
        """
        filename = (filename or "").strip()
        if not filename:
            raise ValidationError("Invalid document data: filename is required.")
        metadata = dict(metadata or {})

        if not text or not text.strip():
            if not self.config.PLACEHOLDER_ON_EMPTY_UPLOAD:
                raise ValidationError("Invalid document data: document text is empty.")
            logger.info(f"Empty upload for '{filename}', using placeholder content")
            text = generate_placeholder_content(filename)

        document = DocumentRecord(
            owner_id=owner_id,
            filename=filename,
            file_type=resolve_file_type(filename, content_type),
            size_bytes=size_bytes if size_bytes is not None else len(text.encode("utf-8")),
            text_preview=text[: self.config.TEXT_PREVIEW_LENGTH],
            category=str(metadata.get("category") or "general"),
            tags=_as_tags(metadata.get("tags")),
            metadata=metadata,
        )

        chunks = self.document_processor.chunk_text(text, document.id)
        embeddings = self.embedding_provider.embed_many([chunk.text for chunk in chunks])
        for chunk, embedding in zip(chunks, embeddings):
            chunk.embedding = embedding
        has_embeddings = any(chunk.has_embedding for chunk in chunks)
        document.metadata["hasEmbeddings"] = has_embeddings

        self.document_store.put(document, chunks)
        logger.info(
            f"Uploaded '{filename}' for owner {owner_id}: {len(chunks)} chunks, "
            f"{sum(chunk.has_embedding for chunk in chunks)} embedded"
        )

        return UploadResult(
            document_id=document.id,
            filename=document.filename,
            chunk_count=len(chunks),
            has_embeddings=has_embeddings,
            text_preview=document.text_preview,
        )

    def search(self, owner_id: str, query: Any, options: Optional[SearchOptions] = None) -> SearchResponse:
        """
        Rank the owner's chunks against a query.

        Vector scoring is used for chunks with an embedding whenever the query
        could be embedded; everything else is scored by text matching.
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError("Valid search query string is required.")
        options = options or SearchOptions(limit=self.config.DEFAULT_SEARCH_LIMIT)
        limit = min(options.limit, self.config.MAX_SEARCH_LIMIT)

        query_embedding = self._embed_query(query)
        candidates = self.document_store.query_candidates(
            owner_id,
            CandidateQuery(text=query, document_ids=options.document_ids, with_embeddings_only=False),
        )
        if query_embedding is not None:
            candidates = self._merge_candidates(
                candidates,
                self.document_store.query_candidates(
                    owner_id,
                    CandidateQuery(text=query, document_ids=options.document_ids, with_embeddings_only=True),
                ),
            )

        scored: List[Tuple[float, SearchResult]] = []
        used_text = False
        for chunk, document in candidates:
            if query_embedding is not None and chunk.has_embedding:
                score = cosine_similarity(query_embedding, chunk.embedding)
                threshold = self._threshold(options, vector=True)
            else:
                score = text_match_score(query, chunk.text)
                threshold = self._threshold(options, vector=False)
                used_text = True
            if score <= 0 or score < threshold:
                continue
            scored.append((score, SearchResult(
                document_id=document.id,
                filename=document.filename,
                chunk_index=chunk.index,
                text=chunk.text,
                similarity=clamp_similarity(score),
                metadata=document.metadata,
            )))

        scored.sort(key=lambda item: item[0], reverse=True)
        results = [result for _, result in scored[:limit]]
        if query_embedding is None:
            search_type = "text"
        else:
            search_type = "hybrid" if used_text else "semantic"
        logger.info(f"Search for owner {owner_id} matched {len(scored)} chunks ({search_type})")
        return SearchResponse(results=results, total_found=len(results), search_type=search_type)

    def list_documents(self, owner_id: str) -> List[DocumentSummary]:
        return self.document_store.list(owner_id)

    def get_document(self, owner_id: str, document_id: str) -> DocumentRecord:
        document = self.document_store.get(owner_id, document_id)
        if document is None:
            raise NotFoundError("Document not found.")
        return document

    def delete(self, owner_id: str, document_id: str) -> DocumentRecord:
        if not document_id:
            raise ValidationError("Document ID is required.")
        return self.document_store.delete(owner_id, document_id)

    def stats(self, owner_id: str) -> StoreStats:
        return self.document_store.stats(owner_id)

    def _embed_query(self, query: str) -> Optional[List[float]]:
        if not self.embedding_provider.is_configured:
            return None
        try:
            return self.embedding_provider.embed(query)
        except EmbeddingError as e:
            logger.warning(f"Could not embed query, falling back to text search: {e.message}")
            return None

    def _threshold(self, options: SearchOptions, vector: bool) -> float:
        if options.threshold is not None:
            return options.threshold
        return self.config.DEFAULT_VECTOR_THRESHOLD if vector else self.config.DEFAULT_TEXT_THRESHOLD

    @staticmethod
    def _merge_candidates(*groups):
        seen = set()
        merged = []
        for group in groups:
            for chunk, document in group:
                if chunk.id not in seen:
                    seen.add(chunk.id)
                    merged.append((chunk, document))
        return merged


def _as_tags(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return [str(tag) for tag in value]
