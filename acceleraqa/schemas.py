from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Dict, Any, Optional
from datetime import datetime

from acceleraqa.models.document import (
    MIME_TYPE_BY_FILE_TYPE, DocumentRecord, DocumentSummary, SearchOptions, SearchResponse, StoreStats,
    UploadResult,
)


class CamelModel(BaseModel):
    """Wire models use camelCase keys but accept snake_case too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests

class UploadDocumentSchema(CamelModel):
    filename: str = ""
    text: Optional[str] = None
    size: Optional[int] = Field(None, ge=0, description="Original file size in bytes")
    type: Optional[str] = Field(None, description="MIME type of the original file")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SearchOptionsSchema(CamelModel):
    limit: int = Field(10, ge=1)
    threshold: Optional[float] = Field(None, ge=0.0, le=1.0)
    document_ids: Optional[List[str]] = None

    def to_options(self) -> SearchOptions:
        return SearchOptions(limit=self.limit, threshold=self.threshold, document_ids=self.document_ids)


class SearchRequestSchema(CamelModel):
    query: Any = None
    options: SearchOptionsSchema = Field(default_factory=SearchOptionsSchema)


class RagActionRequest(CamelModel):
    action: Optional[str] = None
    document: Optional[UploadDocumentSchema] = None
    query: Any = None
    options: SearchOptionsSchema = Field(default_factory=SearchOptionsSchema)
    document_id: Optional[str] = None


# Responses

class UploadResponseSchema(CamelModel):
    id: str
    filename: str
    chunks: int
    has_embeddings: bool
    text_preview: str
    message: str = "Document uploaded and processed successfully"

    @classmethod
    def from_result(cls, result: UploadResult) -> "UploadResponseSchema":
        return cls(
            id=result.document_id,
            filename=result.filename,
            chunks=result.chunk_count,
            has_embeddings=result.has_embeddings,
            text_preview=result.text_preview,
        )


class SearchResultSchema(CamelModel):
    document_id: str
    filename: str
    chunk_index: int
    text: str
    similarity: float
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SearchResponseSchema(CamelModel):
    results: List[SearchResultSchema]
    total_found: int
    search_type: str

    @classmethod
    def from_response(cls, response: SearchResponse) -> "SearchResponseSchema":
        return cls(
            results=[SearchResultSchema(**result.model_dump()) for result in response.results],
            total_found=response.total_found,
            search_type=response.search_type,
        )


class DocumentSchema(CamelModel):
    id: str
    filename: str
    type: str
    size: int
    chunks: Optional[int] = None
    category: str
    tags: List[str]
    created_at: datetime
    metadata: Dict[str, Any]
    text_preview: Optional[str] = None

    @classmethod
    def from_summary(cls, summary: DocumentSummary) -> "DocumentSchema":
        return cls(
            id=summary.id,
            filename=summary.filename,
            type=MIME_TYPE_BY_FILE_TYPE[summary.file_type],
            size=summary.size_bytes,
            chunks=summary.chunk_count,
            category=summary.category,
            tags=summary.tags,
            created_at=summary.created_at,
            metadata=summary.metadata,
        )

    @classmethod
    def from_record(cls, record: DocumentRecord) -> "DocumentSchema":
        return cls(
            id=record.id,
            filename=record.filename,
            type=MIME_TYPE_BY_FILE_TYPE[record.file_type],
            size=record.size_bytes,
            category=record.category,
            tags=record.tags,
            created_at=record.created_at,
            metadata=record.metadata,
            text_preview=record.text_preview,
        )


class DocumentListSchema(CamelModel):
    documents: List[DocumentSchema]
    total: int


class DeleteResponseSchema(CamelModel):
    message: str = "Document deleted successfully"
    document_id: str
    filename: str


class StatsResponseSchema(CamelModel):
    total_documents: int
    total_chunks: int
    total_size: int
    chunks_with_embeddings: int
    embedding_coverage: float
    oldest_document: Optional[datetime] = None
    newest_document: Optional[datetime] = None

    @classmethod
    def from_stats(cls, stats: StoreStats) -> "StatsResponseSchema":
        return cls(
            total_documents=stats.document_count,
            total_chunks=stats.chunk_count,
            total_size=stats.total_size_bytes,
            chunks_with_embeddings=stats.chunks_with_embeddings,
            embedding_coverage=stats.embedding_coverage,
            oldest_document=stats.oldest_document,
            newest_document=stats.newest_document,
        )


class ErrorDetailSchema(BaseModel):
    code: str
    message: str


class ErrorResponseSchema(BaseModel):
    error: ErrorDetailSchema


# Error bodies produced by the exception handlers in main.py
ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    status_code: {"model": ErrorResponseSchema}
    for status_code in (400, 401, 404, 413, 500, 502)
}
