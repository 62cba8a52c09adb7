from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional, Tuple
from datetime import datetime, timezone
import uuid

FileType = Literal["pdf", "doc", "docx", "txt"]

FILE_TYPE_BY_EXTENSION: Dict[str, str] = {
    "pdf": "pdf",
    "doc": "doc",
    "docx": "docx",
    "txt": "txt",
}

FILE_TYPE_BY_MIME: Dict[str, str] = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "text/plain": "txt",
}

MIME_TYPE_BY_FILE_TYPE: Dict[str, str] = {file_type: mime for mime, file_type in FILE_TYPE_BY_MIME.items()}


def resolve_file_type(filename: str, content_type: Optional[str] = None) -> str:
    """Maps a MIME type or filename extension onto the supported file types, defaulting to txt."""
    if content_type and content_type in FILE_TYPE_BY_MIME:
        return FILE_TYPE_BY_MIME[content_type]
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return FILE_TYPE_BY_EXTENSION.get(extension, "txt")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentRecord(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique ID for the document.")
    owner_id: str
    filename: str
    file_type: FileType = "txt"
    size_bytes: int = 0
    text_preview: str = ""
    category: str = "general"
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow, description="Upload time (UTC).")


class ChunkRecord(BaseModel):
    document_id: str
    index: int
    text: str
    word_count: int
    character_count: int
    embedding: Optional[List[float]] = None

    @property
    def id(self) -> str:
        return f"{self.document_id}:{self.index}"

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)


class DocumentSummary(BaseModel):
    id: str
    filename: str
    file_type: FileType
    size_bytes: int
    category: str
    tags: List[str]
    metadata: Dict[str, Any]
    chunk_count: int
    created_at: datetime


class StoreStats(BaseModel):
    document_count: int = 0
    chunk_count: int = 0
    total_size_bytes: int = 0
    chunks_with_embeddings: int = 0
    oldest_document: Optional[datetime] = None
    newest_document: Optional[datetime] = None

    @property
    def embedding_coverage(self) -> float:
        """Percentage of chunks that carry an embedding."""
        if not self.chunk_count:
            return 0.0
        return round(self.chunks_with_embeddings / self.chunk_count * 100, 1)


class CandidateQuery(BaseModel):
    """Candidate selection request handed to a document store."""
    text: str
    document_ids: Optional[List[str]] = None
    with_embeddings_only: bool = False


Candidate = Tuple[ChunkRecord, DocumentRecord]


class SearchOptions(BaseModel):
    """
    Search tuning. ``threshold`` of None means the default for whichever
    scoring mode ends up being used.
    """
    limit: int = Field(10, ge=1)
    threshold: Optional[float] = Field(None, ge=0.0, le=1.0)
    document_ids: Optional[List[str]] = None


class SearchResult(BaseModel):
    document_id: str
    filename: str
    chunk_index: int
    text: str
    similarity: float
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SearchResponse(BaseModel):
    results: List[SearchResult]
    total_found: int
    search_type: Literal["semantic", "hybrid", "text"]


class UploadResult(BaseModel):
    document_id: str
    filename: str
    chunk_count: int
    has_embeddings: bool
    text_preview: str
