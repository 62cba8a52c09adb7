from abc import ABC, abstractmethod
from datetime import timezone
from typing import Callable, List, Optional, Sequence
import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from acceleraqa.core.errors import NotFoundError, StorageError
from acceleraqa.database.connection import ChunkRow, DocumentRow
from acceleraqa.models.document import (
    Candidate, CandidateQuery, ChunkRecord, DocumentRecord, DocumentSummary, StoreStats,
)
from acceleraqa.services.similarity import query_terms

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class DocumentStore(ABC):
    """Tenant-scoped persistence for documents and their chunks."""

    @abstractmethod
    def put(self, document: DocumentRecord, chunks: Sequence[ChunkRecord]) -> None:
        """Persists a document with all of its chunks, or nothing at all."""

    @abstractmethod
    def list(self, owner_id: str) -> List[DocumentSummary]:
        """Documents of one owner, newest first."""

    @abstractmethod
    def get(self, owner_id: str, document_id: str) -> Optional[DocumentRecord]:
        """The document, or None if it is missing or owned by someone else."""

    @abstractmethod
    def delete(self, owner_id: str, document_id: str) -> DocumentRecord:
        """Removes a document and its chunks. Raises NotFoundError if not owned."""

    @abstractmethod
    def query_candidates(self, owner_id: str, query: CandidateQuery) -> List[Candidate]:
        """Chunks of the owner worth scoring for the query, paired with their document."""

    @abstractmethod
    def stats(self, owner_id: str) -> StoreStats:
        """Aggregate counts for one owner."""


class SQLDocumentStore(DocumentStore):
    """
    SQLAlchemy-backed store. Every operation opens its own session from the
    factory, so one instance can serve concurrent requests.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def put(self, document: DocumentRecord, chunks: Sequence[ChunkRecord]) -> None:
        db_doc = DocumentRow(
            id=document.id,
            owner_id=document.owner_id,
            filename=document.filename,
            file_type=document.file_type,
            size_bytes=document.size_bytes,
            text_preview=document.text_preview,
            category=document.category,
            tags=list(document.tags),
            doc_metadata=dict(document.metadata),
            created_at=document.created_at,
        )
        db_doc.chunks = [
            ChunkRow(
                id=chunk.id,
                document_id=document.id,
                chunk_index=chunk.index,
                chunk_text=chunk.text,
                word_count=chunk.word_count,
                character_count=chunk.character_count,
                embedding=chunk.embedding,
            )
            for chunk in chunks
        ]

        with self.session_factory() as db:
            try:
                db.add(db_doc)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to store document {document.id}: {e}")
                raise StorageError("Failed to store document.") from e
        logger.info(f"Stored document {document.id} with {len(chunks)} chunks for owner {document.owner_id}")

    def list(self, owner_id: str) -> List[DocumentSummary]:
        with self._read_session() as db:
            rows = (
                db.query(DocumentRow, func.count(ChunkRow.id))
                .outerjoin(ChunkRow, ChunkRow.document_id == DocumentRow.id)
                .filter(DocumentRow.owner_id == owner_id)
                .group_by(DocumentRow.id)
                .order_by(DocumentRow.created_at.desc())
                .all()
            )
            return [
                DocumentSummary(
                    id=row.id,
                    filename=row.filename,
                    file_type=row.file_type,
                    size_bytes=row.size_bytes,
                    category=row.category,
                    tags=list(row.tags or []),
                    metadata=dict(row.doc_metadata or {}),
                    chunk_count=chunk_count,
                    created_at=_as_utc(row.created_at),
                )
                for row, chunk_count in rows
            ]

    def get(self, owner_id: str, document_id: str) -> Optional[DocumentRecord]:
        with self._read_session() as db:
            row = self._owned_document(db, owner_id, document_id)
            return _to_document(row) if row is not None else None

    def delete(self, owner_id: str, document_id: str) -> DocumentRecord:
        with self.session_factory() as db:
            try:
                row = self._owned_document(db, owner_id, document_id)
                if row is None:
                    raise NotFoundError("Document not found.")
                deleted = _to_document(row)
                db.delete(row)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to delete document {document_id}: {e}")
                raise StorageError("Failed to delete document.") from e
        logger.info(f"Deleted document {document_id} for owner {owner_id}")
        return deleted

    def query_candidates(self, owner_id: str, query: CandidateQuery) -> List[Candidate]:
        with self._read_session() as db:
            statement = (
                db.query(ChunkRow, DocumentRow)
                .join(DocumentRow, ChunkRow.document_id == DocumentRow.id)
                .filter(DocumentRow.owner_id == owner_id)
            )
            if query.document_ids is not None:
                statement = statement.filter(DocumentRow.id.in_(query.document_ids))

            if query.with_embeddings_only:
                statement = statement.filter(ChunkRow.embedding.isnot(None))
            else:
                patterns = [query.text.strip()] + query_terms(query.text)
                statement = statement.filter(
                    or_(*[
                        ChunkRow.chunk_text.ilike(f"%{_escape_like(pattern)}%", escape="\\")
                        for pattern in patterns if pattern
                    ])
                )

            rows = statement.order_by(DocumentRow.created_at.desc(), ChunkRow.chunk_index).all()
            documents = {}
            candidates = []
            for chunk_row, doc_row in rows:
                if doc_row.id not in documents:
                    documents[doc_row.id] = _to_document(doc_row)
                candidates.append((_to_chunk(chunk_row), documents[doc_row.id]))
            return candidates

    def stats(self, owner_id: str) -> StoreStats:
        with self._read_session() as db:
            document_count, total_size, oldest, newest = (
                db.query(
                    func.count(DocumentRow.id),
                    func.coalesce(func.sum(DocumentRow.size_bytes), 0),
                    func.min(DocumentRow.created_at),
                    func.max(DocumentRow.created_at),
                )
                .filter(DocumentRow.owner_id == owner_id)
                .one()
            )
            chunk_count, embedded_count = (
                db.query(func.count(ChunkRow.id), func.count(ChunkRow.embedding))
                .join(DocumentRow, ChunkRow.document_id == DocumentRow.id)
                .filter(DocumentRow.owner_id == owner_id)
                .one()
            )
            return StoreStats(
                document_count=document_count,
                chunk_count=chunk_count,
                total_size_bytes=int(total_size),
                chunks_with_embeddings=embedded_count,
                oldest_document=_as_utc(oldest),
                newest_document=_as_utc(newest),
            )

    def _owned_document(self, db: Session, owner_id: str, document_id: str) -> Optional[DocumentRow]:
        return (
            db.query(DocumentRow)
            .filter(DocumentRow.id == document_id, DocumentRow.owner_id == owner_id)
            .first()
        )

    def _read_session(self):
        return _ReadSession(self.session_factory)


class _ReadSession:
    """Session context that turns driver errors into StorageError."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session = session_factory()

    def __enter__(self) -> Session:
        return self.session

    def __exit__(self, exc_type, exc, tb):
        self.session.close()
        if exc_type is not None and issubclass(exc_type, SQLAlchemyError):
            logger.error(f"Storage read failed: {exc}")
            raise StorageError("Document storage is unavailable.") from exc
        return False


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_utc(value):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_document(row: DocumentRow) -> DocumentRecord:
    return DocumentRecord(
        id=row.id,
        owner_id=row.owner_id,
        filename=row.filename,
        file_type=row.file_type,
        size_bytes=row.size_bytes,
        text_preview=row.text_preview,
        category=row.category,
        tags=list(row.tags or []),
        metadata=dict(row.doc_metadata or {}),
        created_at=_as_utc(row.created_at),
    )


def _to_chunk(row: ChunkRow) -> ChunkRecord:
    return ChunkRecord(
        document_id=row.document_id,
        index=row.chunk_index,
        text=row.chunk_text,
        word_count=row.word_count,
        character_count=row.character_count,
        embedding=row.embedding,
    )
