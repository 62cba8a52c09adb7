from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException, status

from acceleraqa.core.config import settings
from acceleraqa.database.connection import SessionLocal
from acceleraqa.services.document_store import SQLDocumentStore
from acceleraqa.services.embedding_service import EmbeddingProvider
from acceleraqa.services.retrieval_service import RetrievalService


def get_owner_id(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> str:
    """
    Resolved tenant id. Token validation happens upstream; this layer only
    requires that an owner id reaches it.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User authentication required",
        )
    return x_user_id.strip()


@lru_cache()
def get_retrieval_service() -> RetrievalService:
    return RetrievalService(
        document_store=SQLDocumentStore(SessionLocal),
        embedding_provider=EmbeddingProvider.from_settings(settings),
        config=settings,
    )
