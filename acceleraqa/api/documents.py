from fastapi import APIRouter, UploadFile, File, Form, Depends, HTTPException, status
from typing import Optional

from acceleraqa.api.dependencies import get_owner_id, get_retrieval_service
from acceleraqa.core.config import settings
from acceleraqa.schemas import (
    ERROR_RESPONSES, DeleteResponseSchema, DocumentListSchema, DocumentSchema, SearchRequestSchema,
    SearchResponseSchema, StatsResponseSchema, UploadDocumentSchema, UploadResponseSchema,
)
from acceleraqa.services.document_processor import SUPPORTED_CONTENT_TYPES
from acceleraqa.services.retrieval_service import RetrievalService

router = APIRouter(responses=ERROR_RESPONSES)

@router.post("", response_model=UploadResponseSchema, status_code=status.HTTP_201_CREATED)
def upload_document(
    document: UploadDocumentSchema,
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    """
    Chunks, embeds and stores a document supplied as plain text.
    """
    result = service.upload(
        owner_id=owner_id,
        filename=document.filename,
        text=document.text,
        metadata=document.metadata,
        size_bytes=document.size,
        content_type=document.type,
    )
    return UploadResponseSchema.from_result(result)

@router.post("/file", response_model=UploadResponseSchema, status_code=status.HTTP_201_CREATED)
def upload_file(
    file: UploadFile = File(...),
    category: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated tags"),
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    """
    Uploads .pdf or .txt files, extracts text and stores it like a text upload.
    """
    # 1. Validate file type
    if file.content_type not in SUPPORTED_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type: {file.content_type}. Only .pdf and .txt are allowed."
        )

    file_content = file.file.read()
    if len(file_content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.MAX_UPLOAD_BYTES} byte upload limit."
        )

    # 2. Extract text
    extracted_text = service.document_processor.extract_text(file_content, file.content_type)

    metadata = {}
    if category:
        metadata["category"] = category
    if tags:
        metadata["tags"] = tags
    result = service.upload(
        owner_id=owner_id,
        filename=file.filename or "",
        text=extracted_text,
        metadata=metadata,
        size_bytes=len(file_content),
        content_type=file.content_type,
    )
    return UploadResponseSchema.from_result(result)

@router.get("", response_model=DocumentListSchema)
def list_documents(
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    documents = [DocumentSchema.from_summary(summary) for summary in service.list_documents(owner_id)]
    return DocumentListSchema(documents=documents, total=len(documents))

@router.get("/stats", response_model=StatsResponseSchema)
def document_stats(
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    return StatsResponseSchema.from_stats(service.stats(owner_id))

@router.post("/search", response_model=SearchResponseSchema)
def search_documents(
    request: SearchRequestSchema,
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    """
    Ranks the caller's chunks against the query, semantic when embeddings are
    available and text matching otherwise.
    """
    response = service.search(owner_id, request.query, request.options.to_options())
    return SearchResponseSchema.from_response(response)

@router.get("/{document_id}", response_model=DocumentSchema)
def get_document(
    document_id: str,
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    return DocumentSchema.from_record(service.get_document(owner_id, document_id))

@router.delete("/{document_id}", response_model=DeleteResponseSchema)
def delete_document(
    document_id: str,
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    deleted = service.delete(owner_id, document_id)
    return DeleteResponseSchema(document_id=deleted.id, filename=deleted.filename)
