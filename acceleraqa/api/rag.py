from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import logging

from acceleraqa.api.dependencies import get_owner_id, get_retrieval_service
from acceleraqa.core.errors import ValidationError
from acceleraqa.schemas import (
    ERROR_RESPONSES, CamelModel, DeleteResponseSchema, DocumentListSchema, DocumentSchema, RagActionRequest,
    SearchResponseSchema, StatsResponseSchema, UploadResponseSchema,
)
from acceleraqa.services.retrieval_service import RetrievalService

logger = logging.getLogger(__name__)

router = APIRouter(responses=ERROR_RESPONSES)

ACTIONS = ("upload", "search", "list", "delete", "stats")


def _respond(payload: CamelModel, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload.model_dump(by_alias=True)))


@router.post("")
def rag_action(
    request: RagActionRequest,
    owner_id: str = Depends(get_owner_id),
    service: RetrievalService = Depends(get_retrieval_service),
):
    """
    Single entry point used by the chat front end: the body's "action" picks
    one of upload, search, list, delete or stats.
    """
    if not request.action:
        raise ValidationError("Action parameter is required.")
    action = request.action.lower()
    logger.info(f"Processing RAG action '{action}' for owner {owner_id}")

    if action == "upload":
        document = request.document
        if document is None or not document.filename:
            raise ValidationError("Invalid document data.")
        result = service.upload(
            owner_id=owner_id,
            filename=document.filename,
            text=document.text,
            metadata=document.metadata,
            size_bytes=document.size,
            content_type=document.type,
        )
        return _respond(UploadResponseSchema.from_result(result), status.HTTP_201_CREATED)

    if action == "search":
        response = service.search(owner_id, request.query, request.options.to_options())
        return _respond(SearchResponseSchema.from_response(response))

    if action == "list":
        documents = [DocumentSchema.from_summary(summary) for summary in service.list_documents(owner_id)]
        return _respond(DocumentListSchema(documents=documents, total=len(documents)))

    if action == "delete":
        deleted = service.delete(owner_id, request.document_id)
        return _respond(DeleteResponseSchema(document_id=deleted.id, filename=deleted.filename))

    if action == "stats":
        return _respond(StatsResponseSchema.from_stats(service.stats(owner_id)))

    raise ValidationError(f"Invalid action: {request.action}. Expected one of: {', '.join(ACTIONS)}.")
