from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from ..errors import (
    AccessDenied,
    AcquisitionFailed,
    ApiError,
    AuthExpired,
    DocumentInspectorError,
    InvalidDocumentChunkId,
    ResourceNotFound,
    SearchInProgress,
    TransportError,
    UserCancelled,
)
from ..services.api_client import KnowledgeApiClient
from ..services.credential_broker import CredentialBroker
from ..services.search_service import DocumentSearchService
from .models import ConnectionResponse, DocumentResponse, SessionResponse


router = APIRouter()

ERROR_STATUS = {
    InvalidDocumentChunkId: 400,
    AcquisitionFailed: 401,
    AuthExpired: 401,
    AccessDenied: 403,
    ResourceNotFound: 404,
    SearchInProgress: 409,
    ApiError: 502,
    TransportError: 502,
}


def get_broker(request: Request) -> CredentialBroker:
    return request.app.state.broker


def get_api_client(request: Request) -> KnowledgeApiClient:
    return request.app.state.api_client


def get_search_service(request: Request) -> DocumentSearchService:
    return request.app.state.search_service


def error_response(exc: DocumentInspectorError) -> HTTPException:
    status = ERROR_STATUS.get(type(exc), 500)
    return HTTPException(
        status_code=status,
        detail={"kind": exc.kind, "message": exc.message, "retryable": exc.retryable},
    )


@router.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/session", response_model=SessionResponse)
def get_session(broker: CredentialBroker = Depends(get_broker)) -> SessionResponse:
    return SessionResponse.from_identity(broker.current_identity())


@router.post("/session/sign-in", response_model=SessionResponse)
def sign_in(broker: CredentialBroker = Depends(get_broker)) -> SessionResponse:
    try:
        broker.sign_in()
    except UserCancelled:
        pass
    except AcquisitionFailed as exc:
        raise HTTPException(
            status_code=502,
            detail={
                "kind": exc.kind,
                "message": f"{exc.message}. Try clearing cache if the problem persists.",
                "retryable": True,
            },
        ) from exc
    return SessionResponse.from_identity(broker.current_identity())


@router.post("/session/sign-out", response_model=SessionResponse)
def sign_out(broker: CredentialBroker = Depends(get_broker)) -> SessionResponse:
    broker.sign_out()
    return SessionResponse.from_identity(broker.current_identity())


@router.post("/session/clear-cache", response_model=SessionResponse)
def clear_cache(broker: CredentialBroker = Depends(get_broker)) -> SessionResponse:
    broker.clear_cache()
    return SessionResponse.from_identity(broker.current_identity())


@router.get("/documents/{document_chunk_id}", response_model=DocumentResponse)
def get_document(
    document_chunk_id: str,
    search_service: DocumentSearchService = Depends(get_search_service),
):
    try:
        outcome = search_service.search(document_chunk_id)
    except DocumentInspectorError as exc:
        raise error_response(exc) from exc

    if outcome.cancelled:
        return Response(status_code=204)
    if outcome.error is not None:
        raise error_response(outcome.error)
    return DocumentResponse.from_chunk(outcome.document)


@router.get("/knowledge-api/health", response_model=ConnectionResponse)
def knowledge_api_health(
    broker: CredentialBroker = Depends(get_broker),
    api_client: KnowledgeApiClient = Depends(get_api_client),
) -> ConnectionResponse:
    try:
        token = broker.acquire()
    except DocumentInspectorError:
        return ConnectionResponse(reachable=False)
    return ConnectionResponse(reachable=api_client.test_connection(token))
