from __future__ import annotations

import threading

import httpx
import pytest

from doc_inspector.errors import (
    AcquisitionFailed,
    InteractionCancelled,
    InvalidDocumentChunkId,
    ResourceNotFound,
    SearchInProgress,
)
from doc_inspector.services.api_client import KnowledgeApiClient
from doc_inspector.services.credential_broker import CredentialBroker
from doc_inspector.services.search_service import DocumentSearchService

LOGIN_SCOPES = ("https://graph.microsoft.com/User.Read",)


def _service(platform, scope_request, handler) -> DocumentSearchService:
    api_client = KnowledgeApiClient(
        "https://knowledge.example.com/api/document",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    return DocumentSearchService(CredentialBroker(platform, scope_request, LOGIN_SCOPES), api_client)


def test_search_returns_document(make_platform, signed_in_identity, scope_request) -> None:
    platform = make_platform(identities=[signed_in_identity], outcomes={"silent-primary": "tok"})
    payload = {"itemSpec": {"metadata": {"document-chunk-id": "doc-1", "title": "Intro"}, "content": "Hello"}}
    service = _service(platform, scope_request, lambda request: httpx.Response(200, json=payload))

    outcome = service.search("  doc-1  ")

    assert outcome.error is None
    assert outcome.document_chunk_id == "doc-1"
    assert outcome.document.metadata.title == "Intro"
    assert outcome.document.content == "Hello"


def test_blank_identifier_is_rejected(make_platform, scope_request) -> None:
    service = _service(make_platform(), scope_request, lambda request: httpx.Response(200, json={}))

    with pytest.raises(InvalidDocumentChunkId):
        service.search("   ")


def test_cancellation_is_silent(make_platform, signed_in_identity, scope_request) -> None:
    platform = make_platform(
        identities=[signed_in_identity],
        outcomes={"interactive-primary": InteractionCancelled("user_cancelled")},
    )
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={})

    outcome = _service(platform, scope_request, handler).search("doc-1")

    assert outcome.cancelled is True
    assert outcome.error_message is None
    assert outcome.document is None
    assert requests == []


def test_errors_are_forwarded_with_message(make_platform, signed_in_identity, scope_request) -> None:
    platform = make_platform(identities=[signed_in_identity], outcomes={"silent-primary": "tok"})

    outcome = _service(platform, scope_request, lambda request: httpx.Response(404)).search("missing")

    assert isinstance(outcome.error, ResourceNotFound)
    assert outcome.error_message == "Document chunk not found. Please check the ID and try again."


def test_acquisition_failure_skips_fetch(make_platform, signed_in_identity, scope_request) -> None:
    platform = make_platform(identities=[signed_in_identity])

    outcome = _service(platform, scope_request, lambda request: httpx.Response(200, json={})).search("doc")

    assert isinstance(outcome.error, AcquisitionFailed)


def test_second_search_while_one_is_in_flight_is_rejected(make_platform, signed_in_identity, scope_request) -> None:
    entered = threading.Event()
    release = threading.Event()

    def slow_handler(request: httpx.Request) -> httpx.Response:
        entered.set()
        release.wait(timeout=5)
        return httpx.Response(200, json={"content": "slow"})

    platform = make_platform(identities=[signed_in_identity], outcomes={"silent-primary": "tok"})
    service = _service(platform, scope_request, slow_handler)
    results = []
    worker = threading.Thread(target=lambda: results.append(service.search("first")))
    worker.start()
    assert entered.wait(timeout=5)

    with pytest.raises(SearchInProgress):
        service.search("second")

    release.set()
    worker.join(timeout=5)
    assert results[0].document.content == "slow"
    assert service.search("third").document is not None
