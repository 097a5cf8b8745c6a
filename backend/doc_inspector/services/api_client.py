from __future__ import annotations

import logging

import httpx

from ..domain import DocumentChunk
from ..errors import AccessDenied, ApiError, AuthExpired, ResourceNotFound, TransportError
from ..normalizer import normalize
from ..settings import KNOWLEDGE_API_BASE_URL
from ..utils import mask_token

logger = logging.getLogger(__name__)

STATUS_ERRORS = {
    401: AuthExpired,
    403: AccessDenied,
    404: ResourceNotFound,
}


def _headers(token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


class KnowledgeApiClient:
    """Client for the Knowledge API document endpoints using delegated user tokens."""

    def __init__(self, base_url: str = KNOWLEDGE_API_BASE_URL, http_client: httpx.Client | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client()

    def item_spec_url(self, document_chunk_id: str) -> str:
        return f"{self.base_url}/items/{document_chunk_id}/itemspec"

    def fetch_document_chunk(self, document_chunk_id: str, token: str) -> DocumentChunk:
        url = self.item_spec_url(document_chunk_id)
        logger.info("Requesting %s with token %s", url, mask_token(token))
        try:
            response = self._http.get(url, headers=_headers(token))
        except (httpx.TransportError, httpx.InvalidURL) as exc:
            logger.error("Knowledge API request to %s failed: %s", url, exc)
            raise TransportError() from exc

        logger.info("Knowledge API responded %s for %s", response.status_code, document_chunk_id)
        if not response.is_success:
            error_class = STATUS_ERRORS.get(response.status_code)
            if error_class is not None:
                raise error_class()
            raise ApiError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(response.status_code, response.text) from exc
        return normalize(payload, document_chunk_id)

    def test_connection(self, token: str) -> bool:
        try:
            response = self._http.get(f"{self.base_url}/health", headers=_headers(token))
        except (httpx.TransportError, httpx.InvalidURL) as exc:
            logger.info("Connection test failed: %s", exc)
            return False
        return response.is_success

    def close(self) -> None:
        self._http.close()
