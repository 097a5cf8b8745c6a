from __future__ import annotations

from dataclasses import dataclass
import logging
import threading

from ..domain import DocumentChunk
from ..errors import DocumentInspectorError, InvalidDocumentChunkId, SearchInProgress, UserCancelled
from .api_client import KnowledgeApiClient
from .credential_broker import CredentialBroker

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    document_chunk_id: str
    document: DocumentChunk | None = None
    error: DocumentInspectorError | None = None

    @property
    def cancelled(self) -> bool:
        return isinstance(self.error, UserCancelled)

    @property
    def error_message(self) -> str | None:
        if self.error is None or self.cancelled:
            return None
        return self.error.message


class DocumentSearchService:
    def __init__(self, broker: CredentialBroker, api_client: KnowledgeApiClient) -> None:
        self.broker = broker
        self.api_client = api_client
        self._in_flight = threading.Lock()

    def search(self, document_chunk_id: str) -> SearchOutcome:
        chunk_id = document_chunk_id.strip()
        if not chunk_id:
            raise InvalidDocumentChunkId()
        if not self._in_flight.acquire(blocking=False):
            raise SearchInProgress()
        try:
            return self._run(chunk_id)
        finally:
            self._in_flight.release()

    def _run(self, chunk_id: str) -> SearchOutcome:
        try:
            token = self.broker.acquire()
            document = self.api_client.fetch_document_chunk(chunk_id, token)
        except UserCancelled as exc:
            logger.info("Search for %s cancelled by user", chunk_id)
            return SearchOutcome(chunk_id, error=exc)
        except DocumentInspectorError as exc:
            logger.warning("Search for %s failed (%s): %s", chunk_id, exc.kind, exc.message)
            return SearchOutcome(chunk_id, error=exc)
        return SearchOutcome(chunk_id, document=document)
