from __future__ import annotations


class DocumentInspectorError(Exception):
    """Base class for every failure surfaced to the presentation layer."""

    kind = "unexpected_error"
    default_message = "An unexpected error occurred while fetching the document"
    retryable = True

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# Credential acquisition


class UserCancelled(DocumentInspectorError):
    kind = "user_cancelled"
    default_message = "Sign in was cancelled."


class AcquisitionFailed(DocumentInspectorError):
    kind = "acquisition_failed"
    default_message = "Failed to acquire access token. Please try signing in again."


# Knowledge API


class AuthExpired(DocumentInspectorError):
    kind = "auth_expired"
    default_message = "Authentication failed. Please sign in again."


class AccessDenied(DocumentInspectorError):
    kind = "access_denied"
    default_message = "Access denied. You may not have permission to access this resource."


class ResourceNotFound(DocumentInspectorError):
    kind = "resource_not_found"
    default_message = "Document chunk not found. Please check the ID and try again."


class ApiError(DocumentInspectorError):
    kind = "api_error"

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"API Error ({status}): {body}")


class TransportError(DocumentInspectorError):
    kind = "transport_error"
    default_message = "Could not reach the Knowledge API. Check your connection and try again."


# Search boundary


class InvalidDocumentChunkId(DocumentInspectorError):
    kind = "invalid_identifier"
    default_message = "Please enter a document chunk ID"
    retryable = False


class SearchInProgress(DocumentInspectorError):
    kind = "search_in_progress"
    default_message = "A search is already in progress."


# Identity platform collaborator; never surfaced past the credential broker.


class IdentityPlatformError(Exception):
    def __init__(self, code: str, description: str = "") -> None:
        self.code = code
        self.description = description
        super().__init__(f"{code}: {description}" if description else code)


class InteractionCancelled(IdentityPlatformError):
    pass
