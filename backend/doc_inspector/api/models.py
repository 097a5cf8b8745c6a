from __future__ import annotations

from pydantic import BaseModel, Field

from ..domain import DocumentChunk, Identity
from ..presenters import metadata_rows


class UserInfo(BaseModel):
    name: str
    email: str


class SessionResponse(BaseModel):
    authenticated: bool
    user: UserInfo | None = None

    @classmethod
    def from_identity(cls, identity: Identity | None) -> "SessionResponse":
        if identity is None:
            return cls(authenticated=False)
        return cls(authenticated=True, user=UserInfo(name=identity.display_name, email=identity.username))


class MetadataPayload(BaseModel):
    id: str
    title: str
    last_updated: str | None = None
    depot_name: str | None = None
    page_type: str | None = None
    url: str | None = None


class DocumentPayload(BaseModel):
    metadata: MetadataPayload
    content: str


class DisplayRow(BaseModel):
    label: str
    value: str


class DocumentResponse(BaseModel):
    document: DocumentPayload
    display: list[DisplayRow] = Field(default_factory=list, description="Metadata rows ready for rendering.")

    @classmethod
    def from_chunk(cls, chunk: DocumentChunk) -> "DocumentResponse":
        meta = chunk.metadata
        return cls(
            document=DocumentPayload(
                metadata=MetadataPayload(
                    id=meta.id,
                    title=meta.title,
                    last_updated=meta.last_updated,
                    depot_name=meta.depot_name,
                    page_type=meta.page_type,
                    url=meta.url,
                ),
                content=chunk.content,
            ),
            display=[DisplayRow(label=label, value=value) for label, value in metadata_rows(meta)],
        )


class ConnectionResponse(BaseModel):
    reachable: bool
