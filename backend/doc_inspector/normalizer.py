from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .domain import DocumentChunk, DocumentMetadata
from .utils import scalar_text

ENVELOPE_KEY = "itemSpec"
METADATA_KEY = "metadata"

DEFAULT_TITLE = "Untitled Document"
DEFAULT_CONTENT = "No content available"


@dataclass(frozen=True)
class FieldAliases:
    field: str
    aliases: tuple[str, ...]
    default: str | None = None


# Probe order matters: the first present alias wins.
FIELD_ALIASES: tuple[FieldAliases, ...] = (
    FieldAliases("id", ("document-chunk-id", "id", "documentChunkId")),
    FieldAliases("title", ("title", "displayName"), default=DEFAULT_TITLE),
    FieldAliases("last_updated", ("last-updated-at", "lastUpdated", "lastModified", "updatedAt")),
    FieldAliases("depot_name", ("depot-name", "depotName", "depot", "source")),
    FieldAliases("page_type", ("page-type", "pageType", "type", "contentType")),
    FieldAliases("url", ("url", "link", "href")),
)

CONTENT_ALIASES = FieldAliases("content", ("content", "body", "text", "markdown"), default=DEFAULT_CONTENT)

EMPTY: Mapping[str, Any] = {}


def as_lookup(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else EMPTY


def first_present(source: Mapping[str, Any], aliases: tuple[str, ...]) -> str | None:
    for alias in aliases:
        text = scalar_text(source.get(alias))
        if text is not None:
            return text
    return None


def _nested(source: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = source.get(key)
    return value if isinstance(value, Mapping) else None


def working_record(payload: Any) -> Mapping[str, Any]:
    record = as_lookup(payload)
    envelope = _nested(record, ENVELOPE_KEY)
    return record if envelope is None else envelope


def metadata_source(record: Mapping[str, Any]) -> Mapping[str, Any]:
    nested = _nested(record, METADATA_KEY)
    return record if nested is None else nested


def extract_metadata(source: Mapping[str, Any], requested_id: str) -> DocumentMetadata:
    values: dict[str, str | None] = {}
    for entry in FIELD_ALIASES:
        default = requested_id if entry.field == "id" else entry.default
        found = first_present(source, entry.aliases)
        values[entry.field] = found if found is not None else default
    return DocumentMetadata(**values)


def extract_content(record: Mapping[str, Any]) -> str:
    found = first_present(record, CONTENT_ALIASES.aliases)
    return found if found is not None else DEFAULT_CONTENT


def normalize(payload: Any, requested_id: str) -> DocumentChunk:
    """Map a backend payload of unknown shape onto the canonical document chunk.

    Accepts the record wrapped in an ``itemSpec`` envelope or bare, with its
    fields either nested under ``metadata`` or flat on the record. Field names
    are resolved through ``FIELD_ALIASES``; content is always read from the
    record itself. Never raises: anything missing falls back to its default,
    and the id falls back to ``requested_id``.
    """
    record = working_record(payload)
    metadata = extract_metadata(metadata_source(record), requested_id)
    return DocumentChunk(metadata=metadata, content=extract_content(record))
