from __future__ import annotations

from dateutil import parser as date_parser

from .domain import DocumentMetadata

NOT_AVAILABLE = "N/A"


def format_timestamp(value: str | None) -> str:
    if not value:
        return NOT_AVAILABLE
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError):
            return value
    formatted = parsed.strftime("%Y-%m-%d %H:%M:%S")
    zone = parsed.strftime("%Z")
    return f"{formatted} {zone}" if zone else formatted


def metadata_rows(metadata: DocumentMetadata) -> list[tuple[str, str]]:
    return [
        ("Document Chunk ID", metadata.id),
        ("URL", metadata.url or NOT_AVAILABLE),
        ("Title", metadata.title),
        ("Depot Name", metadata.depot_name or NOT_AVAILABLE),
        ("Last Updated", format_timestamp(metadata.last_updated)),
        ("Page Type", metadata.page_type or NOT_AVAILABLE),
    ]
