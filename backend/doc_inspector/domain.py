from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


@dataclass(frozen=True)
class Identity:
    username: str
    name: str | None = None
    account: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def display_name(self) -> str:
        return self.name or self.username


@dataclass(frozen=True)
class ScopeConfig:
    scopes: tuple[str, ...]
    force_refresh: bool = False


@dataclass(frozen=True)
class ScopeRequest:
    primary: ScopeConfig
    fallback: ScopeConfig


class AcquisitionMode(str, Enum):
    SILENT = "silent"
    INTERACTIVE = "interactive"


@dataclass(frozen=True)
class Tier:
    name: str
    mode: AcquisitionMode
    scope: ScopeConfig
    cancel_stops_chain: bool = False


@dataclass
class DocumentMetadata:
    id: str
    title: str
    last_updated: str | None = None
    depot_name: str | None = None
    page_type: str | None = None
    url: str | None = None


@dataclass
class DocumentChunk:
    metadata: DocumentMetadata
    content: str
