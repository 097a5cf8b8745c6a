from __future__ import annotations

import os
from collections.abc import Mapping

from .domain import ScopeConfig, ScopeRequest

DEFAULT_KNOWLEDGE_API_BASE_URL = "https://learnknowledge-int.azurewebsites.net/api/document"
DEFAULT_CLIENT_ID = "fd972449-9448-4dce-9df1-c1edac7b2225"
DEFAULT_AUTHORITY = "https://login.microsoftonline.com/72f988bf-86f1-41af-91ab-2d7cd011db47"

GRAPH_USER_READ = "https://graph.microsoft.com/User.Read"
KNOWLEDGE_API_USER_IMPERSONATION = "api://7c78db7f-b420-4cb8-b448-fc0015661260/user_impersonation"


def resolve_base_url(environ: Mapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    value = (env.get("KNOWLEDGE_API_BASE_URL") or "").strip()
    return (value or DEFAULT_KNOWLEDGE_API_BASE_URL).rstrip("/")


def resolve_cors_origins(environ: Mapping[str, str] | None = None) -> list[str]:
    env = os.environ if environ is None else environ
    raw = env.get("CORS_ORIGINS") or "http://localhost:3000,http://127.0.0.1:3000"
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


KNOWLEDGE_API_BASE_URL = resolve_base_url()
CLIENT_ID = os.getenv("ENTRA_CLIENT_ID", DEFAULT_CLIENT_ID)
AUTHORITY = os.getenv("ENTRA_AUTHORITY", DEFAULT_AUTHORITY)
STATIC_ACCESS_TOKEN = os.getenv("KNOWLEDGE_API_ACCESS_TOKEN") or None
LOG_LEVEL = os.getenv("DOC_INSPECTOR_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = resolve_cors_origins()

LOGIN_SCOPES: tuple[str, ...] = (GRAPH_USER_READ,)

SCOPE_REQUEST = ScopeRequest(
    primary=ScopeConfig(scopes=(KNOWLEDGE_API_USER_IMPERSONATION,)),
    fallback=ScopeConfig(scopes=(GRAPH_USER_READ,)),
)
