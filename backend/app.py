from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from pathlib import Path
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

BACKEND_DIR = Path(__file__).resolve().parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from doc_inspector import settings
from doc_inspector.api.routes import router
from doc_inspector.services.api_client import KnowledgeApiClient
from doc_inspector.services.credential_broker import CredentialBroker
from doc_inspector.services.identity import IdentityPlatform, MsalIdentityPlatform, StaticTokenPlatform
from doc_inspector.services.search_service import DocumentSearchService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("doc_inspector")


def default_identity_platform() -> IdentityPlatform:
    if settings.STATIC_ACCESS_TOKEN:
        logger.info("Using pre-issued access token from KNOWLEDGE_API_ACCESS_TOKEN")
        return StaticTokenPlatform(settings.STATIC_ACCESS_TOKEN)
    return MsalIdentityPlatform(settings.CLIENT_ID, settings.AUTHORITY)


def create_app(
    identity_platform: IdentityPlatform | None = None,
    api_client: KnowledgeApiClient | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        platform = identity_platform or default_identity_platform()
        client = api_client or KnowledgeApiClient(settings.KNOWLEDGE_API_BASE_URL)
        broker = CredentialBroker(platform, settings.SCOPE_REQUEST, settings.LOGIN_SCOPES)

        app.state.broker = broker
        app.state.api_client = client
        app.state.search_service = DocumentSearchService(broker, client)
        logger.info("Document Inspector ready, Knowledge API at %s", client.base_url)
        try:
            yield
        finally:
            client.close()
            platform.close()

    app = FastAPI(title="Document Inspector API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
