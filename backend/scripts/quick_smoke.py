from __future__ import annotations

import os
from pathlib import Path
import sys

from fastapi.testclient import TestClient

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app import create_app  # noqa: E402
from doc_inspector.services.identity import StaticTokenPlatform  # noqa: E402


def fail(message: str) -> None:
    print(f"SMOKE_FAIL: {message}")
    raise SystemExit(1)


def main() -> None:
    token = os.getenv("KNOWLEDGE_API_ACCESS_TOKEN")
    if not token:
        fail("set KNOWLEDGE_API_ACCESS_TOKEN to a delegated Knowledge API token")
    if len(sys.argv) < 2:
        fail("usage: quick_smoke.py <document-chunk-id>")

    document_chunk_id = sys.argv[1]
    with TestClient(create_app(identity_platform=StaticTokenPlatform(token))) as client:
        session = client.get("/session")
        if session.status_code != 200 or not session.json().get("authenticated"):
            fail(f"session endpoint did not report a signed-in identity: {session.text}")

        response = client.get(f"/documents/{document_chunk_id}")
        if response.status_code != 200:
            fail(f"document request failed ({response.status_code}): {response.text}")

    payload = response.json()
    for row in payload["display"]:
        print(f"{row['label']}: {row['value']}")
    print()
    print(payload["document"]["content"])
    print("SMOKE_OK")


if __name__ == "__main__":
    main()
