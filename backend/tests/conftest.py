from __future__ import annotations

import threading
import time
from typing import Callable

import pytest

from doc_inspector.domain import Identity, ScopeConfig, ScopeRequest
from doc_inspector.errors import IdentityPlatformError
from doc_inspector.settings import SCOPE_REQUEST

PRIMARY = SCOPE_REQUEST.primary
FALLBACK = SCOPE_REQUEST.fallback

ALICE = Identity(username="alice@contoso.com", name="Alice", account={"home_account_id": "alice"})


class ScriptedIdentityPlatform:
    """Identity platform whose tier outcomes are fixed up front.

    ``outcomes`` maps tier names (``silent-primary``...) to a token string or an
    exception instance. Unscripted tiers fail with ``interaction_required``.
    """

    def __init__(
        self,
        identities: list[Identity] | None = None,
        outcomes: dict[str, str | Exception] | None = None,
        sign_in: Identity | Exception = ALICE,
        sign_out_error: Exception | None = None,
        prompt_seconds: float = 0.0,
    ) -> None:
        self.identities = list(identities or [])
        self.outcomes = dict(outcomes or {})
        self.sign_in_result = sign_in
        self.sign_out_error = sign_out_error
        self.prompt_seconds = prompt_seconds
        self.calls: list[str] = []
        self.closed = False
        self.open_prompts = 0
        self.max_open_prompts = 0
        self._prompt_guard = threading.Lock()

    def _show_prompt(self) -> None:
        with self._prompt_guard:
            self.open_prompts += 1
            self.max_open_prompts = max(self.max_open_prompts, self.open_prompts)
        time.sleep(self.prompt_seconds)
        with self._prompt_guard:
            self.open_prompts -= 1

    def active_identities(self) -> list[Identity]:
        return list(self.identities)

    def sign_in_interactive(self, scopes: tuple[str, ...]) -> Identity:
        self.calls.append("sign-in")
        self._show_prompt()
        if isinstance(self.sign_in_result, Exception):
            raise self.sign_in_result
        self.identities.append(self.sign_in_result)
        return self.sign_in_result

    def _run(self, mode: str, scope: ScopeConfig) -> str:
        name = f"{mode}-{'primary' if scope == PRIMARY else 'fallback'}"
        self.calls.append(name)
        outcome = self.outcomes.get(name, IdentityPlatformError("interaction_required"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def acquire_token_silent(self, scope: ScopeConfig, identity: Identity) -> str:
        return self._run("silent", scope)

    def acquire_token_interactive(self, scope: ScopeConfig, identity: Identity) -> str:
        self._show_prompt()
        return self._run("interactive", scope)

    def sign_out(self) -> None:
        self.calls.append("sign-out")
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.identities.clear()

    def clear_cache(self) -> None:
        self.calls.append("clear-cache")
        self.identities.clear()

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def scope_request() -> ScopeRequest:
    return ScopeRequest(primary=PRIMARY, fallback=FALLBACK)


@pytest.fixture
def make_platform() -> Callable[..., ScriptedIdentityPlatform]:
    return ScriptedIdentityPlatform


@pytest.fixture
def signed_in_identity() -> Identity:
    return ALICE
