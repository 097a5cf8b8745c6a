from __future__ import annotations

import logging
from typing import Any, Protocol

import msal

from ..domain import Identity, ScopeConfig
from ..errors import IdentityPlatformError, InteractionCancelled

logger = logging.getLogger(__name__)

CANCELLATION_CODES = frozenset(
    {"access_denied", "authentication_canceled", "user_canceled", "user_cancelled"}
)


class IdentityPlatform(Protocol):
    def active_identities(self) -> list[Identity]: ...

    def sign_in_interactive(self, scopes: tuple[str, ...]) -> Identity: ...

    def acquire_token_silent(self, scope: ScopeConfig, identity: Identity) -> str: ...

    def acquire_token_interactive(self, scope: ScopeConfig, identity: Identity) -> str: ...

    def sign_out(self) -> None: ...

    def clear_cache(self) -> None: ...

    def close(self) -> None: ...


def identity_from_account(account: dict[str, Any]) -> Identity:
    return Identity(
        username=account.get("username") or "",
        name=account.get("name"),
        account=account,
    )


def _raise_for_result(result: dict[str, Any] | None) -> dict[str, Any]:
    if not result:
        raise IdentityPlatformError("no_cached_session", "No cached session for the requested scopes")
    if "error" in result:
        code = str(result.get("error"))
        description = str(result.get("error_description") or "")
        if code in CANCELLATION_CODES:
            raise InteractionCancelled(code, description)
        raise IdentityPlatformError(code, description)
    return result


class MsalIdentityPlatform:
    """Identity platform backed by an MSAL public client with an in-memory cache.

    The MSAL application is created on first use so that constructing the
    platform never touches the network. ``clear_cache`` discards it entirely.
    """

    def __init__(self, client_id: str, authority: str) -> None:
        self.client_id = client_id
        self.authority = authority
        self._app: msal.PublicClientApplication | None = None

    def _application(self) -> msal.PublicClientApplication:
        if self._app is None:
            logger.info("Creating MSAL public client for %s", self.authority)
            self._app = msal.PublicClientApplication(self.client_id, authority=self.authority)
        return self._app

    def active_identities(self) -> list[Identity]:
        if self._app is None:
            return []
        return [identity_from_account(account) for account in self._app.get_accounts()]

    def sign_in_interactive(self, scopes: tuple[str, ...]) -> Identity:
        try:
            result = _raise_for_result(self._application().acquire_token_interactive(list(scopes)))
        except OSError as exc:
            raise IdentityPlatformError("network_error", str(exc)) from exc

        claims = result.get("id_token_claims") or {}
        username = claims.get("preferred_username")
        for identity in self.active_identities():
            if username is None or identity.username == username:
                return identity
        raise IdentityPlatformError("no_account", "Sign in completed without an account")

    def acquire_token_silent(self, scope: ScopeConfig, identity: Identity) -> str:
        try:
            result = self._application().acquire_token_silent(
                list(scope.scopes),
                account=dict(identity.account),
                force_refresh=scope.force_refresh,
            )
        except OSError as exc:
            raise IdentityPlatformError("network_error", str(exc)) from exc
        return _raise_for_result(result)["access_token"]

    def acquire_token_interactive(self, scope: ScopeConfig, identity: Identity) -> str:
        try:
            result = self._application().acquire_token_interactive(
                list(scope.scopes),
                login_hint=identity.username or None,
            )
        except OSError as exc:
            raise IdentityPlatformError("network_error", str(exc)) from exc
        return _raise_for_result(result)["access_token"]

    def sign_out(self) -> None:
        if self._app is None:
            return
        try:
            for account in self._app.get_accounts():
                self._app.remove_account(account)
        except (OSError, ValueError, KeyError) as exc:
            raise IdentityPlatformError("sign_out_failed", str(exc)) from exc

    def clear_cache(self) -> None:
        self._app = None

    def close(self) -> None:
        self._app = None


class StaticTokenPlatform:
    """Headless platform that hands out one pre-issued bearer token."""

    def __init__(self, token: str, username: str = "service@local") -> None:
        self._token = token
        self._identity = Identity(username=username, name="Pre-issued token")
        self._signed_in = True

    def active_identities(self) -> list[Identity]:
        return [self._identity] if self._signed_in else []

    def sign_in_interactive(self, scopes: tuple[str, ...]) -> Identity:
        self._signed_in = True
        return self._identity

    def acquire_token_silent(self, scope: ScopeConfig, identity: Identity) -> str:
        return self._token

    def acquire_token_interactive(self, scope: ScopeConfig, identity: Identity) -> str:
        return self._token

    def sign_out(self) -> None:
        self._signed_in = False

    def clear_cache(self) -> None:
        self._signed_in = False

    def close(self) -> None:
        pass
