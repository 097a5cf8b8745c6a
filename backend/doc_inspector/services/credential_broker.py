from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import threading

from ..domain import AcquisitionMode, Identity, ScopeRequest, Tier
from ..errors import AcquisitionFailed, IdentityPlatformError, InteractionCancelled, UserCancelled
from ..utils import mask_token
from .identity import IdentityPlatform

logger = logging.getLogger(__name__)


class TierOutcome(str, Enum):
    ACQUIRED = "acquired"
    CANCEL = "cancel"
    CONTINUE = "continue"


@dataclass(frozen=True)
class TierResult:
    tier: Tier
    outcome: TierOutcome
    token: str | None = None
    error: Exception | None = None


def build_tiers(scope_request: ScopeRequest) -> list[Tier]:
    """Fixed acquisition order: silent before interactive, primary before fallback.

    Only the interactive primary prompt can be cancelled to end the chain.
    """
    return [
        Tier("silent-primary", AcquisitionMode.SILENT, scope_request.primary),
        Tier("interactive-primary", AcquisitionMode.INTERACTIVE, scope_request.primary, cancel_stops_chain=True),
        Tier("silent-fallback", AcquisitionMode.SILENT, scope_request.fallback),
        Tier("interactive-fallback", AcquisitionMode.INTERACTIVE, scope_request.fallback),
    ]


class CredentialBroker:
    def __init__(
        self,
        platform: IdentityPlatform,
        scope_request: ScopeRequest,
        login_scopes: tuple[str, ...],
    ) -> None:
        self.platform = platform
        self.login_scopes = login_scopes
        self.tiers = build_tiers(scope_request)
        # Serializes every platform interaction so at most one prompt is open.
        self._prompt_lock = threading.RLock()

    def current_identity(self) -> Identity | None:
        identities = self.platform.active_identities()
        return identities[0] if identities else None

    def sign_in(self) -> Identity:
        with self._prompt_lock:
            logger.info("Starting interactive sign in")
            try:
                return self.platform.sign_in_interactive(self.login_scopes)
            except InteractionCancelled as exc:
                logger.info("Sign in cancelled by user (%s)", exc.code)
                raise UserCancelled() from exc
            except Exception as exc:
                logger.warning("Sign in failed: %s", exc)
                raise AcquisitionFailed(f"Sign in failed: {exc}") from exc

    def sign_out(self) -> None:
        with self._prompt_lock:
            try:
                self.platform.sign_out()
            except IdentityPlatformError as exc:
                logger.warning("Sign out failed, clearing cache instead: %s", exc)
                self.platform.clear_cache()

    def clear_cache(self) -> None:
        with self._prompt_lock:
            self.platform.clear_cache()
        logger.info("Authentication cache cleared")

    def _resolve_identity(self) -> Identity:
        identity = self.current_identity()
        if identity is not None:
            return identity
        logger.info("No active account")
        return self.sign_in()

    def _attempt(self, tier: Tier, identity: Identity) -> TierResult:
        if tier.mode is AcquisitionMode.SILENT:
            acquire = self.platform.acquire_token_silent
        else:
            acquire = self.platform.acquire_token_interactive
        try:
            token = acquire(tier.scope, identity)
        except InteractionCancelled as exc:
            return TierResult(tier, TierOutcome.CANCEL, error=exc)
        except Exception as exc:
            return TierResult(tier, TierOutcome.CONTINUE, error=exc)
        return TierResult(tier, TierOutcome.ACQUIRED, token=token)

    def acquire(self) -> str:
        """Return a bearer token, walking the tiers in order until one succeeds.

        Raises ``UserCancelled`` when the user dismisses the primary-scope
        prompt and ``AcquisitionFailed`` once every tier is exhausted.
        """
        with self._prompt_lock:
            return self._acquire()

    def _acquire(self) -> str:
        identity = self._resolve_identity()

        for tier in self.tiers:
            result = self._attempt(tier, identity)
            if result.outcome is TierOutcome.ACQUIRED and result.token:
                logger.info("Token acquired via %s (%s)", tier.name, mask_token(result.token))
                return result.token
            logger.info("Tier %s did not yield a token: %s", tier.name, result.error)
            if result.outcome is TierOutcome.CANCEL and tier.cancel_stops_chain:
                raise UserCancelled() from result.error

        logger.error("All token acquisition tiers failed for %s", identity.username)
        raise AcquisitionFailed()
