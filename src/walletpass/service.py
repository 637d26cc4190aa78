"""Wallet pass service.

This module provides the main service layer for wallet pass operations,
wiring the identity store, signer and generator together from one settings
object and exposing the build entry point and a health summary.
"""

from datetime import datetime, timezone
from typing import Any

import structlog

from walletpass.apple.generator import ApplePassGenerator
from walletpass.apple.identity import CertificateStatus, IdentityStore
from walletpass.apple.signer import ApplePassSigner
from walletpass.exceptions import WalletPassError
from walletpass.schemas import PassRequest
from walletpass.settings import WalletPassSettings

logger = structlog.get_logger(__name__)

ATTACHMENT_FILENAME = "pass.pkpass"


class WalletPassService:
    """Service for issuing signed wallet passes.

    Builds are independent of each other; the only shared state is the
    identity store's certificate cache, so one service instance may serve
    concurrent builds from multiple threads.
    """

    def __init__(self, settings: WalletPassSettings, identity_store: IdentityStore | None = None) -> None:
        """Initialize the wallet service.

        Args:
            settings: Issuer configuration.
            identity_store: Certificate cache to use. A new one is created
                from ``settings`` if not provided.
        """
        self.settings = settings
        self.identity_store = identity_store or IdentityStore.from_settings(settings)
        self.signer = ApplePassSigner(self.identity_store)
        self.generator = ApplePassGenerator(settings, self.signer)

    @property
    def content_type(self) -> str:
        return self.generator.get_pass_content_type()

    def preload(self) -> bool:
        """Load the signing identity and WWDR certificate ahead of the first build.

        A failure is logged and the service keeps running; builds then fail
        with the underlying error until the certificates are fixed.

        Returns:
            True if both certificates are loaded.
        """
        if not self.settings.is_configured():
            logger.warning("apple_wallet_not_configured")
            return False

        try:
            identity = self.identity_store.load_identity()
            self.identity_store.load_trust_anchor()
        except WalletPassError as e:
            logger.warning("certificate_preload_failed", code=e.code, error=e.message)
            return False

        logger.info("certificate_preload_complete", expiry=identity.expiry.isoformat())
        return True

    def build_pass(self, request: PassRequest) -> bytes:
        """Build a signed .pkpass for a card request.

        Args:
            request: The card contents.

        Returns:
            The .pkpass archive as bytes.

        Raises:
            WalletPassError: If the pass cannot be built.
        """
        return self.generator.generate_pass(request)

    def certificate_status(self) -> CertificateStatus:
        return self.identity_store.status()

    def rotate_certificates(self) -> None:
        """Forget cached certificates so the next build reloads them."""
        self.identity_store.invalidate()

    def health(self) -> dict[str, Any]:
        """Summarize signing readiness for a health check.

        Returns:
            Dictionary with ``status`` ("ok" or "degraded"), ``timestamp``,
            ``certificate_loaded`` and ``certificate_expiry``, plus
            ``warning`` or ``error`` when applicable.
        """
        status = self.certificate_status()

        result: dict[str, Any] = {
            "status": "ok" if status.loaded and not status.is_expired else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "certificate_loaded": status.loaded,
            "certificate_expiry": status.expiry.isoformat() if status.expiry else None,
        }

        if status.is_expiring_soon:
            result["warning"] = "Certificate expiring soon"
        if status.is_expired:
            result["error"] = "Certificate has expired"
        if not status.loaded:
            result["error"] = status.error

        if result["status"] != "ok":
            logger.warning("wallet_pass_degraded", error=result.get("error"))

        return result
