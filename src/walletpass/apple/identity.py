"""Signing identity and WWDR certificate loading.

The Pass Type ID certificate and its private key arrive as a PKCS#12
container, either inline (base64) or as a .p12/.pfx file. Apple's WWDR
intermediate certificate is read from a PEM file. Both are loaded lazily on
first use and cached until ``invalidate()`` is called.
"""

import base64
import binascii
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import structlog
from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.x509.oid import NameOID

from walletpass.exceptions import (
    CertificateMissing,
    IdentityFileMissing,
    IdentityParseError,
    IdentityUnconfigured,
    PrivateKeyMissing,
    TrustAnchorFileMissing,
    TrustAnchorParseError,
    WalletPassError,
)
from walletpass.settings import WalletPassSettings

logger = structlog.get_logger(__name__)

# Days before expiry at which the certificate is reported as expiring soon
EXPIRY_WARNING_DAYS = 30


@dataclass(frozen=True)
class Identity:
    """The Pass Type ID certificate, its private key and expiry."""

    certificate: x509.Certificate
    private_key: Any
    expiry: datetime


@dataclass(frozen=True)
class CertificateStatus:
    """Snapshot of the signing certificate's health."""

    loaded: bool
    expiry: datetime | None = None
    days_until_expiry: int | None = None
    is_expired: bool = False
    is_expiring_soon: bool = False
    error: str | None = None


def _common_name(certificate: x509.Certificate) -> str | None:
    attributes = certificate.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attributes:
        return None
    return str(attributes[0].value)


class IdentityStore:
    """Loads and caches the signing identity and WWDR certificate.

    Each store owns its own cache, so tests and certificate rotation work on
    independent instances. A lock guards the cache slots; a load racing an
    ``invalidate()`` either completes before the clear or starts after it.
    """

    def __init__(
        self,
        certificate_base64: str | None = None,
        certificate_path: str | None = None,
        certificate_password: str | None = None,
        wwdr_certificate_path: str | None = None,
    ) -> None:
        """Initialize the store with identity sources.

        Args:
            certificate_base64: Base64-encoded PKCS#12 container. Takes
                precedence over ``certificate_path`` when both are set.
            certificate_path: Path to a .p12/.pfx file.
            certificate_password: Passphrase protecting the container.
            wwdr_certificate_path: Path to the Apple WWDR certificate (PEM).
        """
        self.certificate_base64 = certificate_base64 or ""
        self.certificate_path = certificate_path or ""
        self.certificate_password = certificate_password or ""
        self.wwdr_certificate_path = wwdr_certificate_path or ""

        self._lock = threading.RLock()
        self._identity: Identity | None = None
        self._wwdr_certificate: x509.Certificate | None = None

    @classmethod
    def from_settings(cls, settings: WalletPassSettings) -> "IdentityStore":
        return cls(
            certificate_base64=settings.certificate_base64,
            certificate_path=settings.certificate_path,
            certificate_password=settings.certificate_password,
            wwdr_certificate_path=settings.wwdr_certificate_path,
        )

    def _read_pkcs12_bytes(self) -> bytes:
        """Read the PKCS#12 container from the configured source.

        Raises:
            IdentityUnconfigured: If no source is configured.
            IdentityFileMissing: If the configured path does not exist.
            IdentityParseError: If the inline blob is not valid base64.
        """
        if self.certificate_base64:
            # `base64` wraps its output at 76 columns
            encoded = "".join(self.certificate_base64.split())
            try:
                return base64.b64decode(encoded, validate=True)
            except (binascii.Error, ValueError) as e:
                raise IdentityParseError(f"Inline certificate is not valid base64: {e}") from e

        if not self.certificate_path:
            raise IdentityUnconfigured("No certificate configured (APPLE_WALLET_CERT_PATH or APPLE_WALLET_CERT_BASE64)")

        path = Path(self.certificate_path)
        if not path.is_file():
            raise IdentityFileMissing(f"Certificate file not found: {self.certificate_path}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise IdentityFileMissing(f"Certificate file not readable: {self.certificate_path}: {e}") from e

    def _parse_pkcs12(self, data: bytes) -> Identity:
        """Extract exactly one certificate and one private key from a container.

        Raises:
            IdentityParseError: If the container is malformed or the
                passphrase is wrong.
            CertificateMissing: If the container holds no certificate or
                more than one.
            PrivateKeyMissing: If the container holds no private key.
        """
        password = self.certificate_password.encode() if self.certificate_password else None
        try:
            container = pkcs12.load_pkcs12(data, password)
        except ValueError as e:
            raise IdentityParseError(f"Failed to parse PKCS#12 container: {e}") from e

        certificates: list[x509.Certificate] = []
        if container.cert is not None:
            certificates.append(container.cert.certificate)
        certificates.extend(c.certificate for c in container.additional_certs)

        if not certificates:
            raise CertificateMissing("No certificate found in PKCS#12 container")
        if len(certificates) > 1:
            raise CertificateMissing(f"Expected one certificate in PKCS#12 container, found {len(certificates)}")
        if container.key is None:
            raise PrivateKeyMissing("No private key found in PKCS#12 container")

        certificate = certificates[0]
        return Identity(
            certificate=certificate,
            private_key=container.key,
            expiry=certificate.not_valid_after_utc,
        )

    def load_identity(self) -> Identity:
        """Get the signing identity, loading it on first use.

        Returns:
            The cached identity.

        Raises:
            ConfigurationError: If no usable source is configured.
            ParseError: If the container cannot be decoded.
            IntegrityError: If the certificate or key is missing.
        """
        identity = self._identity
        if identity is not None:
            return identity

        with self._lock:
            if self._identity is None:
                identity = self._parse_pkcs12(self._read_pkcs12_bytes())
                self._identity = identity
                logger.info(
                    "certificate_loaded",
                    expiry=identity.expiry.isoformat(),
                    subject=_common_name(identity.certificate),
                )
            return self._identity

    def load_trust_anchor(self) -> x509.Certificate:
        """Get the Apple WWDR intermediate certificate, loading it on first use.

        Raises:
            TrustAnchorFileMissing: If the PEM file does not exist.
            TrustAnchorParseError: If the file is not a PEM certificate.
        """
        wwdr_certificate = self._wwdr_certificate
        if wwdr_certificate is not None:
            return wwdr_certificate

        with self._lock:
            if self._wwdr_certificate is None:
                path = Path(self.wwdr_certificate_path) if self.wwdr_certificate_path else None
                if path is None or not path.is_file():
                    raise TrustAnchorFileMissing(f"WWDR certificate not found: {self.wwdr_certificate_path}")
                try:
                    self._wwdr_certificate = x509.load_pem_x509_certificate(path.read_bytes())
                except OSError as e:
                    raise TrustAnchorFileMissing(f"WWDR certificate not readable: {path}: {e}") from e
                except ValueError as e:
                    raise TrustAnchorParseError(f"Failed to load WWDR certificate {path}: {e}") from e
                logger.info("wwdr_certificate_loaded", subject=_common_name(self._wwdr_certificate))
            return self._wwdr_certificate

    def status(self, now: datetime | None = None) -> CertificateStatus:
        """Report whether the identity is loaded and how close it is to expiry.

        Never raises: load failures are reported with ``loaded=False``.

        Args:
            now: Reference time; a naive datetime is taken as UTC.
        """
        try:
            identity = self.load_identity()
        except WalletPassError as e:
            return CertificateStatus(loaded=False, error=e.message)

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        days_until_expiry = (identity.expiry - now).days

        return CertificateStatus(
            loaded=True,
            expiry=identity.expiry,
            days_until_expiry=days_until_expiry,
            is_expired=now > identity.expiry,
            is_expiring_soon=days_until_expiry <= EXPIRY_WARNING_DAYS,
        )

    def invalidate(self) -> None:
        """Drop cached material so the next load re-reads from source."""
        with self._lock:
            self._identity = None
            self._wwdr_certificate = None
        logger.info("certificate_cache_cleared")
