"""Apple Wallet pass signing using PKCS#7.

This module handles the cryptographic signing of Apple Wallet passes.
A .pkpass file requires a PKCS#7 detached signature of the manifest.json
file, signed with the Pass Type ID certificate and including the Apple
WWDR (Worldwide Developer Relations) intermediate certificate.

The manifest itself lists SHA-1 hashes (mandated by the pass format), while
the signature's message digest uses SHA-256.
"""

import hashlib
import json
from collections.abc import Mapping

import structlog
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import Encoding, pkcs7

from walletpass.apple.identity import IdentityStore
from walletpass.exceptions import SigningError, SigningUnavailable, WalletPassError

logger = structlog.get_logger(__name__)

# content-type, message-digest and signing-time only; no S/MIME capabilities
SIGNATURE_OPTIONS = [
    pkcs7.PKCS7Options.DetachedSignature,
    pkcs7.PKCS7Options.Binary,
    pkcs7.PKCS7Options.NoCapabilities,
]


def sha1_hash(data: bytes | str) -> str:
    """Return the lowercase hex SHA-1 digest of ``data``.

    Strings are hashed as UTF-8.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha1(data).hexdigest()


def generate_manifest(files: Mapping[str, bytes | str]) -> dict[str, str]:
    """Create the manifest mapping for a pass bundle.

    Args:
        files: Bundle members keyed by archive name, excluding the manifest
            and signature themselves.

    Returns:
        Dictionary mapping each filename to its SHA-1 hex digest.
    """
    return {filename: sha1_hash(content) for filename, content in files.items()}


def serialize_manifest(manifest: Mapping[str, str]) -> bytes:
    """Serialize a manifest as compact UTF-8 JSON."""
    return json.dumps(dict(manifest), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class ApplePassSigner:
    """Signs pass manifests with the identity held by an ``IdentityStore``."""

    def __init__(self, identity_store: IdentityStore) -> None:
        self.identity_store = identity_store

    def sign_manifest(self, manifest_data: bytes) -> bytes:
        """Create a PKCS#7 detached signature of the manifest.

        The SignedData carries the Pass Type ID certificate and the WWDR
        certificate. Authenticated attributes are content-type (data),
        message-digest (SHA-256) and signing-time.

        Args:
            manifest_data: The manifest.json content to sign.

        Returns:
            The PKCS#7 signature in DER format.

        Raises:
            SigningUnavailable: If the identity or WWDR certificate cannot
                be loaded.
            SigningError: If signing fails.
        """
        try:
            identity = self.identity_store.load_identity()
            wwdr_certificate = self.identity_store.load_trust_anchor()
        except WalletPassError as e:
            logger.error("signing_material_unavailable", error=e.message, code=e.code)
            raise SigningUnavailable(f"Signing unavailable: {e.message}") from e

        try:
            signature = (
                pkcs7.PKCS7SignatureBuilder()
                .set_data(manifest_data)
                .add_signer(identity.certificate, identity.private_key, hashes.SHA256())
                .add_certificate(wwdr_certificate)
                .sign(Encoding.DER, SIGNATURE_OPTIONS)
            )
        except (TypeError, ValueError) as e:
            logger.error("manifest_signing_failed", error=str(e))
            raise SigningError(f"Failed to sign manifest: {e}") from e

        logger.debug(
            "manifest_signed",
            manifest_size=len(manifest_data),
            signature_size=len(signature),
        )

        return signature
