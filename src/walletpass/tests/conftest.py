"""Test fixtures for wallet pass tests.

This module provides fixtures for testing pass issuance end to end:
throwaway RSA keys, a WWDR-style intermediate CA, a Pass Type ID
certificate issued by it, PKCS#12 containers and an asset directory.
"""

import base64
import io
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest
import structlog
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from PIL import Image

from walletpass.apple.identity import IdentityStore
from walletpass.apple.images import ASSET_FILES
from walletpass.service import WalletPassService
from walletpass.settings import WalletPassSettings
from walletpass.tests.certs import (
    CERT_PASSWORD,
    NOT_VALID_AFTER,
    NOT_VALID_BEFORE,
    make_certificate,
    make_pkcs12,
    make_private_key,
)


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any logging configuration a test applies."""
    yield
    structlog.reset_defaults()


# --- Key and Certificate Fixtures ---


@pytest.fixture(scope="session")
def wwdr_private_key() -> rsa.RSAPrivateKey:
    """Key of the intermediate CA standing in for Apple WWDR."""
    return make_private_key()


@pytest.fixture(scope="session")
def wwdr_certificate(wwdr_private_key: rsa.RSAPrivateKey) -> x509.Certificate:
    """Self-signed CA certificate standing in for Apple WWDR."""
    return make_certificate(
        "Apple Worldwide Developer Relations Certification Authority",
        wwdr_private_key.public_key(),
        issuer=None,
        signing_key=wwdr_private_key,
        is_ca=True,
    )


@pytest.fixture(scope="session")
def pass_private_key() -> rsa.RSAPrivateKey:
    """Private key of the Pass Type ID certificate."""
    return make_private_key()


@pytest.fixture(scope="session")
def pass_certificate(
    pass_private_key: rsa.RSAPrivateKey,
    wwdr_certificate: x509.Certificate,
    wwdr_private_key: rsa.RSAPrivateKey,
) -> x509.Certificate:
    """Pass Type ID certificate issued by the WWDR stand-in."""
    return make_certificate(
        "Pass Type ID: pass.com.example.test",
        pass_private_key.public_key(),
        issuer=wwdr_certificate.subject,
        signing_key=wwdr_private_key,
    )


@pytest.fixture(scope="session")
def pkcs12_bytes(pass_private_key: rsa.RSAPrivateKey, pass_certificate: x509.Certificate) -> bytes:
    """PKCS#12 container with exactly one certificate and key."""
    return make_pkcs12(pass_private_key, pass_certificate)


@pytest.fixture
def inline_pkcs12(pkcs12_bytes: bytes) -> str:
    """The PKCS#12 container as a base64 string."""
    return base64.b64encode(pkcs12_bytes).decode("ascii")


@pytest.fixture
def validity_window() -> tuple[datetime, datetime]:
    return NOT_VALID_BEFORE, NOT_VALID_AFTER


# --- File Fixtures ---


@pytest.fixture
def pkcs12_path(tmp_path: Path, pkcs12_bytes: bytes) -> Path:
    path = tmp_path / "pass.p12"
    path.write_bytes(pkcs12_bytes)
    return path


@pytest.fixture
def wwdr_path(tmp_path: Path, wwdr_certificate: x509.Certificate) -> Path:
    path = tmp_path / "wwdr.pem"
    path.write_bytes(wwdr_certificate.public_bytes(serialization.Encoding.PEM))
    return path


@pytest.fixture
def png_bytes() -> bytes:
    """A minimal 1x1 PNG."""
    img = Image.new("RGB", (1, 1), (255, 0, 0))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def asset_dir(tmp_path: Path, png_bytes: bytes) -> Path:
    """Asset directory holding every expected image, each with distinct content."""
    directory = tmp_path / "assets"
    directory.mkdir()
    for filename in ASSET_FILES:
        (directory / filename).write_bytes(png_bytes + filename.encode())
    return directory


# --- Configured Components ---


@pytest.fixture
def wallet_settings(pkcs12_path: Path, wwdr_path: Path, asset_dir: Path) -> WalletPassSettings:
    """Settings pointing at the generated certificates and assets."""
    return WalletPassSettings(
        pass_type_identifier="pass.com.example.test",
        team_identifier="TEAM123",
        organization_name="Test Org",
        certificate_path=str(pkcs12_path),
        certificate_password=CERT_PASSWORD,
        wwdr_certificate_path=str(wwdr_path),
        asset_dir=str(asset_dir),
    )


@pytest.fixture
def identity_store(wallet_settings: WalletPassSettings) -> IdentityStore:
    return IdentityStore.from_settings(wallet_settings)


@pytest.fixture
def wallet_service(wallet_settings: WalletPassSettings, identity_store: IdentityStore) -> WalletPassService:
    return WalletPassService(wallet_settings, identity_store=identity_store)
