"""Apple Wallet pass generator.

This module generates .pkpass files for generic cards. A .pkpass file is
a ZIP archive containing:
- pass.json: The pass definition
- manifest.json: SHA-1 hashes of all files
- signature: PKCS#7 signature of the manifest
- Images: icon and logo at 1x, 2x and 3x

Every member is stored uncompressed.
"""

import io
import zipfile
from collections.abc import Mapping
from pathlib import Path

import structlog

from walletpass.apple.descriptor import generate_pass_descriptor
from walletpass.apple.images import ASSET_FILES
from walletpass.apple.signer import ApplePassSigner, generate_manifest, serialize_manifest
from walletpass.exceptions import PackagingError, WalletPassError
from walletpass.schemas import PassRequest
from walletpass.settings import WalletPassSettings

logger = structlog.get_logger(__name__)

PASS_JSON = "pass.json"
MANIFEST_JSON = "manifest.json"
SIGNATURE = "signature"


def load_assets(asset_dir: str | Path, filenames: tuple[str, ...] = ASSET_FILES) -> dict[str, bytes]:
    """Load pass images from the asset directory.

    Missing files are logged and skipped; the pass ships without them.

    Args:
        asset_dir: Directory holding the image files.
        filenames: Names to look for, in archive order.

    Returns:
        Dictionary mapping filename to content for the files found.
    """
    directory = Path(asset_dir)
    assets: dict[str, bytes] = {}

    for filename in filenames:
        path = directory / filename
        if path.is_file():
            try:
                assets[filename] = path.read_bytes()
            except OSError as e:
                raise PackagingError(f"Failed to read asset {path}: {e}") from e
        else:
            logger.warning("asset_file_missing", filename=filename, path=str(path))

    return assets


def create_pkpass_archive(files: Mapping[str, bytes]) -> bytes:
    """Create the .pkpass ZIP archive.

    Args:
        files: Dictionary mapping filename to content, in archive order.

    Returns:
        ZIP archive as bytes.

    Raises:
        PackagingError: If the archive cannot be written.
    """
    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_STORED) as zf:
            for filename, content in files.items():
                zf.writestr(filename, content)
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        raise PackagingError(f"Failed to write pass archive: {e}") from e
    return buffer.getvalue()


class ApplePassGenerator:
    """Generates signed Apple Wallet .pkpass files."""

    CONTENT_TYPE = "application/vnd.apple.pkpass"

    def __init__(self, settings: WalletPassSettings, signer: ApplePassSigner) -> None:
        """Initialize the generator.

        Args:
            settings: Issuer configuration (identifiers and asset directory).
            signer: The signer to use for creating signatures.
        """
        self.settings = settings
        self.signer = signer

    def get_pass_content_type(self) -> str:
        """Get the MIME content type for Apple passes."""
        return self.CONTENT_TYPE

    def generate_pass(self, request: PassRequest) -> bytes:
        """Generate a .pkpass file for a card request.

        Args:
            request: The card contents.

        Returns:
            The .pkpass file as bytes.

        Raises:
            WalletPassError: If any step fails; no partial archive is returned.
        """
        try:
            assets = load_assets(self.settings.asset_path)

            descriptor = generate_pass_descriptor(request, self.settings)
            pass_json = descriptor.to_json_bytes()

            files: dict[str, bytes] = {PASS_JSON: pass_json}
            files.update(assets)

            manifest = serialize_manifest(generate_manifest(files))
            signature = self.signer.sign_manifest(manifest)

            # pass.json, manifest.json and signature lead, then the images
            archive_files: dict[str, bytes] = {
                PASS_JSON: pass_json,
                MANIFEST_JSON: manifest,
                SIGNATURE: signature,
            }
            archive_files.update(assets)

            pkpass_bytes = create_pkpass_archive(archive_files)

        except WalletPassError as e:
            logger.error("pass_generation_failed", code=e.code, error=e.message)
            raise

        logger.info(
            "pass_generated",
            serial_number=descriptor.serial_number,
            barcode_format=descriptor.barcode.format,
            members=len(archive_files),
            size=len(pkpass_bytes),
        )

        return pkpass_bytes
