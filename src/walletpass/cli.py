"""Command line interface for issuing wallet passes.

Usage:
    walletpass build --card-name "Gym" --barcode-data 1234 --output gym.pkpass
    walletpass build --card-name "Library" --barcode-data 42 --barcode-format Code128 \\
        --background-color "#003366" --logo-text "" --output library.pkpass
    walletpass status
    walletpass generate-assets --asset-dir ./assets
"""

import argparse
import json
import sys
import typing as t
from pathlib import Path

import structlog
from pydantic import ValidationError

from walletpass.apple.images import write_placeholder_assets
from walletpass.exceptions import WalletPassError
from walletpass.observability import configure_logging
from walletpass.schemas import BarcodeFormat, PassRequest
from walletpass.service import ATTACHMENT_FILENAME, WalletPassService
from walletpass.settings import WalletPassSettings

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(prog="walletpass", description="Issue signed Apple Wallet passes")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build a signed .pkpass file")
    build.add_argument("--card-name", required=True, help="Name shown on the card")
    build.add_argument("--barcode-data", required=True, help="Raw barcode payload")
    build.add_argument(
        "--barcode-format",
        default=BarcodeFormat.QR.value,
        choices=[f.value for f in BarcodeFormat],
        help="Barcode symbology (default: QR)",
    )
    build.add_argument("--foreground-color", help="Hex text color, e.g. #FFFFFF")
    build.add_argument("--background-color", help="Hex background color, e.g. #1A1A2E")
    build.add_argument("--label-color", help="Hex label color, e.g. #CCCCCC")
    build.add_argument("--logo-text", help="Text next to the logo (defaults to the card name)")
    build.add_argument(
        "--output", "-o", type=Path, default=Path(ATTACHMENT_FILENAME), help="Where to write the .pkpass"
    )

    subparsers.add_parser("status", help="Print certificate health as JSON")

    assets = subparsers.add_parser("generate-assets", help="Write placeholder icon and logo images")
    assets.add_argument("--asset-dir", type=Path, help="Target directory (default: APPLE_WALLET_ASSET_DIR)")
    assets.add_argument("--icon-text", default="Y", help="Text drawn on the icons")
    assets.add_argument("--logo-text", default="YEETCARD", help="Wordmark drawn on the logos")

    return parser


def _build(service: WalletPassService, options: argparse.Namespace) -> int:
    payload: dict[str, t.Any] = {
        "card_name": options.card_name,
        "barcode_data": options.barcode_data,
        "barcode_format": options.barcode_format,
        "foreground_color": options.foreground_color,
        "background_color": options.background_color,
        "label_color": options.label_color,
        "logo_text": options.logo_text,
    }
    try:
        request = PassRequest.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        logger.error("validation_error", field=".".join(str(p) for p in first["loc"]), message=first["msg"])
        return 2

    try:
        pkpass = service.build_pass(request)
    except WalletPassError as e:
        logger.error("pass_build_failed", code=e.code, error=e.message)
        return 1

    try:
        options.output.write_bytes(pkpass)
    except OSError as e:
        logger.error("pass_write_failed", path=str(options.output), error=str(e))
        return 1

    logger.info("pass_written", path=str(options.output), size=len(pkpass))
    return 0


def main(argv: t.Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit code."""
    options = build_parser().parse_args(argv)
    settings = WalletPassSettings.from_env()
    configure_logging(settings.log_level, json_output=settings.log_json)

    if options.command == "generate-assets":
        asset_dir = options.asset_dir or settings.asset_path
        write_placeholder_assets(asset_dir, icon_text=options.icon_text, logo_text=options.logo_text)
        return 0

    service = WalletPassService(settings)
    service.preload()

    if options.command == "status":
        health = service.health()
        print(json.dumps(health, indent=2))
        return 0 if health["status"] == "ok" else 1

    return _build(service, options)


if __name__ == "__main__":
    sys.exit(main())
