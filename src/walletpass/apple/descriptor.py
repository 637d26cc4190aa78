"""pass.json descriptor generation.

Builds the generic-style pass descriptor from a card request and the
issuer's identifiers. Each descriptor gets a fresh random serial number.
"""

import json
import uuid
from dataclasses import dataclass
from typing import Any

from walletpass.apple.formatting import PassColors, resolve_colors
from walletpass.exceptions import InvalidBarcodeFormat
from walletpass.schemas import BarcodeFormat, PassRequest
from walletpass.settings import WalletPassSettings

FORMAT_VERSION = 1

BARCODE_FORMATS: dict[BarcodeFormat, str] = {
    BarcodeFormat.QR: "PKBarcodeFormatQR",
    BarcodeFormat.CODE128: "PKBarcodeFormatCode128",
    BarcodeFormat.PDF417: "PKBarcodeFormatPDF417",
    BarcodeFormat.AZTEC: "PKBarcodeFormatAztec",
}

BARCODE_MESSAGE_ENCODING = "iso-8859-1"


@dataclass(frozen=True)
class Barcode:
    """A barcode as it appears in pass.json."""

    format: str
    message: str
    message_encoding: str = BARCODE_MESSAGE_ENCODING

    def as_dict(self) -> dict[str, str]:
        return {
            "format": self.format,
            "message": self.message,
            "messageEncoding": self.message_encoding,
        }


@dataclass(frozen=True)
class PassDescriptor:
    """The rendered contents of pass.json."""

    pass_type_identifier: str
    team_identifier: str
    organization_name: str
    serial_number: str
    description: str
    colors: PassColors
    logo_text: str
    card_name: str
    barcode: Barcode
    format_version: int = FORMAT_VERSION

    def as_pass_json(self) -> dict[str, Any]:
        """Render the descriptor as the pass.json object.

        The barcode is written both to the legacy ``barcode`` key (iOS 8 and
        earlier) and to the ``barcodes`` list.
        """
        barcode = self.barcode.as_dict()
        return {
            "formatVersion": self.format_version,
            "passTypeIdentifier": self.pass_type_identifier,
            "serialNumber": self.serial_number,
            "teamIdentifier": self.team_identifier,
            "organizationName": self.organization_name,
            "description": self.description,
            "foregroundColor": self.colors.foreground,
            "backgroundColor": self.colors.background,
            "labelColor": self.colors.label,
            "logoText": self.logo_text,
            "generic": {
                "primaryFields": [
                    {
                        "key": "card-name",
                        "label": "CARD",
                        "value": self.card_name,
                    }
                ],
            },
            "barcode": barcode,
            "barcodes": [dict(barcode)],
        }

    def to_json_bytes(self) -> bytes:
        """Serialize as pretty-printed UTF-8 JSON."""
        return json.dumps(self.as_pass_json(), indent=2, ensure_ascii=False).encode("utf-8")


def barcode_format_token(barcode_format: Any) -> str:
    """Map a barcode format to its PassKit token.

    Raises:
        InvalidBarcodeFormat: If the format has no PassKit token.
    """
    try:
        return BARCODE_FORMATS[BarcodeFormat(barcode_format)]
    except (ValueError, KeyError) as e:
        raise InvalidBarcodeFormat(f"Invalid barcode format: {barcode_format!r}") from e


def generate_pass_descriptor(request: PassRequest, settings: WalletPassSettings) -> PassDescriptor:
    """Build the descriptor for a card request.

    Args:
        request: The card contents.
        settings: Issuer configuration providing the pass identifiers.

    Returns:
        A descriptor with a freshly generated serial number.

    Raises:
        InvalidBarcodeFormat: If the barcode format has no PassKit token.
        InvalidColorFormat: If a supplied color is not a 6-digit hex color.
    """
    barcode = Barcode(
        format=barcode_format_token(request.barcode_format),
        message=request.barcode_data,
    )
    colors = resolve_colors(
        foreground=request.foreground_color,
        background=request.background_color,
        label=request.label_color,
    )

    return PassDescriptor(
        pass_type_identifier=settings.pass_type_identifier,
        team_identifier=settings.team_identifier,
        organization_name=settings.organization_name,
        serial_number=str(uuid.uuid4()),
        description=request.card_name,
        colors=colors,
        logo_text=request.card_name if request.logo_text is None else request.logo_text,
        card_name=request.card_name,
        barcode=barcode,
    )
