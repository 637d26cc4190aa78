"""Pydantic schemas for pass build requests."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR_REGEX = r"^#?[0-9A-Fa-f]{6}$"


class BarcodeFormat(str, Enum):
    """Barcode symbologies a pass can carry."""

    QR = "QR"
    CODE128 = "Code128"
    PDF417 = "PDF417"
    AZTEC = "Aztec"


class PassRequest(BaseModel):
    """Card contents supplied by the caller.

    Omitted colors fall back to defaults. An omitted ``logo_text`` falls back
    to ``card_name``; an empty string is kept as-is.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    card_name: str = Field(..., alias="cardName", min_length=1, description="Name shown on the card")
    barcode_data: str = Field(..., alias="barcodeData", min_length=1, description="Raw barcode payload")
    barcode_format: BarcodeFormat = Field(..., alias="barcodeFormat")
    foreground_color: str | None = Field(None, alias="foregroundColor", pattern=HEX_COLOR_REGEX)
    background_color: str | None = Field(None, alias="backgroundColor", pattern=HEX_COLOR_REGEX)
    label_color: str | None = Field(None, alias="labelColor", pattern=HEX_COLOR_REGEX)
    logo_text: str | None = Field(None, alias="logoText", description="Text next to the logo")
