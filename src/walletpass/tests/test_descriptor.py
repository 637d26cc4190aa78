"""Tests for walletpass/apple/descriptor.py."""

import json
import uuid

import pytest

from walletpass.apple.descriptor import (
    BARCODE_FORMATS,
    Barcode,
    barcode_format_token,
    generate_pass_descriptor,
)
from walletpass.exceptions import InvalidBarcodeFormat, InvalidColorFormat
from walletpass.schemas import BarcodeFormat, PassRequest
from walletpass.settings import WalletPassSettings


@pytest.fixture
def issuer() -> WalletPassSettings:
    return WalletPassSettings(
        pass_type_identifier="pass.com.example.gym",
        team_identifier="ABCDE12345",
        organization_name="Yeetcard",
    )


def _request(**overrides: object) -> PassRequest:
    data: dict[str, object] = {"card_name": "Gym", "barcode_data": "1234567890", "barcode_format": "QR"}
    data.update(overrides)
    return PassRequest.model_validate(data)


class TestBarcodeFormatToken:
    """Tests for PassKit barcode tokens."""

    @pytest.mark.parametrize(
        "barcode_format,expected",
        [
            ("QR", "PKBarcodeFormatQR"),
            ("Code128", "PKBarcodeFormatCode128"),
            ("PDF417", "PKBarcodeFormatPDF417"),
            ("Aztec", "PKBarcodeFormatAztec"),
        ],
    )
    def test_known_formats(self, barcode_format: str, expected: str) -> None:
        assert barcode_format_token(barcode_format) == expected

    def test_accepts_enum(self) -> None:
        assert barcode_format_token(BarcodeFormat.PDF417) == "PKBarcodeFormatPDF417"

    def test_every_format_has_a_token(self) -> None:
        assert set(BARCODE_FORMATS) == set(BarcodeFormat)

    @pytest.mark.parametrize("barcode_format", ["qr", "EAN13", "", None])
    def test_unknown_format(self, barcode_format: object) -> None:
        with pytest.raises(InvalidBarcodeFormat, match="Invalid barcode format"):
            barcode_format_token(barcode_format)


class TestBarcode:
    """Tests for the barcode dict."""

    def test_as_dict(self) -> None:
        barcode = Barcode(format="PKBarcodeFormatQR", message="abc")
        assert barcode.as_dict() == {
            "format": "PKBarcodeFormatQR",
            "message": "abc",
            "messageEncoding": "iso-8859-1",
        }


class TestGeneratePassDescriptor:
    """Tests for pass.json generation."""

    def test_default_descriptor(self, issuer: WalletPassSettings) -> None:
        """A minimal request produces the full generic pass."""
        descriptor = generate_pass_descriptor(_request(), issuer)
        pass_json = descriptor.as_pass_json()

        barcode = {"format": "PKBarcodeFormatQR", "message": "1234567890", "messageEncoding": "iso-8859-1"}
        assert pass_json == {
            "formatVersion": 1,
            "passTypeIdentifier": "pass.com.example.gym",
            "serialNumber": descriptor.serial_number,
            "teamIdentifier": "ABCDE12345",
            "organizationName": "Yeetcard",
            "description": "Gym",
            "foregroundColor": "rgb(255, 255, 255)",
            "backgroundColor": "rgb(26, 26, 46)",
            "labelColor": "rgb(204, 204, 204)",
            "logoText": "Gym",
            "generic": {"primaryFields": [{"key": "card-name", "label": "CARD", "value": "Gym"}]},
            "barcode": barcode,
            "barcodes": [barcode],
        }

    def test_serial_number_is_uuid4(self, issuer: WalletPassSettings) -> None:
        descriptor = generate_pass_descriptor(_request(), issuer)
        assert uuid.UUID(descriptor.serial_number).version == 4

    def test_serial_numbers_are_unique(self, issuer: WalletPassSettings) -> None:
        serials = {generate_pass_descriptor(_request(), issuer).serial_number for _ in range(50)}
        assert len(serials) == 50

    def test_custom_colors(self, issuer: WalletPassSettings) -> None:
        request = _request(foreground_color="#000000", background_color="ff0000", label_color="#00FF00")
        pass_json = generate_pass_descriptor(request, issuer).as_pass_json()

        assert pass_json["foregroundColor"] == "rgb(0, 0, 0)"
        assert pass_json["backgroundColor"] == "rgb(255, 0, 0)"
        assert pass_json["labelColor"] == "rgb(0, 255, 0)"

    def test_logo_text_defaults_to_card_name(self, issuer: WalletPassSettings) -> None:
        descriptor = generate_pass_descriptor(_request(card_name="Library"), issuer)
        assert descriptor.logo_text == "Library"

    def test_explicit_logo_text(self, issuer: WalletPassSettings) -> None:
        descriptor = generate_pass_descriptor(_request(logo_text="My Gym"), issuer)
        assert descriptor.logo_text == "My Gym"

    def test_empty_logo_text_is_kept(self, issuer: WalletPassSettings) -> None:
        """An empty string is an explicit choice, not an omission."""
        descriptor = generate_pass_descriptor(_request(logo_text=""), issuer)
        assert descriptor.as_pass_json()["logoText"] == ""

    def test_barcode_in_both_fields(self, issuer: WalletPassSettings) -> None:
        pass_json = generate_pass_descriptor(_request(barcode_format="Aztec"), issuer).as_pass_json()

        assert pass_json["barcode"]["format"] == "PKBarcodeFormatAztec"
        assert pass_json["barcodes"] == [pass_json["barcode"]]
        assert pass_json["barcodes"][0] is not pass_json["barcode"]

    def test_invalid_color_bypassing_validation(self, issuer: WalletPassSettings) -> None:
        """Colors that skipped request validation are still rejected."""
        request = PassRequest.model_construct(
            card_name="Gym", barcode_data="1", barcode_format=BarcodeFormat.QR, background_color="#12"
        )
        with pytest.raises(InvalidColorFormat):
            generate_pass_descriptor(request, issuer)


class TestToJsonBytes:
    """Tests for pass.json serialization."""

    def test_pretty_printed_utf8(self, issuer: WalletPassSettings) -> None:
        descriptor = generate_pass_descriptor(_request(card_name="Café ☕"), issuer)
        data = descriptor.to_json_bytes()

        assert "Café ☕".encode() in data
        assert b'\n  "formatVersion": 1' in data
        assert json.loads(data) == descriptor.as_pass_json()
