"""Exceptions raised while building signed wallet passes.

Every failure surfaced by the pass pipeline is a ``WalletPassError``. The
category classes (``ConfigurationError``, ``ParseError``, ...) group the
concrete kinds so that callers can decide how to react without string
matching, and each concrete kind carries a stable ``code`` for transport
layers that need a machine-readable error.
"""


class WalletPassError(Exception):
    """Base exception for wallet pass errors."""

    code = "wallet_pass_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# --- Categories ---


class ConfigurationError(WalletPassError):
    """A required identity or trust-anchor source is missing."""

    code = "configuration_error"


class ParseError(WalletPassError):
    """A container or certificate could not be decoded."""

    code = "parse_error"


class IntegrityError(WalletPassError):
    """A container decoded but does not hold the expected entries."""

    code = "integrity_error"


class FormatError(WalletPassError):
    """An input value has no valid representation in the pass format."""

    code = "format_error"


class SigningError(WalletPassError):
    """The manifest signature could not be produced."""

    code = "signing_error"


class PackagingError(WalletPassError):
    """The .pkpass archive could not be assembled."""

    code = "packaging_error"


# --- Concrete kinds ---


class IdentityUnconfigured(ConfigurationError):
    """Neither an inline PKCS#12 blob nor a PKCS#12 path is configured."""

    code = "identity_unconfigured"


class IdentityFileMissing(ConfigurationError):
    """The configured PKCS#12 path does not exist."""

    code = "identity_file_missing"


class TrustAnchorFileMissing(ConfigurationError):
    """The configured WWDR certificate path does not exist."""

    code = "trust_anchor_file_missing"


class IdentityParseError(ParseError):
    """The PKCS#12 container is malformed or the passphrase is wrong."""

    code = "identity_parse_error"


class TrustAnchorParseError(ParseError):
    """The WWDR certificate is not a valid PEM certificate."""

    code = "trust_anchor_parse_error"


class CertificateMissing(IntegrityError):
    """The PKCS#12 container holds no certificate, or more than one."""

    code = "certificate_missing"


class PrivateKeyMissing(IntegrityError):
    """The PKCS#12 container holds no private key."""

    code = "private_key_missing"


class InvalidColorFormat(FormatError):
    """A color is not a 6-digit hex string."""

    code = "invalid_color_format"


class InvalidBarcodeFormat(FormatError):
    """A barcode format has no PassKit token."""

    code = "invalid_barcode_format"


class SigningUnavailable(SigningError):
    """Signing material could not be loaded.

    The originating identity or trust-anchor error is kept as ``__cause__``.
    """

    code = "signing_unavailable"
