"""Apple Wallet pass configuration.

See: https://developer.apple.com/documentation/walletpasses
"""

from dataclasses import dataclass
from pathlib import Path

from decouple import config


@dataclass(frozen=True)
class WalletPassSettings:
    """Process-wide pass issuer configuration.

    Built once at startup and handed to the components that need it.
    """

    pass_type_identifier: str = ""
    team_identifier: str = ""
    organization_name: str = "Yeetcard"
    certificate_base64: str = ""
    certificate_path: str = "./certs/pass.p12"
    certificate_password: str = ""
    wwdr_certificate_path: str = "./certs/AppleWWDRCA.pem"
    asset_dir: str = "./assets"
    log_level: str = "INFO"
    log_json: bool = True

    @classmethod
    def from_env(cls) -> "WalletPassSettings":
        """Read settings from the environment (and a ``.env`` file if present)."""
        return cls(
            pass_type_identifier=config("APPLE_WALLET_PASS_TYPE_ID", default=""),
            team_identifier=config("APPLE_WALLET_TEAM_ID", default=""),
            organization_name=config("APPLE_WALLET_ORGANIZATION_NAME", default="Yeetcard"),
            certificate_base64=config("APPLE_WALLET_CERT_BASE64", default=""),
            certificate_path=config("APPLE_WALLET_CERT_PATH", default="./certs/pass.p12"),
            certificate_password=config("APPLE_WALLET_CERT_PASSWORD", default=""),
            wwdr_certificate_path=config("APPLE_WALLET_WWDR_CERT_PATH", default="./certs/AppleWWDRCA.pem"),
            asset_dir=config("APPLE_WALLET_ASSET_DIR", default="./assets"),
            log_level=config("LOG_LEVEL", default="INFO"),
            log_json=config("LOG_JSON", default=True, cast=bool),
        )

    @property
    def asset_path(self) -> Path:
        return Path(self.asset_dir)

    def is_configured(self) -> bool:
        """Check if pass identifiers and a certificate source are set.

        Returns:
            True if passes can be issued with this configuration.
        """
        return bool(
            self.pass_type_identifier
            and self.team_identifier
            and (self.certificate_base64 or self.certificate_path)
            and self.wwdr_certificate_path
        )
