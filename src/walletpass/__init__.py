"""Signed Apple Wallet pass issuance."""

from walletpass.schemas import BarcodeFormat, PassRequest
from walletpass.service import WalletPassService
from walletpass.settings import WalletPassSettings

__all__ = [
    "BarcodeFormat",
    "PassRequest",
    "WalletPassService",
    "WalletPassSettings",
]
