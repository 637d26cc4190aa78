"""Apple Wallet pass generation components."""

from walletpass.apple.generator import ApplePassGenerator
from walletpass.apple.identity import IdentityStore
from walletpass.apple.signer import ApplePassSigner

__all__ = [
    "ApplePassGenerator",
    "ApplePassSigner",
    "IdentityStore",
]
