"""MultiversX mnemonic utilities for x402 payment protocol.

Derives Ed25519 account keys from BIP-39 mnemonics using SLIP-10 with the
MultiversX derivation path, matching the official wallets.

See:
    - https://github.com/satoshilabs/slips/blob/master/slip-0010.md - SLIP-10 Ed25519
    - https://github.com/satoshilabs/slips/blob/master/slip-0044.md - Coin type 508 = MultiversX
"""

from __future__ import annotations

from typing import NamedTuple

try:
    from bip_utils import Bip32Slip10Ed25519, Bip39MnemonicValidator, Bip39SeedGenerator

    BIP_UTILS_AVAILABLE = True
except ImportError:
    BIP_UTILS_AVAILABLE = False

from nacl.signing import SigningKey

from .bech32 import encode_address

# MultiversX BIP-44 derivation path
# m/44'/508'/0'/0'/{index}'
# - 44' = BIP-44 purpose
# - 508' = MultiversX coin type (registered in SLIP-44)
# - 0' = account
# - 0' = change
# - index' = address index
#
# SLIP-10 Ed25519 only supports hardened derivation, so every level is hardened.
MULTIVERSX_COIN_TYPE = 508
MULTIVERSX_DERIVATION_PATH = "m/44'/508'/0'/0'/{index}'"

# MultiversX wallets issue 24-word mnemonics; 12-word phrases are accepted too
SUPPORTED_WORD_COUNTS = (12, 24)


class MultiversXAccount(NamedTuple):
    """MultiversX account with address and secret key."""

    address: str
    secret_key: bytes  # 32-byte Ed25519 seed


def _check_bip_utils() -> None:
    """Check that bip_utils is available."""
    if not BIP_UTILS_AVAILABLE:
        raise ImportError(
            "BIP-39 mnemonic support requires bip_utils. "
            "Install with: pip install bip_utils"
        )


def get_derivation_path(address_index: int = 0) -> str:
    """Get the derivation path for an address index."""
    if address_index < 0:
        raise ValueError(f"Address index must be non-negative: {address_index}")
    return MULTIVERSX_DERIVATION_PATH.format(index=address_index)


def is_valid_mnemonic(mnemonic: str) -> bool:
    """Validate a BIP-39 mnemonic phrase.

    Args:
        mnemonic: The mnemonic phrase to validate.

    Returns:
        True if the phrase has a supported word count and a valid checksum.
    """
    _check_bip_utils()
    words = mnemonic.strip().split()
    if len(words) not in SUPPORTED_WORD_COUNTS:
        return False
    return Bip39MnemonicValidator().IsValid(" ".join(words))


def mnemonic_to_multiversx_account(
    mnemonic: str,
    address_index: int = 0,
) -> MultiversXAccount:
    """Derive a MultiversX account from a BIP-39 mnemonic.

    Args:
        mnemonic: BIP-39 mnemonic phrase (12 or 24 words).
        address_index: Address index in the derivation path (default: 0).

    Returns:
        MultiversXAccount with address and secret key.

    Raises:
        ImportError: If bip_utils is not installed.
        ValueError: If the mnemonic is invalid.

    Example:
        >>> account = mnemonic_to_multiversx_account("moral volcano ... improve")
        >>> account.address
        'erd1qyu5wthldzr8wx5c9ucg8kjagg0jfs53s8nr3zpz3hypefsdd8ssycr6th'
    """
    _check_bip_utils()

    normalized = " ".join(mnemonic.strip().split())
    if not is_valid_mnemonic(normalized):
        raise ValueError(
            f"Invalid mnemonic ({len(normalized.split())} words): "
            "must be a valid 12 or 24-word BIP-39 mnemonic"
        )

    seed = bytes(Bip39SeedGenerator(normalized).Generate())
    derived = Bip32Slip10Ed25519.FromSeedAndPath(seed, get_derivation_path(address_index))
    secret_key = bytes(derived.PrivateKey().Raw().ToBytes())

    public_key = bytes(SigningKey(secret_key).verify_key)
    return MultiversXAccount(address=encode_address(public_key), secret_key=secret_key)
