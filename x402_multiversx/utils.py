"""MultiversX mechanism utility functions.

Provides amount encoding, network resolution, and money conversion
helpers for building and checking MultiversX transactions.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any

from .constants import (
    CAIP2_PREFIX,
    CHAIN_ID_TO_NETWORK,
    DEFAULT_CHAIN_ID,
    DEFAULT_DECIMALS,
    NETWORK_CONFIGS,
    V1_TO_V2_NETWORK_MAP,
)
from .errors import InvalidAmountError

_DIGITS_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"[0-9a-fA-F]*")


# ============================================================================
# Amounts
# ============================================================================


def parse_amount(value: str | int) -> int:
    """Parse an atomic amount.

    Only plain base-10 digit strings are accepted: no sign, whitespace,
    underscores, or decimal point.

    Args:
        value: Decimal string or non-negative int.

    Returns:
        The amount as an int.

    Raises:
        InvalidAmountError: If the value is not a non-negative integer.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise InvalidAmountError(f"Amount must be non-negative: {value}")
        return value
    if not isinstance(value, str) or not _DIGITS_RE.fullmatch(value):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    return int(value)


def amount_to_hex(amount: int) -> str:
    """Encode an amount as minimal big-endian, even-length lowercase hex.

    Zero encodes as "00".
    """
    if amount < 0:
        raise InvalidAmountError(f"Amount must be non-negative: {amount}")
    encoded = format(amount, "x")
    if len(encoded) % 2:
        encoded = "0" + encoded
    return encoded


def hex_to_amount(value: str) -> int:
    """Decode a big-endian hex amount. The empty string decodes to 0.

    Raises:
        InvalidAmountError: If the value is not hex.
    """
    if not _HEX_RE.fullmatch(value):
        raise InvalidAmountError(f"Invalid hex amount: {value!r}")
    if not value:
        return 0
    return int(value, 16)


def compare_amounts(a: str | int, b: str | int) -> int:
    """Compare two amounts.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b.

    Raises:
        InvalidAmountError: If either side does not parse.
    """
    x = parse_amount(a)
    y = parse_amount(b)
    return (x > y) - (x < y)


def is_sufficient_amount(actual: str | int, required: str | int) -> bool:
    """Check that the paid amount covers the required amount."""
    return compare_amounts(actual, required) >= 0


# ============================================================================
# Networks
# ============================================================================


def normalize_network(network: str) -> str:
    """Normalize network identifier to CAIP-2 format.

    Args:
        network: Network identifier (V1 name, short name or CAIP-2).

    Returns:
        CAIP-2 network identifier.

    Raises:
        ValueError: If network is not supported.
    """
    if network.startswith(CAIP2_PREFIX):
        if network in NETWORK_CONFIGS:
            return network
        raise ValueError(f"Unsupported CAIP-2 network: {network}")

    if network in V1_TO_V2_NETWORK_MAP:
        return V1_TO_V2_NETWORK_MAP[network]

    raise ValueError(f"Unsupported network: {network}")


def is_valid_network(network: str) -> bool:
    """Check if a network identifier is valid.

    Args:
        network: Network identifier.

    Returns:
        True if network is supported.
    """
    try:
        normalize_network(network)
        return True
    except ValueError:
        return False


def get_network_config(network: str) -> dict[str, Any]:
    """Get configuration for a network.

    Args:
        network: Network identifier (V1 name or CAIP-2).

    Returns:
        NetworkConfig dictionary.

    Raises:
        ValueError: If network is not supported.
    """
    caip2 = normalize_network(network)
    config = NETWORK_CONFIGS.get(caip2)
    if not config:
        raise ValueError(f"Unsupported network: {network}")
    return dict(config)


def get_chain_id(network: str) -> str:
    """Resolve the chain ID a transaction must carry for a network.

    An empty network falls back to devnet. "multiversx:<ref>" yields <ref>
    as-is, so custom chains (e.g. local testnets) resolve too.

    Args:
        network: Network identifier.

    Returns:
        Chain ID string.

    Raises:
        ValueError: If network is not recognized.
    """
    if not network:
        return DEFAULT_CHAIN_ID

    if network in V1_TO_V2_NETWORK_MAP:
        network = V1_TO_V2_NETWORK_MAP[network]

    if network.startswith(CAIP2_PREFIX):
        reference = network[len(CAIP2_PREFIX) :]
        if reference:
            return reference

    raise ValueError(f"Unsupported network: {network}")


def network_from_chain_id(chain_id: str) -> str | None:
    """Determine CAIP-2 network from chain ID.

    Returns:
        CAIP-2 network identifier or None if unknown.
    """
    return CHAIN_ID_TO_NETWORK.get(chain_id)


def get_default_asset_info(network: str) -> dict[str, Any]:
    """Get default stablecoin info for a network.

    Args:
        network: Network identifier.

    Returns:
        Asset info dictionary with identifier, name, decimals.

    Raises:
        ValueError: If the network has no default stablecoin.
    """
    config = get_network_config(network)
    asset = config.get("default_asset")
    if not asset:
        raise ValueError(f"No default asset configured for network: {network}")
    return dict(asset)


# ============================================================================
# Money
# ============================================================================


def parse_money_to_decimal(money: str | float | int) -> Decimal:
    """Parse money value to decimal.

    Args:
        money: Money value (string, float, or int), e.g. "$1.50".

    Returns:
        Decimal amount.

    Raises:
        ValueError: If the value is not a number.
    """
    try:
        if isinstance(money, str):
            cleaned = money.strip().lstrip("$").replace(",", "").strip()
            return Decimal(cleaned)
        return Decimal(str(money))
    except ArithmeticError as e:
        raise ValueError(f"Invalid money value: {money!r}") from e


def to_atomic_amount(amount: Decimal | float | int, decimals: int = DEFAULT_DECIMALS) -> int:
    """Convert decimal amount to atomic units.

    Args:
        amount: Decimal amount.
        decimals: Number of decimal places.

    Returns:
        Amount in atomic units (smallest unit), truncated.
    """
    return int(Decimal(str(amount)) * Decimal(10**decimals))


def from_atomic_amount(amount: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Convert atomic units to decimal amount.

    Args:
        amount: Amount in atomic units.
        decimals: Number of decimal places.

    Returns:
        Decimal amount.
    """
    return Decimal(amount) / Decimal(10**decimals)
