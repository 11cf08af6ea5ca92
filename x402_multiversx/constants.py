"""MultiversX mechanism constants - network configs, gas defaults, error codes."""

import os
from typing import TypedDict

# Scheme identifier
SCHEME_EXACT = "exact"

# Native asset sentinel (EGLD)
NATIVE_ASSET = "EGLD"
NATIVE_DECIMALS = 18

# Fully qualified native token identifier. Routed through MultiESDTNFTTransfer,
# never treated as the native sentinel.
NATIVE_TOKEN_IDENTIFIER = "EGLD-000000"

# Default token decimals for USDC on MultiversX
DEFAULT_DECIMALS = 6

# Address format
ADDRESS_HRP = "erd"
PUBKEY_LENGTH = 32

# Transaction defaults
TX_VERSION = 1
DEFAULT_GAS_PRICE = 1_000_000_000
DEFAULT_GAS_LIMIT = 50_000
MULTI_TRANSFER_GAS_LIMIT = 60_000_000

# Multi-asset transfer built-in function
MULTI_TRANSFER_FUNCTION = "MultiESDTNFTTransfer"
FUNGIBLE_TOKEN_NONCE = 0

# Payment validity window used when V1 requirements omit maxTimeoutSeconds
DEFAULT_MAX_TIMEOUT_SECONDS = 300

# Gateway request timeout (seconds)
DEFAULT_TIMEOUT = 10.0

# Gateway endpoints
SIMULATE_PATH = "/transaction/simulate"
SEND_PATH = "/transaction/send"
NONCE_PATH = "/address/{address}/nonce"

# ============================================================================
# Gateway URLs
# ============================================================================

FALLBACK_GATEWAY_MAINNET = "https://gateway.multiversx.com"
FALLBACK_GATEWAY_DEVNET = "https://devnet-gateway.multiversx.com"
FALLBACK_GATEWAY_TESTNET = "https://testnet-gateway.multiversx.com"

# Set MULTIVERSX_<NETWORK>_GATEWAY_URL to use custom endpoints
MAINNET_GATEWAY_URL = os.environ.get("MULTIVERSX_MAINNET_GATEWAY_URL", FALLBACK_GATEWAY_MAINNET)
DEVNET_GATEWAY_URL = os.environ.get("MULTIVERSX_DEVNET_GATEWAY_URL", FALLBACK_GATEWAY_DEVNET)
TESTNET_GATEWAY_URL = os.environ.get("MULTIVERSX_TESTNET_GATEWAY_URL", FALLBACK_GATEWAY_TESTNET)

# Chain IDs
MAINNET_CHAIN_ID = "1"
DEVNET_CHAIN_ID = "D"
TESTNET_CHAIN_ID = "T"

# Used when requirements carry no network
DEFAULT_CHAIN_ID = DEVNET_CHAIN_ID

# CAIP-2 network identifiers (V2)
CAIP_FAMILY = "multiversx:*"
CAIP2_PREFIX = "multiversx:"
MULTIVERSX_MAINNET_CAIP2 = f"{CAIP2_PREFIX}{MAINNET_CHAIN_ID}"
MULTIVERSX_DEVNET_CAIP2 = f"{CAIP2_PREFIX}{DEVNET_CHAIN_ID}"
MULTIVERSX_TESTNET_CAIP2 = f"{CAIP2_PREFIX}{TESTNET_CHAIN_ID}"

# V1 to V2 network identifier mappings (for backwards compatibility)
V1_TO_V2_NETWORK_MAP: dict[str, str] = {
    "multiversx-mainnet": MULTIVERSX_MAINNET_CAIP2,
    "multiversx-devnet": MULTIVERSX_DEVNET_CAIP2,
    "multiversx-testnet": MULTIVERSX_TESTNET_CAIP2,
    # Also support short names
    "mainnet": MULTIVERSX_MAINNET_CAIP2,
    "devnet": MULTIVERSX_DEVNET_CAIP2,
    "testnet": MULTIVERSX_TESTNET_CAIP2,
}

# V2 to V1 network identifier mappings (for backwards compatibility)
V2_TO_V1_NETWORK_MAP: dict[str, str] = {
    MULTIVERSX_MAINNET_CAIP2: "multiversx-mainnet",
    MULTIVERSX_DEVNET_CAIP2: "multiversx-devnet",
    MULTIVERSX_TESTNET_CAIP2: "multiversx-testnet",
}

# V1 supported networks (legacy name-based)
V1_NETWORKS = [
    "multiversx-mainnet",
    "multiversx-devnet",
    "multiversx-testnet",
]

# All supported CAIP-2 networks
SUPPORTED_NETWORKS = [
    MULTIVERSX_MAINNET_CAIP2,
    MULTIVERSX_DEVNET_CAIP2,
    MULTIVERSX_TESTNET_CAIP2,
]

# Simulation statuses reported by the gateway
SIMULATION_STATUS_SUCCESS = "success"

# Error codes
ERR_UNSUPPORTED_SCHEME = "unsupported_scheme"
ERR_NETWORK_MISMATCH = "network_mismatch"
ERR_INVALID_PAYLOAD = "invalid_exact_multiversx_payload"
ERR_MISSING_SIGNATURE = "invalid_exact_multiversx_payload_missing_signature"
ERR_CHAIN_ID_MISMATCH = "invalid_exact_multiversx_payload_chain_id_mismatch"
ERR_INVALID_AMOUNT = "invalid_exact_multiversx_payload_invalid_amount"
ERR_INVALID_TRANSFER_FORMAT = "invalid_exact_multiversx_payload_transfer_format"
ERR_RECIPIENT_MISMATCH = "invalid_exact_multiversx_payload_recipient_mismatch"
ERR_ASSET_MISMATCH = "invalid_exact_multiversx_payload_asset_mismatch"
ERR_AMOUNT_INSUFFICIENT = "invalid_exact_multiversx_payload_amount_insufficient"
ERR_SIMULATION_FAILED = "transaction_simulation_failed"
ERR_TRANSACTION_FAILED = "transaction_failed"
ERR_BROADCASTER_NOT_CONFIGURED = "broadcaster_not_configured"


class AssetInfo(TypedDict):
    """Information about an ESDT token."""

    identifier: str
    name: str
    decimals: int


class NetworkConfig(TypedDict):
    """Configuration for a MultiversX network."""

    gateway_url: str
    chain_id: str
    default_asset: AssetInfo | None


# Network configurations
NETWORK_CONFIGS: dict[str, NetworkConfig] = {
    MULTIVERSX_MAINNET_CAIP2: {
        "gateway_url": MAINNET_GATEWAY_URL,
        "chain_id": MAINNET_CHAIN_ID,
        "default_asset": {
            "identifier": "USDC-c76f1f",
            "name": "USDC",
            "decimals": 6,
        },
    },
    MULTIVERSX_DEVNET_CAIP2: {
        "gateway_url": DEVNET_GATEWAY_URL,
        "chain_id": DEVNET_CHAIN_ID,
        "default_asset": {
            "identifier": "USDC-350c4e",
            "name": "USDC",
            "decimals": 6,
        },
    },
    MULTIVERSX_TESTNET_CAIP2: {
        "gateway_url": TESTNET_GATEWAY_URL,
        "chain_id": TESTNET_CHAIN_ID,
        "default_asset": None,
    },
}

# Chain ID to CAIP-2 mapping
CHAIN_ID_TO_NETWORK: dict[str, str] = {
    config["chain_id"]: network for network, config in NETWORK_CONFIGS.items()
}
