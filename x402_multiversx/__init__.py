"""MultiversX mechanism for the x402 Python SDK.

This package provides MultiversX blockchain integration for the x402 payment
protocol. It supports both V2 (CAIP-2 network identifiers) and V1 (legacy
network names) through backward compatibility wrappers.

Features:
- Native EGLD transfers
- ESDT token transfers via MultiESDTNFTTransfer
- Bech32 address validation with full checksum verification
- Verification by node simulation (the node checks the Ed25519 signature)
- Configurable gateway URLs via environment variables

Environment Variables:
    MULTIVERSX_MAINNET_GATEWAY_URL: Custom gateway for mainnet
    MULTIVERSX_DEVNET_GATEWAY_URL: Custom gateway for devnet
    MULTIVERSX_TESTNET_GATEWAY_URL: Custom gateway for testnet

Usage:
    ```python
    from x402 import x402Client
    from x402_multiversx import MULTIVERSX_DEVNET_CAIP2, MultiversXSigner
    from x402_multiversx.exact import ExactMultiversXScheme

    signer = MultiversXSigner.from_pem("wallet.pem")
    client = x402Client()
    client.register(MULTIVERSX_DEVNET_CAIP2, ExactMultiversXScheme(signer))
    ```
"""

# Constants
from .constants import (
    DEFAULT_DECIMALS,
    MULTIVERSX_DEVNET_CAIP2,
    MULTIVERSX_MAINNET_CAIP2,
    MULTIVERSX_TESTNET_CAIP2,
    NATIVE_ASSET,
    NATIVE_DECIMALS,
    NETWORK_CONFIGS,
    SCHEME_EXACT,
    SUPPORTED_NETWORKS,
    V1_NETWORKS,
    V1_TO_V2_NETWORK_MAP,
)

# Errors
from .errors import (
    ChecksumMismatchError,
    GatewayError,
    InvalidAddressError,
    InvalidAmountError,
    InvalidHexError,
    InvalidLengthError,
    InvalidPaddingError,
    InvalidSymbolError,
    MalformedTransferError,
    MissingRecipientError,
    MissingSeparatorError,
    MultiversXError,
)

# Types
from .types import (
    ExactMultiversXPayload,
    ExactMultiversXPayloadV1,
    ExactMultiversXPayloadV2,
    NativeAsset,
    SimulationResult,
    TokenAsset,
    TokenTransfer,
    TransactionEnvelope,
    TransferInstruction,
    classify_asset,
)

# Protocols
from .signer import (
    ClientMultiversXSigner,
    NetworkProvider,
    TransactionBroadcaster,
    TransactionSimulator,
)

# Implementations
from .gateway import GatewayClient
from .signers import MultiversXSigner

# Codecs and utilities
from .bech32 import (
    decode_address,
    decode_bech32,
    encode_address,
    encode_bech32,
    is_valid_address,
)
from .transfer import build_transfer_instruction, decode_transfer, encode_transfer
from .utils import (
    amount_to_hex,
    compare_amounts,
    from_atomic_amount,
    get_chain_id,
    get_network_config,
    hex_to_amount,
    is_sufficient_amount,
    is_valid_network,
    normalize_network,
    parse_amount,
    parse_money_to_decimal,
    to_atomic_amount,
)

# Submodule exports
from . import exact

__all__ = [
    # Constants
    "DEFAULT_DECIMALS",
    "MULTIVERSX_DEVNET_CAIP2",
    "MULTIVERSX_MAINNET_CAIP2",
    "MULTIVERSX_TESTNET_CAIP2",
    "NATIVE_ASSET",
    "NATIVE_DECIMALS",
    "NETWORK_CONFIGS",
    "SCHEME_EXACT",
    "SUPPORTED_NETWORKS",
    "V1_NETWORKS",
    "V1_TO_V2_NETWORK_MAP",
    # Errors
    "ChecksumMismatchError",
    "GatewayError",
    "InvalidAddressError",
    "InvalidAmountError",
    "InvalidHexError",
    "InvalidLengthError",
    "InvalidPaddingError",
    "InvalidSymbolError",
    "MalformedTransferError",
    "MissingRecipientError",
    "MissingSeparatorError",
    "MultiversXError",
    # Types
    "ExactMultiversXPayload",
    "ExactMultiversXPayloadV1",
    "ExactMultiversXPayloadV2",
    "NativeAsset",
    "SimulationResult",
    "TokenAsset",
    "TokenTransfer",
    "TransactionEnvelope",
    "TransferInstruction",
    "classify_asset",
    # Protocols
    "ClientMultiversXSigner",
    "NetworkProvider",
    "TransactionBroadcaster",
    "TransactionSimulator",
    # Implementations
    "GatewayClient",
    "MultiversXSigner",
    # Codecs and utilities
    "amount_to_hex",
    "build_transfer_instruction",
    "compare_amounts",
    "decode_address",
    "decode_bech32",
    "decode_transfer",
    "encode_address",
    "encode_bech32",
    "encode_transfer",
    "from_atomic_amount",
    "get_chain_id",
    "get_network_config",
    "hex_to_amount",
    "is_sufficient_amount",
    "is_valid_address",
    "is_valid_network",
    "normalize_network",
    "parse_amount",
    "parse_money_to_decimal",
    "to_atomic_amount",
    # Submodules
    "exact",
]
