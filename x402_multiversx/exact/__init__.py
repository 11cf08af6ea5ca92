"""Exact payment scheme for MultiversX.

Provides client, server, and facilitator implementations
for the exact payment scheme on MultiversX networks.

Usage:
    ```python
    from x402_multiversx import GatewayClient, MultiversXSigner
    from x402_multiversx.exact import (
        register_exact_multiversx_client,
        register_exact_multiversx_facilitator,
    )

    # Client-side: sign payments with a wallet key
    signer = MultiversXSigner.from_pem(os.environ["MULTIVERSX_PEM"])
    client = x402Client()
    register_exact_multiversx_client(client, signer)

    # Facilitator-side: the gateway simulates and broadcasts
    gateway = GatewayClient()
    facilitator = x402Facilitator()
    register_exact_multiversx_facilitator(
        facilitator, gateway, ["multiversx:D"], broadcaster=gateway
    )
    ```
"""

# Client scheme
from .client import ExactMultiversXScheme as ExactMultiversXClientScheme
from .client import build_transaction_envelope

# Server scheme
from .server import ExactMultiversXScheme as ExactMultiversXServerScheme
from .server import normalize_requirements

# Facilitator scheme
from .facilitator import ExactMultiversXScheme as ExactMultiversXFacilitatorScheme

# Registration helpers
from .register import (
    register_exact_multiversx_client,
    register_exact_multiversx_facilitator,
    register_exact_multiversx_server,
)

# V1 compatibility
from . import v1

# For convenience, export the main scheme class
# (use the appropriate import for client/server/facilitator)
ExactMultiversXScheme = ExactMultiversXClientScheme

__all__ = [
    # Schemes
    "ExactMultiversXScheme",
    "ExactMultiversXClientScheme",
    "ExactMultiversXServerScheme",
    "ExactMultiversXFacilitatorScheme",
    # Operations
    "build_transaction_envelope",
    "normalize_requirements",
    # Registration helpers
    "register_exact_multiversx_client",
    "register_exact_multiversx_server",
    "register_exact_multiversx_facilitator",
    # V1 compatibility
    "v1",
]
