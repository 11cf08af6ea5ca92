"""MultiversX signer and network protocol definitions.

Defines the abstract interfaces the schemes depend on:
- ClientMultiversXSigner: Used by x402Client for creating payment payloads.
- NetworkProvider: Used by the client to look up the sender's nonce.
- TransactionSimulator: Used by x402Facilitator to dry-run payments.
- TransactionBroadcaster: Used by x402Facilitator to settle payments.
"""

from typing import Protocol

from .types import SimulationResult, TransactionEnvelope


class ClientMultiversXSigner(Protocol):
    """Protocol for MultiversX client-side signing operations.

    The client signer is responsible for:
    - Providing the sender address
    - Signing the canonical transaction bytes with its Ed25519 key
    """

    @property
    def address(self) -> str:
        """Get the signer's MultiversX address.

        Returns:
            62-character Bech32 address (erd1...).
        """
        ...

    def sign(self, message: bytes) -> bytes:
        """Sign a serialized transaction.

        Args:
            message: Canonical signing bytes of the transaction.

        Returns:
            64-byte Ed25519 signature.
        """
        ...


class NetworkProvider(Protocol):
    """Protocol for account state lookups needed to build a transaction."""

    def get_nonce(self, address: str, chain_id: str) -> int:
        """Get the current nonce of an account.

        Args:
            address: Bech32 account address.
            chain_id: Chain the account lives on.

        Returns:
            The account nonce.

        Raises:
            GatewayError: If the lookup fails.
        """
        ...


class TransactionSimulator(Protocol):
    """Protocol for dry-running signed transactions.

    The node checks the signature, nonce and balances during simulation,
    so a successful simulation is the cryptographic proof of the payment.
    """

    def simulate_transaction(self, envelope: TransactionEnvelope) -> SimulationResult:
        """Simulate a signed transaction without committing it.

        Args:
            envelope: Signed transaction.

        Returns:
            SimulationResult reported by the node.

        Raises:
            GatewayError: If the request fails or the node reports an error.
        """
        ...


class TransactionBroadcaster(Protocol):
    """Protocol for submitting signed transactions."""

    def send_transaction(self, envelope: TransactionEnvelope) -> str:
        """Send a signed transaction to the network.

        Args:
            envelope: Signed transaction.

        Returns:
            Transaction hash.

        Raises:
            GatewayError: If sending fails.
        """
        ...
