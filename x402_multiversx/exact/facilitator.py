"""MultiversX facilitator implementation for the Exact payment scheme (V2).

Verifies payments by simulating the signed transaction on a node and
cross-checking its fields against the requirements, then settles by
broadcasting the same transaction.
"""

from __future__ import annotations

import logging
from typing import Any

from x402.schemas import (
    Network,
    PaymentPayload,
    PaymentRequirements,
    SettleResponse,
    VerifyResponse,
)

from ..bech32 import decode_address
from ..constants import (
    CAIP_FAMILY,
    ERR_AMOUNT_INSUFFICIENT,
    ERR_ASSET_MISMATCH,
    ERR_BROADCASTER_NOT_CONFIGURED,
    ERR_CHAIN_ID_MISMATCH,
    ERR_INVALID_AMOUNT,
    ERR_INVALID_PAYLOAD,
    ERR_INVALID_TRANSFER_FORMAT,
    ERR_MISSING_SIGNATURE,
    ERR_NETWORK_MISMATCH,
    ERR_RECIPIENT_MISMATCH,
    ERR_SIMULATION_FAILED,
    ERR_TRANSACTION_FAILED,
    ERR_UNSUPPORTED_SCHEME,
    FUNGIBLE_TOKEN_NONCE,
    SCHEME_EXACT,
)
from ..errors import InvalidAddressError, InvalidAmountError, MalformedTransferError
from ..signer import TransactionBroadcaster, TransactionSimulator
from ..transfer import decode_transfer
from ..types import (
    ExactMultiversXPayload,
    NativeAsset,
    TokenAsset,
    TransactionEnvelope,
    classify_asset,
)
from ..utils import get_chain_id, is_sufficient_amount, parse_amount

logger = logging.getLogger(__name__)


def _invalid(reason: str, message: str, payer: str = "") -> VerifyResponse:
    return VerifyResponse(
        is_valid=False,
        invalid_reason=reason,
        invalid_message=message,
        payer=payer,
    )


class ExactMultiversXScheme:
    """MultiversX facilitator implementation for the Exact payment scheme (V2).

    The node's simulation is the signature oracle: it checks the Ed25519
    signature, nonce and balances. This scheme then checks that the
    simulated transaction actually pays what the requirements ask for.

    Attributes:
        scheme: The scheme identifier ("exact").
        caip_family: The CAIP family pattern ("multiversx:*").
    """

    scheme = SCHEME_EXACT
    caip_family = CAIP_FAMILY

    def __init__(
        self,
        simulator: TransactionSimulator,
        broadcaster: TransactionBroadcaster | None = None,
    ):
        """Create ExactMultiversXScheme facilitator.

        Args:
            simulator: Dry-runs signed transactions for verification.
            broadcaster: Submits transactions on settlement (optional;
                settle fails without one).
        """
        self._simulator = simulator
        self._broadcaster = broadcaster

    def get_extra(self, network: Network) -> dict[str, Any] | None:
        """Get mechanism-specific extra data for the supported kinds endpoint.

        The payer signs and pays its own gas, so there is nothing to add.
        """
        _ = network
        return None

    def get_signers(self, network: Network) -> list[str]:
        """Get facilitator wallet addresses (none: the facilitator holds no key)."""
        _ = network
        return []

    def verify(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> VerifyResponse:
        """Verify a MultiversX payment payload.

        1. Parse the signed transaction and check scheme and network
        2. Require a signature and the chain ID of the required network
        3. Simulate the transaction on the node
        4. Native EGLD: receiver is payTo and value covers the amount
        5. ESDT: data is a single MultiESDTNFTTransfer from the sender to
           itself, moving the required token to payTo, covering the amount

        Args:
            payload: Payment payload from client.
            requirements: Payment requirements.

        Returns:
            VerifyResponse with is_valid and payer. Never raises.
        """
        try:
            envelope = ExactMultiversXPayload.from_dict(payload.payload)
        except ValueError as e:
            return _invalid(ERR_INVALID_PAYLOAD, str(e))

        payer = envelope.sender

        # Step 1: Validate scheme and network
        if payload.accepted.scheme != SCHEME_EXACT or requirements.scheme != SCHEME_EXACT:
            return _invalid(
                ERR_UNSUPPORTED_SCHEME,
                f"Unsupported scheme: {payload.accepted.scheme}",
                payer,
            )

        if str(payload.accepted.network) != str(requirements.network):
            return _invalid(
                ERR_NETWORK_MISMATCH,
                f"Payload network {payload.accepted.network} does not match {requirements.network}",
                payer,
            )

        # Step 2: Signature and chain
        if not envelope.is_signed:
            return _invalid(ERR_MISSING_SIGNATURE, "Transaction is not signed", payer)

        try:
            expected_chain_id = get_chain_id(str(requirements.network))
        except ValueError as e:
            return _invalid(ERR_NETWORK_MISMATCH, str(e), payer)

        if envelope.chain_id != expected_chain_id:
            return _invalid(
                ERR_CHAIN_ID_MISMATCH,
                f"Transaction chain ID {envelope.chain_id!r} does not match {expected_chain_id!r}",
                payer,
            )

        # Step 3: Simulate
        try:
            result = self._simulator.simulate_transaction(envelope)
        except Exception as e:
            logger.warning("Simulation request failed for %s: %s", payer, e)
            return _invalid(ERR_SIMULATION_FAILED, str(e), payer)

        if not result.succeeded:
            message = result.error or f"Simulation status: {result.status or 'unknown'}"
            logger.warning("Simulation rejected transaction from %s: %s", payer, message)
            return _invalid(ERR_SIMULATION_FAILED, message, payer)

        # Step 4/5: Cross-check fields
        try:
            required_amount = parse_amount(requirements.amount)
        except InvalidAmountError as e:
            return _invalid(ERR_INVALID_AMOUNT, f"Required amount: {e}", payer)

        asset = classify_asset(requirements.asset)
        if isinstance(asset, NativeAsset):
            rejection = self._check_native(envelope, requirements, required_amount)
        else:
            rejection = self._check_token(envelope, requirements, asset, required_amount)

        if rejection is not None:
            return rejection

        logger.info("Verified %s payment from %s", asset.identifier, payer)
        return VerifyResponse(is_valid=True, payer=payer)

    def _check_native(
        self,
        envelope: TransactionEnvelope,
        requirements: PaymentRequirements,
        required_amount: int,
    ) -> VerifyResponse | None:
        payer = envelope.sender

        if envelope.receiver != requirements.pay_to:
            return _invalid(
                ERR_RECIPIENT_MISMATCH,
                f"Receiver {envelope.receiver} does not match payTo {requirements.pay_to}",
                payer,
            )

        try:
            paid = parse_amount(envelope.value)
        except InvalidAmountError as e:
            return _invalid(ERR_INVALID_AMOUNT, f"Transaction value: {e}", payer)

        if not is_sufficient_amount(paid, required_amount):
            return _invalid(
                ERR_AMOUNT_INSUFFICIENT,
                f"Value {paid} is less than required {required_amount}",
                payer,
            )

        return None

    def _check_token(
        self,
        envelope: TransactionEnvelope,
        requirements: PaymentRequirements,
        asset: TokenAsset,
        required_amount: int,
    ) -> VerifyResponse | None:
        payer = envelope.sender

        try:
            instruction = decode_transfer(envelope.data)
        except MalformedTransferError as e:
            return _invalid(ERR_INVALID_TRANSFER_FORMAT, str(e), payer)

        if instruction.count != 1:
            return _invalid(
                ERR_INVALID_TRANSFER_FORMAT,
                f"Expected a single transfer, got {instruction.count}",
                payer,
            )

        # Multi-transfers are sent to the sender's own account
        if envelope.receiver != envelope.sender:
            return _invalid(
                ERR_INVALID_TRANSFER_FORMAT,
                "Token transfer must be addressed to the sender",
                payer,
            )

        transfer = instruction.transfers[0]
        if transfer.token_identifier != asset.identifier:
            return _invalid(
                ERR_ASSET_MISMATCH,
                f"Token {transfer.token_identifier} does not match {asset.identifier}",
                payer,
            )

        if transfer.nonce != FUNGIBLE_TOKEN_NONCE:
            return _invalid(
                ERR_ASSET_MISMATCH,
                f"Expected a fungible transfer, got token nonce {transfer.nonce}",
                payer,
            )

        try:
            expected_destination = decode_address(requirements.pay_to)
        except InvalidAddressError as e:
            return _invalid(ERR_RECIPIENT_MISMATCH, f"Invalid payTo: {e}", payer)

        if instruction.destination != expected_destination:
            return _invalid(
                ERR_RECIPIENT_MISMATCH,
                "Transfer destination does not match payTo",
                payer,
            )

        if not is_sufficient_amount(transfer.amount, required_amount):
            return _invalid(
                ERR_AMOUNT_INSUFFICIENT,
                f"Amount {transfer.amount} is less than required {required_amount}",
                payer,
            )

        return None

    def settle(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> SettleResponse:
        """Settle a MultiversX payment on-chain.

        - Re-verifies payment
        - Sends the signed transaction through the broadcaster

        Args:
            payload: Verified payment payload.
            requirements: Payment requirements.

        Returns:
            SettleResponse with success, transaction, and payer.
        """
        network = str(payload.accepted.network)

        verify_result = self.verify(payload, requirements)
        if not verify_result.is_valid:
            return SettleResponse(
                success=False,
                error_reason=verify_result.invalid_reason,
                error_message=verify_result.invalid_message,
                network=network,
                payer=verify_result.payer,
                transaction="",
            )

        payer = verify_result.payer or ""
        if self._broadcaster is None:
            return SettleResponse(
                success=False,
                error_reason=ERR_BROADCASTER_NOT_CONFIGURED,
                error_message="No transaction broadcaster configured",
                network=network,
                payer=payer,
                transaction="",
            )

        envelope = TransactionEnvelope.from_dict(payload.payload)
        try:
            tx_hash = self._broadcaster.send_transaction(envelope)
        except Exception as e:
            logger.warning("Broadcast failed for %s: %s", payer, e)
            return SettleResponse(
                success=False,
                error_reason=ERR_TRANSACTION_FAILED,
                error_message=str(e),
                network=network,
                payer=payer,
                transaction="",
            )

        logger.info("Settled payment from %s in %s", payer, tx_hash)
        return SettleResponse(
            success=True,
            transaction=tx_hash,
            network=network,
            payer=payer,
        )
