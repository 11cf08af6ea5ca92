"""MultiversX client implementation for the Exact payment scheme (V2).

Builds and signs a single transaction paying the resource server, either
as a plain EGLD transfer or as a MultiESDTNFTTransfer for ESDT tokens.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from x402.schemas import PaymentRequirements

from ..bech32 import decode_address
from ..constants import (
    DEFAULT_GAS_LIMIT,
    DEFAULT_GAS_PRICE,
    MULTI_TRANSFER_GAS_LIMIT,
    SCHEME_EXACT,
    TX_VERSION,
)
from ..errors import MissingRecipientError
from ..signer import ClientMultiversXSigner, NetworkProvider
from ..transfer import build_transfer_instruction, encode_transfer
from ..types import NativeAsset, TransactionEnvelope, classify_asset
from ..utils import get_chain_id, parse_amount

# Signs canonical transaction bytes, returning the raw signature
SignFunc = Callable[[bytes], bytes]


def _require_pay_to(requirements: PaymentRequirements) -> str:
    pay_to = requirements.pay_to
    if not pay_to:
        raise MissingRecipientError("Payment requirements have no payTo address")
    return pay_to


def _resource_reference(requirements: PaymentRequirements) -> bytes | None:
    extra = requirements.extra or {}
    resource_id = extra.get("resourceId")
    if isinstance(resource_id, str) and resource_id:
        return resource_id.encode("utf-8")
    return None


def build_transaction_envelope(
    requirements: PaymentRequirements,
    sender: str,
    nonce: int,
    sign: SignFunc,
) -> TransactionEnvelope:
    """Build and sign the payment transaction for the given requirements.

    Native EGLD goes straight to payTo through the value field. Tokens are
    sent by the sender to itself with a MultiESDTNFTTransfer call naming
    payTo as destination; extra["resourceId"] is appended as reference.

    Args:
        requirements: Payment requirements from server.
        sender: Payer's Bech32 address.
        nonce: Payer's current account nonce.
        sign: Signs the canonical transaction bytes.

    Returns:
        Signed TransactionEnvelope.

    Raises:
        MissingRecipientError: If payTo is empty.
        ValueError: If the network is not recognized.
        InvalidAddressError: If payTo is not a valid address.
        InvalidAmountError: If the amount does not parse.
    """
    pay_to = _require_pay_to(requirements)
    chain_id = get_chain_id(str(requirements.network or ""))
    destination = decode_address(pay_to)
    asset = classify_asset(requirements.asset)

    if isinstance(asset, NativeAsset):
        envelope = TransactionEnvelope(
            nonce=nonce,
            value=str(parse_amount(requirements.amount)),
            receiver=pay_to,
            sender=sender,
            gas_price=DEFAULT_GAS_PRICE,
            gas_limit=DEFAULT_GAS_LIMIT,
            data="",
            chain_id=chain_id,
            version=TX_VERSION,
        )
    else:
        instruction = build_transfer_instruction(
            destination,
            asset.identifier,
            requirements.amount,
            reference=_resource_reference(requirements),
        )
        envelope = TransactionEnvelope(
            nonce=nonce,
            value="0",
            receiver=sender,
            sender=sender,
            gas_price=DEFAULT_GAS_PRICE,
            gas_limit=MULTI_TRANSFER_GAS_LIMIT,
            data=encode_transfer(instruction),
            chain_id=chain_id,
            version=TX_VERSION,
        )

    signature = sign(envelope.serialize_for_signing())
    return envelope.with_signature(signature.hex())


class ExactMultiversXScheme:
    """MultiversX client implementation for the Exact payment scheme (V2).

    Implements SchemeNetworkClient protocol. Returns the inner payload dict,
    which x402Client wraps into a full PaymentPayload.

    Attributes:
        scheme: The scheme identifier ("exact").
    """

    scheme = SCHEME_EXACT

    def __init__(
        self,
        signer: ClientMultiversXSigner,
        network_provider: NetworkProvider | None = None,
        gateway_url: str | None = None,
    ):
        """Create ExactMultiversXScheme.

        Args:
            signer: MultiversX signer for payment authorizations.
            network_provider: Nonce source (default: GatewayClient).
            gateway_url: Optional custom gateway URL for the default provider.
        """
        self._signer = signer
        self._network_provider = network_provider
        self._gateway_url = gateway_url

    def _get_network_provider(self) -> NetworkProvider:
        if self._network_provider is None:
            from ..gateway import GatewayClient

            self._network_provider = GatewayClient(self._gateway_url)
        return self._network_provider

    def create_payment_payload(
        self,
        requirements: PaymentRequirements,
    ) -> dict[str, Any]:
        """Create a signed payment transaction.

        Args:
            requirements: Payment requirements from server.

        Returns:
            Inner payload dict (the signed transaction fields).
            x402Client wraps this with x402_version, accepted, resource, extensions.

        Raises:
            MissingRecipientError: If payTo is empty.
            ValueError: If network is unsupported.
            GatewayError: If the nonce lookup fails.
        """
        _require_pay_to(requirements)
        chain_id = get_chain_id(str(requirements.network or ""))
        sender = self._signer.address

        nonce = self._get_network_provider().get_nonce(sender, chain_id)
        envelope = build_transaction_envelope(requirements, sender, nonce, self._signer.sign)
        return envelope.to_dict()
