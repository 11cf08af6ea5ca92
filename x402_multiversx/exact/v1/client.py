"""V1 client implementation for MultiversX exact payment scheme.

Provides backward compatibility for V1 protocol by wrapping the V2 implementation.
Maps V1 network names (multiversx-mainnet, multiversx-devnet, ...) to V2
CAIP-2 identifiers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from x402.schemas import PaymentRequirements

from ...constants import DEFAULT_MAX_TIMEOUT_SECONDS, SCHEME_EXACT, V1_TO_V2_NETWORK_MAP

if TYPE_CHECKING:
    from ...signer import ClientMultiversXSigner, NetworkProvider


def v1_requirements_to_v2(
    payment_requirements: dict[str, Any],
    network: str | None = None,
) -> PaymentRequirements:
    """Convert V1 payment requirements to V2.

    Maps the V1 network name to CAIP-2 and maxAmountRequired to amount.

    Args:
        payment_requirements: V1 requirements dict (camelCase keys).
        network: Network to use instead of the one in the requirements.

    Returns:
        V2 PaymentRequirements.
    """
    v1_network = network or payment_requirements.get("network", "")
    v2_network = V1_TO_V2_NETWORK_MAP.get(v1_network, v1_network)

    return PaymentRequirements(
        scheme=payment_requirements.get("scheme", SCHEME_EXACT),
        network=v2_network,
        amount=str(payment_requirements.get("maxAmountRequired", "0")),
        pay_to=payment_requirements.get("payTo", ""),
        asset=payment_requirements.get("asset", ""),
        max_timeout_seconds=payment_requirements.get(
            "maxTimeoutSeconds", DEFAULT_MAX_TIMEOUT_SECONDS
        ),
        extra=payment_requirements.get("extra"),
    )


class ExactMultiversXSchemeV1:
    """V1 client implementation for MultiversX exact payment scheme.

    Wraps V2 ExactMultiversXScheme with V1 network name support and
    field name mapping (maxAmountRequired -> amount).

    This implements SchemeNetworkClientV1 protocol.

    Attributes:
        scheme: The scheme identifier ("exact").
    """

    scheme = SCHEME_EXACT

    def __init__(
        self,
        signer: "ClientMultiversXSigner",
        network_provider: "NetworkProvider | None" = None,
        gateway_url: str | None = None,
    ):
        """Create ExactMultiversXSchemeV1.

        Args:
            signer: MultiversX signer for payment authorizations.
            network_provider: Nonce source (default: GatewayClient).
            gateway_url: Optional custom gateway URL.
        """
        from ..client import ExactMultiversXScheme

        self._v2_scheme = ExactMultiversXScheme(signer, network_provider, gateway_url)

    def create_payment_payload(
        self,
        payment_requirements: dict[str, Any],
    ) -> dict[str, Any]:
        """Create payment payload for V1 protocol.

        Args:
            payment_requirements: V1 payment requirements dict with:
                - scheme: str
                - network: str (V1 network name)
                - maxAmountRequired: str
                - payTo: str
                - asset: str
                - extra: dict | None

        Returns:
            V1 payment payload dict (the signed transaction fields).
        """
        return self._v2_scheme.create_payment_payload(
            v1_requirements_to_v2(payment_requirements)
        )
