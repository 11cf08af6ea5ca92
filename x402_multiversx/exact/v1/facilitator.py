"""V1 facilitator implementation for MultiversX exact payment scheme.

Provides backward compatibility for V1 protocol by wrapping the V2 implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from x402.schemas import PaymentPayload, PaymentRequirements

from ...constants import SCHEME_EXACT, V1_TO_V2_NETWORK_MAP, V2_TO_V1_NETWORK_MAP
from .client import v1_requirements_to_v2

if TYPE_CHECKING:
    from ...signer import TransactionBroadcaster, TransactionSimulator


class ExactMultiversXSchemeV1:
    """V1 facilitator implementation for MultiversX exact payment scheme.

    Wraps V2 ExactMultiversXScheme with V1 network name support and
    field name mapping.

    This implements SchemeNetworkFacilitatorV1 protocol.

    Attributes:
        scheme: The scheme identifier ("exact").
    """

    scheme = SCHEME_EXACT

    def __init__(
        self,
        simulator: "TransactionSimulator",
        broadcaster: "TransactionBroadcaster | None" = None,
    ):
        """Create ExactMultiversXSchemeV1.

        Args:
            simulator: Dry-runs transactions during verification.
            broadcaster: Submits transactions on settlement (optional).
        """
        from ..facilitator import ExactMultiversXScheme

        self._v2_scheme = ExactMultiversXScheme(simulator, broadcaster)

    def get_signers(self, network: str) -> list[str]:
        """Get facilitator wallet addresses (none for MultiversX)."""
        v2_network = V1_TO_V2_NETWORK_MAP.get(network, network)
        return self._v2_scheme.get_signers(v2_network)

    def _to_v2(
        self,
        payload: dict[str, Any],
        payment_requirements: dict[str, Any],
    ) -> tuple[PaymentPayload, PaymentRequirements]:
        v2_requirements = v1_requirements_to_v2(payment_requirements)

        # V1 payloads carry scheme and network at the top level
        v2_accepted = v1_requirements_to_v2(
            {**payment_requirements, "scheme": payload.get("scheme", SCHEME_EXACT)},
            network=payload.get("network", ""),
        )

        v2_payload = PaymentPayload(
            x402_version=1,
            payload=payload.get("payload", {}),
            accepted=v2_accepted,
        )
        return v2_payload, v2_requirements

    def verify(
        self,
        payload: dict[str, Any],
        payment_requirements: dict[str, Any],
    ) -> dict[str, Any]:
        """Verify payment payload for V1 protocol.

        Args:
            payload: V1 payment payload dict.
            payment_requirements: V1 payment requirements dict.

        Returns:
            V1 verify response dict.
        """
        v2_payload, v2_requirements = self._to_v2(payload, payment_requirements)
        result = self._v2_scheme.verify(v2_payload, v2_requirements)

        return {
            "isValid": result.is_valid,
            "invalidReason": result.invalid_reason,
            "payer": result.payer,
        }

    def settle(
        self,
        payload: dict[str, Any],
        payment_requirements: dict[str, Any],
    ) -> dict[str, Any]:
        """Settle payment for V1 protocol.

        Args:
            payload: V1 payment payload dict.
            payment_requirements: V1 payment requirements dict.

        Returns:
            V1 settle response dict.
        """
        v2_payload, v2_requirements = self._to_v2(payload, payment_requirements)
        result = self._v2_scheme.settle(v2_payload, v2_requirements)

        response_network = V2_TO_V1_NETWORK_MAP.get(result.network, result.network)

        return {
            "success": result.success,
            "errorReason": result.error_reason,
            "transaction": result.transaction,
            "network": response_network,
            "payer": result.payer,
        }
