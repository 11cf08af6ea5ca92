"""Registration helpers for MultiversX exact payment schemes.

Each helper wires the V2 scheme (CAIP-2 ids under ``multiversx:``) and, where
the role has one, the V1 wrapper for the legacy ``multiversx-*`` names.
"""

from typing import TYPE_CHECKING, TypeVar

from ..constants import CAIP_FAMILY, V1_NETWORKS

if TYPE_CHECKING:
    from x402 import (
        x402Client,
        x402ClientSync,
        x402Facilitator,
        x402FacilitatorSync,
        x402ResourceServer,
        x402ResourceServerSync,
    )

    from ..signer import (
        ClientMultiversXSigner,
        NetworkProvider,
        TransactionBroadcaster,
        TransactionSimulator,
    )

# Type vars for accepting both async and sync variants
ClientT = TypeVar("ClientT", "x402Client", "x402ClientSync")
ServerT = TypeVar("ServerT", "x402ResourceServer", "x402ResourceServerSync")
FacilitatorT = TypeVar("FacilitatorT", "x402Facilitator", "x402FacilitatorSync")


def _network_list(networks: str | list[str] | None) -> list[str]:
    """Explicit networks as a list, or the ``multiversx:*`` family when none given."""
    if not networks:
        return [CAIP_FAMILY]
    if isinstance(networks, str):
        return [networks]
    return list(networks)


def register_exact_multiversx_client(
    client: ClientT,
    signer: "ClientMultiversXSigner",
    networks: str | list[str] | None = None,
    policies: list | None = None,
    network_provider: "NetworkProvider | None" = None,
    gateway_url: str | None = None,
) -> ClientT:
    """Let a client pay MultiversX requirements with a local key.

    The signer produces the Ed25519 signature over each transfer. Account
    nonces come from ``network_provider``, or from a GatewayClient on
    ``gateway_url`` (per-chain defaults when unset). The same signer and
    nonce source back the V1 wrapper registered for every legacy name.

    Args:
        client: x402Client or x402ClientSync.
        signer: Payer key; its address becomes the transaction sender.
        networks: CAIP-2 id(s) to pay on (default: the whole family).
        policies: Payment policies added after the schemes.
        network_provider: Nonce source.
        gateway_url: Gateway used when no nonce source is given.

    Returns:
        The client, for chaining.
    """
    from .client import ExactMultiversXScheme as ExactMultiversXClientScheme
    from .v1.client import ExactMultiversXSchemeV1 as ExactMultiversXClientSchemeV1

    scheme = ExactMultiversXClientScheme(signer, network_provider, gateway_url)
    for network in _network_list(networks):
        client.register(network, scheme)

    v1_scheme = ExactMultiversXClientSchemeV1(signer, network_provider, gateway_url)
    for network in V1_NETWORKS:
        client.register_v1(network, v1_scheme)

    for policy in policies or []:
        client.register_policy(policy)

    return client


def register_exact_multiversx_server(
    server: ServerT,
    networks: str | list[str] | None = None,
) -> ServerT:
    """Let a resource server advertise MultiversX prices.

    The server scheme only normalizes requirements and converts prices, so
    it needs no keys and no gateway. Legacy V1 servers are not supported.

    Args:
        server: x402ResourceServer or x402ResourceServerSync.
        networks: CAIP-2 id(s) to price on (default: the whole family).

    Returns:
        The server, for chaining.
    """
    from .server import ExactMultiversXScheme as ExactMultiversXServerScheme

    scheme = ExactMultiversXServerScheme()
    for network in _network_list(networks):
        server.register(network, scheme)

    return server


def register_exact_multiversx_facilitator(
    facilitator: FacilitatorT,
    simulator: "TransactionSimulator",
    networks: str | list[str],
    broadcaster: "TransactionBroadcaster | None" = None,
) -> FacilitatorT:
    """Let a facilitator verify and settle MultiversX payments.

    Verification and settlement are split across two collaborators: the
    simulator dry-runs the payer's signed transaction, and the broadcaster
    submits it. A GatewayClient can fill both roles. Without a broadcaster
    the facilitator still verifies, and settle reports
    ``broadcaster_not_configured``. The facilitator never signs.

    Args:
        facilitator: x402Facilitator or x402FacilitatorSync.
        simulator: Dry-runs transactions during verify.
        networks: CAIP-2 id(s) to serve. Required, since a facilitator
            talks to concrete chains.
        broadcaster: Submits transactions during settle.

    Returns:
        The facilitator, for chaining.
    """
    from .facilitator import ExactMultiversXScheme as ExactMultiversXFacilitatorScheme
    from .v1.facilitator import ExactMultiversXSchemeV1 as ExactMultiversXFacilitatorSchemeV1

    facilitator.register(
        [networks] if isinstance(networks, str) else list(networks),
        ExactMultiversXFacilitatorScheme(simulator, broadcaster),
    )
    facilitator.register_v1(
        V1_NETWORKS,
        ExactMultiversXFacilitatorSchemeV1(simulator, broadcaster),
    )

    return facilitator
