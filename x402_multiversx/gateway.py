"""MultiversX gateway client.

Implements the NetworkProvider, TransactionSimulator and
TransactionBroadcaster protocols against the public gateway REST API.
Every gateway response is wrapped as {"data": ..., "error": "", "code": ...}.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .constants import (
    CHAIN_ID_TO_NETWORK,
    DEFAULT_TIMEOUT,
    NETWORK_CONFIGS,
    NONCE_PATH,
    SEND_PATH,
    SIMULATE_PATH,
)
from .errors import GatewayError
from .types import SimulationResult, TransactionEnvelope

logger = logging.getLogger(__name__)


class GatewayClient:
    """Synchronous client for a MultiversX gateway (proxy).

    Implements NetworkProvider, TransactionSimulator and
    TransactionBroadcaster protocols.

    Example:
        ```python
        gateway = GatewayClient()
        facilitator = x402Facilitator()
        facilitator.register([MULTIVERSX_DEVNET_CAIP2], ExactMultiversXScheme(gateway, gateway))
        ```
    """

    def __init__(
        self,
        gateway_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        """Create gateway client.

        Args:
            gateway_url: Custom gateway URL used for every chain (optional).
                Without it, the URL is taken from NETWORK_CONFIGS by chain ID.
            timeout: Request timeout in seconds.
            client: Preconfigured httpx client (optional).
        """
        self._custom_gateway_url = gateway_url.rstrip("/") if gateway_url else None
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_gateway_url(self, chain_id: str) -> str:
        """Resolve the gateway URL for a chain.

        Raises:
            ValueError: If no custom URL is set and the chain is unknown.
        """
        if self._custom_gateway_url:
            return self._custom_gateway_url

        network = CHAIN_ID_TO_NETWORK.get(chain_id)
        if not network:
            raise ValueError(f"No gateway configured for chain ID: {chain_id!r}")
        return NETWORK_CONFIGS[network]["gateway_url"].rstrip("/")

    def _request(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        logger.debug("Gateway request %s %s", method, url)
        try:
            response = self._client.request(method, url, json=body)
        except httpx.HTTPError as e:
            raise GatewayError(f"Gateway request failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            payload = {}

        error = payload.get("error") or ""
        code = payload.get("code") or None

        if response.is_error:
            reason = f"Gateway returned status {response.status_code}"
            if error:
                reason = f"{reason}: {error}"
            raise GatewayError(reason, status_code=response.status_code, code=code)

        if error:
            raise GatewayError(error, status_code=response.status_code, code=code)

        data = payload.get("data")
        if not isinstance(data, dict):
            raise GatewayError(
                "Gateway response has no data", status_code=response.status_code, code=code
            )
        return data

    def get_nonce(self, address: str, chain_id: str) -> int:
        """Get the current nonce of an account."""
        url = self.get_gateway_url(chain_id) + NONCE_PATH.format(address=address)
        data = self._request("GET", url)
        nonce = data.get("nonce")
        if isinstance(nonce, bool) or not isinstance(nonce, int):
            raise GatewayError(f"Gateway returned invalid nonce: {nonce!r}")
        return nonce

    def simulate_transaction(self, envelope: TransactionEnvelope) -> SimulationResult:
        """Simulate a signed transaction on the envelope's chain."""
        url = self.get_gateway_url(envelope.chain_id) + SIMULATE_PATH
        data = self._request("POST", url, envelope.to_gateway_dict())
        result = SimulationResult.from_dict(data.get("result") or {})
        logger.debug("Simulation status=%s hash=%s", result.status, result.hash)
        return result

    def send_transaction(self, envelope: TransactionEnvelope) -> str:
        """Send a signed transaction and return its hash."""
        url = self.get_gateway_url(envelope.chain_id) + SEND_PATH
        data = self._request("POST", url, envelope.to_gateway_dict())
        tx_hash = data.get("txHash")
        if not isinstance(tx_hash, str) or not tx_hash:
            raise GatewayError("Gateway response has no transaction hash")
        logger.debug("Sent transaction %s", tx_hash)
        return tx_hash
