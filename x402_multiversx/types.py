"""MultiversX mechanism types - transaction envelope, transfers, asset variants."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field, replace
from typing import Any, Union

from .constants import NATIVE_ASSET, SIMULATION_STATUS_SUCCESS


@dataclass(frozen=True)
class TransactionEnvelope:
    """A MultiversX transaction as exchanged between client and facilitator.

    Immutable: signing produces a new envelope via with_signature().

    Attributes:
        nonce: Sender account nonce.
        value: Native amount in atomic units, as a decimal string.
        receiver: Bech32 receiver address.
        sender: Bech32 sender address.
        gas_price: Gas price in atomic EGLD.
        gas_limit: Gas limit.
        data: Raw instruction text (empty for plain native transfers).
        chain_id: Chain identifier ("1", "D", "T").
        version: Transaction version.
        signature: Hex-encoded Ed25519 signature (empty until signed).
    """

    nonce: int
    value: str
    receiver: str
    sender: str
    gas_price: int
    gas_limit: int
    data: str = ""
    chain_id: str = ""
    version: int = 1
    signature: str = ""

    @property
    def is_signed(self) -> bool:
        return bool(self.signature)

    def with_signature(self, signature: str) -> "TransactionEnvelope":
        """Return a copy carrying the given hex signature."""
        return replace(self, signature=signature)

    def encoded_data(self) -> str:
        """Base64 form of the data field, as the node expects it."""
        return base64.b64encode(self.data.encode("utf-8")).decode("ascii")

    def to_signable_dict(self) -> dict[str, Any]:
        """Fields covered by the signature, in the chain's canonical order.

        The data field is base64-encoded and omitted when empty.
        """
        fields: dict[str, Any] = {
            "nonce": self.nonce,
            "value": self.value,
            "receiver": self.receiver,
            "sender": self.sender,
            "gasPrice": self.gas_price,
            "gasLimit": self.gas_limit,
        }
        if self.data:
            fields["data"] = self.encoded_data()
        fields["chainID"] = self.chain_id
        fields["version"] = self.version
        return fields

    def serialize_for_signing(self) -> bytes:
        """Canonical bytes the sender signs (compact JSON, no signature)."""
        return json.dumps(self.to_signable_dict(), separators=(",", ":")).encode("utf-8")

    def to_gateway_dict(self) -> dict[str, Any]:
        """Body for the gateway's simulate and send endpoints."""
        body = self.to_signable_dict()
        body["signature"] = self.signature
        return body

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with camelCase keys for JSON.
        """
        return {
            "nonce": self.nonce,
            "value": self.value,
            "receiver": self.receiver,
            "sender": self.sender,
            "gasPrice": self.gas_price,
            "gasLimit": self.gas_limit,
            "data": self.data,
            "chainID": self.chain_id,
            "version": self.version,
            "signature": self.signature,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransactionEnvelope":
        """Create from dictionary.

        Args:
            data: Dictionary with envelope fields (camelCase keys).

        Returns:
            TransactionEnvelope instance.

        Raises:
            ValueError: If a required field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a transaction object, got {type(data).__name__}")

        try:
            return cls(
                nonce=_as_int(data["nonce"], "nonce"),
                value=str(data["value"]),
                receiver=_as_str(data["receiver"], "receiver"),
                sender=_as_str(data["sender"], "sender"),
                gas_price=_as_int(data["gasPrice"], "gasPrice"),
                gas_limit=_as_int(data["gasLimit"], "gasLimit"),
                data=_as_str(data.get("data") or "", "data"),
                chain_id=_as_str(data["chainID"], "chainID"),
                version=_as_int(data["version"], "version"),
                signature=_as_str(data.get("signature") or "", "signature"),
            )
        except KeyError as e:
            raise ValueError(f"Missing transaction field: {e.args[0]}") from e


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field {name} must be an integer")
    return value


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Field {name} must be a string")
    return value


# The x402 payload for the exact scheme is the signed envelope itself
ExactMultiversXPayload = TransactionEnvelope

# Type aliases for V1/V2 compatibility
ExactMultiversXPayloadV1 = ExactMultiversXPayload
ExactMultiversXPayloadV2 = ExactMultiversXPayload


@dataclass(frozen=True)
class TokenTransfer:
    """One token movement inside a multi-transfer instruction.

    Attributes:
        token_identifier: ESDT identifier (e.g. "USDC-c76f1f").
        nonce: Token nonce; 0 for fungible tokens.
        amount: Atomic amount.
    """

    token_identifier: str
    nonce: int
    amount: int


@dataclass(frozen=True)
class TransferInstruction:
    """Decoded MultiESDTNFTTransfer call.

    Attributes:
        destination: Raw 32-byte public key of the recipient.
        transfers: Token movements, in order.
        reference: Optional trailing reference bytes (e.g. a resource id).
    """

    destination: bytes
    transfers: list[TokenTransfer] = field(default_factory=list)
    reference: bytes | None = None

    @property
    def count(self) -> int:
        return len(self.transfers)


@dataclass(frozen=True)
class NativeAsset:
    """The chain's native currency (EGLD), moved through the value field."""

    @property
    def identifier(self) -> str:
        return NATIVE_ASSET


@dataclass(frozen=True)
class TokenAsset:
    """An ESDT token, moved through a MultiESDTNFTTransfer call."""

    identifier: str


Asset = Union[NativeAsset, TokenAsset]


def classify_asset(asset: str | None) -> Asset:
    """Classify an asset string from payment requirements.

    Empty and "EGLD" denote the native currency. Every other string is a
    token identifier, including "EGLD-000000".
    """
    if not asset or asset == NATIVE_ASSET:
        return NativeAsset()
    return TokenAsset(asset)


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of a gateway transaction simulation.

    Attributes:
        status: Execution status reported by the node.
        hash: Transaction hash computed by the node.
        error: Node error message, if any.
    """

    status: str
    hash: str = ""
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SIMULATION_STATUS_SUCCESS and not self.error

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulationResult":
        """Create from the gateway's simulation result object."""
        return cls(
            status=str(data.get("status", "")),
            hash=str(data.get("hash", "")),
            error=data.get("failReason") or None,
        )
