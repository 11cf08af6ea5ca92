"""Test helpers shared by the unit and integration suites."""

from x402.schemas import PaymentPayload, PaymentRequirements

from x402_multiversx.constants import MULTIVERSX_DEVNET_CAIP2, SCHEME_EXACT
from x402_multiversx.types import SimulationResult

# Well-known devnet test wallets
ALICE = "erd1qyu5wthldzr8wx5c9ucg8kjagg0jfs53s8nr3zpz3hypefsdd8ssycr6th"
ALICE_HEX = "0139472eff6886771a982f3083da5d421f24c29181e63888228dc81ca60d69e1"
BOB = "erd1spyavw0956vq68xj8y4tenjpq2wd5a9p2c6j8gsz7ztyrnpxrruqzu66jx"
BOB_HEX = "8049d639e5a6980d1cd2392abcce41029cda74a1563523a202f09641cc2618f8"

TEST_TOKEN = "USDC-350c4e"
FAKE_SIGNATURE = b"\x5a" * 64


def fake_sign(message: bytes) -> bytes:
    return FAKE_SIGNATURE


def make_requirements(
    amount: str = "1000",
    asset: str = "",
    pay_to: str = BOB,
    network: str = MULTIVERSX_DEVNET_CAIP2,
    extra: dict | None = None,
) -> PaymentRequirements:
    return PaymentRequirements(
        scheme=SCHEME_EXACT,
        network=network,
        asset=asset,
        amount=amount,
        pay_to=pay_to,
        max_timeout_seconds=300,
        extra=extra or {},
    )


def make_payload(inner: dict, requirements: PaymentRequirements) -> PaymentPayload:
    return PaymentPayload(x402_version=2, payload=inner, accepted=requirements)


class FakeSimulator:
    """Records simulated envelopes and replays a fixed result."""

    def __init__(self, result: SimulationResult | None = None, error: Exception | None = None):
        self.result = result or SimulationResult(status="success", hash="abc123")
        self.error = error
        self.calls = []

    def simulate_transaction(self, envelope):
        self.calls.append(envelope)
        if self.error is not None:
            raise self.error
        return self.result


class FakeBroadcaster:
    """Records sent envelopes and returns a fixed hash."""

    def __init__(self, tx_hash: str = "f00dbabe", error: Exception | None = None):
        self.tx_hash = tx_hash
        self.error = error
        self.calls = []

    def send_transaction(self, envelope):
        self.calls.append(envelope)
        if self.error is not None:
            raise self.error
        return self.tx_hash


class FakeNetworkProvider:
    """Returns a fixed nonce and records lookups."""

    def __init__(self, nonce: int = 7):
        self.nonce = nonce
        self.calls = []

    def get_nonce(self, address, chain_id):
        self.calls.append((address, chain_id))
        return self.nonce


