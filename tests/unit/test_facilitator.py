"""Unit tests for the MultiversX exact facilitator scheme."""

from dataclasses import replace

from helpers import (
    ALICE,
    ALICE_HEX,
    BOB,
    BOB_HEX,
    TEST_TOKEN,
    FakeBroadcaster,
    FakeSimulator,
    fake_sign,
    make_payload,
    make_requirements,
)

from x402_multiversx.constants import (
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
    MULTIVERSX_DEVNET_CAIP2,
    MULTIVERSX_MAINNET_CAIP2,
)
from x402_multiversx.errors import GatewayError
from x402_multiversx.exact.client import build_transaction_envelope
from x402_multiversx.exact.facilitator import ExactMultiversXScheme
from x402_multiversx.transfer import encode_transfer
from x402_multiversx.types import (
    SimulationResult,
    TokenTransfer,
    TransactionEnvelope,
    TransferInstruction,
)


def signed_envelope(requirements, nonce: int = 7) -> TransactionEnvelope:
    return build_transaction_envelope(requirements, ALICE, nonce, fake_sign)


def token_envelope(instruction: TransferInstruction, **overrides) -> TransactionEnvelope:
    requirements = make_requirements(asset=TEST_TOKEN)
    envelope = replace(signed_envelope(requirements), data=encode_transfer(instruction))
    return replace(envelope, **overrides) if overrides else envelope


def verify(scheme, envelope, requirements, accepted=None):
    payload = make_payload(envelope.to_dict(), accepted or requirements)
    return scheme.verify(payload, requirements)


class TestExactMultiversXSchemeConstructor:
    """Test ExactMultiversXScheme (facilitator) constructor."""

    def test_should_create_instance_with_correct_scheme(self, simulator):
        """Should create instance with correct scheme."""
        facilitator = ExactMultiversXScheme(simulator)
        assert facilitator.scheme == "exact"
        assert facilitator.caip_family == "multiversx:*"

    def test_get_extra_and_signers(self, simulator):
        """Test the facilitator advertises no extra data or signers."""
        facilitator = ExactMultiversXScheme(simulator)
        assert facilitator.get_extra(MULTIVERSX_DEVNET_CAIP2) is None
        assert facilitator.get_signers(MULTIVERSX_DEVNET_CAIP2) == []


class TestVerifyEnvelope:
    """Tests for payload, scheme, network and signature checks."""

    def test_valid_native_payment(self, simulator):
        """Test a correct EGLD payment."""
        requirements = make_requirements(amount="1000")
        envelope = signed_envelope(requirements)

        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)

        assert result.is_valid
        assert result.payer == ALICE
        assert simulator.calls == [envelope]

    def test_invalid_payload(self, simulator):
        """Test a payload that is not a transaction."""
        requirements = make_requirements()
        payload = make_payload({"nonce": 1}, requirements)

        result = ExactMultiversXScheme(simulator).verify(payload, requirements)

        assert not result.is_valid
        assert result.invalid_reason == ERR_INVALID_PAYLOAD
        assert simulator.calls == []

    def test_unsupported_scheme(self, simulator):
        """Test requirements for another scheme."""
        requirements = make_requirements()
        envelope = signed_envelope(requirements)
        other = requirements.model_copy(update={"scheme": "upto"})

        result = verify(ExactMultiversXScheme(simulator), envelope, other, accepted=other)

        assert result.invalid_reason == ERR_UNSUPPORTED_SCHEME
        assert result.payer == ALICE

    def test_network_mismatch(self, simulator):
        """Test payload accepted for another network."""
        requirements = make_requirements()
        accepted = make_requirements(network=MULTIVERSX_MAINNET_CAIP2)

        result = verify(
            ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements, accepted
        )

        assert result.invalid_reason == ERR_NETWORK_MISMATCH
        assert simulator.calls == []

    def test_unrecognized_network(self, simulator):
        """Test requirements on a network outside the MultiversX family."""
        envelope = signed_envelope(make_requirements())
        requirements = make_requirements(network="eip155:8453")

        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)

        assert result.invalid_reason == ERR_NETWORK_MISMATCH

    def test_missing_signature(self, simulator):
        """Test an unsigned transaction."""
        requirements = make_requirements()
        envelope = replace(signed_envelope(requirements), signature="")

        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)

        assert result.invalid_reason == ERR_MISSING_SIGNATURE
        assert simulator.calls == []

    def test_chain_id_mismatch(self, simulator):
        """Test a transaction signed for another chain."""
        requirements = make_requirements()
        envelope = replace(signed_envelope(requirements), chain_id="1")

        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)

        assert result.invalid_reason == ERR_CHAIN_ID_MISMATCH
        assert simulator.calls == []


class TestVerifySimulation:
    """Tests for the simulation step."""

    def test_simulation_failed_status(self):
        """Test a failed simulation."""
        simulator = FakeSimulator(SimulationResult(status="fail", error="insufficient funds"))
        requirements = make_requirements()

        result = verify(ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements)

        assert result.invalid_reason == ERR_SIMULATION_FAILED
        assert result.invalid_message == "insufficient funds"
        assert result.payer == ALICE

    def test_simulation_success_with_error(self):
        """Test a success status carrying an error (e.g. bad signature)."""
        simulator = FakeSimulator(SimulationResult(status="success", error="invalid signature"))
        requirements = make_requirements()

        result = verify(ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements)

        assert result.invalid_reason == ERR_SIMULATION_FAILED

    def test_simulation_pending_status(self):
        """Test any status other than success is a failure."""
        simulator = FakeSimulator(SimulationResult(status="pending"))
        requirements = make_requirements()

        result = verify(ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements)

        assert result.invalid_reason == ERR_SIMULATION_FAILED
        assert "pending" in result.invalid_message

    def test_simulation_request_error(self):
        """Test a gateway failure during simulation."""
        simulator = FakeSimulator(error=GatewayError("connection refused"))
        requirements = make_requirements()

        result = verify(ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements)

        assert result.invalid_reason == ERR_SIMULATION_FAILED
        assert "connection refused" in result.invalid_message


class TestVerifyNative:
    """Tests for EGLD cross-checks."""

    def test_overpayment_accepted(self, simulator):
        """Test paying more than required."""
        paid = signed_envelope(make_requirements(amount="2000"))
        result = verify(ExactMultiversXScheme(simulator), paid, make_requirements(amount="1000"))
        assert result.is_valid

    def test_explicit_egld_asset(self, simulator):
        """Test requirements naming EGLD."""
        requirements = make_requirements(asset="EGLD")
        result = verify(ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements)
        assert result.is_valid

    def test_insufficient_amount(self, simulator):
        """Test paying less than required."""
        paid = signed_envelope(make_requirements(amount="999"))
        result = verify(ExactMultiversXScheme(simulator), paid, make_requirements(amount="1000"))
        assert result.invalid_reason == ERR_AMOUNT_INSUFFICIENT

    def test_recipient_mismatch(self, simulator):
        """Test paying someone other than payTo."""
        paid = signed_envelope(make_requirements(pay_to=ALICE))
        result = verify(ExactMultiversXScheme(simulator), paid, make_requirements(pay_to=BOB))
        assert result.invalid_reason == ERR_RECIPIENT_MISMATCH

    def test_invalid_transaction_value(self, simulator):
        """Test a value that is not a base-10 integer."""
        requirements = make_requirements()
        envelope = replace(signed_envelope(requirements), value="1e3")
        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)
        assert result.invalid_reason == ERR_INVALID_AMOUNT

    def test_transaction_value_with_trailing_newline(self, simulator):
        """Test a value with trailing whitespace is rejected."""
        requirements = make_requirements(amount="1000")
        envelope = replace(signed_envelope(requirements), value="1000\n")
        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)
        assert not result.is_valid
        assert result.invalid_reason == ERR_INVALID_AMOUNT

    def test_invalid_required_amount(self, simulator):
        """Test requirements with a malformed amount."""
        envelope = signed_envelope(make_requirements())
        result = verify(ExactMultiversXScheme(simulator), envelope, make_requirements(amount="1.5"))
        assert result.invalid_reason == ERR_INVALID_AMOUNT

    def test_token_transfer_for_native_requirement(self, simulator):
        """Test a token payment does not satisfy an EGLD requirement."""
        paid = signed_envelope(make_requirements(asset=TEST_TOKEN))
        result = verify(ExactMultiversXScheme(simulator), paid, make_requirements())
        assert result.invalid_reason == ERR_RECIPIENT_MISMATCH


class TestVerifyToken:
    """Tests for ESDT cross-checks."""

    def test_valid_token_payment(self, simulator):
        """Test a correct token payment."""
        requirements = make_requirements(amount="1000", asset=TEST_TOKEN)
        result = verify(ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements)
        assert result.is_valid
        assert result.payer == ALICE

    def test_valid_with_reference(self, simulator):
        """Test a trailing reference does not affect verification."""
        requirements = make_requirements(asset=TEST_TOKEN, extra={"resourceId": "r-1"})
        result = verify(ExactMultiversXScheme(simulator), signed_envelope(requirements), requirements)
        assert result.is_valid

    def test_overpayment_accepted(self, simulator):
        """Test paying more tokens than required."""
        paid = signed_envelope(make_requirements(amount="5000", asset=TEST_TOKEN))
        requirements = make_requirements(amount="1000", asset=TEST_TOKEN)
        assert verify(ExactMultiversXScheme(simulator), paid, requirements).is_valid

    def test_insufficient_amount(self, simulator):
        """Test paying fewer tokens than required."""
        paid = signed_envelope(make_requirements(amount="999", asset=TEST_TOKEN))
        requirements = make_requirements(amount="1000", asset=TEST_TOKEN)
        result = verify(ExactMultiversXScheme(simulator), paid, requirements)
        assert result.invalid_reason == ERR_AMOUNT_INSUFFICIENT

    def test_native_transfer_for_token_requirement(self, simulator):
        """Test an EGLD payment does not satisfy a token requirement."""
        paid = signed_envelope(make_requirements())
        result = verify(
            ExactMultiversXScheme(simulator), paid, make_requirements(asset=TEST_TOKEN)
        )
        assert result.invalid_reason == ERR_INVALID_TRANSFER_FORMAT

    def test_qualified_egld_requires_multi_transfer(self, simulator):
        """Test EGLD-000000 cannot be paid through the value field."""
        paid = signed_envelope(make_requirements())
        result = verify(
            ExactMultiversXScheme(simulator), paid, make_requirements(asset="EGLD-000000")
        )
        assert result.invalid_reason == ERR_INVALID_TRANSFER_FORMAT

    def test_multiple_transfers(self, simulator):
        """Test instructions with more than one transfer."""
        instruction = TransferInstruction(
            destination=bytes.fromhex(BOB_HEX),
            transfers=[TokenTransfer(TEST_TOKEN, 0, 1000), TokenTransfer(TEST_TOKEN, 0, 1)],
        )
        result = verify(
            ExactMultiversXScheme(simulator),
            token_envelope(instruction),
            make_requirements(asset=TEST_TOKEN),
        )
        assert result.invalid_reason == ERR_INVALID_TRANSFER_FORMAT

    def test_receiver_not_sender(self, simulator):
        """Test multi-transfers must be sent to the sender's own account."""
        instruction = TransferInstruction(
            destination=bytes.fromhex(BOB_HEX), transfers=[TokenTransfer(TEST_TOKEN, 0, 1000)]
        )
        result = verify(
            ExactMultiversXScheme(simulator),
            token_envelope(instruction, receiver=BOB),
            make_requirements(asset=TEST_TOKEN),
        )
        assert result.invalid_reason == ERR_INVALID_TRANSFER_FORMAT

    def test_token_mismatch(self, simulator):
        """Test a transfer of another token."""
        paid = signed_envelope(make_requirements(asset="WEGLD-bd4d79"))
        result = verify(
            ExactMultiversXScheme(simulator), paid, make_requirements(asset=TEST_TOKEN)
        )
        assert result.invalid_reason == ERR_ASSET_MISMATCH

    def test_non_fungible_nonce(self, simulator):
        """Test a transfer with a non-zero token nonce."""
        instruction = TransferInstruction(
            destination=bytes.fromhex(BOB_HEX), transfers=[TokenTransfer(TEST_TOKEN, 3, 1000)]
        )
        result = verify(
            ExactMultiversXScheme(simulator),
            token_envelope(instruction),
            make_requirements(asset=TEST_TOKEN),
        )
        assert result.invalid_reason == ERR_ASSET_MISMATCH

    def test_destination_mismatch(self, simulator):
        """Test tokens sent to someone other than payTo."""
        instruction = TransferInstruction(
            destination=bytes.fromhex(ALICE_HEX), transfers=[TokenTransfer(TEST_TOKEN, 0, 1000)]
        )
        result = verify(
            ExactMultiversXScheme(simulator),
            token_envelope(instruction),
            make_requirements(asset=TEST_TOKEN),
        )
        assert result.invalid_reason == ERR_RECIPIENT_MISMATCH

    def test_short_destination(self, simulator):
        """Test destinations are compared byte for byte."""
        instruction = TransferInstruction(
            destination=bytes.fromhex(BOB_HEX)[:31], transfers=[TokenTransfer(TEST_TOKEN, 0, 1000)]
        )
        result = verify(
            ExactMultiversXScheme(simulator),
            token_envelope(instruction),
            make_requirements(asset=TEST_TOKEN),
        )
        assert result.invalid_reason == ERR_RECIPIENT_MISMATCH

    def test_malformed_data(self, simulator):
        """Test data that is not a multi-transfer call."""
        requirements = make_requirements(asset=TEST_TOKEN)
        envelope = replace(signed_envelope(requirements), data="ESDTTransfer@abcd@01")
        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)
        assert result.invalid_reason == ERR_INVALID_TRANSFER_FORMAT

    def test_invalid_hex_in_data(self, simulator):
        """Test multi-transfer fields that are not hex."""
        requirements = make_requirements(asset=TEST_TOKEN)
        envelope = signed_envelope(requirements)
        envelope = replace(envelope, data=envelope.data.replace("@03e8", "@xyz"))
        result = verify(ExactMultiversXScheme(simulator), envelope, requirements)
        assert result.invalid_reason == ERR_INVALID_TRANSFER_FORMAT


class TestSettle:
    """Tests for settle."""

    def test_settle_success(self, simulator, broadcaster):
        """Test a verified payment is broadcast."""
        requirements = make_requirements()
        envelope = signed_envelope(requirements)
        payload = make_payload(envelope.to_dict(), requirements)

        result = ExactMultiversXScheme(simulator, broadcaster).settle(payload, requirements)

        assert result.success
        assert result.transaction == "f00dbabe"
        assert result.network == MULTIVERSX_DEVNET_CAIP2
        assert result.payer == ALICE
        assert broadcaster.calls == [envelope]

    def test_settle_verification_failure(self, simulator, broadcaster):
        """Test nothing is broadcast when verification fails."""
        paid = signed_envelope(make_requirements(amount="1"))
        requirements = make_requirements(amount="1000")
        payload = make_payload(paid.to_dict(), requirements)

        result = ExactMultiversXScheme(simulator, broadcaster).settle(payload, requirements)

        assert not result.success
        assert result.error_reason == ERR_AMOUNT_INSUFFICIENT
        assert result.transaction == ""
        assert broadcaster.calls == []

    def test_settle_without_broadcaster(self, simulator):
        """Test settlement needs a broadcaster."""
        requirements = make_requirements()
        payload = make_payload(signed_envelope(requirements).to_dict(), requirements)

        result = ExactMultiversXScheme(simulator).settle(payload, requirements)

        assert not result.success
        assert result.error_reason == ERR_BROADCASTER_NOT_CONFIGURED
        assert result.payer == ALICE

    def test_settle_broadcast_failure(self, simulator):
        """Test a send failure is reported, not raised."""
        broadcaster = FakeBroadcaster(error=GatewayError("nonce too low"))
        requirements = make_requirements()
        payload = make_payload(signed_envelope(requirements).to_dict(), requirements)

        result = ExactMultiversXScheme(simulator, broadcaster).settle(payload, requirements)

        assert not result.success
        assert result.error_reason == ERR_TRANSACTION_FAILED
        assert "nonce too low" in result.error_message
        assert len(broadcaster.calls) == 1

    def test_settle_token_payment(self, simulator, broadcaster):
        """Test a token payment is broadcast as signed."""
        requirements = make_requirements(asset=TEST_TOKEN)
        envelope = signed_envelope(requirements)
        payload = make_payload(envelope.to_dict(), requirements)

        result = ExactMultiversXScheme(simulator, broadcaster).settle(payload, requirements)

        assert result.success
        assert broadcaster.calls[0].data == envelope.data
