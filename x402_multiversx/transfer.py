"""MultiESDTNFTTransfer instruction encoding and decoding.

Token payments move through the built-in multi-transfer function. The
sender calls it on its own account with the data field:

    MultiESDTNFTTransfer@<destHex>@<countHex>@<tokenHex>@<nonceHex>@<amountHex>[@<referenceHex>]

with one token/nonce/amount triple per transfer.
"""

from __future__ import annotations

import re

from .constants import FUNGIBLE_TOKEN_NONCE, MULTI_TRANSFER_FUNCTION
from .errors import InvalidHexError, MalformedTransferError
from .types import TokenTransfer, TransferInstruction
from .utils import amount_to_hex, parse_amount

_STRICT_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})+")

# opcode, destination, count, then at least one token/nonce/amount triple
MIN_FIELDS = 6
FIELDS_PER_TRANSFER = 3


def _decode_hex(value: str, name: str) -> bytes:
    if not _STRICT_HEX_RE.fullmatch(value):
        raise InvalidHexError(f"Invalid hex in {name}: {value!r}")
    return bytes.fromhex(value)


def encode_transfer(instruction: TransferInstruction) -> str:
    """Render a transfer instruction as data-field text.

    Args:
        instruction: Destination, transfers and optional reference.

    Returns:
        The data field string.

    Raises:
        MalformedTransferError: If the instruction carries no transfers.
    """
    if not instruction.transfers:
        raise MalformedTransferError("Transfer instruction needs at least one transfer")

    parts = [
        MULTI_TRANSFER_FUNCTION,
        instruction.destination.hex(),
        amount_to_hex(len(instruction.transfers)),
    ]
    for transfer in instruction.transfers:
        parts.append(transfer.token_identifier.encode("utf-8").hex())
        parts.append(amount_to_hex(transfer.nonce))
        parts.append(amount_to_hex(transfer.amount))
    if instruction.reference:
        parts.append(instruction.reference.hex())
    return "@".join(parts)


def decode_transfer(data: str) -> TransferInstruction:
    """Parse data-field text into a transfer instruction.

    Args:
        data: The transaction's data field.

    Returns:
        Decoded TransferInstruction.

    Raises:
        MalformedTransferError: If the text is not a multi-transfer call or
            the field count does not match the declared transfer count.
        InvalidHexError: If any field is not strict even-length hex, or a
            token identifier is not UTF-8.
    """
    fields = data.split("@")
    if len(fields) < MIN_FIELDS:
        raise MalformedTransferError(
            f"Expected at least {MIN_FIELDS} fields, got {len(fields)}"
        )
    if fields[0] != MULTI_TRANSFER_FUNCTION:
        raise MalformedTransferError(f"Unexpected function: {fields[0]!r}")

    destination = _decode_hex(fields[1], "destination")
    count = int.from_bytes(_decode_hex(fields[2], "count"), "big")
    if count < 1:
        raise MalformedTransferError("Transfer count must be at least 1")

    end = 3 + count * FIELDS_PER_TRANSFER
    if len(fields) < end:
        raise MalformedTransferError(
            f"Declared {count} transfers but only {len(fields) - 3} transfer fields present"
        )
    if len(fields) > end + 1:
        raise MalformedTransferError(f"Unexpected trailing fields: {len(fields) - end}")

    transfers = []
    for i in range(count):
        token_hex, nonce_hex, amount_hex = fields[3 + i * 3 : 6 + i * 3]
        try:
            token_identifier = _decode_hex(token_hex, "token").decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidHexError(f"Token identifier is not UTF-8: {token_hex!r}") from e
        transfers.append(
            TokenTransfer(
                token_identifier=token_identifier,
                nonce=int.from_bytes(_decode_hex(nonce_hex, "nonce"), "big"),
                amount=int.from_bytes(_decode_hex(amount_hex, "amount"), "big"),
            )
        )

    reference = _decode_hex(fields[end], "reference") if len(fields) == end + 1 else None
    return TransferInstruction(destination=destination, transfers=transfers, reference=reference)


def build_transfer_instruction(
    destination: bytes,
    token_identifier: str,
    amount: str | int,
    reference: bytes | None = None,
) -> TransferInstruction:
    """Build a single fungible-token transfer instruction.

    Raises:
        InvalidAmountError: If the amount does not parse.
    """
    return TransferInstruction(
        destination=destination,
        transfers=[
            TokenTransfer(
                token_identifier=token_identifier,
                nonce=FUNGIBLE_TOKEN_NONCE,
                amount=parse_amount(amount),
            )
        ],
        reference=reference,
    )
