"""Bech32 address codec for MultiversX accounts.

MultiversX addresses are plain Bech32 (BIP-173 checksum constant 1) over a
32-byte Ed25519 public key with the "erd" human-readable prefix.

Case is not normalized: only lower-case strings decode. An all upper-case
address is rejected with InvalidSymbolError.
"""

from __future__ import annotations

from .constants import ADDRESS_HRP, PUBKEY_LENGTH
from .errors import (
    ChecksumMismatchError,
    InvalidAddressError,
    InvalidLengthError,
    InvalidPaddingError,
    InvalidSymbolError,
    MissingSeparatorError,
)

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"

GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)

CHECKSUM_CONSTANT = 1
CHECKSUM_LENGTH = 6
SEPARATOR = "1"
MIN_LENGTH = 8
MAX_LENGTH = 90


def bech32_polymod(values: list[int]) -> int:
    """Compute the BCH checksum polynomial over 5-bit values."""
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for i in range(5):
            if (top >> i) & 1:
                chk ^= GENERATOR[i]
    return chk


def bech32_hrp_expand(hrp: str) -> list[int]:
    """Expand the human-readable prefix into checksum seed values."""
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def bech32_verify_checksum(hrp: str, data: list[int]) -> bool:
    return bech32_polymod(bech32_hrp_expand(hrp) + data) == CHECKSUM_CONSTANT


def bech32_create_checksum(hrp: str, data: list[int]) -> list[int]:
    values = bech32_hrp_expand(hrp) + data
    polymod = bech32_polymod(values + [0] * CHECKSUM_LENGTH) ^ CHECKSUM_CONSTANT
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]


def convert_bits(data: list[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    """Regroup a sequence of from_bits-wide values into to_bits-wide values.

    Args:
        data: Input values, each below 2**from_bits.
        from_bits: Width of input values.
        to_bits: Width of output values.
        pad: Zero-pad a trailing partial group instead of rejecting it.

    Returns:
        Regrouped values.

    Raises:
        InvalidPaddingError: If pad is False and leftover bits are
            non-zero or span a full input group.
    """
    acc = 0
    bits = 0
    out: list[int] = []
    maxv = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1

    for value in data:
        if value < 0 or value >> from_bits:
            raise InvalidPaddingError(f"Value out of range for {from_bits}-bit group: {value}")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & maxv)

    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & maxv)
    elif bits >= from_bits or (acc << (to_bits - bits)) & maxv:
        raise InvalidPaddingError("Invalid padding in Bech32 data")

    return out


def decode_bech32(bech: str) -> tuple[str, bytes]:
    """Decode a Bech32 string into its prefix and raw bytes.

    Args:
        bech: Bech32 text.

    Returns:
        Tuple of (human-readable prefix, decoded bytes).

    Raises:
        InvalidLengthError: If the text is shorter than 8 or longer than 90.
        MissingSeparatorError: If "1" is absent or too close to either end.
        InvalidSymbolError: If a character falls outside the alphabet.
        ChecksumMismatchError: If the checksum does not validate.
        InvalidPaddingError: If the 5-to-8 bit regrouping leaves bad padding.
    """
    if len(bech) < MIN_LENGTH or len(bech) > MAX_LENGTH:
        raise InvalidLengthError(f"Invalid bech32 string length: {len(bech)}")

    pos = bech.rfind(SEPARATOR)
    if pos < 1 or pos + CHECKSUM_LENGTH + 1 > len(bech):
        raise MissingSeparatorError("Invalid index of separator in bech32 string")

    hrp = bech[:pos]
    if any(ord(c) < 33 or ord(c) > 126 for c in hrp):
        raise InvalidSymbolError("Invalid character in human-readable part")

    data: list[int] = []
    for c in bech[pos + 1 :]:
        idx = CHARSET.find(c)
        if idx == -1:
            raise InvalidSymbolError(f"Invalid character in data part: {c!r}")
        data.append(idx)

    if not bech32_verify_checksum(hrp, data):
        raise ChecksumMismatchError("Invalid bech32 checksum")

    decoded = convert_bits(data[:-CHECKSUM_LENGTH], 5, 8, pad=False)
    return hrp, bytes(decoded)


def encode_bech32(hrp: str, data: bytes) -> str:
    """Encode raw bytes as a Bech32 string under the given prefix."""
    values = convert_bits(list(data), 8, 5, pad=True)
    checksum = bech32_create_checksum(hrp, values)
    return hrp + SEPARATOR + "".join(CHARSET[v] for v in values + checksum)


def decode_address(address: str) -> bytes:
    """Decode a MultiversX address into its 32-byte public key.

    Args:
        address: Bech32 account address (erd1...).

    Returns:
        Raw public key bytes.

    Raises:
        InvalidAddressError: If the address does not decode, has a foreign
            prefix, or is not 32 bytes long.
    """
    if not isinstance(address, str):
        raise InvalidAddressError(f"Address must be a string, got {type(address).__name__}")

    hrp, pubkey = decode_bech32(address)
    if hrp != ADDRESS_HRP:
        raise InvalidAddressError(f"Invalid address prefix: expected {ADDRESS_HRP}, got {hrp}")
    if len(pubkey) != PUBKEY_LENGTH:
        raise InvalidAddressError(
            f"Invalid address length: expected {PUBKEY_LENGTH} bytes, got {len(pubkey)}"
        )
    return pubkey


def encode_address(pubkey: bytes, hrp: str = ADDRESS_HRP) -> str:
    """Encode a 32-byte public key as a MultiversX address.

    Raises:
        InvalidAddressError: If the key is not 32 bytes long.
    """
    if len(pubkey) != PUBKEY_LENGTH:
        raise InvalidAddressError(
            f"Invalid public key length: expected {PUBKEY_LENGTH} bytes, got {len(pubkey)}"
        )
    return encode_bech32(hrp, pubkey)


def is_valid_address(address: str) -> bool:
    """Validate a MultiversX address (checksum, prefix and key length).

    Args:
        address: String to validate.

    Returns:
        True if the address decodes to a 32-byte "erd" account.
    """
    if not address or not isinstance(address, str):
        return False

    try:
        decode_address(address)
        return True
    except InvalidAddressError:
        return False
