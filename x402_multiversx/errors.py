"""Error types for the MultiversX mechanism.

Codec and builder failures raise these; verification and settlement convert
them into VerifyResponse/SettleResponse reason codes instead.
"""


class MultiversXError(ValueError):
    """Base class for MultiversX mechanism errors."""

    pass


class InvalidAddressError(MultiversXError):
    """Address failed Bech32 decoding or does not describe an account."""

    pass


class InvalidLengthError(InvalidAddressError):
    """Bech32 string shorter than 8 or longer than 90 characters."""

    pass


class MissingSeparatorError(InvalidAddressError):
    """Separator absent or too close to either end of the string."""

    pass


class InvalidSymbolError(InvalidAddressError):
    """Character outside the Bech32 alphabet (or a non-printable prefix)."""

    pass


class ChecksumMismatchError(InvalidAddressError):
    """Bech32 polymod did not validate."""

    pass


class InvalidPaddingError(InvalidAddressError):
    """Non-zero or oversized leftover bits after 5-to-8 bit regrouping."""

    pass


class InvalidAmountError(MultiversXError):
    """Amount is not a non-negative base-10 integer."""

    pass


class MalformedTransferError(MultiversXError):
    """Data field is not a recognizable MultiESDTNFTTransfer instruction."""

    pass


class InvalidHexError(MalformedTransferError):
    """A transfer field is not clean, even-length hex."""

    pass


class MissingRecipientError(MultiversXError):
    """Payment requirements carry no payTo address."""

    pass


class GatewayError(Exception):
    """Gateway request failed at the transport or API level.

    Attributes:
        reason: Human-readable reason, including the node's error if reported.
        status_code: HTTP status code (if a response was received).
        code: Gateway error code (if reported).
    """

    def __init__(
        self,
        reason: str,
        status_code: int | None = None,
        code: str | None = None,
    ):
        self.reason = reason
        self.status_code = status_code
        self.code = code
        super().__init__(reason)
