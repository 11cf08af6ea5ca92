"""MultiversX server implementation for the Exact payment scheme (V2).

Parses prices and normalizes payment requirements before they are
advertised to payers.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

from x402.schemas import AssetAmount, Network, PaymentRequirements, Price, SupportedKind

from ..constants import DEFAULT_DECIMALS, NATIVE_ASSET, NATIVE_DECIMALS, SCHEME_EXACT
from ..errors import MissingRecipientError
from ..types import NativeAsset, classify_asset
from ..utils import (
    get_default_asset_info,
    get_network_config,
    parse_money_to_decimal,
    to_atomic_amount,
)

# Type alias for money parser
MoneyParser = Callable[[float, str], AssetAmount | None]


def normalize_requirements(requirements: PaymentRequirements) -> PaymentRequirements:
    """Fill in scheme defaults on a copy of the requirements.

    The asset defaults to EGLD when empty. The caller's object is never
    mutated.

    Args:
        requirements: Requirements as configured by the resource server.

    Returns:
        A normalized deep copy.

    Raises:
        MissingRecipientError: If payTo is empty.
    """
    if not requirements.pay_to:
        raise MissingRecipientError("Payment requirements have no payTo address")

    normalized = requirements.model_copy(deep=True)
    if not normalized.asset:
        normalized.asset = NATIVE_ASSET
    return normalized


class ExactMultiversXScheme:
    """MultiversX server implementation for the Exact payment scheme (V2).

    Money prices default to the network's USDC token; AssetAmount prices
    with no asset default to EGLD.

    Attributes:
        scheme: The scheme identifier ("exact").
    """

    scheme = SCHEME_EXACT

    def __init__(self):
        """Create ExactMultiversXScheme."""
        self._money_parsers: list[MoneyParser] = []

    def register_money_parser(self, parser: MoneyParser) -> "ExactMultiversXScheme":
        """Register custom money parser in the parser chain.

        Multiple parsers can be registered - tried in registration order.
        If parser returns None, next parser is tried.

        Args:
            parser: Custom function to convert amount to AssetAmount.

        Returns:
            Self for chaining.
        """
        self._money_parsers.append(parser)
        return self

    def parse_price(self, price: Price, network: Network) -> AssetAmount:
        """Parse price into asset amount.

        If price is already AssetAmount, returns it (asset defaults to EGLD).
        If price is Money (str|float), parses and tries custom parsers.
        Falls back to default USDC conversion.

        Args:
            price: Price to parse (string, number, or AssetAmount dict).
            network: Network identifier.

        Returns:
            AssetAmount with amount, asset, and extra fields.

        Raises:
            ValueError: If the network has no default stablecoin for Money.
        """
        network_str = str(network)

        # Already an AssetAmount (dict with 'amount' key)
        if isinstance(price, dict) and "amount" in price:
            asset = price.get("asset") or NATIVE_ASSET
            return AssetAmount(
                amount=str(price["amount"]),
                asset=asset,
                extra=price.get("extra") or {"decimals": self._asset_decimals(network_str, asset)},
            )

        # Already an AssetAmount object
        if isinstance(price, AssetAmount):
            if not price.asset:
                price = price.model_copy(update={"asset": NATIVE_ASSET})
            return price

        decimal_amount = parse_money_to_decimal(price)

        for parser in self._money_parsers:
            result = parser(float(decimal_amount), network_str)
            if result is not None:
                return result

        return self._default_money_conversion(decimal_amount, network_str)

    def _default_money_conversion(self, amount: Decimal, network: str) -> AssetAmount:
        """Convert decimal USD amount to the network's USDC AssetAmount."""
        asset = get_default_asset_info(network)
        atomic_amount = to_atomic_amount(amount, asset["decimals"])

        return AssetAmount(
            amount=str(atomic_amount),
            asset=asset["identifier"],
            extra={"decimals": asset["decimals"]},
        )

    def _asset_decimals(self, network: str, asset: str) -> int:
        return self.get_asset_info(network, asset)["decimals"]

    def enhance_payment_requirements(
        self,
        requirements: PaymentRequirements,
        supported_kind: SupportedKind,
        extension_keys: list[str],
    ) -> PaymentRequirements:
        """Add scheme-specific enhancements to payment requirements.

        For MultiversX:
        - Defaults the asset to EGLD
        - Adds decimals to extra (required for display)

        Args:
            requirements: Base payment requirements.
            supported_kind: Supported kind from facilitator.
            extension_keys: Extension keys being used.

        Returns:
            Normalized copy of the payment requirements.

        Raises:
            MissingRecipientError: If payTo is empty.
        """
        _ = supported_kind, extension_keys

        enhanced = normalize_requirements(requirements)
        extra = dict(enhanced.extra or {})
        if "decimals" not in extra:
            extra["decimals"] = self._asset_decimals(str(enhanced.network), enhanced.asset)
        enhanced.extra = extra
        return enhanced

    def get_asset_info(self, network: str, asset: str) -> dict[str, Any]:
        """Get information about an asset.

        Args:
            network: Network identifier.
            asset: "EGLD" or an ESDT identifier.

        Returns:
            Asset info with identifier, name, decimals.
        """
        if isinstance(classify_asset(asset), NativeAsset):
            return {"identifier": NATIVE_ASSET, "name": NATIVE_ASSET, "decimals": NATIVE_DECIMALS}

        try:
            default_asset = get_network_config(network).get("default_asset")
        except ValueError:
            default_asset = None

        if default_asset and default_asset["identifier"] == asset:
            return dict(default_asset)

        # Unknown token - ticker is the part before the random suffix
        return {
            "identifier": asset,
            "name": asset.split("-")[0],
            "decimals": DEFAULT_DECIMALS,
        }
