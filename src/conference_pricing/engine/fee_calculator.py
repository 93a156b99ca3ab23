"""
Fee Computation - turns a (tier, category) pair into a net/gross price.

Authored amounts are either gross (``prices_include_vat``) or net; the
other side is derived with the effective VAT rate. Registrants always see
the gross amount rounded half-up to cents.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..errors import UnknownCategoryError
from .models import (
    STANDARD,
    STUDENT,
    CustomPricingField,
    FeeBreakdown,
    PricingConfig,
    Tier,
)

CENT = Decimal("0.01")


def round_money(amount: float) -> float:
    """Round to 2 decimals, half-up (0.125 → 0.13)."""
    return float(Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


def effective_vat(vat_percentage: Optional[float], fallback: Optional[float]) -> Optional[float]:
    """Conference VAT if set, else the organisation default, else None."""
    if vat_percentage is not None:
        return vat_percentage
    return fallback


def price_with_vat(net: float, vat_percentage: float) -> float:
    return net * (1 + vat_percentage / 100)


def price_without_vat(gross: float, vat_percentage: float) -> float:
    return gross / (1 + vat_percentage / 100)


def price_breakdown(net: float, vat_percentage: Optional[float] = None) -> dict:
    """Net, gross and VAT for a net price (no VAT when the rate is unset)."""
    vat = vat_percentage or 0
    without_vat = round_money(net)
    with_vat = round_money(price_with_vat(net, vat))
    return {
        "without_vat": without_vat,
        "with_vat": with_vat,
        "vat_amount": round_money(with_vat - without_vat),
        "vat_percentage": vat,
    }


def apply_vat(
    base_amount: float,
    config: PricingConfig,
    vat_fallback: Optional[float] = None,
) -> FeeBreakdown:
    """Derive net and gross for one authored amount."""
    vat_source = effective_vat(config.vat_percentage, vat_fallback)
    vat = vat_source or 0

    if config.prices_include_vat:
        gross = base_amount
        net = price_without_vat(base_amount, vat)
    else:
        net = base_amount
        gross = price_with_vat(base_amount, vat)

    gross_rounded = round_money(gross)
    net_rounded = round_money(net)
    return FeeBreakdown(
        amount=gross_rounded,
        currency=config.currency,
        gross_amount=gross_rounded,
        net_amount=net_rounded,
        vat_amount=round_money(gross_rounded - net_rounded),
        vat_percentage=vat_source,
    )


def base_amount(tier: Tier, category: str, config: PricingConfig) -> float:
    """
    Look up the authored price for a category in a tier.

    Raises UnknownCategoryError instead of defaulting to zero, so a
    misconfigured category never under-charges.
    """
    tier = Tier(tier)
    if category == STANDARD:
        return config.tier_amount(tier)

    if category == STUDENT:
        if config.student is not None:
            return config.student.for_tier(tier)
        if config.student_discount is not None:
            # Legacy configs stored a discount off the standard price
            standard = config.tier_amount(tier)
            return max(0.0, standard - config.amount(config.student_discount))
        raise UnknownCategoryError(category)

    fee_type = config.find_fee_type(category)
    if fee_type is None:
        raise UnknownCategoryError(category)
    return fee_type.for_tier(tier)


def compute_pricing(
    tier: Tier,
    category: str,
    config: PricingConfig,
    vat_fallback: Optional[float] = None,
) -> FeeBreakdown:
    """Price one registrant of ``category`` in ``tier``."""
    return apply_vat(base_amount(tier, category, config), config, vat_fallback)


def compute_accompanying_person_pricing(
    config: PricingConfig,
    vat_fallback: Optional[float] = None,
) -> FeeBreakdown:
    """Flat accompanying-person price, same net/gross rule as registration fees."""
    return apply_vat(config.amount(config.accompanying_person_price), config, vat_fallback)


def compute_custom_field_pricing(pricing_field: CustomPricingField, config: PricingConfig) -> FeeBreakdown:
    """Add-on line items pass through untaxed."""
    value = round_money(pricing_field.value)
    return FeeBreakdown(
        amount=value,
        currency=config.currency,
        gross_amount=value,
        net_amount=value,
        vat_amount=0.0,
        vat_percentage=None,
    )


def fee_prices(price: float, prices_include_vat: bool, vat_percentage: Optional[float]) -> tuple[float, float]:
    """
    (net, gross) for a single authored price, as stored for registration fees.

    Without a positive VAT rate net and gross are the same amount.
    """
    amount = float(price or 0)
    vat = vat_percentage or 0
    if vat > 0:
        if prices_include_vat:
            return round_money(price_without_vat(amount, vat)), round_money(amount)
        return round_money(amount), round_money(price_with_vat(amount, vat))
    return round_money(amount), round_money(amount)
