"""Display helpers for prices and tiers."""
from datetime import datetime
from typing import Optional

from .models import Tier, TierResolution

CURRENCY_SYMBOLS = {
    'EUR': '€',
    'USD': '$',
    'GBP': '£',
    'CHF': 'CHF',
    'JPY': '¥',
}

# Symbols written before the amount; the rest follow it ("150 €")
PREFIX_SYMBOLS = {'USD', 'GBP', 'JPY'}

TIER_DISPLAY_NAMES = {
    Tier.EARLY_BIRD: 'Early Bird',
    Tier.REGULAR: 'Regular',
    Tier.LATE: 'Late Registration',
}


def tier_display_name(tier: Optional[Tier]) -> str:
    if tier is None:
        return 'Standard'
    return TIER_DISPLAY_NAMES.get(Tier(tier), 'Standard')


def currency_symbol(currency: str) -> str:
    """Symbol for a currency code, or the code itself when unknown."""
    code = currency.upper()
    return CURRENCY_SYMBOLS.get(code, code)


def format_price_without_zeros(amount: float) -> str:
    """450.0 → "450", 450.50 → "450.5", 450.55 → "450.55"."""
    text = f"{amount:.2f}".rstrip('0').rstrip('.')
    return text or '0'


def format_price(amount: float, currency: str) -> str:
    return f"{format_price_without_zeros(amount)} {currency.upper()}"


def format_price_with_symbol(amount: float, currency: str) -> str:
    code = currency.upper()
    symbol = currency_symbol(code)
    value = format_price_without_zeros(amount)
    if code in PREFIX_SYMBOLS:
        return f"{symbol}{value}"
    return f"{value} {symbol}"


def price_increase_message(resolution: TierResolution) -> Optional[str]:
    """
    "Price increases after <date>" text for the current tier, if another
    tier follows.
    """
    if resolution.deadline is None or resolution.next_tier is None:
        return None
    deadline: datetime = resolution.deadline
    return (
        f"{tier_display_name(resolution.tier)} pricing ends {deadline.strftime('%B %d, %Y')}; "
        f"{tier_display_name(resolution.next_tier)} pricing applies afterwards"
    )
