"""Engine subpackage - tier resolution and fee computation."""
from .fee_calculator import compute_pricing
from .models import PricingConfig, Quote, QuoteRequest, Tier, TierResolution, FeeBreakdown
from .pricing_engine import PricingEngine
from .tier_resolver import resolve_tier

__all__ = [
    'PricingEngine',
    'PricingConfig',
    'Quote',
    'QuoteRequest',
    'Tier',
    'TierResolution',
    'FeeBreakdown',
    'compute_pricing',
    'resolve_tier',
]
