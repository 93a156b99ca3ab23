"""
Pricing Engine - assembles a full registration quote with traceability.

Chains the tier resolver and the fee computation into one call, adding:
- Line items for the registration fee, accompanying persons and add-ons
- Execution trace for every resolution step
- Organisation defaults (currency, VAT, late window) from settings
"""
import logging
from typing import Optional

from ..config.settings import Settings, get_settings
from ..errors import UnknownCategoryError
from .fee_calculator import (
    compute_accompanying_person_pricing,
    compute_custom_field_pricing,
    compute_pricing,
    round_money,
)
from .formatting import tier_display_name
from .models import LineItem, PricingConfig, Quote, QuoteRequest, TierResolution
from .tier_resolver import resolve_tier

logger = logging.getLogger(__name__)


class PricingEngine:
    """
    Resolves what a registrant pays at a given instant.

    Resolution order:
    1. Resolve the active tier from the configured dates
    2. Look up the category price for that tier and apply VAT
    3. Add accompanying persons at the flat (untiered) price
    4. Add selected custom pricing fields as untaxed add-ons
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def resolve(self, request: QuoteRequest, config: PricingConfig) -> TierResolution:
        return resolve_tier(
            request.now,
            config,
            conference_start=request.conference_start,
            late_window_days=self.settings.late_window_days,
        )

    def vat_fallback(self, request: QuoteRequest) -> Optional[float]:
        if request.vat_fallback is not None:
            return request.vat_fallback
        return self.settings.default_vat_percentage

    def quote(self, request: QuoteRequest, config: PricingConfig) -> Quote:
        """
        Calculate a quote with full traceability.

        Raises UnknownCategoryError when the category or an add-on id is
        not part of the configuration.
        """
        resolution = self.resolve(request, config)
        vat_fallback = self.vat_fallback(request)

        quote = Quote(
            category=request.category,
            resolution=resolution,
            currency=config.currency,
            total=0.0,
        )

        quote.add_trace("Tier", f"Active tier is {tier_display_name(resolution.tier)}", resolution.tier.value)
        if resolution.deadline is not None:
            quote.add_trace(
                "Deadline",
                f"Price changes to {tier_display_name(resolution.next_tier)} after",
                resolution.deadline.isoformat(),
            )

        fee = compute_pricing(resolution.tier, request.category, config, vat_fallback)
        quote.registration_fee = fee
        quote.lines.append(LineItem(
            code=request.category,
            description=f"Registration ({request.category}, {tier_display_name(resolution.tier)})",
            quantity=1,
            unit_net=fee.net_amount,
            unit_gross=fee.gross_amount,
            extended_price=fee.amount,
            source="tier",
        ))
        vat_label = "no VAT" if fee.vat_percentage is None else f"VAT {fee.vat_percentage:g}%"
        quote.add_trace(
            "Registration",
            f"{request.category} price for {resolution.tier.value} ({vat_label})",
            f"{fee.amount:.2f} {fee.currency}",
        )

        if request.accompanying_persons > 0:
            person = compute_accompanying_person_pricing(config, vat_fallback)
            extended = round_money(person.amount * request.accompanying_persons)
            quote.lines.append(LineItem(
                code="accompanying_person",
                description="Accompanying person",
                quantity=request.accompanying_persons,
                unit_net=person.net_amount,
                unit_gross=person.gross_amount,
                extended_price=extended,
                source="flat",
            ))
            quote.add_trace(
                "Accompanying persons",
                f"{request.accompanying_persons} × {person.amount:.2f}",
                f"{extended:.2f}",
            )

        for add_on_id in request.add_on_ids:
            pricing_field = config.find_pricing_field(add_on_id)
            if pricing_field is None:
                raise UnknownCategoryError(add_on_id)
            add_on = compute_custom_field_pricing(pricing_field, config)
            quote.lines.append(LineItem(
                code=pricing_field.id,
                description=pricing_field.name,
                quantity=1,
                unit_net=add_on.net_amount,
                unit_gross=add_on.gross_amount,
                extended_price=add_on.amount,
                source="add-on",
            ))
            quote.add_trace("Add-on", pricing_field.name, f"{add_on.amount:.2f}")

        quote.total = round_money(sum(line.extended_price for line in quote.lines))
        quote.add_trace("Total", f"{len(quote.lines)} line(s)", f"{quote.total:.2f} {quote.currency}")

        logger.debug("Quote for %s: %s", request.category, quote.get_trace_text())
        return quote
