#!/usr/bin/env python
"""
Print the price matrix and today's quote for a pricing config.

Usage:
    python scripts/print_price_matrix.py pricing.json [category] [YYYY-MM-DD]
"""
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from conference_pricing.config.settings import configure_logging, get_settings
from conference_pricing.engine import PricingConfig, PricingEngine, QuoteRequest
from conference_pricing.engine.formatting import price_increase_message
from conference_pricing.engine.models import parse_moment
from conference_pricing.engine.price_matrix import build_price_matrix
from conference_pricing.errors import EngineError


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    configure_logging()
    settings = get_settings()

    with open(sys.argv[1], 'r', encoding='utf-8') as f:
        config = PricingConfig.from_dict(json.load(f), default_currency=settings.default_currency)

    category = sys.argv[2] if len(sys.argv) > 2 else "standard"
    now = parse_moment(sys.argv[3]) if len(sys.argv) > 3 else datetime.now(timezone.utc)

    print("=" * 60)
    print(f"PRICE MATRIX ({config.currency})")
    print("=" * 60)
    print(build_price_matrix(config, settings.default_vat_percentage).to_string())
    print()

    try:
        quote = PricingEngine(settings).quote(QuoteRequest(now=now, category=category), config)
    except EngineError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"Quote for '{category}' at {now}:")
    print(quote.get_trace_text())
    message = price_increase_message(quote.resolution)
    if message:
        print()
        print(message)


if __name__ == "__main__":
    main()
