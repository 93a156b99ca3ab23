"""
Price Matrix - admin-facing table of every category × tier price.

One row per category (standard, student, custom fee types) with a
``<TIER>_Net`` and ``<TIER>_Gross`` column per tier, in the same spirit as a
catalog with one price column per tier.
"""
from typing import Optional

import pandas as pd

from ..errors import UnknownCategoryError
from .fee_calculator import compute_pricing
from .models import STANDARD, STUDENT, TIER_ORDER, PricingConfig


def matrix_columns() -> list[str]:
    columns = ['Name']
    for tier in TIER_ORDER:
        columns.append(f"{tier.value.upper()}_Net")
        columns.append(f"{tier.value.upper()}_Gross")
    return columns


def build_price_matrix(config: PricingConfig, vat_fallback: Optional[float] = None) -> pd.DataFrame:
    """
    Build the matrix. Student is only listed when the config prices it.

    The index is the category key passed to ``compute_pricing``.
    """
    categories = [(STANDARD, 'Standard'), (STUDENT, 'Student')]
    categories.extend((fee_type.id, fee_type.name) for fee_type in config.custom_fee_types)

    rows = {}
    for category, name in categories:
        row = {'Name': name}
        try:
            for tier in TIER_ORDER:
                fee = compute_pricing(tier, category, config, vat_fallback)
                row[f"{tier.value.upper()}_Net"] = fee.net_amount
                row[f"{tier.value.upper()}_Gross"] = fee.gross_amount
        except UnknownCategoryError:
            continue
        rows[category] = row

    df = pd.DataFrame.from_dict(rows, orient='index', columns=matrix_columns())
    df.index.name = 'Category'
    return df


def matrix_records(df: pd.DataFrame) -> list[dict]:
    """Rows as plain dicts (category included) for JSON output."""
    return df.reset_index().to_dict(orient='records')
