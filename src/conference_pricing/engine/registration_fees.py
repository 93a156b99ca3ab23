"""
Custom registration fees - single-priced fees with a validity window and
an optional capacity, offered next to (or instead of) tiered pricing.

Sold counts come from the caller; this module never reads storage.
"""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ..errors import InvalidConfigurationError
from .fee_calculator import fee_prices
from .models import Moment, as_float, as_int, as_utc, parse_moment, pick


class FeeUnavailableReason(str, Enum):
    SOLD_OUT = "sold_out"
    NOT_AVAILABLE_YET = "not_available_yet"
    EXPIRED = "expired"
    INACTIVE = "inactive"


def _as_date(value: Union[Moment, str]) -> date:
    value = parse_moment(value)
    if isinstance(value, datetime):
        return as_utc(value).date()
    return value


@dataclass(frozen=True)
class CustomRegistrationFee:
    """A fee as stored: net and gross both kept, validity dates inclusive."""
    id: str
    name: str
    valid_from: date
    valid_to: date
    price_net: float
    price_gross: float
    currency: str = "EUR"
    is_active: bool = True
    capacity: Optional[int] = None  # None = unlimited
    display_order: int = 0

    def __post_init__(self) -> None:
        if self.valid_to < self.valid_from:
            raise InvalidConfigurationError(f"Fee '{self.name}' ends before it starts")
        if self.price_net < 0 or self.price_gross < 0:
            raise InvalidConfigurationError(f"Fee '{self.name}' has a negative price")

    @classmethod
    def from_input(
        cls,
        id: str,
        name: str,
        valid_from: Moment,
        valid_to: Moment,
        price: float,
        prices_include_vat: bool = False,
        vat_percentage: Optional[float] = None,
        **kwargs,
    ) -> 'CustomRegistrationFee':
        """Create a fee from the admin input: one price plus its VAT treatment."""
        net, gross = fee_prices(price, prices_include_vat, vat_percentage)
        return cls(
            id=id,
            name=name.strip(),
            valid_from=_as_date(valid_from),
            valid_to=_as_date(valid_to),
            price_net=net,
            price_gross=gross,
            **kwargs,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CustomRegistrationFee':
        capacity = pick(data, 'capacity')
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            valid_from=_as_date(pick(data, 'validFrom', 'valid_from')),
            valid_to=_as_date(pick(data, 'validTo', 'valid_to')),
            price_net=as_float(pick(data, 'priceNet', 'price_net', default=0.0), "Net price"),
            price_gross=as_float(pick(data, 'priceGross', 'price_gross', default=0.0), "Gross price"),
            currency=pick(data, 'currency', default="EUR"),
            is_active=bool(pick(data, 'isActive', 'is_active', default=True)),
            capacity=as_int(capacity, "Capacity") if capacity not in (None, "") else None,
            display_order=as_int(pick(data, 'displayOrder', 'display_order', default=0), "Display order"),
        )


@dataclass(frozen=True)
class RegistrationFeeOption:
    """A fee as offered on the public form: gross price and availability only."""
    id: str
    name: str
    price_gross: float
    currency: str
    is_available: bool
    sold_count: int
    capacity: Optional[int] = None
    disabled_reason: Optional[FeeUnavailableReason] = None


def is_fee_sold_out(capacity: Optional[int], sold_count: int) -> bool:
    """Sold out when a positive capacity is reached; no capacity never sells out."""
    if capacity is None or capacity <= 0:
        return False
    return sold_count >= capacity


def is_fee_in_validity_window(valid_from: date, valid_to: date, as_of: Moment) -> bool:
    day = _as_date(as_of)
    return valid_from <= day <= valid_to


def fee_unavailable_reason(
    fee: CustomRegistrationFee,
    sold_count: int,
    as_of: Moment,
) -> FeeUnavailableReason:
    """Why a fee cannot be selected. Checked in order: inactive, window, capacity."""
    if not fee.is_active:
        return FeeUnavailableReason.INACTIVE
    day = _as_date(as_of)
    if day < fee.valid_from:
        return FeeUnavailableReason.NOT_AVAILABLE_YET
    if day > fee.valid_to:
        return FeeUnavailableReason.EXPIRED
    if is_fee_sold_out(fee.capacity, sold_count):
        return FeeUnavailableReason.SOLD_OUT
    return FeeUnavailableReason.INACTIVE


def fee_options(
    fees: list[CustomRegistrationFee],
    sold_counts: Mapping[str, int],
    as_of: Moment,
) -> list[RegistrationFeeOption]:
    """
    Every fee for the public form, ordered by display_order.

    Unavailable fees stay in the list, disabled with a reason, so the form
    can explain why they cannot be picked.
    """
    options = []
    for fee in sorted(fees, key=lambda f: f.display_order):
        sold = sold_counts.get(fee.id, 0)
        available = (
            fee.is_active
            and is_fee_in_validity_window(fee.valid_from, fee.valid_to, as_of)
            and not is_fee_sold_out(fee.capacity, sold)
        )
        options.append(RegistrationFeeOption(
            id=fee.id,
            name=fee.name,
            price_gross=fee.price_gross,
            currency=fee.currency,
            is_available=available,
            sold_count=sold,
            capacity=fee.capacity,
            disabled_reason=None if available else fee_unavailable_reason(fee, sold, as_of),
        ))
    return options
