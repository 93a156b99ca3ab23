"""
Data models for the pricing engine.

Uses frozen dataclasses so a configuration snapshot cannot change while
a price is being resolved. Every model has a ``from_dict`` constructor that
accepts both the admin editor's camelCase keys and the stored snake_case keys.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union

from ..errors import InvalidConfigurationError

# A price is either one number or a per-currency mapping: {"EUR": 150, "USD": 170}
Amount = Union[float, Mapping[str, float]]
Moment = Union[date, datetime]


class Tier(str, Enum):
    """Time-bounded pricing bracket."""
    EARLY_BIRD = "early_bird"
    REGULAR = "regular"
    LATE = "late"


TIER_ORDER = (Tier.EARLY_BIRD, Tier.REGULAR, Tier.LATE)

STANDARD = "standard"
STUDENT = "student"


def pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key; lets callers pass camelCase or snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def parse_moment(value: Any) -> Optional[Moment]:
    """
    Parse an ISO date or datetime string.

    "2026-03-01" stays a date (a whole calendar day), anything with a time
    part becomes a datetime. A trailing "Z" is read as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    text = str(value).strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    except ValueError:
        raise InvalidConfigurationError(f"Invalid date '{value}', expected ISO 8601") from None


def as_float(value: Any, what: str) -> float:
    """float(value), reporting bad input as a configuration error."""
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{what} must be a number, got '{value}'") from None


def as_int(value: Any, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{what} must be a whole number, got '{value}'") from None


def as_utc(value: Moment, end_of_day: bool = False) -> datetime:
    """
    Normalise a date or datetime to an aware UTC datetime.

    Plain dates become midnight, or the last microsecond of that day when
    ``end_of_day`` is set. Naive datetimes are taken to be UTC.
    """
    if not isinstance(value, datetime):
        moment = datetime.combine(value, datetime.max.time() if end_of_day else datetime.min.time())
        return moment.replace(tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def price_amount(value: Optional[Amount], currency: str) -> float:
    """
    Resolve an amount for a currency.

    Numbers pass through. For a multi-currency mapping the entry for
    ``currency`` wins, otherwise the first entry is used.
    """
    if value is None:
        return 0.0
    if isinstance(value, Mapping):
        if not value:
            return 0.0
        key = currency.upper()
        for code, amount in value.items():
            if code.upper() == key:
                return as_float(amount, "Price")
        return as_float(next(iter(value.values())), "Price")
    return as_float(value, "Price")


def _check_amount(value: Optional[Amount], what: str):
    if value is None:
        return
    amounts = value.values() if isinstance(value, Mapping) else [value]
    for amount in amounts:
        if as_float(amount, what) < 0:
            raise InvalidConfigurationError(f"{what} cannot be negative")


@dataclass(frozen=True)
class EarlyBirdPrice:
    amount: Amount = 0.0
    deadline: Optional[Moment] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'EarlyBirdPrice':
        return cls(
            amount=pick(data, 'amount', default=0.0),
            deadline=parse_moment(pick(data, 'deadline')),
        )


@dataclass(frozen=True)
class RegularPrice:
    amount: Amount = 0.0
    start_date: Optional[Moment] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RegularPrice':
        return cls(
            amount=pick(data, 'amount', default=0.0),
            start_date=parse_moment(pick(data, 'startDate', 'start_date')),
        )


@dataclass(frozen=True)
class LatePrice:
    amount: Amount = 0.0
    start_date: Optional[Moment] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'LatePrice':
        return cls(
            amount=pick(data, 'amount', default=0.0),
            start_date=parse_moment(pick(data, 'startDate', 'start_date')),
        )


@dataclass(frozen=True)
class StudentPrices:
    """Fixed student prices per tier (not discounts)."""
    early_bird: float = 0.0
    regular: float = 0.0
    late: float = 0.0

    def for_tier(self, tier: Tier) -> float:
        return float(getattr(self, Tier(tier).value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'StudentPrices':
        return cls(
            early_bird=as_float(pick(data, 'earlyBird', 'early_bird', default=0.0), "Early bird price"),
            regular=as_float(pick(data, 'regular', default=0.0), "Regular price"),
            late=as_float(pick(data, 'late', default=0.0), "Late price"),
        )


@dataclass(frozen=True)
class CustomFeeType:
    """Admin-defined registrant category (e.g. "VIP") with its own tier prices."""
    id: str
    name: str
    early_bird: float = 0.0
    regular: float = 0.0
    late: float = 0.0
    description: Optional[str] = None

    def for_tier(self, tier: Tier) -> float:
        return float(getattr(self, Tier(tier).value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CustomFeeType':
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            early_bird=as_float(pick(data, 'earlyBird', 'early_bird', default=0.0), "Early bird price"),
            regular=as_float(pick(data, 'regular', default=0.0), "Regular price"),
            late=as_float(pick(data, 'late', default=0.0), "Late price"),
            description=data.get('description') or None,
        )


@dataclass(frozen=True)
class CustomPricingField:
    """Flat add-on line item; not tiered and not taxed by the engine."""
    id: str
    name: str
    value: float
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CustomPricingField':
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            value=as_float(data.get('value') or 0.0, "Add-on price"),
            description=data.get('description') or "",
        )


@dataclass(frozen=True)
class PricingConfig:
    """Conference pricing snapshot authored by an administrator."""
    currency: str = "EUR"
    vat_percentage: Optional[float] = None  # None = inherit organisation default
    prices_include_vat: bool = False
    early_bird: EarlyBirdPrice = field(default_factory=EarlyBirdPrice)
    regular: RegularPrice = field(default_factory=RegularPrice)
    late: LatePrice = field(default_factory=LatePrice)
    student: Optional[StudentPrices] = None
    student_discount: Optional[Amount] = None  # legacy, used only without `student`
    accompanying_person_price: Amount = 0.0
    custom_fee_types: tuple[CustomFeeType, ...] = ()
    custom_pricing_fields: tuple[CustomPricingField, ...] = ()

    def __post_init__(self) -> None:
        if self.vat_percentage is not None and not 0 <= self.vat_percentage <= 100:
            raise InvalidConfigurationError("VAT percentage must be between 0 and 100")

        _check_amount(self.early_bird.amount, "Early bird price")
        _check_amount(self.regular.amount, "Regular price")
        _check_amount(self.late.amount, "Late price")
        _check_amount(self.student_discount, "Student discount")
        _check_amount(self.accompanying_person_price, "Accompanying person price")
        if self.student is not None:
            for tier in TIER_ORDER:
                _check_amount(self.student.for_tier(tier), "Student price")

        seen = set()
        for fee_type in self.custom_fee_types:
            if fee_type.id in seen or fee_type.id in (STANDARD, STUDENT):
                raise InvalidConfigurationError(f"Duplicate fee type id '{fee_type.id}'")
            seen.add(fee_type.id)
            for tier in TIER_ORDER:
                _check_amount(fee_type.for_tier(tier), f"Price of fee type '{fee_type.name}'")

    def amount(self, value: Optional[Amount]) -> float:
        """Resolve an authored amount in this config's currency."""
        return price_amount(value, self.currency)

    def tier_amount(self, tier: Tier) -> float:
        tier = Tier(tier)
        if tier is Tier.EARLY_BIRD:
            return self.amount(self.early_bird.amount)
        if tier is Tier.REGULAR:
            return self.amount(self.regular.amount)
        return self.amount(self.late.amount)

    def find_fee_type(self, fee_type_id: str) -> Optional[CustomFeeType]:
        for fee_type in self.custom_fee_types:
            if fee_type.id == fee_type_id:
                return fee_type
        return None

    def find_pricing_field(self, field_id: str) -> Optional[CustomPricingField]:
        for pricing_field in self.custom_pricing_fields:
            if pricing_field.id == field_id:
                return pricing_field
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], default_currency: str = "EUR") -> 'PricingConfig':
        """Create a config from the editor payload or the stored conference row."""
        student = pick(data, 'student')
        vat = pick(data, 'vatPercentage', 'vat_percentage')
        return cls(
            currency=str(pick(data, 'currency', default=default_currency)).upper(),
            vat_percentage=as_float(vat, "VAT percentage") if vat not in (None, "") else None,
            prices_include_vat=bool(pick(data, 'pricesIncludeVat', 'prices_include_vat', default=False)),
            early_bird=EarlyBirdPrice.from_dict(pick(data, 'earlyBird', 'early_bird', default={})),
            regular=RegularPrice.from_dict(pick(data, 'regular', default={})),
            late=LatePrice.from_dict(pick(data, 'late', default={})),
            student=StudentPrices.from_dict(student) if student else None,
            student_discount=pick(data, 'studentDiscount', 'student_discount'),
            accompanying_person_price=pick(
                data, 'accompanyingPersonPrice', 'accompanying_person_price', default=0.0
            ),
            custom_fee_types=tuple(
                CustomFeeType.from_dict(item)
                for item in pick(data, 'customFeeTypes', 'custom_fee_types', default=[])
            ),
            custom_pricing_fields=tuple(
                CustomPricingField.from_dict(item)
                for item in pick(data, 'customPricingFields', 'custom_pricing_fields', 'custom_fields', default=[])
            ),
        )


@dataclass(frozen=True)
class TierResolution:
    """Active tier, when it ends, and which tier follows."""
    tier: Tier
    deadline: Optional[datetime] = None
    next_tier: Optional[Tier] = None


@dataclass(frozen=True)
class FeeBreakdown:
    """Net/gross pair for one price; ``amount`` is what the registrant pays."""
    amount: float
    currency: str
    gross_amount: float
    net_amount: float
    vat_amount: float
    vat_percentage: Optional[float] = None


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class LineItem:
    """A single line item in a quote."""
    code: str
    description: str
    quantity: int
    unit_net: float
    unit_gross: float
    extended_price: float
    source: str  # "tier", "flat" or "add-on"


@dataclass
class QuoteRequest:
    """Everything needed to price one registration at one instant."""
    now: Moment
    category: str = STANDARD
    accompanying_persons: int = 0
    add_on_ids: list[str] = field(default_factory=list)
    conference_start: Optional[Moment] = None
    vat_fallback: Optional[float] = None


@dataclass
class Quote:
    """Complete result of a pricing calculation."""
    category: str
    resolution: TierResolution
    currency: str
    total: float
    lines: list[LineItem] = field(default_factory=list)
    registration_fee: Optional[FeeBreakdown] = None
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def tier(self) -> Tier:
        return self.resolution.tier

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the quote trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
