"""
Hotel options offered with a registration, in admin-defined order.

A hotel is offered for a stay (arrival to departure) when the whole stay
fits its availability dates and it still has rooms left. Hotels without
their own dates are bound by the conference dates instead.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence, Union

from ..engine.fee_calculator import round_money
from ..engine.models import Moment, as_float, as_int, as_utc, parse_moment, pick
from ..errors import InvalidConfigurationError


def _as_date(value: Union[Moment, str, None]) -> Optional[date]:
    value = parse_moment(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value).date()
    return value


@dataclass(frozen=True)
class HotelOption:
    id: str
    name: str
    price_per_night: float
    occupancy: str = "1 person"
    description: Optional[str] = None
    order: int = 0
    available_from: Optional[date] = None
    available_until: Optional[date] = None
    max_rooms: Optional[int] = None  # None = no room limit

    def __post_init__(self) -> None:
        if self.price_per_night < 0:
            raise InvalidConfigurationError(f"Hotel '{self.name}' has a negative price per night")
        if (
            self.available_from is not None
            and self.available_until is not None
            and self.available_until < self.available_from
        ):
            raise InvalidConfigurationError(f"Hotel '{self.name}' is available until before it is available from")
        if self.max_rooms is not None and self.max_rooms <= 0:
            raise InvalidConfigurationError(f"Hotel '{self.name}' must offer at least one room")

    def is_available_for_stay(
        self,
        arrival: Moment,
        departure: Moment,
        conference_start: Optional[Moment] = None,
        conference_end: Optional[Moment] = None,
    ) -> bool:
        """
        Arrival on or after the first available day and departure on or
        before the last one. Missing hotel dates fall back to the conference
        dates; with neither, the hotel is always available.
        """
        available_from = self.available_from or _as_date(conference_start)
        available_until = self.available_until or _as_date(conference_end)
        if available_from is not None and _as_date(arrival) < available_from:
            return False
        if available_until is not None and _as_date(departure) > available_until:
            return False
        return True

    def is_full(self, reserved: int) -> bool:
        if self.max_rooms is None:
            return False
        return reserved >= self.max_rooms

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'HotelOption':
        max_rooms = pick(data, 'maxRooms', 'max_rooms')
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            price_per_night=as_float(pick(data, 'pricePerNight', 'price_per_night', default=0.0), "Price per night"),
            occupancy=data.get('occupancy') or "1 person",
            description=data.get('description') or None,
            order=as_int(data.get('order') or 0, "Order"),
            available_from=_as_date(pick(data, 'availableFrom', 'available_from')),
            available_until=_as_date(pick(data, 'availableUntil', 'available_until')),
            max_rooms=as_int(max_rooms, "Max rooms") if max_rooms not in (None, "") else None,
        )


def number_of_nights(arrival: Optional[Moment], departure: Optional[Moment]) -> int:
    """Nights between two days; 0 when a date is missing or departure is not after arrival."""
    if arrival is None or departure is None:
        return 0
    nights = (_as_date(departure) - _as_date(arrival)).days
    return max(nights, 0)


def accommodation_price(option: HotelOption, nights: int) -> float:
    return round_money(option.price_per_night * nights)


def available_hotels(
    options: Sequence[HotelOption],
    arrival: Optional[Moment],
    departure: Optional[Moment],
    conference_start: Optional[Moment] = None,
    conference_end: Optional[Moment] = None,
    reserved_counts: Optional[Mapping[str, int]] = None,
) -> list[HotelOption]:
    """
    Hotels bookable for the stay, in display order.

    Nothing is offered until both arrival and departure are known. Hotels
    whose reserved count has reached ``max_rooms`` are left out.
    """
    if arrival is None or departure is None:
        return []
    reserved_counts = reserved_counts or {}
    return sorted(
        (
            option for option in options
            if option.is_available_for_stay(arrival, departure, conference_start, conference_end)
            and not option.is_full(reserved_counts.get(option.id, 0))
        ),
        key=lambda option: option.order,
    )
