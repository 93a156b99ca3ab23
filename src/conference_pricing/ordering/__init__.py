"""Ordering subpackage - stable, index-addressable admin collections."""
from .hotels import HotelOption, accommodation_price, available_hotels, number_of_nights
from .manager import append, move, remove, renumber

__all__ = [
    'HotelOption',
    'accommodation_price',
    'available_hotels',
    'number_of_nights',
    'append',
    'move',
    'remove',
    'renumber',
]
