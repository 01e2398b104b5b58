"""Domain models for vt_calculator — pure dataclasses, no business logic."""

from dataclasses import dataclass
from decimal import Decimal

BASE_TRANSPORTATION_PRICE_KEY = "BASE_TRANSPORTATION_PRICE"


@dataclass
class Country:
    id: str
    code: str
    name: str


@dataclass
class State:
    id: str
    code: str
    name: str
    country_id: str


@dataclass
class City:
    id: str
    name: str


@dataclass
class Port:
    id: str
    name: str
    code: str | None
    country_id: str
    state_id: str | None = None
    is_destination: bool = False


@dataclass
class PriceBreakdown:
    towing_price: Decimal
    shipping_price: Decimal
    insurance_price: Decimal
    base_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.towing_price + self.shipping_price + self.insurance_price + self.base_price
