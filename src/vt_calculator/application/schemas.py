"""Pydantic schemas for the public calculator API.

Money is NUMERIC(12,2) in the database and Decimal in the domain; responses
carry plain JSON numbers.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from src.vt_calculator.domain.models import City, Country, Port, PriceBreakdown, State


class CountryOut(BaseModel):
    id: str
    code: str
    name: str

    @classmethod
    def from_domain(cls, country: Country) -> "CountryOut":
        return cls(id=country.id, code=country.code, name=country.name)


class StateOut(BaseModel):
    id: str
    code: str
    name: str

    @classmethod
    def from_domain(cls, state: State) -> "StateOut":
        return cls(id=state.id, code=state.code, name=state.name)


class CityOut(BaseModel):
    id: str
    name: str

    @classmethod
    def from_domain(cls, city: City) -> "CityOut":
        return cls(id=city.id, name=city.name)


class PortOut(BaseModel):
    id: str
    name: str
    code: str | None
    country_id: str
    state_id: str | None = None
    is_destination: bool = False

    @classmethod
    def from_domain(cls, port: Port) -> "PortOut":
        return cls(
            id=port.id,
            name=port.name,
            code=port.code,
            country_id=port.country_id,
            state_id=port.state_id,
            is_destination=port.is_destination,
        )


class CalculateRequest(BaseModel):
    city_id: str = Field(..., min_length=1)
    origin_port_id: str = Field(..., min_length=1)
    destination_port_id: str = Field(..., min_length=1)
    vehicle_value: Decimal = Field(..., gt=0)


class BreakdownOut(BaseModel):
    towing_price: float
    shipping_price: float
    insurance_price: float
    base_price: float


class CalculateResponse(BaseModel):
    breakdown: BreakdownOut
    total: float
    currency: Literal["USD"] = "USD"

    @classmethod
    def from_breakdown(cls, breakdown: PriceBreakdown) -> "CalculateResponse":
        return cls(
            breakdown=BreakdownOut(
                towing_price=float(breakdown.towing_price),
                shipping_price=float(breakdown.shipping_price),
                insurance_price=float(breakdown.insurance_price),
                base_price=float(breakdown.base_price),
            ),
            total=float(breakdown.total),
        )
