# src/vt_calculator/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.vt_calculator.domain.models import City, Country, Port, State


class PriceRepositoryProtocol(Protocol):
    async def list_countries(self, db: AsyncSession) -> list[Country]: ...

    async def list_ports(self, db: AsyncSession, country_id: str | None) -> list[Port]: ...

    async def country_exists(self, db: AsyncSession, country_id: str) -> bool: ...

    async def state_exists(self, db: AsyncSession, state_id: str) -> bool: ...

    async def list_states(self, db: AsyncSession, country_id: str) -> list[State]: ...

    async def list_cities(self, db: AsyncSession, state_id: str) -> list[City]: ...

    async def list_origin_ports(self, db: AsyncSession, state_id: str) -> list[Port]: ...

    async def list_destination_ports(self, db: AsyncSession) -> list[Port]: ...

    async def get_towing_price(
        self, db: AsyncSession, city_id: str, port_id: str
    ) -> Decimal | None: ...

    async def get_shipping_price(
        self, db: AsyncSession, origin_port_id: str, destination_port_id: str
    ) -> Decimal | None: ...

    async def get_insurance_price(
        self, db: AsyncSession, vehicle_value: Decimal
    ) -> Decimal | None: ...

    async def get_setting(self, db: AsyncSession, key: str) -> str | None: ...
