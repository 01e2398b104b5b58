"""CalculatorService — thin composition layer over PriceRepository.

All methods are read-only; no commit/rollback needed.
The caller (router) passes db session; service delegates to repository.

Reference lookups by parent (states of a country, cities of a state) reject a
missing parent id with 400 and an unknown one with 404.

Quote = towing (city → origin port) + shipping (origin → destination port)
      + insurance (bracket containing the vehicle value)
      + base transportation price (system setting, 0 when unset)
"""

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy.ext.asyncio import AsyncSession

from src.vt_calculator.application.schemas import (
    CalculateRequest,
    CalculateResponse,
    CityOut,
    CountryOut,
    PortOut,
    StateOut,
)
from src.vt_calculator.domain.models import BASE_TRANSPORTATION_PRICE_KEY, PriceBreakdown
from src.vt_calculator.domain.repository import PriceRepositoryProtocol
from src.vt_calculator.infrastructure.persistence import PriceRepository
from src.vt_common.errors import (
    MissingParameterError,
    PriceNotConfiguredError,
    ReferenceNotFoundError,
)

logger = logging.getLogger("vt.calculator")


class CalculatorService:
    def __init__(self, repo: PriceRepositoryProtocol | None = None) -> None:
        self._repo: PriceRepositoryProtocol = repo or PriceRepository()

    async def list_countries(self, db: AsyncSession) -> list[CountryOut]:
        countries = await self._repo.list_countries(db)
        return [CountryOut.from_domain(c) for c in countries]

    async def list_states(self, db: AsyncSession, country_id: str | None) -> list[StateOut]:
        if not country_id:
            raise MissingParameterError("country_id")
        if not await self._repo.country_exists(db, country_id):
            raise ReferenceNotFoundError("Country")
        states = await self._repo.list_states(db, country_id)
        return [StateOut.from_domain(s) for s in states]

    async def list_cities(self, db: AsyncSession, state_id: str | None) -> list[CityOut]:
        """Cities of a state that have at least one towing price."""
        if not state_id:
            raise MissingParameterError("state_id")
        await self._require_state(db, state_id)
        cities = await self._repo.list_cities(db, state_id)
        return [CityOut.from_domain(c) for c in cities]

    async def list_ports(
        self,
        db: AsyncSession,
        country_id: str | None,
        state_id: str | None = None,
        port_type: str | None = None,
    ) -> list[PortOut]:
        """Destination ports, origin ports of a state, or all ports (optionally per country).

        ``port_type="destination"`` wins over the other filters. With a
        ``state_id`` only origin ports with a configured shipping route are
        returned.
        """
        if port_type == "destination":
            ports = await self._repo.list_destination_ports(db)
        elif state_id:
            await self._require_state(db, state_id)
            ports = await self._repo.list_origin_ports(db, state_id)
        elif port_type == "origin":
            raise MissingParameterError("state_id (or use type=destination)")
        else:
            ports = await self._repo.list_ports(db, country_id)
        return [PortOut.from_domain(p) for p in ports]

    async def _require_state(self, db: AsyncSession, state_id: str) -> None:
        if not await self._repo.state_exists(db, state_id):
            raise ReferenceNotFoundError("State")

    async def calculate(self, db: AsyncSession, req: CalculateRequest) -> CalculateResponse:
        towing = await self._repo.get_towing_price(db, req.city_id, req.origin_port_id)
        shipping = await self._repo.get_shipping_price(
            db, req.origin_port_id, req.destination_port_id
        )
        insurance = await self._repo.get_insurance_price(db, req.vehicle_value)
        base_setting = await self._repo.get_setting(db, BASE_TRANSPORTATION_PRICE_KEY)

        # Report every missing piece at once
        errors: list[str] = []
        if towing is None:
            errors.append("No towing price configured for the selected city and port combination")
        if shipping is None:
            errors.append("No shipping price configured for the selected port route")
        if insurance is None:
            errors.append(
                f"No insurance price configured for vehicle value ${req.vehicle_value:,}"
            )
        if errors:
            raise PriceNotConfiguredError(errors)

        breakdown = PriceBreakdown(
            towing_price=Decimal(towing),  # type: ignore[arg-type]
            shipping_price=Decimal(shipping),  # type: ignore[arg-type]
            insurance_price=Decimal(insurance),  # type: ignore[arg-type]
            base_price=_parse_base_price(base_setting),
        )
        return CalculateResponse.from_breakdown(breakdown)


def _parse_base_price(raw: str | None) -> Decimal:
    if raw is None:
        return Decimal(0)
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        logger.warning("ignoring non-numeric %s=%r", BASE_TRANSPORTATION_PRICE_KEY, raw)
        return Decimal(0)
