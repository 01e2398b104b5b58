"""PriceRepository — concrete implementation of PriceRepositoryProtocol.

All queries use raw text() SQL (no ORM); all are read-only.
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
Alembic migrations 004 and 006 are the authoritative DDL.
"""

from decimal import Decimal

from sqlalchemy import Row, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.vt_calculator.domain.models import City, Country, Port, State

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_LIST_COUNTRIES_SQL = text("""
    SELECT id, code, name
    FROM countries
    ORDER BY name ASC
""")

_LIST_PORTS_SQL = text("""
    SELECT id, name, code, country_id, state_id, is_destination
    FROM ports
    WHERE (CAST(:country_id AS TEXT) IS NULL OR country_id = CAST(:country_id AS TEXT))
    ORDER BY name ASC
""")

_COUNTRY_EXISTS_SQL = text("SELECT 1 FROM countries WHERE id = :country_id")

_STATE_EXISTS_SQL = text("SELECT 1 FROM states WHERE id = :state_id")

_LIST_STATES_SQL = text("""
    SELECT id, code, name, country_id
    FROM states
    WHERE country_id = :country_id
    ORDER BY name ASC
""")

# Only cities that can actually be quoted: at least one towing price
_LIST_CITIES_SQL = text("""
    SELECT c.id, c.name
    FROM cities c
    WHERE c.state_id = :state_id
      AND EXISTS (SELECT 1 FROM towing_prices t WHERE t.city_id = c.id)
    ORDER BY c.name ASC
""")

# Origin ports need at least one outbound shipping price
_LIST_ORIGIN_PORTS_SQL = text("""
    SELECT p.id, p.name, p.code, p.country_id, p.state_id, p.is_destination
    FROM ports p
    WHERE p.state_id = :state_id
      AND NOT p.is_destination
      AND EXISTS (SELECT 1 FROM shipping_prices s WHERE s.origin_port_id = p.id)
    ORDER BY p.name ASC
""")

_LIST_DESTINATION_PORTS_SQL = text("""
    SELECT id, name, code, country_id, state_id, is_destination
    FROM ports
    WHERE is_destination
    ORDER BY name ASC
""")

_TOWING_PRICE_SQL = text("""
    SELECT price
    FROM towing_prices
    WHERE city_id = :city_id AND port_id = :port_id
    LIMIT 1
""")

_SHIPPING_PRICE_SQL = text("""
    SELECT price
    FROM shipping_prices
    WHERE origin_port_id = :origin_port_id
      AND destination_port_id = :destination_port_id
    LIMIT 1
""")

_INSURANCE_PRICE_SQL = text("""
    SELECT price
    FROM insurance_prices
    WHERE min_value <= :vehicle_value AND max_value >= :vehicle_value
    ORDER BY min_value DESC
    LIMIT 1
""")

_SETTING_SQL = text("""
    SELECT value
    FROM system_settings
    WHERE key = :key
""")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class PriceRepository:
    """Concrete repository — all operations are read-only SQL queries."""

    async def list_countries(self, db: AsyncSession) -> list[Country]:
        result = await db.execute(_LIST_COUNTRIES_SQL)
        return [
            Country(id=row.id, code=row.code, name=row.name)
            for row in result.fetchall()
        ]

    async def list_ports(self, db: AsyncSession, country_id: str | None) -> list[Port]:
        result = await db.execute(_LIST_PORTS_SQL, {"country_id": country_id})
        return [_port_from_row(row) for row in result.fetchall()]

    async def country_exists(self, db: AsyncSession, country_id: str) -> bool:
        result = await db.execute(_COUNTRY_EXISTS_SQL, {"country_id": country_id})
        return result.scalar_one_or_none() is not None

    async def state_exists(self, db: AsyncSession, state_id: str) -> bool:
        result = await db.execute(_STATE_EXISTS_SQL, {"state_id": state_id})
        return result.scalar_one_or_none() is not None

    async def list_states(self, db: AsyncSession, country_id: str) -> list[State]:
        result = await db.execute(_LIST_STATES_SQL, {"country_id": country_id})
        return [
            State(id=row.id, code=row.code, name=row.name, country_id=row.country_id)
            for row in result.fetchall()
        ]

    async def list_cities(self, db: AsyncSession, state_id: str) -> list[City]:
        result = await db.execute(_LIST_CITIES_SQL, {"state_id": state_id})
        return [City(id=row.id, name=row.name) for row in result.fetchall()]

    async def list_origin_ports(self, db: AsyncSession, state_id: str) -> list[Port]:
        result = await db.execute(_LIST_ORIGIN_PORTS_SQL, {"state_id": state_id})
        return [_port_from_row(row) for row in result.fetchall()]

    async def list_destination_ports(self, db: AsyncSession) -> list[Port]:
        result = await db.execute(_LIST_DESTINATION_PORTS_SQL)
        return [_port_from_row(row) for row in result.fetchall()]

    async def get_towing_price(
        self, db: AsyncSession, city_id: str, port_id: str
    ) -> Decimal | None:
        result = await db.execute(
            _TOWING_PRICE_SQL, {"city_id": city_id, "port_id": port_id}
        )
        return result.scalar_one_or_none()

    async def get_shipping_price(
        self, db: AsyncSession, origin_port_id: str, destination_port_id: str
    ) -> Decimal | None:
        result = await db.execute(
            _SHIPPING_PRICE_SQL,
            {"origin_port_id": origin_port_id, "destination_port_id": destination_port_id},
        )
        return result.scalar_one_or_none()

    async def get_insurance_price(
        self, db: AsyncSession, vehicle_value: Decimal
    ) -> Decimal | None:
        result = await db.execute(_INSURANCE_PRICE_SQL, {"vehicle_value": vehicle_value})
        return result.scalar_one_or_none()

    async def get_setting(self, db: AsyncSession, key: str) -> str | None:
        result = await db.execute(_SETTING_SQL, {"key": key})
        return result.scalar_one_or_none()


def _port_from_row(row: Row) -> Port:
    return Port(
        id=row.id,
        name=row.name,
        code=row.code,
        country_id=row.country_id,
        state_id=row.state_id,
        is_destination=row.is_destination,
    )
