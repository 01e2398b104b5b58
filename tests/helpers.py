"""Test helpers shared by unit and integration tests."""

from collections.abc import Awaitable, Callable
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.vt_calculator.domain.models import City, Country, Port, State
from src.vt_common.enums import UserRole, UserStatus
from src.vt_gateway.auth.session import Session
from src.vt_gateway.auth.session_token import create_session_token, session_cookie_name

# Integration fixture: seed_user(role=..., status=...) -> {"email", "password"}
SeedUser = Callable[..., Awaitable[dict[str, str]]]


class FakeClock:
    """Deterministic epoch-seconds clock for rate limiter tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_session(
    role: UserRole = UserRole.DEALER,
    status: UserStatus = UserStatus.ACTIVE,
    email: str = "alice@example.com",
) -> Session:
    return Session(
        user_id="7f1c2b1e-0000-4000-8000-000000000001",
        email=email,
        name="Alice",
        role=role,
        status=status,
    )


def session_cookie_header(session: Session, token: str | None = None) -> dict[str, str]:
    """Raw Cookie header carrying a session token (httpx per-request cookies are deprecated)."""
    return {"cookie": f"{session_cookie_name()}={token or create_session_token(session)}"}


def mock_db_returning(*rows: object) -> AsyncMock:
    """AsyncSession mock whose successive execute() calls yield ``rows`` via scalar_one_or_none."""
    results = []
    for row in rows:
        result = MagicMock()
        result.scalar_one_or_none.return_value = row
        results.append(result)
    db = AsyncMock()
    db.execute = AsyncMock(side_effect=results)
    db.add = MagicMock()
    db.begin = MagicMock(return_value=AsyncMock())
    return db


def make_price_repo(
    towing: Decimal | None = Decimal("450.00"),
    shipping: Decimal | None = Decimal("1200.00"),
    insurance: Decimal | None = Decimal("150.00"),
    base: str | None = None,
) -> MagicMock:
    """PriceRepositoryProtocol stand-in: one country and state, fixed prices.

    Every country and state id exists; tests flip country_exists / state_exists
    to cover unknown parents.
    """
    repo = MagicMock()
    repo.list_countries = AsyncMock(
        return_value=[Country(id="c-us", code="US", name="United States")]
    )
    repo.list_ports = AsyncMock(
        return_value=[Port(id="p-nyc", name="New York", code="USNYC", country_id="c-us")]
    )
    repo.country_exists = AsyncMock(return_value=True)
    repo.state_exists = AsyncMock(return_value=True)
    repo.list_states = AsyncMock(
        return_value=[State(id="s-ny", code="NY", name="New York", country_id="c-us")]
    )
    repo.list_cities = AsyncMock(return_value=[City(id="city-1", name="Albany")])
    repo.list_origin_ports = AsyncMock(
        return_value=[
            Port(id="p-nyc", name="New York", code="USNYC", country_id="c-us", state_id="s-ny")
        ]
    )
    repo.list_destination_ports = AsyncMock(
        return_value=[
            Port(id="p-pti", name="Poti", code="GEPTI", country_id="c-ge", is_destination=True)
        ]
    )
    repo.get_towing_price = AsyncMock(return_value=towing)
    repo.get_shipping_price = AsyncMock(return_value=shipping)
    repo.get_insurance_price = AsyncMock(return_value=insurance)
    repo.get_setting = AsyncMock(return_value=base)
    return repo
