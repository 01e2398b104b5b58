"""004: create calculator reference and price tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE countries (
            id      TEXT            PRIMARY KEY,
            code    VARCHAR(8)      NOT NULL UNIQUE,
            name    TEXT            NOT NULL
        );
    """)
    op.execute("""
        CREATE TABLE ports (
            id          TEXT        PRIMARY KEY,
            name        TEXT        NOT NULL,
            code        VARCHAR(16),
            country_id  TEXT        NOT NULL REFERENCES countries (id)
        );
    """)
    op.execute("CREATE INDEX idx_ports_country ON ports (country_id);")
    op.execute("""
        CREATE TABLE cities (
            id          TEXT        PRIMARY KEY,
            name        TEXT        NOT NULL,
            country_id  TEXT        NOT NULL REFERENCES countries (id)
        );
    """)
    op.execute("""
        CREATE TABLE towing_prices (
            city_id     TEXT            NOT NULL REFERENCES cities (id),
            port_id     TEXT            NOT NULL REFERENCES ports (id),
            price       NUMERIC(12, 2)  NOT NULL CHECK (price >= 0),
            PRIMARY KEY (city_id, port_id)
        );
    """)
    op.execute("""
        CREATE TABLE shipping_prices (
            origin_port_id      TEXT            NOT NULL REFERENCES ports (id),
            destination_port_id TEXT            NOT NULL REFERENCES ports (id),
            price               NUMERIC(12, 2)  NOT NULL CHECK (price >= 0),
            PRIMARY KEY (origin_port_id, destination_port_id)
        );
    """)
    op.execute("""
        CREATE TABLE insurance_prices (
            id          SERIAL          PRIMARY KEY,
            min_value   NUMERIC(12, 2)  NOT NULL,
            max_value   NUMERIC(12, 2)  NOT NULL,
            price       NUMERIC(12, 2)  NOT NULL CHECK (price >= 0),
            CONSTRAINT ck_insurance_bracket CHECK (min_value <= max_value)
        );
    """)
    op.execute("""
        CREATE TABLE system_settings (
            key         TEXT        PRIMARY KEY,
            value       TEXT        NOT NULL,
            updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_system_settings_updated_at
            BEFORE UPDATE ON system_settings
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    for table in (
        "system_settings",
        "insurance_prices",
        "shipping_prices",
        "towing_prices",
        "cities",
        "ports",
        "countries",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table};")
