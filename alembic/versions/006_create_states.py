"""006: add states; link cities and ports to them, flag destination ports

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE states (
            id          TEXT        PRIMARY KEY,
            code        VARCHAR(8)  NOT NULL,
            name        TEXT        NOT NULL,
            country_id  TEXT        NOT NULL REFERENCES countries (id),
            CONSTRAINT uq_states_country_code UNIQUE (country_id, code)
        );
    """)
    op.execute("CREATE INDEX idx_states_country ON states (country_id);")
    op.execute("ALTER TABLE cities ADD COLUMN state_id TEXT REFERENCES states (id);")
    op.execute("CREATE INDEX idx_cities_state ON cities (state_id);")
    op.execute("""
        ALTER TABLE ports
            ADD COLUMN state_id       TEXT    REFERENCES states (id),
            ADD COLUMN is_destination BOOLEAN NOT NULL DEFAULT FALSE;
    """)
    op.execute("CREATE INDEX idx_ports_state ON ports (state_id);")
    op.execute("CREATE INDEX idx_ports_destination ON ports (is_destination) WHERE is_destination;")


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS idx_ports_destination;")
    op.execute("DROP INDEX IF EXISTS idx_ports_state;")
    op.execute("ALTER TABLE ports DROP COLUMN IF EXISTS is_destination;")
    op.execute("ALTER TABLE ports DROP COLUMN IF EXISTS state_id;")
    op.execute("DROP INDEX IF EXISTS idx_cities_state;")
    op.execute("ALTER TABLE cities DROP COLUMN IF EXISTS state_id;")
    op.execute("DROP TABLE IF EXISTS states;")
