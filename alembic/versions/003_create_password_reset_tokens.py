"""003: create password_reset_tokens table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE password_reset_tokens (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            token           VARCHAR(128)    NOT NULL,
            email           VARCHAR(255)    NOT NULL,
            expires_at      TIMESTAMPTZ     NOT NULL,
            used_at         TIMESTAMPTZ,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_password_reset_tokens_token UNIQUE (token)
        );
    """)
    op.execute("CREATE INDEX idx_password_reset_tokens_email ON password_reset_tokens (email);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS password_reset_tokens;")
