"""005: seed the first admin user

Revision ID: 005
Revises: 004
Create Date: 2026-10-19

Reads ADMIN_EMAIL / ADMIN_PASSWORD from the environment. Without
ADMIN_PASSWORD nothing is inserted, so no deployment ships a default
password.
"""

import os
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from src.vt_gateway.auth.password import hash_password

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _admin_email() -> str:
    return os.environ.get("ADMIN_EMAIL", "admin@example.com").strip().lower()


def upgrade() -> None:
    password = os.environ.get("ADMIN_PASSWORD")
    if not password:
        return
    op.get_bind().execute(
        sa.text("""
            INSERT INTO users (email, name, password_hash, role, status)
            VALUES (:email, 'System Administrator', :password_hash, 'ADMIN', 'ACTIVE')
            ON CONFLICT (email) DO UPDATE SET password_hash = EXCLUDED.password_hash
        """),
        {"email": _admin_email(), "password_hash": hash_password(password)},
    )


def downgrade() -> None:
    op.get_bind().execute(
        sa.text("DELETE FROM users WHERE email = :email AND role = 'ADMIN'"),
        {"email": _admin_email()},
    )
