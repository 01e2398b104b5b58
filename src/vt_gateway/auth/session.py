"""Session payload carried inside the signed session token.

Role and status are copied from the user row at login and are NOT re-read
from the database per request. A user blocked after login keeps access
until the token expires (SESSION_MAX_AGE_DAYS) or stops being renewed.
"""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel

from src.vt_common.enums import ROLE_HOME, UserRole, UserStatus


class Session(BaseModel):
    user_id: str
    email: str
    name: str
    role: UserRole
    status: UserStatus

    @property
    def is_blocked(self) -> bool:
        return self.status == UserStatus.BLOCKED

    @property
    def home(self) -> str:
        return ROLE_HOME[self.role]


@dataclass(frozen=True)
class DecodedSession:
    session: Session
    issued_at: datetime
    expires_at: datetime
