"""Delivery of password reset links.

Mail delivery is deployment specific; the service only needs something
that accepts (email, link). The default sender records that a link was
issued without writing the link itself to the log.
"""

import logging
from typing import Protocol

logger = logging.getLogger("vt.auth")


class ResetLinkSender(Protocol):
    async def send(self, email: str, link: str) -> None: ...


class LoggingResetLinkSender:
    async def send(self, email: str, link: str) -> None:
        logger.info("password reset link issued to=%s", email)
