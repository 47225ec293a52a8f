# core/admin_gate.py
from __future__ import annotations

import hmac
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminGate:
    """
    Local credential check that unlocks add/edit/delete.
    With no credentials configured every attempt is refused.
    """
    user: str = ""
    password: str = ""

    @staticmethod
    def from_env() -> "AdminGate":
        return AdminGate(
            user=os.getenv("SONGBOOK_ADMIN_USER", "").strip(),
            password=os.getenv("SONGBOOK_ADMIN_PASS", ""),
        )

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)

    def check(self, user: str, password: str) -> bool:
        if not self.configured:
            logger.warning("Admin login attempted but no admin credentials are configured")
            return False
        # both comparisons always run
        user_ok = hmac.compare_digest((user or "").strip().encode("utf-8"), self.user.encode("utf-8"))
        pass_ok = hmac.compare_digest((password or "").encode("utf-8"), self.password.encode("utf-8"))
        if not (user_ok and pass_ok):
            logger.info("Rejected admin login for %r", user)
        return user_ok and pass_ok
