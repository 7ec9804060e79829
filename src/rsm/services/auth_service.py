from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Protocol

from rsm.domain.errors import AuthorizationError
from rsm.repositories.contracts import SessionFlagStore

log = logging.getLogger(__name__)

DEMO_USERNAME = "admin123"
DEMO_PASSWORD = "123"
INVALID_CREDENTIALS_MSG = f"ชื่อผู้ใช้หรือรหัสผ่านไม่ถูกต้อง (ลองใช้: {DEMO_USERNAME} / {DEMO_PASSWORD})"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


class Authenticator(Protocol):
    def authenticate(self, credentials: Credentials) -> bool: ...


class FixedPairAuthenticator:
    """Placeholder check against one hard-coded pair. Not a security boundary."""

    def __init__(self, username: str = DEMO_USERNAME, password: str = DEMO_PASSWORD):
        self.username = username
        self.password = password

    def authenticate(self, credentials: Credentials) -> bool:
        user_ok = hmac.compare_digest(credentials.username.encode("utf-8"), self.username.encode("utf-8"))
        pass_ok = hmac.compare_digest(credentials.password.encode("utf-8"), self.password.encode("utf-8"))
        return user_ok and pass_ok


class AuthService:
    def __init__(self, store: SessionFlagStore, authenticator: Authenticator | None = None):
        self.store = store
        self.authenticator = authenticator or FixedPairAuthenticator()

    def is_logged_in(self) -> bool:
        return self.store.is_logged_in()

    def login(self, username: str, password: str) -> None:
        creds = Credentials(username=username or "", password=password or "")
        if not self.authenticator.authenticate(creds):
            log.warning("login_failed username=%s", creds.username)
            raise AuthorizationError(INVALID_CREDENTIALS_MSG)
        self.store.set_logged_in()
        log.info("login_ok username=%s", creds.username)

    def logout(self) -> None:
        self.store.clear()
        log.info("logout")
