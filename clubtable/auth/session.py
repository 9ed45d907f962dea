"""Authenticated session state"""

from typing import Callable, List, Optional

import structlog

from clubtable.auth.token import decode_token
from clubtable.config import settings
from clubtable.schemas.auth import CurrentUser, TokenOk, TokenResult

logger = structlog.get_logger()


class AuthSession:
    """Holds the bearer token and the user it identifies.

    Created per session and passed explicitly to whatever needs it. Logging
    out clears the token and notifies listeners so dependent state can be
    torn down.
    """

    def __init__(self, token: Optional[str] = None, login_path: Optional[str] = None):
        self.token: Optional[str] = None
        self.user: Optional[CurrentUser] = None
        self.redirect_to: Optional[str] = None
        self.login_path = login_path or settings.login_path
        self._logout_listeners: List[Callable[[str], None]] = []

        if token:
            self.restore(token)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def restore(self, token: str) -> TokenResult:
        """Adopt a stored token if it is well formed and not expired"""
        result = decode_token(token)
        if isinstance(result, TokenOk):
            self.token = token
            self.user = CurrentUser.from_claims(result.claims)
            self.redirect_to = None
        else:
            logger.info("Rejected stored token", reason=result.kind)
            self.logout(reason=result.kind)
        return result

    def on_logout(self, callback: Callable[[str], None]) -> None:
        """Register a callback invoked with the logout reason"""
        self._logout_listeners.append(callback)

    def logout(self, reason: str = "logout") -> None:
        """Forget the token and send the user back to the login page"""
        had_token = self.token is not None
        self.token = None
        self.user = None
        self.redirect_to = self.login_path

        if had_token:
            logger.info("Session ended", reason=reason)

        for callback in self._logout_listeners:
            callback(reason)
