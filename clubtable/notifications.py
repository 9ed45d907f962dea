"""Toast notifications built from API responses and errors"""

import time
from typing import Callable, List, Optional
from uuid import uuid4

from clubtable.config import Settings, get_settings
from clubtable.errors import HttpError
from clubtable.schemas.notification import (
    ErrorEnvelope,
    GenericError,
    StructuredServerError,
    Toast,
    ToastAction,
)


class ToastQueue:
    """Notifications waiting to be shown, each with its own lifetime.

    Toasts carrying a ``how`` instruction stay longer than plain ones. A
    duration of 0 keeps the toast until it is removed.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or get_settings()
        self._clock = clock
        self._toasts: List[Toast] = []

    def add(
        self,
        status: str = "info",
        title: Optional[str] = None,
        description: Optional[str] = None,
        what: Optional[str] = None,
        why: Optional[str] = None,
        message: Optional[str] = None,
        who: Optional[str] = None,
        where: Optional[str] = None,
        when: Optional[str] = None,
        how: Optional[str] = None,
        actions: Optional[List[ToastAction]] = None,
        duration: Optional[float] = None,
    ) -> Toast:
        if duration is None:
            duration = (
                self.settings.toast_instruction_duration_seconds
                if how
                else self.settings.toast_duration_seconds
            )

        toast = Toast(
            id=uuid4().hex,
            status=status,
            title=title or what or "Notification",
            description=description or why or message or "",
            who=who,
            where=where,
            when=when,
            how=how,
            actions=actions or [],
            duration=duration,
            created_at=self._clock(),
        )
        self._toasts = self._toasts + [toast]
        return toast

    def add_envelope(self, envelope: ErrorEnvelope, status: str = "error") -> Toast:
        if isinstance(envelope, StructuredServerError):
            return self.add(
                status=status,
                what=envelope.what,
                why=envelope.why,
                who=envelope.who,
                where=envelope.where,
                when=envelope.when,
                how=envelope.how,
                actions=envelope.actions,
            )
        return self.add(status=status, title="Error", message=envelope.message)

    def add_error(self, error: Exception) -> Toast:
        return self.add_envelope(envelope_for(error))

    def remove(self, toast_id: str) -> None:
        self._toasts = [t for t in self._toasts if t.id != toast_id]

    def active(self) -> List[Toast]:
        """Drop expired toasts and return the rest"""
        now = self._clock()
        self._toasts = [
            t for t in self._toasts if t.expires_at is None or t.expires_at > now
        ]
        return list(self._toasts)


def envelope_for(error: Exception) -> ErrorEnvelope:
    """The envelope an error should be rendered with"""
    if isinstance(error, HttpError):
        return error.envelope
    return GenericError(message=str(error) or "Something went wrong")
