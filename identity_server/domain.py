"""Defines identity concepts for use in the identity server."""

from typing import NamedTuple, Optional
from datetime import datetime

from pytz import UTC


class User(NamedTuple):
    """A registered user account."""

    user_id: str
    """Opaque, unique identifier."""

    user_name: str
    email: str

    email_confirmed: bool = False
    """Under the confirmed-account policy, sign-in requires this."""

    access_failed_count: int = 0
    lockout_enabled: bool = True
    lockout_end: Optional[datetime] = None
    two_factor_enabled: bool = False
    phone_number: Optional[str] = None
    phone_number_confirmed: bool = False

    security_stamp: str = ''
    """Changes whenever credentials change; invalidates issued tokens."""

    created: Optional[datetime] = None

    def is_locked_out(self, now: Optional[datetime] = None) -> bool:
        """Whether the account is currently locked out."""
        if not self.lockout_enabled or self.lockout_end is None:
            return False
        now = now or datetime.now(tz=UTC)
        lockout_end = self.lockout_end
        if lockout_end.tzinfo is None:
            lockout_end = lockout_end.replace(tzinfo=UTC)
        return lockout_end > now


class SignInResult(NamedTuple):
    """Outcome of a password sign-in attempt."""

    SUCCEEDED = 'succeeded'  # type: ignore
    FAILED = 'failed'  # type: ignore
    NOT_ALLOWED = 'not_allowed'  # type: ignore
    LOCKED_OUT = 'locked_out'  # type: ignore

    status: str
    user: Optional[User] = None

    @property
    def succeeded(self) -> bool:
        return self.status == self.SUCCEEDED

    @property
    def is_not_allowed(self) -> bool:
        return self.status == self.NOT_ALLOWED

    @property
    def is_locked_out(self) -> bool:
        return self.status == self.LOCKED_OUT


class AuthorizeViewModel(NamedTuple):
    """Details shown to a user asked to authorize a client application."""

    DISPLAY_NAMES = {  # type: ignore
        'application_name': 'Application',
        'scope': 'Scope'
    }

    application_name: str
    scope: str

    @classmethod
    def display_name(cls, field: str) -> str:
        """Get the human-readable label for ``field``."""
        if field not in cls._fields:
            raise KeyError(f'AuthorizeViewModel has no field {field}')
        display: str = cls.DISPLAY_NAMES[field]  # type: ignore
        return display
