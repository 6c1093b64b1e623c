"""
User account management and sign-in policy.

:class:`IdentityService` is the only component that touches credentials. It
delegates the primitives to established libraries:

- passwords are hashed and verified with :mod:`werkzeug.security`;
- e-mail confirmation and password reset tokens are signed, timestamped
  payloads produced by :class:`itsdangerous.URLSafeTimedSerializer`, bound to
  the user's security stamp so that a token stops working once the
  credentials it was issued for change;
- the browser session is managed by Flask-Login (see :mod:`.auth`).

The sign-in policy follows :class:`IdentityOptions`. With
``require_confirmed_account`` set, a user whose e-mail address is not
confirmed is refused with :attr:`.SignInResult.NOT_ALLOWED` regardless of the
password.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, List, Mapping, NamedTuple

from markupsafe import escape
from pytz import UTC
from itsdangerous import URLSafeTimedSerializer, BadSignature, \
    SignatureExpired
from werkzeug.security import generate_password_hash, check_password_hash

from .. import domain
from . import datastore
from .datastore import NoSuchUser
from .email import EmailSender

logger = logging.getLogger(__name__)

CONFIRM_EMAIL_PURPOSE = 'EmailConfirmation'
RESET_PASSWORD_PURPOSE = 'ResetPassword'


class RegistrationFailed(RuntimeError):
    """A new user could not be created."""


class InvalidToken(RuntimeError):
    """A confirmation or reset token is forged, expired, or already used."""


class IdentityOptions(NamedTuple):
    """Account and sign-in policy."""

    require_confirmed_account: bool = True
    max_failed_access_attempts: int = 5
    lockout_minutes: int = 5
    token_max_age: int = 86400
    password_required_length: int = 6

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'IdentityOptions':
        """Build options from application configuration."""
        return cls(
            require_confirmed_account=bool(
                config.get('REQUIRE_CONFIRMED_ACCOUNT', True)
            ),
            max_failed_access_attempts=int(
                config.get('MAX_FAILED_ACCESS_ATTEMPTS', 5)
            ),
            lockout_minutes=int(config.get('DEFAULT_LOCKOUT_MINUTES', 5)),
            token_max_age=int(config.get('EMAIL_TOKEN_MAX_AGE', 86400))
        )


def normalize(value: str) -> str:
    """Case-normalize a user name or e-mail address for lookup."""
    return value.strip().upper()


def new_security_stamp() -> str:
    return secrets.token_hex(16)


def password_errors(password: str, required_length: int = 6) -> List[str]:
    """Describe the ways in which ``password`` is too weak."""
    errors = []
    if len(password) < required_length:
        errors.append(f'Passwords must be at least {required_length}'
                      ' characters.')
    if not any(c.isdigit() for c in password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(c.islower() for c in password):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(c.isupper() for c in password):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")
    if all(c.isalnum() for c in password):
        errors.append('Passwords must have at least one non alphanumeric'
                      ' character.')
    return errors


class IdentityService(object):
    """Manages user accounts in the user store."""

    def __init__(self, options: IdentityOptions, secret_key: str,
                 email_sender: EmailSender) -> None:
        self.options = options
        self.email_sender = email_sender
        self._secret_key = secret_key

    def _serializer(self, purpose: str) -> URLSafeTimedSerializer:
        return URLSafeTimedSerializer(self._secret_key, salt=purpose)

    # Accounts.

    def create_user(self, user_name: str, email: str,
                    password: str) -> domain.User:
        """Register a new, unconfirmed user."""
        errors = password_errors(password,
                                 self.options.password_required_length)
        if errors:
            raise RegistrationFailed(' '.join(errors))
        try:
            user = datastore.add_user(
                user_name=user_name.strip(),
                normalized_user_name=normalize(user_name),
                email=email.strip(),
                normalized_email=normalize(email),
                password_hash=generate_password_hash(password),
                security_stamp=new_security_stamp()
            )
        except datastore.DuplicateUser as e:
            raise RegistrationFailed(
                f'User name {user_name} or e-mail {email} is already taken.'
            ) from e
        logger.info('Created user %s', user.user_id)
        return user

    def find_user(self, user_name_or_email: str) -> domain.User:
        """Look up a user by user name, falling back to e-mail address."""
        normalized = normalize(user_name_or_email)
        try:
            return datastore.get_user_by_name(normalized)
        except NoSuchUser:
            return datastore.get_user_by_email(normalized)

    def get_user(self, user_id: str) -> domain.User:
        return datastore.get_user_by_id(user_id)

    def check_password(self, user: domain.User, password: str) -> bool:
        hashed = datastore.get_password_hash(user.user_id)
        return bool(hashed) and check_password_hash(hashed, password)

    # Sign-in.

    def can_sign_in(self, user: domain.User) -> bool:
        """Apply the confirmed-account policy."""
        if self.options.require_confirmed_account and not user.email_confirmed:
            logger.debug('User %s cannot sign in without a confirmed account',
                         user.user_id)
            return False
        return True

    def password_sign_in(self, user_name_or_email: str, password: str,
                         lockout_on_failure: bool = True) \
            -> domain.SignInResult:
        """
        Check credentials and sign-in policy.

        Parameters
        ----------
        user_name_or_email : str
        password : str
        lockout_on_failure : bool
            If True, a failed attempt counts towards account lockout.

        Returns
        -------
        :class:`domain.SignInResult`

        """
        try:
            user = self.find_user(user_name_or_email)
        except NoSuchUser:
            logger.debug('Sign in failed: no such user')
            return domain.SignInResult(domain.SignInResult.FAILED)

        if not self.can_sign_in(user):
            return domain.SignInResult(domain.SignInResult.NOT_ALLOWED, user)
        if user.is_locked_out():
            logger.info('User %s is locked out', user.user_id)
            return domain.SignInResult(domain.SignInResult.LOCKED_OUT, user)

        if self.check_password(user, password):
            if user.access_failed_count:
                user = datastore.update_user(user.user_id,
                                             access_failed_count=0,
                                             lockout_end=None)
            logger.info('User %s signed in', user.user_id)
            return domain.SignInResult(domain.SignInResult.SUCCEEDED, user)

        logger.debug('Invalid password for user %s', user.user_id)
        if lockout_on_failure and user.lockout_enabled:
            user = self._access_failed(user)
            if user.is_locked_out():
                return domain.SignInResult(domain.SignInResult.LOCKED_OUT,
                                           user)
        return domain.SignInResult(domain.SignInResult.FAILED, user)

    def _access_failed(self, user: domain.User) -> domain.User:
        count = user.access_failed_count + 1
        if count < self.options.max_failed_access_attempts:
            return datastore.update_user(user.user_id,
                                         access_failed_count=count)
        lockout_end = datetime.now(tz=UTC) \
            + timedelta(minutes=self.options.lockout_minutes)
        logger.warning('Locking out user %s until %s', user.user_id,
                       lockout_end.isoformat())
        return datastore.update_user(user.user_id, access_failed_count=0,
                                     lockout_end=lockout_end)

    # Tokens.

    def _generate_token(self, user: domain.User, purpose: str) -> str:
        token: str = self._serializer(purpose).dumps(
            {'uid': user.user_id, 'stamp': user.security_stamp}
        )
        return token

    def _verify_token(self, user_id: str, token: str,
                      purpose: str) -> domain.User:
        try:
            payload = self._serializer(purpose).loads(
                token, max_age=self.options.token_max_age
            )
        except SignatureExpired as e:
            raise InvalidToken('Token has expired') from e
        except BadSignature as e:
            raise InvalidToken('Token is not valid') from e
        user = datastore.get_user_by_id(user_id)
        if payload.get('uid') != user.user_id \
                or payload.get('stamp') != user.security_stamp:
            raise InvalidToken('Token is not valid for this user')
        return user

    def generate_email_confirmation_token(self, user: domain.User) -> str:
        return self._generate_token(user, CONFIRM_EMAIL_PURPOSE)

    def confirm_email(self, user_id: str, token: str) -> domain.User:
        """Mark the user's e-mail address as confirmed."""
        user = self._verify_token(user_id, token, CONFIRM_EMAIL_PURPOSE)
        user = datastore.update_user(user.user_id, email_confirmed=True,
                                     security_stamp=new_security_stamp())
        logger.info('Confirmed e-mail for user %s', user.user_id)
        return user

    def generate_password_reset_token(self, user: domain.User) -> str:
        return self._generate_token(user, RESET_PASSWORD_PURPOSE)

    def reset_password(self, user_id: str, token: str,
                       new_password: str) -> domain.User:
        """Replace the password of a user holding a valid reset token."""
        user = self._verify_token(user_id, token, RESET_PASSWORD_PURPOSE)
        errors = password_errors(new_password,
                                 self.options.password_required_length)
        if errors:
            raise RegistrationFailed(' '.join(errors))
        user = datastore.update_user(
            user.user_id,
            password_hash=generate_password_hash(new_password),
            security_stamp=new_security_stamp(),
            access_failed_count=0,
            lockout_end=None
        )
        logger.info('Reset password for user %s', user.user_id)
        return user

    # Messages.

    def send_confirmation_email(self, user: domain.User,
                                callback_url: str) -> bool:
        """Ask the user to follow ``callback_url`` to confirm their account."""
        return self.email_sender.send_email(
            user.email,
            'Confirm your email',
            'Please confirm your account by '
            f'<a href="{escape(callback_url)}">clicking here</a>.'
        )

    def send_password_reset_email(self, user: domain.User,
                                  callback_url: str) -> bool:
        return self.email_sender.send_email(
            user.email,
            'Reset Password',
            'Please reset your password by '
            f'<a href="{escape(callback_url)}">clicking here</a>.'
        )
