"""Data context binding the user store to its database."""

from typing import Any, Optional

from pytz import UTC
from sqlalchemy.exc import IntegrityError

from . import util, models
from ... import domain


class NoSuchUser(RuntimeError):
    """A user was requested that does not exist."""


class DuplicateUser(RuntimeError):
    """A user with the same name or e-mail address already exists."""


init_app = util.init_app
create_all = util.create_all
drop_all = util.drop_all
is_available = util.is_available

_UPDATABLE = {'user_name', 'normalized_user_name', 'email',
              'normalized_email', 'email_confirmed', 'password_hash',
              'security_stamp', 'phone_number', 'phone_number_confirmed',
              'two_factor_enabled', 'lockout_end', 'lockout_enabled',
              'access_failed_count'}


def add_user(user_name: str, normalized_user_name: str, email: str,
             normalized_email: str, password_hash: str,
             security_stamp: str) -> domain.User:
    """Persist a new user record."""
    db_user = models.DBUser(
        user_name=user_name,
        normalized_user_name=normalized_user_name,
        email=email,
        normalized_email=normalized_email,
        password_hash=password_hash,
        security_stamp=security_stamp
    )
    try:
        with util.transaction() as dbsession:
            dbsession.add(db_user)
    except IntegrityError as e:
        raise DuplicateUser(f'User {user_name} <{email}> exists') from e
    return _to_domain(db_user)


def get_user_by_id(user_id: str) -> domain.User:
    """Load a :class:`domain.User` by its identifier."""
    return _get_user(id=user_id)


def get_user_by_name(normalized_user_name: str) -> domain.User:
    """Load a :class:`domain.User` by normalized user name."""
    return _get_user(normalized_user_name=normalized_user_name)


def get_user_by_email(normalized_email: str) -> domain.User:
    """Load a :class:`domain.User` by normalized e-mail address."""
    return _get_user(normalized_email=normalized_email)


def get_password_hash(user_id: str) -> Optional[str]:
    """Get the stored password hash for a user."""
    with util.transaction() as dbsession:
        db_user = _query_dbuser(dbsession, id=user_id)
        hashed: Optional[str] = db_user.password_hash if db_user else None
    if db_user is None:
        raise NoSuchUser(f'No user with id {user_id}')
    return hashed


def update_user(user_id: str, **fields: Any) -> domain.User:
    """
    Update columns of an existing user record.

    Parameters
    ----------
    user_id : str
    fields : kwargs
        Column values to set. Each update also rotates the concurrency stamp.

    """
    unknown = set(fields) - _UPDATABLE
    if unknown:
        raise ValueError(f'Cannot update {", ".join(sorted(unknown))}')
    lockout_end = fields.get('lockout_end')
    if lockout_end is not None and lockout_end.tzinfo is not None:
        fields['lockout_end'] = lockout_end.astimezone(UTC).replace(tzinfo=None)
    try:
        with util.transaction() as dbsession:
            db_user = _query_dbuser(dbsession, id=user_id)
            if db_user is not None:
                for key, value in fields.items():
                    setattr(db_user, key, value)
                db_user.concurrency_stamp = models._new_id()
                dbsession.add(db_user)
    except IntegrityError as e:
        raise DuplicateUser(f'Update conflicts with user {user_id}') from e
    if db_user is None:
        raise NoSuchUser(f'No user with id {user_id}')
    return _to_domain(db_user)


def _query_dbuser(dbsession: util.Session,
                  **criteria: str) -> Optional[models.DBUser]:
    db_user: Optional[models.DBUser] = dbsession.query(models.DBUser) \
        .filter_by(**criteria) \
        .first()
    return db_user


def _get_user(**criteria: str) -> domain.User:
    with util.transaction() as dbsession:
        db_user = _query_dbuser(dbsession, **criteria)
        user = _to_domain(db_user) if db_user is not None else None
    if user is None:
        raise NoSuchUser(f'No user with {criteria}')
    return user


def _to_domain(db_user: models.DBUser) -> domain.User:
    lockout_end = db_user.lockout_end
    if lockout_end is not None and lockout_end.tzinfo is None:
        lockout_end = lockout_end.replace(tzinfo=UTC)
    return domain.User(
        user_id=str(db_user.id),
        user_name=db_user.user_name,
        email=db_user.email,
        email_confirmed=bool(db_user.email_confirmed),
        access_failed_count=db_user.access_failed_count or 0,
        lockout_enabled=bool(db_user.lockout_enabled),
        lockout_end=lockout_end,
        two_factor_enabled=bool(db_user.two_factor_enabled),
        phone_number=db_user.phone_number,
        phone_number_confirmed=bool(db_user.phone_number_confirmed),
        security_stamp=db_user.security_stamp or '',
        created=db_user.created
    )
