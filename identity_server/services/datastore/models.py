"""SQLAlchemy models for the user store."""

import uuid
from datetime import datetime

from pytz import UTC

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Boolean, Column, DateTime, Integer, String

db: SQLAlchemy = SQLAlchemy()


def _utcnow() -> datetime:
    return datetime.now(tz=UTC).replace(tzinfo=None)


def _new_id() -> str:
    return str(uuid.uuid4())


class DBUser(db.Model):  # type: ignore
    """Persistence for :class:`domain.User`."""

    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=_new_id)
    user_name = Column(String(256))
    normalized_user_name = Column(String(256), unique=True, index=True)
    email = Column(String(256))
    normalized_email = Column(String(256), unique=True, index=True)
    email_confirmed = Column(Boolean, nullable=False, default=False)
    password_hash = Column(String(255))
    security_stamp = Column(String(64))
    concurrency_stamp = Column(String(36), default=_new_id)
    phone_number = Column(String(64), nullable=True)
    phone_number_confirmed = Column(Boolean, nullable=False, default=False)
    two_factor_enabled = Column(Boolean, nullable=False, default=False)
    lockout_end = Column(DateTime, nullable=True)
    """Naive UTC."""
    lockout_enabled = Column(Boolean, nullable=False, default=True)
    access_failed_count = Column(Integer, nullable=False, default=0)
    created = Column(DateTime, default=_utcnow)

    def __repr__(self) -> str:
        return f'<DBUser {self.id} {self.user_name}>'
