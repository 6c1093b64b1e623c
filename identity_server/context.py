"""
The services an application instance is built with.

:func:`build_context` runs once, from the application factory. The resulting
:class:`IdentityContext` is immutable and is stored on the application; request
handlers get it with :func:`current_context`.
"""

import re
from typing import Any, Mapping, NamedTuple

from flask import Flask, current_app

from .exceptions import ConfigurationError
from .services.email import EmailSender, create_email_sender
from .services.identity import IdentityOptions, IdentityService

EXTENSION_KEY = 'identity_server'

_sqlalchemy_url = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')


class IdentityContext(NamedTuple):
    """Process-wide services, built once at startup."""

    database_uri: str
    identity: IdentityService
    email_sender: EmailSender
    login_route: str
    login_force_load: bool


def get_connection_string(config: Mapping[str, Any], name: str) -> str:
    """Get a named connection string; it must be present and non-empty."""
    connection_strings = config.get('CONNECTION_STRINGS') or {}
    value = connection_strings.get(name)
    if not value or not str(value).strip():
        raise ConfigurationError(f'Connection string {name} is not set')
    return str(value).strip()


def to_database_uri(connection_string: str) -> str:
    """
    Convert a connection string to an SQLAlchemy database URI.

    Parameters
    ----------
    connection_string : str
        Either an SQLAlchemy URL, or ``key=value`` pairs separated by ``;``
        naming the SQLite file with ``Data Source`` (or ``DataSource``,
        ``Filename``).

    Returns
    -------
    str

    """
    if _sqlalchemy_url.match(connection_string):
        return connection_string
    pairs = {}
    for part in connection_string.split(';'):
        if not part.strip():
            continue
        key, sep, value = part.partition('=')
        if not sep or not key.strip():
            raise ConfigurationError(
                f'Malformed connection string segment: {part!r}'
            )
        pairs[key.strip().lower().replace(' ', '')] = value.strip()
    source = pairs.get('datasource') or pairs.get('filename')
    if not source:
        raise ConfigurationError('Connection string has no Data Source')
    if source == ':memory:':
        return 'sqlite://'
    return f'sqlite:///{source}'


def build_context(config: Mapping[str, Any]) -> IdentityContext:
    """Build the services named by ``config``."""
    database_uri = to_database_uri(
        get_connection_string(config, 'AppDbContextConnection')
    )
    secret_key = config.get('SECRET_KEY')
    if not secret_key:
        raise ConfigurationError('SECRET_KEY is not set')
    email_sender = create_email_sender(config)
    identity = IdentityService(IdentityOptions.from_config(config),
                               secret_key, email_sender)
    return IdentityContext(
        database_uri=database_uri,
        identity=identity,
        email_sender=email_sender,
        login_route=config.get('LOGIN_ROUTE', 'Identity/Account/Login'),
        login_force_load=bool(config.get('LOGIN_FORCE_LOAD', True))
    )


def init_app(app: Flask, context: IdentityContext) -> None:
    """Attach ``context`` to ``app``; this may only happen once."""
    if EXTENSION_KEY in app.extensions:
        raise ConfigurationError('Identity services are already registered')
    app.extensions[EXTENSION_KEY] = context


def current_context() -> IdentityContext:
    """Get the :class:`IdentityContext` of the current application."""
    context: IdentityContext = current_app.extensions[EXTENSION_KEY]
    return context
