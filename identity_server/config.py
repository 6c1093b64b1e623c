"""Flask configuration."""

import os
import secrets

#################### Data context ####################
CONNECTION_STRINGS = {
    'AppDbContextConnection': os.environ.get('APP_DB_CONTEXT_CONNECTION')
}
"""Named connection strings.

``AppDbContextConnection`` binds the user store. It may be an SQLAlchemy URL
(``sqlite:///app.db``) or ``Data Source=app.db``. There is no default; the
application refuses to start without it.
"""

SQLALCHEMY_TRACK_MODIFICATIONS = False

CREATE_DB = bool(int(os.environ.get('CREATE_DB', 0)))
"""Create the identity tables on startup."""


#################### Identity options ####################
REQUIRE_CONFIRMED_ACCOUNT = \
    bool(int(os.environ.get('REQUIRE_CONFIRMED_ACCOUNT', '1')))
"""Users must confirm their e-mail address before they can sign in."""

MAX_FAILED_ACCESS_ATTEMPTS = int(os.environ.get('MAX_FAILED_ACCESS_ATTEMPTS',
                                                '5'))
DEFAULT_LOCKOUT_MINUTES = int(os.environ.get('DEFAULT_LOCKOUT_MINUTES', '5'))

EMAIL_TOKEN_MAX_AGE = int(os.environ.get('EMAIL_TOKEN_MAX_AGE', '86400'))
"""Seconds for which confirmation and password reset links are valid."""


#################### Login redirect ####################
LOGIN_ROUTE = os.environ.get('LOGIN_ROUTE', 'Identity/Account/Login')
"""Where unauthenticated users are sent.

Client-side routed deployments use ``authentication/login`` with
``LOGIN_FORCE_LOAD=0``.
"""

LOGIN_FORCE_LOAD = bool(int(os.environ.get('LOGIN_FORCE_LOAD', '1')))
"""If true, the redirect is a full page load (HTTP 302)."""


#################### E-mail ####################
EMAIL_SENDER = os.environ.get('EMAIL_SENDER', 'null')
"""Either ``null`` (accepts and discards every message) or ``smtp``."""

EMAIL_FROM = os.environ.get('EMAIL_FROM', 'no-reply@localhost')
SMTP_HOST = os.environ.get('SMTP_HOST', 'localhost')
SMTP_PORT = int(os.environ.get('SMTP_PORT', '25'))
SMTP_USERNAME = os.environ.get('SMTP_USERNAME')
SMTP_PASSWORD = os.environ.get('SMTP_PASSWORD')
SMTP_USE_TLS = bool(int(os.environ.get('SMTP_USE_TLS', '0')))


#################### Minor configs ##############################
SECRET_KEY = os.environ.get('SECRET_KEY', secrets.token_urlsafe(16))
"""Signs the Flask session cookie and e-mail tokens."""

LOGLEVEL = int(os.environ.get('LOGLEVEL', 20))

APPLICATION_NAME = os.environ.get('APPLICATION_NAME', 'Identity Server')


#################### Public links ####################
BASE_SERVER = os.environ.get('BASE_SERVER', 'localhost:5000')
"""Host (and port) under which the identity area is publicly reachable.

Links mailed to users (e-mail confirmation, password reset) are built from
this value and ``PREFERRED_URL_SCHEME``, never from the request's ``Host``.
"""

PREFERRED_URL_SCHEME = os.environ.get('PREFERRED_URL_SCHEME', 'https')

DISPLAY_CONFIRM_ACCOUNT_LINK = \
    bool(int(os.environ.get('DISPLAY_CONFIRM_ACCOUNT_LINK', '0')))
"""Show the confirmation link after registration when no e-mail is sent.

Only for development. The link is shown only to the session that registered.
"""


#################### Forms ####################
WTF_CSRF_ENABLED = bool(int(os.environ.get('WTF_CSRF_ENABLED', '1')))
"""Reject form posts without a valid antiforgery token."""
