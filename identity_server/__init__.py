"""
Identity server.

A Flask application that keeps a database of user accounts and lets people
register, confirm their e-mail address, sign in, and reset their password.
Pages that require a signed-in user send anonymous visitors to the login page
with a ``returnUrl`` that brings them back afterwards.

Startup is handled by :func:`identity_server.factory.create_web_app`. It reads
the ``AppDbContextConnection`` connection string, binds the user store to it,
and builds the identity and e-mail services into a single, immutable
:class:`identity_server.context.IdentityContext`. The application does not
start if the connection string is missing or malformed.

By default, users must confirm their e-mail address before they can sign in,
and e-mail is not delivered at all (see :mod:`identity_server.services.email`);
configure an SMTP relay before going into production.
"""
