"""Web Server Gateway Interface entry-point."""

from identity_server.factory import create_web_app

# Built at import, so that a bad configuration stops the server before it
# accepts any request.
__flask_app__ = create_web_app()


def application(environ, start_response):    # type: ignore
    """WSGI application."""
    return __flask_app__(environ, start_response)
