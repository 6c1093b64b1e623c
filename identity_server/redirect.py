"""
Send unauthenticated users to the login page.

The redirect always carries the URL the user tried to reach as ``returnUrl``,
percent-encoded so that its own path and query survive the round-trip::

    >>> login_redirect('/secret?x=1').location
    'Identity/Account/Login?returnUrl=%2Fsecret%3Fx%3D1'

A forced load navigates the whole page (the login page is served by the
identity area); otherwise the client-side router is told where to go.
"""

from typing import NamedTuple
from urllib.parse import quote, urlsplit

from flask import Response, jsonify, redirect, request

from .context import current_context

DEFAULT_LOGIN_ROUTE = 'Identity/Account/Login'


class LoginRedirect(NamedTuple):
    """Where to send the user, and how."""

    location: str
    force_load: bool = True


def login_redirect(current_url: str, route: str = DEFAULT_LOGIN_ROUTE,
                   force_load: bool = True) -> LoginRedirect:
    """Build the login URL that returns the user to ``current_url``."""
    location = f'{route}?returnUrl={quote(current_url, safe="")}'
    return LoginRedirect(location, force_load)


def redirect_to_login() -> Response:
    """Send the user to log in, with a pointer back to the current URL."""
    context = current_context()
    current_url = request.path
    if request.query_string:
        current_url += '?' + request.query_string.decode('utf-8')
    target = login_redirect(current_url, context.login_route,
                            context.login_force_load)
    if target.force_load:
        return redirect('/' + target.location.lstrip('/'))
    response: Response = jsonify(navigate_to=target.location)
    response.status_code = 401
    return response


def safe_return_url(return_url: str, default: str = '/') -> str:
    """Only follow local, absolute-path return URLs after login."""
    if not return_url or len(return_url) > 2048:
        return default
    parts = urlsplit(return_url)
    if parts.scheme or parts.netloc or not return_url.startswith('/') \
            or return_url.startswith('//') or '\\' in return_url:
        return default
    return return_url
