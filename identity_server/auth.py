"""Browser sessions for signed-in users, via Flask-Login."""

import logging
from typing import Optional

from flask import Flask
from flask_login import LoginManager, UserMixin

from . import domain
from .context import current_context
from .redirect import redirect_to_login
from .services.datastore import NoSuchUser

logger = logging.getLogger(__name__)

login_manager = LoginManager()


class SessionUser(UserMixin):
    """A :class:`domain.User` as seen by Flask-Login."""

    def __init__(self, user: domain.User) -> None:
        self.user = user

    def get_id(self) -> str:
        return self.user.user_id

    @property
    def is_active(self) -> bool:
        return current_context().identity.can_sign_in(self.user)

    def __repr__(self) -> str:
        return f'<SessionUser {self.user.user_id}>'


@login_manager.user_loader
def load_user(user_id: str) -> Optional[SessionUser]:
    """Reload the signed-in user from the user store."""
    try:
        return SessionUser(current_context().identity.get_user(user_id))
    except NoSuchUser:
        logger.debug('Session refers to unknown user %s', user_id)
        return None


def init_app(app: Flask) -> None:
    """Install session handling on ``app``."""
    login_manager.init_app(app)
    login_manager.unauthorized_handler(redirect_to_login)
