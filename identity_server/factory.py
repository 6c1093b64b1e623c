"""Application factory for the identity server."""

import logging
from typing import Any, Mapping, Optional

from flask import Flask, Response, jsonify
from flask_wtf.csrf import CSRFProtect
from werkzeug.exceptions import HTTPException, Forbidden, Unauthorized, \
    BadRequest, MethodNotAllowed, InternalServerError, NotFound

from . import app_logging, auth, context, filters
from .routes import authorization, identity, ui
from .services import datastore

logger = logging.getLogger(__name__)


def create_web_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    """
    Initialize and configure the identity server.

    Parameters
    ----------
    config : mapping or None
        Overrides applied on top of ``config.py``.

    Raises
    ------
    :class:`.ConfigurationError`
        If the ``AppDbContextConnection`` connection string is missing or
        malformed, or another required service cannot be configured. No
        application is returned in that case.

    """
    app = Flask('identity_server')
    app.config.from_pyfile('config.py')
    if config:
        app.config.update(config)
    app_logging.setup_logger(int(app.config['LOGLEVEL']))

    services = context.build_context(app.config)
    app.config['SQLALCHEMY_DATABASE_URI'] = services.database_uri

    datastore.init_app(app)
    context.init_app(app, services)
    auth.init_app(app)
    CSRFProtect(app)

    app.register_blueprint(ui.blueprint)
    app.register_blueprint(identity.blueprint)
    app.register_blueprint(authorization.blueprint)
    app.jinja_env.filters['display_name'] = filters.display_name

    if app.config['CREATE_DB']:
        with app.app_context():
            datastore.create_all()

    register_error_handlers(app)
    logger.info('Identity server configured; confirmed accounts required: %s',
                services.identity.options.require_confirmed_account)
    return app


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""
    app.errorhandler(Forbidden)(jsonify_exception)
    app.errorhandler(Unauthorized)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)


def jsonify_exception(error: HTTPException) -> Response:
    """Render exceptions as JSON."""
    exc_resp = error.get_response()
    response: Response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    return response
