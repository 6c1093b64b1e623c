"""Helpers for tests."""

from typing import Any, Dict

from flask import Flask

from ..factory import create_web_app

PASSWORD = 'Passw0rd!'


def make_config(**overrides: Any) -> Dict[str, Any]:
    """Configuration for an application with a fresh in-memory user store."""
    config = {
        'CONNECTION_STRINGS': {'AppDbContextConnection': 'Data Source=:memory:'},
        'SECRET_KEY': 'foosecret',
        'CREATE_DB': True,
        'EMAIL_SENDER': 'null',
        'LOGIN_ROUTE': 'Identity/Account/Login',
        'LOGIN_FORCE_LOAD': True,
        'REQUIRE_CONFIRMED_ACCOUNT': True,
        'BASE_SERVER': 'identity.example.com',
        'PREFERRED_URL_SCHEME': 'https',
        'DISPLAY_CONFIRM_ACCOUNT_LINK': False,
        'WTF_CSRF_ENABLED': False,
    }
    config.update(overrides)
    return config


def create_test_app(**overrides: Any) -> Flask:
    app = create_web_app(make_config(**overrides))
    app.config['TESTING'] = True
    return app
