"""Tests for startup configuration in :mod:`identity_server.context`."""

from unittest import TestCase, mock

from ..context import get_connection_string, to_database_uri, build_context, \
    current_context, IdentityContext
from ..exceptions import ConfigurationError
from ..factory import create_web_app
from ..services.email import NullEmailSender, SMTPEmailSender
from .util import make_config, create_test_app


class TestGetConnectionString(TestCase):
    def test_present(self):
        config = {'CONNECTION_STRINGS': {'AppDbContextConnection': 'x'}}
        self.assertEqual(
            get_connection_string(config, 'AppDbContextConnection'), 'x'
        )

    def test_missing(self):
        with self.assertRaises(ConfigurationError):
            get_connection_string({'CONNECTION_STRINGS': {}},
                                  'AppDbContextConnection')
        with self.assertRaises(ConfigurationError):
            get_connection_string({}, 'AppDbContextConnection')

    def test_blank(self):
        config = {'CONNECTION_STRINGS': {'AppDbContextConnection': '  '}}
        with self.assertRaises(ConfigurationError):
            get_connection_string(config, 'AppDbContextConnection')


class TestToDatabaseUri(TestCase):
    def test_sqlalchemy_url(self):
        self.assertEqual(to_database_uri('sqlite:///app.db'),
                         'sqlite:///app.db')

    def test_data_source(self):
        self.assertEqual(to_database_uri('DataSource=app.db'),
                         'sqlite:///app.db')
        self.assertEqual(to_database_uri('Data Source=app.db;'),
                         'sqlite:///app.db')
        self.assertEqual(to_database_uri('data source = /tmp/app.db'),
                         'sqlite:////tmp/app.db')

    def test_memory(self):
        self.assertEqual(to_database_uri('Data Source=:memory:'), 'sqlite://')

    def test_malformed(self):
        for value in ['app.db', 'Mode=ReadOnly', 'Data Source=', '=app.db']:
            with self.assertRaises(ConfigurationError, msg=value):
                to_database_uri(value)


class TestBuildContext(TestCase):
    def test_defaults(self):
        context = build_context(make_config())
        self.assertIsInstance(context, IdentityContext)
        self.assertEqual(context.database_uri, 'sqlite://')
        self.assertIsInstance(context.email_sender, NullEmailSender)
        self.assertIs(context.identity.email_sender, context.email_sender)
        self.assertTrue(context.identity.options.require_confirmed_account)
        self.assertEqual(context.login_route, 'Identity/Account/Login')
        self.assertTrue(context.login_force_load)

    def test_smtp(self):
        context = build_context(make_config(EMAIL_SENDER='smtp'))
        self.assertIsInstance(context.email_sender, SMTPEmailSender)

    def test_no_secret(self):
        with self.assertRaises(ConfigurationError):
            build_context(make_config(SECRET_KEY=''))

    def test_immutable(self):
        context = build_context(make_config())
        with self.assertRaises(AttributeError):
            context.login_route = 'elsewhere'


class TestStartup(TestCase):
    """The application does not start without a working user store."""

    def test_missing_connection_string(self):
        config = make_config(CONNECTION_STRINGS={})
        with mock.patch('identity_server.factory.datastore') as mock_ds:
            with self.assertRaises(ConfigurationError):
                create_web_app(config)
            self.assertEqual(mock_ds.init_app.call_count, 0,
                             'User store is never bound')

    def test_malformed_connection_string(self):
        config = make_config(
            CONNECTION_STRINGS={'AppDbContextConnection': 'not a database'}
        )
        with self.assertRaises(ConfigurationError):
            create_web_app(config)

    def test_unknown_email_sender(self):
        with self.assertRaises(ConfigurationError):
            create_web_app(make_config(EMAIL_SENDER='pigeon'))

    def test_registered_once(self):
        """Services are attached to the application at startup."""
        app = create_test_app()
        with app.app_context():
            context = current_context()
            self.assertEqual(app.config['SQLALCHEMY_DATABASE_URI'],
                             context.database_uri)
        with self.assertRaises(ConfigurationError):
            from .. import context as ctx
            ctx.init_app(app, context)
