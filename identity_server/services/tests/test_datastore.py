"""Tests for :mod:`identity_server.services.datastore`."""

from unittest import TestCase
from datetime import datetime, timedelta

from pytz import UTC

from .. import datastore
from ...tests.util import create_test_app


class TestDatastore(TestCase):
    """The user store persists identity records."""

    def setUp(self):
        self.app = create_test_app()
        self.ctx = self.app.app_context()
        self.ctx.push()
        self.user = datastore.add_user(
            user_name='Alice', normalized_user_name='ALICE',
            email='Alice@example.com', normalized_email='ALICE@EXAMPLE.COM',
            password_hash='not-really-a-hash', security_stamp='stamp'
        )

    def tearDown(self):
        datastore.drop_all()
        self.ctx.pop()

    def test_add_user(self):
        self.assertTrue(self.user.user_id)
        self.assertEqual(self.user.user_name, 'Alice')
        self.assertFalse(self.user.email_confirmed)
        self.assertEqual(self.user.access_failed_count, 0)
        self.assertIsNotNone(self.user.created)
        self.assertNotIn('not-really-a-hash', repr(self.user))

    def test_lookups(self):
        self.assertEqual(datastore.get_user_by_id(self.user.user_id),
                         self.user)
        self.assertEqual(datastore.get_user_by_name('ALICE'), self.user)
        self.assertEqual(datastore.get_user_by_email('ALICE@EXAMPLE.COM'),
                         self.user)
        self.assertEqual(datastore.get_password_hash(self.user.user_id),
                         'not-really-a-hash')

    def test_no_such_user(self):
        with self.assertRaises(datastore.NoSuchUser):
            datastore.get_user_by_id('nope')
        with self.assertRaises(datastore.NoSuchUser):
            datastore.get_user_by_name('alice')

    def test_duplicates(self):
        with self.assertRaises(datastore.DuplicateUser):
            datastore.add_user(
                user_name='alice', normalized_user_name='ALICE',
                email='other@example.com',
                normalized_email='OTHER@EXAMPLE.COM',
                password_hash='x', security_stamp='y'
            )
        with self.assertRaises(datastore.DuplicateUser):
            datastore.add_user(
                user_name='other', normalized_user_name='OTHER',
                email='alice@example.com',
                normalized_email='ALICE@EXAMPLE.COM',
                password_hash='x', security_stamp='y'
            )

    def test_update_user(self):
        lockout_end = datetime.now(tz=UTC) + timedelta(minutes=5)
        user = datastore.update_user(self.user.user_id, email_confirmed=True,
                                     lockout_end=lockout_end)
        self.assertTrue(user.email_confirmed)
        self.assertEqual(user.lockout_end.tzinfo, UTC)
        self.assertTrue(user.is_locked_out())
        self.assertEqual(datastore.get_user_by_id(self.user.user_id), user)

    def test_update_no_such_user(self):
        with self.assertRaises(datastore.NoSuchUser):
            datastore.update_user('nope', email_confirmed=True)

    def test_update_unknown_column(self):
        with self.assertRaises(ValueError):
            datastore.update_user(self.user.user_id, id='other')

    def test_available(self):
        self.assertTrue(datastore.is_available())
