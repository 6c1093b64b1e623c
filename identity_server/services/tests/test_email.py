"""Tests for :mod:`identity_server.services.email`."""

from unittest import TestCase, mock

from .. import email
from ...exceptions import ConfigurationError


class TestNullEmailSender(TestCase):
    """The placeholder sender accepts everything and delivers nothing."""

    @mock.patch(f'{email.__name__}.smtplib')
    def test_always_succeeds(self, mock_smtplib):
        sender = email.NullEmailSender()
        for args in [('alice@example.com', 'Confirm', '<p>Hi</p>'),
                     ('', '', ''),
                     ('not an address', '\n', '<unclosed')]:
            self.assertTrue(sender.send_email(*args))
        self.assertEqual(mock_smtplib.SMTP.call_count, 0,
                         'No connection is made')


class TestSMTPEmailSender(TestCase):
    """Messages are delivered through an SMTP relay."""

    @mock.patch(f'{email.__name__}.smtplib')
    def test_send(self, mock_smtplib):
        conn = mock_smtplib.SMTP.return_value.__enter__.return_value
        sender = email.SMTPEmailSender(host='mail.example.com', port=587,
                                       sender='noreply@example.com')
        self.assertTrue(sender.send_email('alice@example.com', 'Confirm',
                                          '<a href="x">here</a>'))
        mock_smtplib.SMTP.assert_called_once_with(host='mail.example.com',
                                                  port=587)
        self.assertEqual(conn.starttls.call_count, 0)
        self.assertEqual(conn.login.call_count, 0)
        message = conn.send_message.call_args[0][0]
        self.assertEqual(message['To'], 'alice@example.com')
        self.assertEqual(message['From'], 'noreply@example.com')
        self.assertEqual(message['Subject'], 'Confirm')
        html = message.get_body(preferencelist=('html',))
        self.assertIn('<a href="x">here</a>', html.get_content())

    @mock.patch(f'{email.__name__}.smtplib')
    def test_send_with_tls_and_login(self, mock_smtplib):
        conn = mock_smtplib.SMTP.return_value.__enter__.return_value
        sender = email.SMTPEmailSender(username='user', password='pass',
                                       use_tls=True)
        sender.send_email('alice@example.com', 'Confirm', '<p>Hi</p>')
        conn.starttls.assert_called_once_with()
        conn.login.assert_called_once_with('user', 'pass')

    @mock.patch(f'{email.__name__}.smtplib')
    def test_delivery_failure_propagates(self, mock_smtplib):
        mock_smtplib.SMTP.side_effect = ConnectionRefusedError
        sender = email.SMTPEmailSender()
        with self.assertRaises(ConnectionRefusedError):
            sender.send_email('alice@example.com', 'Confirm', '<p>Hi</p>')


class TestCreateEmailSender(TestCase):
    def test_default(self):
        self.assertIsInstance(email.create_email_sender({}),
                              email.NullEmailSender)

    def test_smtp(self):
        sender = email.create_email_sender({'EMAIL_SENDER': 'SMTP',
                                            'SMTP_PORT': '2525'})
        self.assertIsInstance(sender, email.SMTPEmailSender)

    def test_unknown(self):
        with self.assertRaises(ConfigurationError):
            email.create_email_sender({'EMAIL_SENDER': 'carrier-pigeon'})

    def test_base_class(self):
        with self.assertRaises(NotImplementedError):
            email.EmailSender().send_email('a', 'b', 'c')
