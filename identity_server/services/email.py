"""
E-mail delivery for account confirmation and password reset messages.

The identity service only depends on :class:`EmailSender`. Which variant is
used is decided by the ``EMAIL_SENDER`` configuration parameter:

``null``
    :class:`NullEmailSender` accepts every message and delivers nothing. Use
    it for development and tests; users cannot confirm their accounts unless
    someone reads the confirmation link from the log.
``smtp``
    :class:`SMTPEmailSender` delivers messages through an SMTP relay.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Mapping, Any, Optional

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class EmailSender(object):
    """Sends HTML e-mail on behalf of the identity service."""

    def send_email(self, email: str, subject: str, html_message: str) -> bool:
        """Send ``html_message`` to ``email``; returns ``True`` on success."""
        raise NotImplementedError('Implemented by a subclass')


class NullEmailSender(EmailSender):
    """Placeholder transport that discards every message."""

    def send_email(self, email: str, subject: str, html_message: str) -> bool:
        logger.debug('Discarding e-mail to %s: %s', email, subject)
        return True


class SMTPEmailSender(EmailSender):
    """Delivers messages with a new SMTP connection for each message."""

    def __init__(self, host: str = 'localhost', port: int = 25,
                 sender: str = 'no-reply@localhost',
                 username: Optional[str] = None,
                 password: Optional[str] = None,
                 use_tls: bool = False) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls

    def _new_connection(self) -> smtplib.SMTP:
        return smtplib.SMTP(host=self._host, port=self._port)

    def _build_message(self, email: str, subject: str,
                       html_message: str) -> EmailMessage:
        message = EmailMessage()
        message['Subject'] = subject
        message['From'] = self._sender
        message['To'] = email
        message.set_content('This message requires an HTML capable client.')
        message.add_alternative(html_message, subtype='html')
        return message

    def send_email(self, email: str, subject: str, html_message: str) -> bool:
        message = self._build_message(email, subject, html_message)
        with self._new_connection() as conn:
            if self._use_tls:
                conn.starttls()
            if self._username:
                conn.login(self._username, self._password or '')
            conn.send_message(message)
        logger.info('Sent e-mail to %s: %s', email, subject)
        return True


def create_email_sender(config: Mapping[str, Any]) -> EmailSender:
    """Select the :class:`EmailSender` named by ``EMAIL_SENDER``."""
    kind = str(config.get('EMAIL_SENDER', 'null')).lower()
    if kind == 'null':
        logger.warning('E-mail delivery is disabled; messages are discarded')
        return NullEmailSender()
    if kind == 'smtp':
        return SMTPEmailSender(
            host=config.get('SMTP_HOST', 'localhost'),
            port=int(config.get('SMTP_PORT', 25)),
            sender=config.get('EMAIL_FROM', 'no-reply@localhost'),
            username=config.get('SMTP_USERNAME'),
            password=config.get('SMTP_PASSWORD'),
            use_tls=bool(config.get('SMTP_USE_TLS', False))
        )
    raise ConfigurationError(f'Unknown EMAIL_SENDER: {kind}')
