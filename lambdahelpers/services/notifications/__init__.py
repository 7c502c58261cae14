"""
Notifier package.

- :mod:`mail` — SES plain text email and raw email parsing
- :mod:`sms`  — SNS text messages
"""
from .mail import Mailer, Message, parse_body
from .sms import SMS, MissingMessageError

__all__ = [
    'Mailer',
    'Message',
    'MissingMessageError',
    'SMS',
    'parse_body',
]
