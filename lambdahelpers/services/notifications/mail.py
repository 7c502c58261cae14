"""
Email notifications through Amazon SES and raw email parsing
"""
from dataclasses import dataclass
from email import message_from_bytes
from email import policy
from typing import Any, Optional, Union

from ...utils.config_loader import DEFAULT_CONFIG
from ...utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Message:
    """Subject and plain text body of a parsed email."""

    subject: str
    body: str


class Mailer:
    """
    Sends plain text emails with SES.
    """

    def __init__(
        self,
        client: Any,
        subject: str = DEFAULT_CONFIG["mail_subject"],
        charset: str = DEFAULT_CONFIG["mail_charset"],
        sender: str = DEFAULT_CONFIG["mail_sender"],
    ):
        """
        Initialize the mailer.

        Args:
            client: boto3 SES client
            subject: Subject line used for every email
            charset: Charset declared for subject and body
            sender: Verified SES source address used when :meth:`send_mail`
                is not given one
        """
        self.client = client
        self.subject = subject
        self.charset = charset
        self.sender = sender

    def send_mail(self, recipient: str, sender: Optional[str], body: str) -> str:
        """
        Send *body* as a plain text email to a single recipient.

        Args:
            recipient: Destination address
            sender: Verified SES source address; empty or None uses the
                mailer's default sender
            body: Text body

        Returns:
            SES message id

        Raises:
            ValueError: No sender given and no default sender configured
        """
        sender = sender or self.sender
        if not sender:
            raise ValueError("No sender given and mail_sender is not configured")

        flog = log.with_fields(sender=sender, recipient=recipient)
        flog.debug("Sending email")

        try:
            response = self.client.send_email(
                Destination={"ToAddresses": [recipient]},
                Message={
                    "Body": {"Text": {"Charset": self.charset, "Data": body}},
                    "Subject": {"Charset": self.charset, "Data": self.subject},
                },
                Source=sender,
            )
        except Exception:
            flog.error("Failed to send email")
            raise

        message_id = response.get("MessageId", "")
        flog.with_fields(message_id=message_id).info("Sent email")
        return message_id


def parse_body(email: Union[str, bytes]) -> Message:
    """
    Extract the subject and plain text body from a raw email.

    Text is turned back into bytes with ``surrogateescape`` before parsing,
    so 8-bit parts read by :meth:`Bucket.read_file` are decoded with the
    charset their own headers declare.

    Args:
        email: Raw RFC 5322 message, e.g. an object body read from an
            SES-to-S3 inbox bucket

    Returns:
        :class:`Message`; ``body`` is empty when the email has no text part
    """
    log.debug("Parsing body")

    if isinstance(email, str):
        email = email.encode("utf-8", "surrogateescape")

    parsed = message_from_bytes(email, policy=policy.default)
    part = parsed.get_body(preferencelist=("plain",))

    return Message(
        subject=str(parsed.get("Subject", "")),
        body=part.get_content() if part is not None else "",
    )
