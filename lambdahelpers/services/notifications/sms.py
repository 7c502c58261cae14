"""
SMS notifications through Amazon SNS
"""
from typing import Any

from ...utils.logger import get_logger

log = get_logger(__name__)


class MissingMessageError(ValueError):
    """The message text or the phone number was empty."""


class SMS:
    """Sends text messages with an SNS client.

    Args:
        client: boto3 SNS client
    """

    def __init__(self, client: Any):
        self.client = client

    def send_message(self, message: str, number: str) -> str:
        """Send *message* to the phone number *number*.

        Args:
            message: Text to send
            number: E.164 phone number

        Returns:
            SNS message id

        Raises:
            MissingMessageError: *message* or *number* is empty
        """
        log.info("Sending message")

        if not message or not number:
            log.with_fields(message=message, number=number).error("Missing message or phone number")
            raise MissingMessageError("Missing message or phone number")

        try:
            response = self.client.publish(Message=message, PhoneNumber=number)
        except Exception:
            log.error("Failed to send text message")
            raise

        log.debug("SNS response: %s", response)
        return response.get("MessageId", "")
