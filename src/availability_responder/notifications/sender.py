from dataclasses import dataclass
from typing import Optional, Any
import logging

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from ..exceptions import SendError, ChannelUnconfiguredError, ProviderSendError
from ..utils.log_sanitizer import sanitize_for_logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryReceipt:
    """
    Outcome of one send attempt.
    Args:
        destination: Address the message was sent to.
        message_sid: Provider message identifier when the send was accepted.
        error: The failure, when the send was not accepted.
    """
    destination: str
    message_sid: Optional[str] = None
    error: Optional[SendError] = None

    @property
    def delivered(self) -> bool:
        return self.error is None


class NotificationSender:
    """
    Sends single SMS replies through Twilio.

    Delivery is best effort: failures are logged and reported in the
    returned receipt, never raised.
    """

    def __init__(
            self,
            account_sid: Optional[str] = None,
            auth_token: Optional[str] = None,
            from_number: Optional[str] = None,
            client: Optional[Any] = None
    ):
        """
        Args:
            account_sid: Twilio account SID
            auth_token: Twilio auth token
            from_number: Twilio phone number replies are sent from
            client: Pre-built Twilio client. Built from the credentials when omitted.
        """
        self._from_number = from_number
        self._client = client
        if self._client is None and account_sid and auth_token:
            self._client = Client(account_sid, auth_token)

        if not self.configured:
            logger.warning("Twilio credentials not found. SMS sending will be disabled.")

    @property
    def configured(self) -> bool:
        return self._client is not None and bool(self._from_number)

    def send(self, destination: str, body: str) -> DeliveryReceipt:
        """
        Send ``body`` to ``destination``.

        Returns:
            DeliveryReceipt describing the outcome.
        """
        sanitized = sanitize_for_logging(to=destination, body=body)

        if not self.configured:
            logger.error("Twilio client not configured. Cannot send SMS to %s.", sanitized['to'])
            return DeliveryReceipt(
                destination=destination,
                error=ChannelUnconfiguredError("Outbound SMS channel is not configured"),
            )

        try:
            message = self._client.messages.create(
                body=body,
                from_=self._from_number,
                to=destination,
            )
        except TwilioRestException as e:
            logger.error("Twilio rejected SMS to %s (status=%s, code=%s): %s",
                         sanitized['to'], e.status, e.code, e.msg)
            return DeliveryReceipt(destination=destination, error=ProviderSendError(str(e)))
        except Exception as e:
            logger.exception("Error sending SMS to %s", sanitized['to'])
            return DeliveryReceipt(destination=destination, error=ProviderSendError(str(e)))

        logger.info("SMS reply sent to %s: %s", sanitized['to'], sanitized['body'])
        return DeliveryReceipt(destination=destination, message_sid=message.sid)
