import pytest
from unittest.mock import Mock, patch

from twilio.base.exceptions import TwilioRestException

from availability_responder.exceptions import ChannelUnconfiguredError, ProviderSendError
from availability_responder.notifications.sender import NotificationSender, DeliveryReceipt


@pytest.fixture
def mock_twilio_client():
    client = Mock()
    client.messages.create.return_value = Mock(sid="SM0123456789")
    return client


@pytest.mark.unit
@pytest.mark.notifications
class TestNotificationSender:
    """Test cases for outbound SMS delivery."""

    def test_send(self, mock_twilio_client):
        sender = NotificationSender(from_number="+15550000000", client=mock_twilio_client)

        receipt = sender.send("+15551234567", "Available")

        mock_twilio_client.messages.create.assert_called_once_with(
            body="Available", from_="+15550000000", to="+15551234567"
        )
        assert receipt == DeliveryReceipt(destination="+15551234567", message_sid="SM0123456789")
        assert receipt.delivered is True

    def test_builds_twilio_client_from_credentials(self):
        with patch('availability_responder.notifications.sender.Client') as mock_client_class:
            sender = NotificationSender("AC123", "auth-token", "+15550000000")

        mock_client_class.assert_called_once_with("AC123", "auth-token")
        assert sender.configured is True

    def test_unconfigured_channel(self):
        sender = NotificationSender()

        receipt = sender.send("+15551234567", "Busy")

        assert sender.configured is False
        assert receipt.delivered is False
        assert isinstance(receipt.error, ChannelUnconfiguredError)

    def test_missing_sender_number_is_unconfigured(self, mock_twilio_client):
        sender = NotificationSender(client=mock_twilio_client)

        receipt = sender.send("+15551234567", "Busy")

        assert isinstance(receipt.error, ChannelUnconfiguredError)
        mock_twilio_client.messages.create.assert_not_called()

    def test_twilio_rejection_is_reported(self, mock_twilio_client):
        mock_twilio_client.messages.create.side_effect = TwilioRestException(
            status=400, uri="/Messages", msg="Invalid 'To' Phone Number", code=21211
        )
        sender = NotificationSender(from_number="+15550000000", client=mock_twilio_client)

        receipt = sender.send("+15551234567", "Busy")

        assert receipt.delivered is False
        assert isinstance(receipt.error, ProviderSendError)

    def test_network_failure_is_reported(self, mock_twilio_client):
        mock_twilio_client.messages.create.side_effect = ConnectionError("connection refused")
        sender = NotificationSender(from_number="+15550000000", client=mock_twilio_client)

        receipt = sender.send("+15551234567", "Busy")

        assert isinstance(receipt.error, ProviderSendError)
        assert "connection refused" in str(receipt.error)
