"""Outbound SMS delivery."""

from .sender import NotificationSender, DeliveryReceipt

__all__ = [
    "NotificationSender",
    "DeliveryReceipt",
]
