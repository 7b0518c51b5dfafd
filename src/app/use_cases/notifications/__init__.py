"""
Notification Use Cases
"""

from .list_notifications_use_case import ListNotificationsUseCase
from .send_notification_use_case import SendNotificationUseCase

__all__ = [
    "SendNotificationUseCase",
    "ListNotificationsUseCase",
]
