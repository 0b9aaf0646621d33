"""Companion-device adapters: phone message channel and local notifications."""

from infrastructure.messaging.http_channel import HttpMessageChannel
from infrastructure.messaging.notifications import LoopNotificationScheduler

__all__ = [
    "HttpMessageChannel",
    "LoopNotificationScheduler",
]
