"""
Channel session lifecycle.

Drives one messaging-gateway session through reset, create, QR pairing and
connection polling.
"""

from salesbot.channel.scheduler import RecurringTask
from salesbot.channel.session import ChannelSessionManager, clean_session_name

__all__ = [
    "ChannelSessionManager",
    "RecurringTask",
    "clean_session_name",
]
