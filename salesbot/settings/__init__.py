"""
Settings package.

Exposes the process-wide settings accessor and the nested configuration groups.
"""

from salesbot.settings.settings import Settings, get_settings, reload_settings

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
]
