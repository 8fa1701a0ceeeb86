"""
Live feed availability states.
"""

from enum import Enum

class FeedAvailability(Enum):
    """Whether the live chain endpoint can be used.

    Set once by the startup connection attempt and never re-evaluated.
    """
    NOT_CONFIGURED = "NotConfigured"
    UNAVAILABLE = "Unavailable"
    READY = "Ready"

    @property
    def is_ready(self) -> bool:
        return self is FeedAvailability.READY
