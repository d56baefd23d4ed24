# notifications.py

import logging

logger = logging.getLogger(__name__)


class NotificationSink:
    """Holds the latest short-lived event label ("FIGHT!", "BLOCKED!", ...) for the HUD.

    A new message replaces whatever is still on screen.
    """

    def __init__(self, duration=2.0):
        self.duration = duration
        self.message = None
        self.expires_at = 0.0
        self.history = []

    def push(self, text, now):
        logger.info("%s", text)
        self.message = text
        self.expires_at = now + self.duration
        self.history.append(text)

    def current(self, now):
        if self.message is not None and now < self.expires_at:
            return self.message
        return None

    def clear(self):
        self.message = None
        self.expires_at = 0.0
        self.history.clear()
