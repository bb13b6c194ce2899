"""
Service Errors
Failures raised by outbound transports
"""


class NotificationError(Exception):
    """An email or WhatsApp message could not be delivered"""

    def __init__(self, channel: str, recipient: str, reason: str):
        self.channel = channel
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"{channel} to {recipient} failed: {reason}")
