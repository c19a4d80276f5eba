"""
Messaging interface for SMS and email compose hand-off.
"""

from abc import ABC, abstractmethod


class MessagingService(ABC):
    """
    Abstract interface for opening the platform's compose views.

    Implementations hand the message off to the SMS/mail app. Returning
    normally means the hand-off was issued, not that the message was sent.
    Raise to report that the compose view could not be opened.
    """

    @abstractmethod
    async def compose_sms(self, phone_number: str, message: str) -> None:
        """
        Open an SMS compose view.

        Args:
            phone_number: Recipient phone number
            message: Message body
        """
        pass

    @abstractmethod
    async def compose_email(self, recipient: str, subject: str, body: str) -> None:
        """
        Open an email compose view.

        Args:
            recipient: Recipient address
            subject: Subject line
            body: Message body
        """
        pass
