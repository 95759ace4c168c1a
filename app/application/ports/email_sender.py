from abc import ABC, abstractmethod


class EmailSenderPort(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, html: str) -> None:
        """Send one HTML email. Raises RemoteError on provider failure."""
        raise NotImplementedError
