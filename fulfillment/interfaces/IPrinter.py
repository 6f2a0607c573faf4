from abc import ABC, abstractmethod

class IPrinter(ABC):
    @abstractmethod
    def print_text(self, text: str, title: str) -> None:
        """Send plain text to an output device. Raise on device failure."""
