"""Base classes for user-visible message delivery."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..logging.config import get_logger
from ..utils.time import now_ms


class MessageLevel(str, Enum):
    """Severity of a user-visible message."""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class UserMessage:
    """A short message shown to the user (toast)."""
    level: MessageLevel
    text: str
    timestamp: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.value, "text": self.text, "timestamp": self.timestamp}


class DeliveryStatus(Enum):
    """Message delivery status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DeliveryResult:
    """Result of a message delivery attempt."""
    status: DeliveryStatus
    message: Optional[str] = None
    error: Optional[Exception] = None


class BaseMessageDelivery(ABC):
    """Base class for user-visible message sinks."""

    def __init__(self, name: str, config: Any = None):
        self.name = name
        self.config = config
        self.logger = get_logger(f"fasting.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    def deliver(self, messages: list[UserMessage]) -> list[DeliveryResult]:
        """
        Deliver messages to the configured destination.

        Args:
            messages: Messages in emission order

        Returns:
            List of delivery results for each message
        """
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if delivery mechanism is healthy."""
        pass

    def emit(self, level: MessageLevel, text: str) -> DeliveryResult:
        """Deliver a single message and update the counters."""
        results = self.deliver([UserMessage(level=level, text=text)])
        result = results[0] if results else DeliveryResult(status=DeliveryStatus.FAILED)
        if result.status == DeliveryStatus.SUCCESS:
            self._delivery_count += 1
        else:
            self._error_count += 1
        return result

    def info(self, text: str) -> DeliveryResult:
        return self.emit(MessageLevel.INFO, text)

    def success(self, text: str) -> DeliveryResult:
        return self.emit(MessageLevel.SUCCESS, text)

    def error(self, text: str) -> DeliveryResult:
        return self.emit(MessageLevel.ERROR, text)

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
        }
