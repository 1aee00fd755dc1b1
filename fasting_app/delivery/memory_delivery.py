"""In-memory message delivery, for embedding and tests."""

from .base import BaseMessageDelivery, DeliveryResult, DeliveryStatus, UserMessage


class MemoryMessageDelivery(BaseMessageDelivery):
    """Collects messages in emission order."""

    def __init__(self, name: str = "memory"):
        super().__init__(name)
        self.messages: list[UserMessage] = []

    def deliver(self, messages: list[UserMessage]) -> list[DeliveryResult]:
        self.messages.extend(messages)
        return [DeliveryResult(status=DeliveryStatus.SUCCESS) for _ in messages]

    def health_check(self) -> bool:
        return True

    def texts(self) -> list[str]:
        return [message.text for message in self.messages]

    def clear(self) -> None:
        self.messages.clear()
