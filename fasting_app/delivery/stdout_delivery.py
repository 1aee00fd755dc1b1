"""Standard output message delivery mechanism."""

import json
import sys
from typing import Optional

from ..config.defaults import MessageParams
from ..utils.time import format_local_datetime
from .base import BaseMessageDelivery, DeliveryResult, DeliveryStatus, MessageLevel, UserMessage

_PRETTY_PREFIX = {
    MessageLevel.INFO: "•",
    MessageLevel.SUCCESS: "✓",
    MessageLevel.ERROR: "✗",
}


class StdoutMessageDelivery(BaseMessageDelivery):
    """Prints user-visible messages to stdout."""

    def __init__(self, name: str = "stdout", config: Optional[MessageParams] = None):
        super().__init__(name, config or MessageParams())
        self.config: MessageParams

    def deliver(self, messages: list[UserMessage]) -> list[DeliveryResult]:
        """Deliver messages to stdout."""
        results = []

        for message in messages:
            try:
                print(self._format_message(message), file=sys.stdout, flush=True)
                results.append(DeliveryResult(
                    status=DeliveryStatus.SUCCESS,
                    message="Printed to stdout"
                ))

            except (OSError, ValueError) as e:
                self.logger.error(
                    "Failed to print message to stdout",
                    delivery_name=self.name,
                    level=message.level.value,
                    error=str(e)
                )
                results.append(DeliveryResult(
                    status=DeliveryStatus.FAILED,
                    message=f"Stdout error: {str(e)}",
                    error=e
                ))

        return results

    def _format_message(self, message: UserMessage) -> str:
        """Format message for stdout output."""
        if self.config.format == "json":
            payload = message.to_dict()
            if not self.config.include_timestamp:
                payload.pop("timestamp")
            return json.dumps(payload, ensure_ascii=False)

        output = f"{_PRETTY_PREFIX[message.level]} {message.text}"
        if self.config.include_timestamp:
            output = f"[{format_local_datetime(message.timestamp)}] {output}"
        return output

    def health_check(self) -> bool:
        """Check if stdout is available."""
        try:
            return sys.stdout.writable()
        except (OSError, ValueError):
            return False
