"""WebSocket broadcast for consultation messages."""

from api.ws.consultation_broadcast import (
    broadcast_consultation_message,
    subscribe_consultation,
    unsubscribe_consultation,
)

__all__ = ["broadcast_consultation_message", "subscribe_consultation", "unsubscribe_consultation"]
