"""
In-memory WebSocket subscribers per user.
When a consultation message is stored (user or AI), push it to every open socket
of that user.
"""

from __future__ import annotations

from typing import Any

from fastapi import WebSocket

# user_id -> set of WebSocket connections
_subscribers: dict[int, set[WebSocket]] = {}


def subscribe_consultation(user_id: int, ws: WebSocket) -> None:
    _subscribers.setdefault(user_id, set()).add(ws)


def unsubscribe_consultation(user_id: int, ws: WebSocket) -> None:
    if user_id in _subscribers:
        _subscribers[user_id].discard(ws)
        if not _subscribers[user_id]:
            del _subscribers[user_id]


def subscriber_count(user_id: int) -> int:
    return len(_subscribers.get(user_id, ()))


async def broadcast_consultation_message(user_id: int, payload: dict[str, Any]) -> int:
    """
    Send payload to all sockets of this user. Sockets that fail are dropped.
    Returns the number of successful deliveries.
    """
    if user_id not in _subscribers:
        return 0
    dead: set[WebSocket] = set()
    sent = 0
    for ws in list(_subscribers[user_id]):
        try:
            await ws.send_json(payload)
            sent += 1
        except Exception:
            dead.add(ws)
    # A socket may unsubscribe itself while a send is pending
    subs = _subscribers.get(user_id)
    if subs is not None:
        subs.difference_update(dead)
        if not subs:
            del _subscribers[user_id]
    return sent
