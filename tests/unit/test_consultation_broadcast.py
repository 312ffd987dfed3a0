"""In-memory consultation socket registry."""
import pytest

from api.ws.consultation_broadcast import (
    broadcast_consultation_message,
    subscribe_consultation,
    subscriber_count,
    unsubscribe_consultation,
)


class _Socket:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send_json(self, payload):
        if self.fail:
            raise RuntimeError("closed")
        self.sent.append(payload)


class _ClosingSocket:
    """Disconnects (route cleanup runs) while its send is pending, then fails."""

    def __init__(self, user_id: int):
        self.user_id = user_id

    async def send_json(self, payload):
        unsubscribe_consultation(self.user_id, self)
        raise RuntimeError("disconnected")


@pytest.mark.unit
class TestBroadcast:
    @pytest.mark.asyncio
    async def test_delivers_and_drops_dead_sockets(self):
        good, dead = _Socket(), _Socket(fail=True)
        subscribe_consultation(41, good)
        subscribe_consultation(41, dead)
        try:
            assert await broadcast_consultation_message(41, {"message": "hi"}) == 1
            assert good.sent == [{"message": "hi"}]
            assert subscriber_count(41) == 1
        finally:
            unsubscribe_consultation(41, good)
        assert subscriber_count(41) == 0

    @pytest.mark.asyncio
    async def test_no_subscribers(self):
        assert await broadcast_consultation_message(42, {"message": "hi"}) == 0

    @pytest.mark.asyncio
    async def test_last_socket_unsubscribing_during_send(self):
        closing = _ClosingSocket(43)
        subscribe_consultation(43, closing)
        assert await broadcast_consultation_message(43, {"message": "hi"}) == 0
        assert subscriber_count(43) == 0

    @pytest.mark.asyncio
    async def test_other_sockets_survive_a_mid_send_disconnect(self):
        closing, good = _ClosingSocket(44), _Socket()
        subscribe_consultation(44, closing)
        subscribe_consultation(44, good)
        try:
            assert await broadcast_consultation_message(44, {"message": "hi"}) == 1
            assert good.sent == [{"message": "hi"}]
            assert subscriber_count(44) == 1
        finally:
            unsubscribe_consultation(44, good)
