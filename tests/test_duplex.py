import pytest

from rpcstack import DuplexJsonRpcEngine, JsonRpcEngine
from rpcstack.utils.exceptions import EngineDestroyedError


def _end_with(value):
    def _mw(req, res, next_, end):
        res["result"] = value
        end()

    return _mw


@pytest.mark.asyncio
async def test_receiver_and_sender_are_independent():
    duplex = DuplexJsonRpcEngine()
    duplex.add_receiver_middleware(_end_with("received"))
    duplex.add_sender_middleware(_end_with("sent"))

    incoming = await duplex.receive({"id": 1, "method": "ping"})
    outgoing = await duplex.send({"id": 2, "method": "ping"})

    assert incoming["result"] == "received"
    assert outgoing["result"] == "sent"
    assert isinstance(duplex.receiver, JsonRpcEngine)
    assert duplex.receiver is not duplex.sender


@pytest.mark.asyncio
async def test_duplex_handles_batches():
    duplex = DuplexJsonRpcEngine()
    duplex.add_receiver_middleware(_end_with(True))
    responses = await duplex.receive([{"id": 1, "method": "a"}, {"method": "b"}])
    assert [r["id"] for r in responses] == [1]


@pytest.mark.asyncio
async def test_duplex_notification_handlers():
    received, sent = [], []
    duplex = DuplexJsonRpcEngine(
        receiver_notification_handler=lambda n: received.append(n["method"]),
        sender_notification_handler=lambda n: sent.append(n["method"]),
    )
    await duplex.receiver.emit_notification({"method": "incoming"})
    await duplex.sender.emit_notification({"method": "outgoing"})
    assert received == ["incoming"]
    assert sent == ["outgoing"]


@pytest.mark.asyncio
async def test_duplex_engines_embed_as_middleware():
    duplex = DuplexJsonRpcEngine()
    duplex.add_receiver_middleware(_end_with("from receiver"))
    outer = JsonRpcEngine([duplex.receiver_as_middleware()])
    response = await outer.handle({"id": 1, "method": "x"})
    assert response["result"] == "from receiver"

    duplex.add_sender_middleware(_end_with("from sender"))
    outer = JsonRpcEngine([duplex.sender_as_middleware()])
    response = await outer.handle({"id": 1, "method": "x"})
    assert response["result"] == "from sender"


@pytest.mark.asyncio
async def test_duplex_destroy():
    duplex = DuplexJsonRpcEngine()
    duplex.destroy()
    with pytest.raises(EngineDestroyedError):
        await duplex.receive({"id": 1, "method": "x"})
    with pytest.raises(EngineDestroyedError):
        duplex.add_sender_middleware(_end_with(1))
