from rpcstack.engine.errors import serialize_error
from rpcstack.engine.request_guard import prepare_request


def _prepare(req):
    return prepare_request(req, jsonrpc_version="2.0", serialize=serialize_error)


def test_request_guard_rejects_non_object():
    for value in (None, True, 3, "x", [1]):
        res = _prepare(value)
        assert res.error is not None
        assert res.request is None
        assert res.response["id"] is None
        assert res.response["error"]["code"] == -32600
        assert "result" not in res.response


def test_request_guard_rejects_missing_or_non_string_method():
    for value in ({"id": 7}, {"id": 7, "method": None}, {"id": 7, "method": True}):
        res = _prepare(value)
        assert res.response["id"] == 7
        assert res.response["error"]["code"] == -32600
        assert res.response["error"]["message"].startswith("Must specify a string method.")


def test_request_guard_copies_request_and_builds_shell():
    caller = {"id": 1, "jsonrpc": "2.0", "method": "hello", "params": [1]}
    res = _prepare(caller)
    assert res.error is None
    assert res.request == caller
    assert res.request is not caller
    assert res.response == {"id": 1, "jsonrpc": "2.0"}
    assert res.is_notification is False


def test_request_guard_detects_notification_and_defaults_version():
    res = prepare_request({"method": "notify"}, jsonrpc_version="2.0", serialize=serialize_error)
    assert res.is_notification is True
    assert res.response == {"id": None, "jsonrpc": "2.0"}
