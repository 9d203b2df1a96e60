"""Tests for rpcstack.engine.errors module."""

from __future__ import annotations

import copy

import pytest

from rpcstack.engine.errors import (
    EngineInvariantError,
    ErrorCode,
    JsonRpcError,
    internal_error,
    invalid_request,
    method_not_found,
    serialize_error,
)


class TestJsonRpcError:
    def test_default_message_for_standard_code(self) -> None:
        err = JsonRpcError(ErrorCode.METHOD_NOT_FOUND)
        assert err.code == -32601
        assert err.message == "The method does not exist / is not available."
        assert err.serialize() == {"code": -32601, "message": err.message}

    def test_data_is_serialized_only_when_given(self) -> None:
        assert "data" not in internal_error("x").serialize()
        assert internal_error("x", None).serialize() == {"code": -32603, "message": "x", "data": None}
        assert invalid_request("bad", {"request": 1}).serialize()["data"] == {"request": 1}

    def test_rejects_non_integer_code(self) -> None:
        with pytest.raises(ValueError):
            JsonRpcError("oops", "message")  # type: ignore[arg-type]

    def test_invariant_error_embeds_request(self) -> None:
        err = EngineInvariantError("Nothing ended request", {"id": 1, "method": "hello"})
        assert err.code == ErrorCode.INTERNAL
        assert err.message.startswith("JsonRpcEngine: Nothing ended request:\n")
        assert '"method": "hello"' in err.message
        assert err.data == {"request": {"id": 1, "method": "hello"}}

    def test_helpers_build_expected_codes(self) -> None:
        assert method_not_found().code == -32601
        assert invalid_request().code == -32600
        assert internal_error().message == "Internal JSON-RPC error."


class TestSerializeError:
    def test_json_rpc_error(self) -> None:
        err = JsonRpcError(-32000, "custom", {"k": "v"})
        assert serialize_error(err) == {"code": -32000, "message": "custom", "data": {"k": "v"}}

    def test_structured_mapping_is_copied_not_mutated(self) -> None:
        original = {"code": 4001, "message": "rejected", "data": [1], "extra": True}
        snapshot = copy.deepcopy(original)
        result = serialize_error(original)
        assert result == {"code": 4001, "message": "rejected", "data": [1]}
        assert original == snapshot
        assert result is not original

    def test_exception_is_wrapped_as_internal_error(self) -> None:
        result = serialize_error(RuntimeError("foobar"))
        assert result["code"] == -32603
        assert result["message"] == "foobar"
        assert result["data"]["originalError"] == {
            "type": "RuntimeError",
            "message": "foobar",
            "errorCode": "INTERNAL_ERROR",
            "category": "fatal",
        }

    def test_exception_without_message_gets_default(self) -> None:
        result = serialize_error(RuntimeError())
        assert result["message"] == "Internal JSON-RPC error."

    @pytest.mark.parametrize("value", [42, "a string", None, [1, 2], {"no": "code"}])
    def test_non_exception_values_are_preserved(self, value) -> None:
        result = serialize_error(value)
        assert result["code"] == -32603
        assert result["message"] == "Internal JSON-RPC error."
        assert result["data"]["originalError"] == value

    def test_unserializable_value_is_described(self) -> None:
        marker = object()
        result = serialize_error(marker)
        assert result["data"]["originalError"] == repr(marker)

    def test_object_with_code_and_message_attributes(self) -> None:
        class _ProviderError(Exception):
            def __init__(self):
                super().__init__("user rejected")
                self.code = 4001
                self.message = "user rejected"

        assert serialize_error(_ProviderError()) == {"code": 4001, "message": "user rejected"}

    def test_bool_code_is_not_structured(self) -> None:
        result = serialize_error({"code": True, "message": "x"})
        assert result["code"] == -32603

    @pytest.mark.parametrize(
        "value",
        [RuntimeError("boom"), 42, "text", JsonRpcError(-32001, "x", {"a": 1}), {"code": 1, "message": "m"}],
    )
    def test_idempotent(self, value) -> None:
        once = serialize_error(value)
        assert serialize_error(once) == once

    def test_sanitizes_top_level_message_only(self) -> None:
        result = serialize_error(RuntimeError("token=supersecretvalue"))
        assert "supersecretvalue" not in result["message"]
        assert result["data"]["originalError"]["message"] == "token=supersecretvalue"

    def test_original_error_message_keeps_long_identifiers(self) -> None:
        address = "0x" + "ab" * 20
        result = serialize_error(ValueError(f"unknown account {address}"))
        assert result["data"]["originalError"]["message"] == f"unknown account {address}"
        assert result["data"]["originalError"]["type"] == "ValueError"

    def test_sanitize_can_be_disabled(self) -> None:
        result = serialize_error(RuntimeError("token=supersecretvalue"), sanitize=False)
        assert result["message"] == "token=supersecretvalue"

    def test_includes_stack_when_requested(self) -> None:
        try:
            raise RuntimeError("with stack")
        except RuntimeError as exc:
            error = exc
        result = serialize_error(error, should_include_stack=True)
        assert "Traceback" in result["stack"]
        assert serialize_error(result, should_include_stack=True) == result
        assert "stack" not in serialize_error(error)
