"""Tests for the JSON-RPC message codec."""

from __future__ import annotations

import json

import pytest

from mcpr.protocols.errors import InvalidRequestError, ParseError
from mcpr.protocols.mcp.codec import decode, encode
from mcpr.protocols.mcp.models import JsonRpcResponse


class TestDecode:
    def test_valid_request(self) -> None:
        req = decode('{"jsonrpc":"2.0","id":1,"method":"tools/call","params":{"name":"add"}}')
        assert req.method == "tools/call"
        assert req.id == 1
        assert req.params == {"name": "add"}

    def test_bytes_input(self) -> None:
        req = decode(b'{"jsonrpc":"2.0","id":"a","method":"tools/list"}')
        assert req.id == "a"

    def test_invalid_json(self) -> None:
        with pytest.raises(ParseError):
            decode("{not json")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(ParseError):
            decode(b'{"method":"\xff"}')

    def test_missing_method(self) -> None:
        with pytest.raises(ParseError, match="method"):
            decode('{"jsonrpc":"2.0","id":1}')

    def test_non_string_method(self) -> None:
        with pytest.raises(ParseError):
            decode('{"jsonrpc":"2.0","id":1,"method":42}')

    def test_batch_rejected(self) -> None:
        with pytest.raises(InvalidRequestError):
            decode('[{"jsonrpc":"2.0","id":1,"method":"tools/list"}]')

    def test_scalar_rejected(self) -> None:
        with pytest.raises(InvalidRequestError):
            decode("42")

    def test_params_must_be_object(self) -> None:
        with pytest.raises(InvalidRequestError, match="params"):
            decode('{"jsonrpc":"2.0","id":1,"method":"x","params":[1,2]}')

    def test_invalid_id_type(self) -> None:
        with pytest.raises(InvalidRequestError):
            decode('{"jsonrpc":"2.0","id":{"a":1},"method":"x"}')

    @pytest.mark.parametrize("raw_id", ["true", "false", "1.0"])
    def test_id_not_coerced(self, raw_id: str) -> None:
        with pytest.raises(InvalidRequestError):
            decode('{"jsonrpc":"2.0","id":' + raw_id + ',"method":"x"}')

    def test_version_is_not_checked(self) -> None:
        # The dispatcher answers a bad version; the codec only parses.
        assert decode('{"jsonrpc":"1.0","id":1,"method":"x"}').jsonrpc == "1.0"


class TestEncode:
    def test_compact_single_line(self) -> None:
        line = encode(JsonRpcResponse.success(1, {"tools": []}))
        assert line == '{"jsonrpc":"2.0","id":1,"result":{"tools":[]}}'
        assert "\n" not in line

    def test_error_envelope(self) -> None:
        line = encode(JsonRpcResponse.failure(2, -32601, "Method not found", data="x"))
        assert json.loads(line)["error"] == {"code": -32601, "message": "Method not found", "data": "x"}

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValueError):
            encode(JsonRpcResponse.success(1, float("nan")))
