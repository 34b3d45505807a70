"""Tests for ``mcpr request`` CLI command."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import httpx
from click.testing import CliRunner

from mcpr.cli import main

if TYPE_CHECKING:
    from pathlib import Path

_SERVER_SOURCE = """\
from mcpr import mcp

server = mcp("calc")


@server.tool()
def add(a: int, b: int) -> int:
    return a + b
"""


def _write_server(tmp_path: Path) -> Path:
    f = tmp_path / "request_server.py"
    f.write_text(_SERVER_SOURCE)
    return f


def _http_response(status_code: int, body: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = json.dumps(body).encode() if body is not None else b""
    resp.json.return_value = body
    return resp


class TestRequestInProcess:
    def test_tool_call(self, tmp_path: Path) -> None:
        f = _write_server(tmp_path)

        runner = CliRunner()
        result = runner.invoke(
            main,
            [
                "request",
                "tools/call",
                "--target",
                str(f),
                "--params",
                '{"name": "add", "arguments": {"a": 2, "b": 3}}',
            ],
        )

        assert result.exit_code == 0, result.output
        envelope = json.loads(result.output)
        assert envelope["id"] == 1
        assert envelope["result"]["content"][0]["text"] == "5"

    def test_string_id(self, tmp_path: Path) -> None:
        f = _write_server(tmp_path)

        runner = CliRunner()
        result = runner.invoke(
            main, ["request", "tools/list", "--target", str(f), "--id", "abc"]
        )

        assert json.loads(result.output)["id"] == "abc"

    def test_notification(self, tmp_path: Path) -> None:
        f = _write_server(tmp_path)

        runner = CliRunner()
        result = runner.invoke(main, ["request", "tools/list", "--target", str(f), "--notify"])

        assert result.exit_code == 0
        assert "No response" in result.output

    def test_load_error(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["request", "tools/list", "--target", str(tmp_path / "missing.py")]
        )

        assert result.exit_code == 1
        assert "Error loading server" in result.output


class TestRequestValidation:
    def test_needs_exactly_one_destination(self) -> None:
        runner = CliRunner()
        assert runner.invoke(main, ["request", "tools/list"]).exit_code == 2
        both = runner.invoke(main, ["request", "tools/list", "--target", "a", "--url", "b"])
        assert both.exit_code == 2

    def test_bad_params(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["request", "tools/call", "--target", "x.py", "--params", "{oops"]
        )

        assert result.exit_code == 2
        assert "Invalid --params JSON" in result.output


class TestRequestHttp:
    def test_posts_to_mcp_endpoint(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}
        with patch("httpx.post", return_value=_http_response(200, body)) as mock_post:
            runner = CliRunner()
            result = runner.invoke(
                main, ["request", "tools/list", "--url", "http://localhost:8080/"]
            )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == body
        assert mock_post.call_args.args[0] == "http://localhost:8080/mcp"
        sent = json.loads(mock_post.call_args.kwargs["content"])
        assert sent == {"jsonrpc": "2.0", "method": "tools/list", "id": 1}

    def test_accepted_notification(self) -> None:
        with patch("httpx.post", return_value=_http_response(202)):
            runner = CliRunner()
            result = runner.invoke(
                main, ["request", "initialized", "--url", "http://h/mcp", "--notify"]
            )

        assert result.exit_code == 0
        assert "No response" in result.output

    def test_connection_error(self) -> None:
        with patch("httpx.post", side_effect=httpx.ConnectError("refused")):
            runner = CliRunner()
            result = runner.invoke(main, ["request", "tools/list", "--url", "http://h"])

        assert result.exit_code == 1
        assert "Request error" in result.output
