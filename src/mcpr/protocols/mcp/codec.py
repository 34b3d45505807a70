"""Message codec — raw text to :class:`JsonRpcRequest` and back.

Pure and stateless.  Decoding failures are raised as protocol errors so
the dispatcher can turn them into ``id: null`` error responses.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from mcpr.protocols.errors import InvalidRequestError, ParseError
from mcpr.protocols.mcp.models import JsonRpcRequest, JsonRpcResponse


def decode(raw: bytes | str) -> JsonRpcRequest:
    """Parse one JSON-RPC message.

    Raises:
        ParseError: The input is not JSON, or the object has no string ``method``.
        InvalidRequestError: The input is JSON but not a request object.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Parse error: {exc}") from exc

    try:
        data: Any = json.loads(raw)
    except ValueError as exc:
        raise ParseError(f"Parse error: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidRequestError("Invalid Request: expected a JSON object")

    if not isinstance(data.get("method"), str):
        raise ParseError("Parse error: missing or non-string 'method'")

    if "params" in data and data["params"] is not None and not isinstance(data["params"], dict):
        raise InvalidRequestError("Invalid Request: 'params' must be an object")

    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequestError(f"Invalid Request: {exc.errors()[0]['msg']}") from exc


def encode(response: JsonRpcResponse) -> str:
    """Serialize *response* as a single compact JSON line (no trailing newline)."""
    return json.dumps(response.to_wire(), separators=(",", ":"), allow_nan=False)
