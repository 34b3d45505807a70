"""Infer a JSON-Schema ``inputSchema`` from a Python function signature."""

from __future__ import annotations

import inspect
import types
import typing
from collections.abc import Callable
from typing import Any

_JSON_TYPES: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    tuple: "array",
    set: "array",
    frozenset: "array",
    dict: "object",
}

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def json_type(annotation: Any) -> str:
    """Map a type annotation to a JSON-Schema type name (``string`` if unknown)."""
    if annotation is inspect.Parameter.empty:
        return "string"

    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        return json_type(args[0]) if len(args) == 1 else "string"
    if origin is not None:
        annotation = origin

    if isinstance(annotation, type):
        for klass, name in _JSON_TYPES.items():
            if issubclass(annotation, klass):
                # bool is a subclass of int; the exact match wins.
                return _JSON_TYPES.get(annotation, name)
    return "string"


def infer_input_schema(fn: Callable[..., Any]) -> dict[str, Any]:
    """Build an object schema with one property per named parameter.

    Parameters without a default are listed in ``required``; ``*args`` and
    ``**kwargs`` are ignored.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return {"type": "object", "properties": {}, "required": []}

    try:
        hints = typing.get_type_hints(fn)
    except (NameError, TypeError):
        hints = {}

    properties: dict[str, Any] = {}
    required: list[str] = []
    for name, param in signature.parameters.items():
        if param.kind in _SKIPPED_KINDS:
            continue
        annotation = hints.get(name, param.annotation)
        properties[name] = {"type": json_type(annotation), "description": f"Parameter {name}"}
        if param.default is inspect.Parameter.empty:
            required.append(name)

    return {"type": "object", "properties": properties, "required": required}
