"""Type coercion between Python values and JSON-compatible trees.

Values that JSON cannot represent directly are written as tagged objects
carrying an ``_mcp_type`` marker, so :func:`deserialize` can rebuild them::

    >>> serialize(complex(1, 2))
    {'_mcp_type': 'complex', 'real': 1.0, 'imag': 2.0}
    >>> deserialize({'_mcp_type': 'complex', 'real': 1.0, 'imag': 2.0})
    (1+2j)

Custom types are handled by an explicit :class:`SerializerRegistry` passed
in by the caller; there is no process-wide mutable state.
"""

from __future__ import annotations

import base64
import dataclasses
import math
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

TYPE_KEY = "_mcp_type"

Encoder = Callable[[Any], Any]
Decoder = Callable[[dict[str, Any]], Any]


class SerializerRegistry:
    """Per-type encoders (looked up along the MRO) and per-tag decoders."""

    def __init__(self) -> None:
        self._encoders: dict[type, tuple[Encoder, str | None]] = {}
        self._decoders: dict[str, Decoder] = {}

    def register(
        self,
        type_: type,
        encoder: Encoder,
        *,
        tag: str | None = None,
        decoder: Decoder | None = None,
    ) -> None:
        """Register *encoder* for instances of *type_*.

        With a *tag*, the encoder's output is wrapped as
        ``{"_mcp_type": tag, "value": <encoded>}`` and *decoder* (if given)
        receives that object back in :func:`deserialize`.
        """
        self._encoders[type_] = (encoder, tag)
        if tag is not None and decoder is not None:
            self._decoders[tag] = decoder

    def find_encoder(self, value: Any) -> tuple[Encoder, str | None] | None:
        for klass in type(value).__mro__:
            entry = self._encoders.get(klass)
            if entry is not None:
                return entry
        return None

    def find_decoder(self, tag: str) -> Decoder | None:
        return self._decoders.get(tag)


def _tagged(tag: str, **fields: Any) -> dict[str, Any]:
    return {TYPE_KEY: tag, **fields}


def _encode_float(value: float) -> Any:
    if math.isnan(value):
        return _tagged("float", value="NaN")
    if math.isinf(value):
        return _tagged("float", value="Infinity" if value > 0 else "-Infinity")
    return value


def serialize(value: Any, registry: SerializerRegistry | None = None) -> Any:
    """Convert *value* into a tree of dicts, lists, strings, numbers, bools and None."""
    if registry is not None:
        entry = registry.find_encoder(value)
        if entry is not None:
            encoder, tag = entry
            encoded = serialize(encoder(value), registry)
            return _tagged(tag, value=encoded) if tag else encoded

    if isinstance(value, Enum):
        return serialize(value.value, registry)
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return _encode_float(value)
    if isinstance(value, complex):
        return _tagged("complex", real=_encode_float(value.real), imag=_encode_float(value.imag))
    # datetime is a subclass of date, so it is checked first.
    if isinstance(value, datetime):
        return _tagged("datetime", value=value.isoformat())
    if isinstance(value, date):
        return _tagged("date", value=value.isoformat())
    if isinstance(value, time):
        return _tagged("time", value=value.isoformat())
    if isinstance(value, Decimal):
        return _tagged("decimal", value=str(value))
    if isinstance(value, (bytes, bytearray)):
        return _tagged("bytes", value=base64.b64encode(bytes(value)).decode("ascii"))
    if isinstance(value, BaseModel):
        return serialize(value.model_dump(mode="json"), registry)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: serialize(getattr(value, f.name), registry) for f in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {str(k): serialize(v, registry) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        items = [serialize(v, registry) for v in value]
        try:
            items.sort()
        except TypeError:
            items.sort(key=repr)
        return _tagged("set", values=items)
    if isinstance(value, Iterable):
        return [serialize(v, registry) for v in value]
    return str(value)


def _decode_float(raw: Any) -> float:
    if isinstance(raw, dict) and raw.get(TYPE_KEY) == "float":
        return float({"NaN": "nan", "Infinity": "inf", "-Infinity": "-inf"}[raw["value"]])
    return float(raw)


_BUILTIN_DECODERS: dict[str, Decoder] = {
    "float": _decode_float,
    "complex": lambda obj: complex(_decode_float(obj["real"]), _decode_float(obj["imag"])),
    "datetime": lambda obj: datetime.fromisoformat(obj["value"]),
    "date": lambda obj: date.fromisoformat(obj["value"]),
    "time": lambda obj: time.fromisoformat(obj["value"]),
    "decimal": lambda obj: Decimal(obj["value"]),
    "bytes": lambda obj: base64.b64decode(obj["value"]),
    "set": lambda obj: set(obj["values"]),
}


def deserialize(tree: Any, registry: SerializerRegistry | None = None) -> Any:
    """Rebuild Python values from a tree produced by :func:`serialize`.

    Objects tagged with an unknown ``_mcp_type`` are returned as plain dicts.
    """
    if isinstance(tree, list):
        return [deserialize(v, registry) for v in tree]
    if not isinstance(tree, dict):
        return tree

    tag = tree.get(TYPE_KEY)
    if isinstance(tag, str):
        decoder = registry.find_decoder(tag) if registry is not None else None
        if decoder is not None:
            return decoder(tree)
        builtin = _BUILTIN_DECODERS.get(tag)
        if builtin is not None:
            if tag == "set":
                return builtin({"values": [deserialize(v, registry) for v in tree["values"]]})
            return builtin(tree)

    return {k: deserialize(v, registry) for k, v in tree.items()}
