"""Core — capability registry, schema inference and value serialization.

The server facade lives in :mod:`mcpr.core.server`; it is not re-exported
here because it depends on the protocol layer, which depends on this package.
"""

from mcpr.core.registry import CapabilityRegistry, Prompt, Resource, Tool
from mcpr.core.schema import infer_input_schema
from mcpr.core.serialization import SerializerRegistry, deserialize, serialize

__all__ = [
    "CapabilityRegistry",
    "Prompt",
    "Resource",
    "SerializerRegistry",
    "Tool",
    "deserialize",
    "infer_input_schema",
    "serialize",
]
