"""Capability registry — the tools, resources and prompts a server exposes.

Three name-keyed maps, each holding a record with metadata plus the
callable that backs it.  Listing preserves insertion order; re-registering
a name replaces the record in place.

All access goes through one re-entrant lock, so registering while a
transport is already serving concurrent requests is safe.
"""

from __future__ import annotations

import asyncio
import inspect
import re
import threading
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mcpr.protocols.errors import PromptNotFoundError, ResourceNotFoundError, ToolNotFoundError


def _resolve(value: Any) -> Any:
    """Drive an awaitable handler result to completion on this thread."""
    if inspect.isawaitable(value):
        async def _await() -> Any:
            return await value

        return asyncio.run(_await())
    return value


class Tool(BaseModel):
    """A named callable with a JSON-Schema description of its arguments."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict)
    handler: Callable[..., Any]

    def invoke(self, arguments: dict[str, Any]) -> Any:
        """Call the handler with *arguments* as keyword arguments."""
        return _resolve(self.handler(**arguments))


class Resource(BaseModel):
    """A named, read-only data source.  The name doubles as its URI."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    description: str = ""
    mime_type: str = "text/plain"
    handler: Callable[[], Any]

    def fetch(self) -> Any:
        return _resolve(self.handler())


class Prompt(BaseModel):
    """A text template with ``{placeholder}`` tokens."""

    name: str
    description: str = ""
    template: str
    arguments: dict[str, str] = {}

    def render(self, values: dict[str, Any], stringify: Callable[[Any], str] = str) -> str:
        """Replace every literal ``{key}`` with its value.

        The template is scanned once, so text inserted for one key is never
        re-scanned for placeholders.  Keys are tried in a fixed order:
        declared arguments in registration order, then undeclared keys sorted.
        """
        if not values:
            return self.template
        declared = [k for k in self.arguments if k in values]
        extra = sorted(k for k in values if k not in self.arguments)
        pattern = re.compile("|".join(re.escape("{" + k + "}") for k in declared + extra))

        def _substitute(match: re.Match[str]) -> str:
            value = values[match.group(0)[1:-1]]
            return value if isinstance(value, str) else stringify(value)

        return pattern.sub(_substitute, self.template)


class CapabilityRegistry:
    """In-memory store of tools, resources and prompts.

    Usage::

        registry = CapabilityRegistry()
        registry.register_tool("add", "Add two numbers", schema, lambda a, b: a + b)
        registry.get_tool("add").invoke({"a": 2, "b": 3})  # 5
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tools: dict[str, Tool] = {}
        self._resources: dict[str, Resource] = {}
        self._prompts: dict[str, Prompt] = {}

    # -- registration -------------------------------------------------------

    def register_tool(
        self,
        name: str,
        description: str,
        schema: dict[str, Any],
        handler: Callable[..., Any],
    ) -> Tool:
        tool = Tool(name=name, description=description, input_schema=schema, handler=handler)
        with self._lock:
            self._tools[name] = tool
        return tool

    def register_resource(
        self,
        name: str,
        description: str,
        mime_type: str,
        handler: Callable[[], Any],
    ) -> Resource:
        resource = Resource(
            name=name, description=description, mime_type=mime_type, handler=handler
        )
        with self._lock:
            self._resources[name] = resource
        return resource

    def register_prompt(
        self,
        name: str,
        description: str,
        template: str,
        arguments: dict[str, str] | None = None,
    ) -> Prompt:
        prompt = Prompt(
            name=name, description=description, template=template, arguments=arguments or {}
        )
        with self._lock:
            self._prompts[name] = prompt
        return prompt

    # -- listing ------------------------------------------------------------

    def list_tools(self) -> list[Tool]:
        with self._lock:
            return list(self._tools.values())

    def list_resources(self) -> list[Resource]:
        with self._lock:
            return list(self._resources.values())

    def list_prompts(self) -> list[Prompt]:
        with self._lock:
            return list(self._prompts.values())

    # -- lookup -------------------------------------------------------------

    def get_tool(self, name: str) -> Tool:
        with self._lock:
            tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def get_resource(self, name: str) -> Resource:
        with self._lock:
            resource = self._resources.get(name)
        if resource is None:
            raise ResourceNotFoundError(name)
        return resource

    def get_prompt(self, name: str) -> Prompt:
        with self._lock:
            prompt = self._prompts.get(name)
        if prompt is None:
            raise PromptNotFoundError(name)
        return prompt

    def capabilities(self) -> dict[str, Any]:
        """Capability flags for ``initialize``: one entry per non-empty kind."""
        caps: dict[str, Any] = {}
        with self._lock:
            if self._tools:
                caps["tools"] = {"listChanged": False}
            if self._resources:
                caps["resources"] = {"listChanged": False}
            if self._prompts:
                caps["prompts"] = {"listChanged": False}
        return caps

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools) + len(self._resources) + len(self._prompts)
