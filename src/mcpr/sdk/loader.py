"""Resolve ``module:attr`` / ``path/to/file.py:attr`` targets to an :class:`MCPServer`."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path

from mcpr.core.server import MCPServer
from mcpr.sdk.errors import TargetLoadError

DEFAULT_ATTR = "server"


def split_target(target: str) -> tuple[str, str]:
    """Split *target* into ``(module_or_path, attribute)``.

    The attribute defaults to ``server``.  A Windows drive letter
    (``C:\\srv\\app.py``) is not mistaken for the separator.
    """
    head, sep, attr = target.rpartition(":")
    if not sep or not head or "/" in attr or "\\" in attr:
        return target, DEFAULT_ATTR
    return head, attr or DEFAULT_ATTR


def load_server(target: str) -> MCPServer:
    """Import the module or file named by *target* and return its server object.

    A callable attribute is called with no arguments (a server factory).

    Raises:
        TargetLoadError: The module cannot be imported or the attribute is
            missing or is not an :class:`MCPServer`.
    """
    location, attr = split_target(target)

    if location.endswith(".py"):
        path = Path(location)
        if not path.is_file():
            raise TargetLoadError(f"Source file does not exist: {location}")
        module_name = f"_mcpr_target_{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise TargetLoadError(f"Cannot import {location}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            sys.modules.pop(module_name, None)
            raise TargetLoadError(f"Error executing {location}: {exc}") from exc
    else:
        try:
            module = importlib.import_module(location)
        except ImportError as exc:
            raise TargetLoadError(f"Cannot import module '{location}': {exc}") from exc

    try:
        obj = getattr(module, attr)
    except AttributeError as exc:
        raise TargetLoadError(f"'{location}' has no attribute '{attr}'") from exc

    if callable(obj) and not isinstance(obj, MCPServer):
        obj = obj()

    if not isinstance(obj, MCPServer):
        raise TargetLoadError(f"'{target}' is a {type(obj).__name__}, not an MCPServer")
    return obj
