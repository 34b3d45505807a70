"""MCP server transports — the stdio loop and the transport protocol.

Each transport satisfies the :class:`MCPTransport` protocol: it owns an
I/O loop, hands every raw message to an :class:`MCPDispatcher` and writes
back whatever the dispatcher returns.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Protocol, TextIO, runtime_checkable

if TYPE_CHECKING:
    from mcpr.protocols.mcp.dispatcher import MCPDispatcher

logger = logging.getLogger(__name__)


@runtime_checkable
class MCPTransport(Protocol):
    """Abstract server-side transport for MCP JSON-RPC communication."""

    def serve(self, dispatcher: MCPDispatcher) -> None: ...
    def stop(self) -> None: ...


class StdioTransport:
    """Serves newline-delimited JSON over stdin/stdout.

    Strictly sequential: each line is decoded, dispatched, executed and
    answered before the next one is read, so responses come out in request
    order.  Nothing but protocol messages is ever written to *stdout*.
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def serve(self, dispatcher: MCPDispatcher) -> None:
        """Run the read-dispatch-write loop until EOF or :meth:`stop`."""
        stdin = self._stdin or sys.stdin
        stdout = self._stdout or sys.stdout
        # Raw bytes, so undecodable input becomes a per-line parse error.
        reader = getattr(stdin, "buffer", stdin)
        self._running = True
        logger.info("Serving %s on stdio", dispatcher.server_info.name)

        try:
            while self._running:
                line = reader.readline()
                if not line:
                    logger.info("stdin closed, stopping")
                    break
                if not line.strip():
                    continue

                reply = dispatcher.dispatch(line)
                if reply is not None:
                    stdout.write(reply + "\n")
                    stdout.flush()
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping")
        finally:
            self._running = False

    def stop(self) -> None:
        """Ask the loop to exit after the message in flight."""
        self._running = False
