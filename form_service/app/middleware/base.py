"""Base class for middleware that propagates a header value into context.

The value is read from a request header (or generated), stored in
``scope["state"]``, attached to the logging context and echoed on the
response.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

from form_service.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


class HeaderContextMiddleware(ABC):
    """Pure ASGI middleware carrying one header value through a request.

    Subclasses define ``header_name`` (lowercase), ``state_key`` and
    ``log_context_key``, and implement ``generate_value``.
    """

    header_name: str
    state_key: str
    log_context_key: str

    should_clear_context_on_finish: bool = False

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    @abstractmethod
    def generate_value(self) -> str:
        """Return a value for requests that did not send the header."""

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        value = self._extract_or_generate(scope)
        scope.setdefault("state", {})[self.state_key] = value
        set_log_context(**{self.log_context_key: value})

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, value)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            if self.should_clear_context_on_finish:
                clear_log_context()

    def _extract_or_generate(self, scope: Scope) -> str:
        headers = dict(scope.get("headers", []))
        header_bytes = headers.get(self.header_name.encode("latin-1"))
        if header_bytes:
            return header_bytes.decode("latin-1")
        return self.generate_value()
