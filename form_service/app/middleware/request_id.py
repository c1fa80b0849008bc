"""Request ID middleware.

Takes ``X-Request-ID`` from the request or generates a UUID4, exposes it as
``request.state.request_id``, adds it to every log record of the request
and returns it in the response headers. The log context is cleared when
the request finishes.
"""

from __future__ import annotations

import uuid

from form_service.app.middleware.base import HeaderContextMiddleware


class RequestIDMiddleware(HeaderContextMiddleware):
    header_name = "x-request-id"
    state_key = "request_id"
    log_context_key = "request_id"
    should_clear_context_on_finish = True

    def generate_value(self) -> str:
        return str(uuid.uuid4())
