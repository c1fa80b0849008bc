"""ASGI middleware."""

from form_service.app.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
