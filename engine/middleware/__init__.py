"""Middleware components for the smart notification service."""

from engine.middleware.request_id import RequestIDMiddleware

__all__ = [
    "RequestIDMiddleware",
]
