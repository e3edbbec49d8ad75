"""Middleware for the shortlink web app."""

from .headers import SecurityHeadersMiddleware
from .logging import LoggingMiddleware

__all__ = ["SecurityHeadersMiddleware", "LoggingMiddleware"]
