"""HTTP middleware."""
from hackdesk.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
