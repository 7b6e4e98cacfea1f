from .services_middleware import ServicesMiddleware
from .structured_logging import StructuredLoggingMiddleware

__all__ = ["ServicesMiddleware", "StructuredLoggingMiddleware"]
