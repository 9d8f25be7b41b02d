"""secureheaders logging — hexagonal logging port and adapters."""

from secureheaders.logging.port import LoggingPort
from secureheaders.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
