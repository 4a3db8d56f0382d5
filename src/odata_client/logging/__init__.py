"""OData client logging: hexagonal logging port and adapters."""

from odata_client.logging.port import LoggingPort
from odata_client.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
