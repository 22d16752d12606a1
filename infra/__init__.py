# Infrastructure module - Configuration, Logging, HTTP and MCP surfaces
# Surfaces (service_bus, server, mcp_server) are imported from their modules
# directly; they depend on core, which depends on this package.

from .config import ConfigManager, DEFAULTS
from .logging import (
    get_logger, configure_logging, TurnContext,
    log_turn_end, get_turn_id, generate_turn_id
)

__all__ = [
    # Configuration
    "ConfigManager",
    "DEFAULTS",
    # Logging
    "get_logger",
    "configure_logging",
    "TurnContext",
    "log_turn_end",
    "get_turn_id",
    "generate_turn_id",
]
