# API module - External HTTP integrations
# One client per service, secrets isolated in the environment

from .client import (
    APIClient, APIConfig, APIResponse, APIStatus,
    create_memory_lol_client, create_anthropic_client
)
from .llm import LLMClient, LLMError

__all__ = [
    "APIClient", "APIConfig", "APIResponse", "APIStatus",
    "create_memory_lol_client", "create_anthropic_client",
    "LLMClient", "LLMError",
]
