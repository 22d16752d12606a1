"""
API Client Framework
--------------------
Per-service HTTP client with uniform status classification.
API keys come from the environment only and are never logged.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, Optional
import logging
import os

import httpx


class APIStatus(Enum):
    """Status of an API response."""
    SUCCESS = auto()
    RATE_LIMITED = auto()
    AUTH_ERROR = auto()
    NOT_FOUND = auto()
    SERVER_ERROR = auto()
    TIMEOUT = auto()
    NETWORK_ERROR = auto()


@dataclass
class APIConfig:
    """Configuration for an API client."""
    name: str
    base_url: str
    api_key_env: Optional[str] = None  # Environment variable name (NOT the actual key)
    api_key_header: str = "Authorization"
    timeout_seconds: float = 30.0
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class APIResponse:
    """Response from an API call."""
    status: APIStatus
    data: Optional[Any] = None
    error: Optional[str] = None
    status_code: int = 0
    response_time_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == APIStatus.SUCCESS


class APIClient:
    """
    Base API client with error classification.

    Rules:
    - API keys loaded from environment only
    - Keys never appear in logs or responses
    - Transport is injectable for tests
    """

    def __init__(
        self,
        config: APIConfig,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.config = config
        self._transport = transport
        self._logger = logging.getLogger(f"monad.api.{config.name}")

        self._api_key = os.getenv(config.api_key_env) if config.api_key_env else None
        if config.api_key_env and not self._api_key:
            self._logger.warning(f"API key not found: {config.api_key_env}")

    @property
    def requires_key(self) -> bool:
        return self.config.api_key_env is not None

    @property
    def is_configured(self) -> bool:
        """Check if API client is properly configured."""
        return not self.requires_key or self._api_key is not None

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers with authentication."""
        headers = {
            "Accept": "application/json",
            "User-Agent": "monad-aio/1.0",
        }
        headers.update(self.config.headers)

        if self._api_key:
            if self.config.api_key_header == "Authorization":
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                headers[self.config.api_key_header] = self._api_key

        return headers

    def get(self, endpoint: str, params: Optional[Dict] = None) -> APIResponse:
        """Make a GET request."""
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, data: Optional[Dict] = None) -> APIResponse:
        """Make a POST request."""
        return self._request("POST", endpoint, json=data)

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict] = None,
        json: Optional[Dict] = None
    ) -> APIResponse:
        """Make an HTTP request with error handling."""
        if not self.is_configured:
            return APIResponse(
                status=APIStatus.AUTH_ERROR,
                error=f"API key not configured: {self.config.api_key_env}"
            )

        url = f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        start_time = datetime.now()

        try:
            with httpx.Client(
                timeout=self.config.timeout_seconds,
                transport=self._transport
            ) as client:
                response = client.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json,
                    headers=self._get_headers()
                )
        except httpx.TimeoutException:
            self._logger.error(f"{method} {url} timed out")
            return APIResponse(
                status=APIStatus.TIMEOUT,
                error="Request timed out"
            )
        except httpx.TransportError as e:
            self._logger.error(f"{method} {url} failed: {e}")
            return APIResponse(
                status=APIStatus.NETWORK_ERROR,
                error=f"Network error: {e}"
            )

        response_time = (datetime.now() - start_time).total_seconds() * 1000
        self._logger.debug(f"{method} {url} -> {response.status_code} ({response_time:.0f}ms)")

        if response.status_code == 200:
            try:
                data = response.json() if response.content else None
            except ValueError:
                return APIResponse(
                    status=APIStatus.SERVER_ERROR,
                    error="Invalid JSON in response",
                    status_code=response.status_code,
                    response_time_ms=response_time
                )
            return APIResponse(
                status=APIStatus.SUCCESS,
                data=data,
                status_code=response.status_code,
                response_time_ms=response_time
            )
        elif response.status_code == 429:
            status, error = APIStatus.RATE_LIMITED, "Rate limit exceeded"
        elif response.status_code in (401, 403):
            status, error = APIStatus.AUTH_ERROR, "Authentication failed"
        elif response.status_code == 404:
            status, error = APIStatus.NOT_FOUND, "Resource not found"
        elif response.status_code >= 500:
            status, error = APIStatus.SERVER_ERROR, f"Server error: {response.status_code}"
        else:
            status, error = APIStatus.SERVER_ERROR, f"Unexpected status: {response.status_code}"

        return APIResponse(
            status=status,
            error=error,
            status_code=response.status_code,
            response_time_ms=response_time
        )


# Pre-configured clients

def create_memory_lol_client(
    base_url: str = "https://api.memory.lol",
    timeout_seconds: float = 15.0,
    transport: Optional[httpx.BaseTransport] = None
) -> APIClient:
    """Create memory.lol client (Twitter username history, no key needed)."""
    return APIClient(APIConfig(
        name="memory_lol",
        base_url=base_url,
        timeout_seconds=timeout_seconds,
    ), transport=transport)


def create_anthropic_client(
    base_url: str = "https://api.anthropic.com/v1",
    api_key_env: str = "ANTHROPIC_API_KEY",
    timeout_seconds: float = 60.0,
    transport: Optional[httpx.BaseTransport] = None
) -> APIClient:
    """Create Anthropic messages API client."""
    return APIClient(APIConfig(
        name="anthropic",
        base_url=base_url,
        api_key_env=api_key_env,
        api_key_header="x-api-key",
        timeout_seconds=timeout_seconds,
        headers={
            "Content-Type": "application/json",
            "anthropic-version": "2023-06-01",
        },
    ), transport=transport)
