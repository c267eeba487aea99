"""
Base API Client

Provides unified HTTP request handling and error mapping for the external
API clients used by the Mood Analyst agent.

Every request is a single attempt bounded by a timeout. Failures are raised
as CatalogError subclasses so the orchestration layer can degrade gracefully.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Union

import aiohttp
import structlog
from yarl import URL

from .exceptions import APIError, DecodeError, TransportError

logger = structlog.get_logger(__name__)


class BaseAPIClient(ABC):
    """
    Base HTTP client with unified request handling and error handling.

    Subclasses supply service-specific authentication and response error
    extraction. The client owns one aiohttp session, opened and closed through
    the async context manager protocol.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        service_name: str = "api"
    ):
        """
        Initialize base API client.

        Args:
            base_url: Base URL for the API
            timeout: Total timeout per request in seconds
            service_name: Service name for logging and identification
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.service_name = service_name
        self.session: Optional[aiohttp.ClientSession] = None

        self.logger = logger.bind(
            service=service_name,
            component="BaseAPIClient",
            base_url=base_url
        )

        self.logger.debug("Base API client initialized", timeout=timeout)

    async def __aenter__(self):
        """Async context manager entry."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self.logger.debug("API client session started")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("API client session closed")

    def _build_url(self, endpoint: Union[str, URL]) -> Union[str, URL]:
        """Resolve an endpoint against base_url; absolute and pre-encoded URLs pass through."""
        if isinstance(endpoint, URL):
            return endpoint
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}" if endpoint else self.base_url

    async def _make_request(
        self,
        endpoint: Union[str, URL],
        params: Optional[Dict[str, Any]] = None,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, str]] = None,
        expected_status: Sequence[int] = (200,)
    ) -> Dict[str, Any]:
        """
        Make a single HTTP request and decode its JSON body.

        Args:
            endpoint: API endpoint (relative to base_url), absolute URL, or yarl.URL
            params: Query parameters
            method: HTTP method (GET, POST, etc.)
            headers: Additional headers
            json_body: JSON request body
            data: Form-encoded request body
            expected_status: Status codes treated as success

        Returns:
            Parsed JSON response data

        Raises:
            TransportError: Session missing, network failure or timeout
            APIError: Unexpected HTTP status or error payload
            DecodeError: Malformed response body
        """
        if not self.session:
            self.logger.error("Client not initialized")
            raise TransportError(
                f"{self.service_name} client not initialized. Use async context manager."
            )

        url = self._build_url(endpoint)
        request_headers = dict(headers or {})
        request_headers.setdefault('User-Agent', f'MoodAnalyst-{self.service_name}/1.0')

        request_context = {
            "method": method,
            "url": str(url),
            "param_count": len(params or {}),
        }

        self.logger.debug("Making API request", **request_context)

        try:
            async with self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                data=data,
                headers=request_headers
            ) as response:
                if response.status not in expected_status:
                    body = await response.text()
                    self.logger.warning(
                        f"{self.service_name} HTTP error",
                        status=response.status,
                        body=body,
                        **request_context
                    )
                    raise APIError(
                        f"{self.service_name} request failed with status {response.status}: {body}",
                        status=response.status,
                        body=body,
                        url=str(url)
                    )

                payload = await self._parse_response(response)

                error_info = self._extract_api_error(payload)
                if error_info:
                    self.logger.error(
                        "API error in response body",
                        error=error_info,
                        status=response.status,
                        **request_context
                    )
                    raise APIError(
                        f"{self.service_name} API error: {error_info}",
                        status=response.status,
                        body=error_info,
                        url=str(url)
                    )

                self.logger.debug(
                    "API request successful",
                    status=response.status,
                    **request_context
                )
                return payload

        except asyncio.TimeoutError as e:
            self.logger.warning("Request timeout", timeout=self.timeout, **request_context)
            raise TransportError(
                f"{self.service_name} request timed out after {self.timeout}s",
                url=str(url)
            ) from e

        except aiohttp.ClientError as e:
            self.logger.error(
                "HTTP client error",
                error=str(e),
                error_type=type(e).__name__,
                **request_context
            )
            raise TransportError(
                f"{self.service_name} client error: {e}",
                url=str(url)
            ) from e

    async def _parse_response(self, response: aiohttp.ClientResponse) -> Dict[str, Any]:
        """
        Parse API response. Can be overridden by subclasses for custom parsing.

        Args:
            response: HTTP response object

        Returns:
            Parsed response data (empty dict for an empty body)
        """
        try:
            payload = await response.json(content_type=None)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.logger.error(f"{self.service_name} invalid JSON response", error=str(e))
            raise DecodeError(f"{self.service_name} returned invalid JSON", status=response.status) from e

        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise DecodeError(
                f"{self.service_name} returned unexpected JSON type {type(payload).__name__}",
                status=response.status
            )
        return payload

    @abstractmethod
    def _extract_api_error(self, data: Dict[str, Any]) -> Optional[str]:
        """
        Extract API-specific error information from response data.
        Must be implemented by subclasses.

        Args:
            data: Parsed response data

        Returns:
            Error message if found, None otherwise
        """
        pass

    def get_service_info(self) -> Dict[str, Any]:
        """
        Get service information for health reporting.

        Returns:
            Service configuration and status information
        """
        return {
            "service_name": self.service_name,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "session_active": self.session is not None,
            "component_type": "BaseAPIClient"
        }
