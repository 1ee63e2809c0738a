"""Base shift provider abstraction.

This module defines the interface for shift-scheduling services. Every
provider translates its responses into the canonical `ShiftRecord`.

## Query Model

Providers expose a single question: "what is the next shift at or after
this instant?" Walking the schedule forward is the job of
`shift_sync.shifts.chain.ShiftChainFetcher`, not of the provider.

## Translation Requirements

Each provider implements `_translate_response()` to turn its JSON payload
into a `ShiftRecord`, or None when the service reports no further shift.
Records with missing fields are still returned; deciding whether a record
can extend a chain belongs to the fetcher.

## Error Model

- `AuthenticationError`: token rejected (401/403)
- `RateLimitError`: 429, with `Retry-After` when present
- `ProviderError`: any other 4xx/5xx
- `httpx.HTTPError`: transport failures, propagated unchanged

Requests are not retried here. A failed step truncates the chain instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx

from shift_sync.models.shift import ShiftRecord


class ProviderError(Exception):
    """Base exception for shift provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when authentication fails."""

    pass


class ShiftProvider(ABC):
    """Abstract base class for shift-scheduling services.

    Attributes:
        name: Human-readable provider name
        base_url: Base URL for the API

    Example:
        ```python
        class MyProvider(ShiftProvider):
            name = "my_provider"
            base_url = "https://api.example.com"

            async def get_next_shift(self, reference_time):
                response = await self._fetch(...)
                return self._translate_response(response.json())
        ```
    """

    name: str
    base_url: str

    # Statuses that mean "no further shift" rather than a failure
    empty_statuses: frozenset[int] = frozenset({204, 404})

    def __init__(
        self,
        api_token: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the provider.

        Args:
            api_token: Token sent in the Authorization header
            base_url: Override the provider's default base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_token = api_token
        if base_url:
            self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ShiftProvider:
        """Enter async context manager."""
        self._client = self._create_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests."""
        return {
            "Authorization": self.api_token,
            "Accept": "application/json",
        }

    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Fetch data from the API.

        Args:
            url: Full URL to fetch
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response (may be an "empty" status, see `empty_statuses`)

        Raises:
            AuthenticationError: If the token is rejected
            RateLimitError: If rate limit is exceeded
            ProviderError: For any other error status
        """
        client = self._get_client()
        request_headers = self._get_default_headers()
        if headers:
            request_headers.update(headers)

        response = await client.get(url, params=params, headers=request_headers)

        if response.status_code in self.empty_statuses:
            return response

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )

        if response.status_code >= 400:
            raise ProviderError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    @abstractmethod
    async def get_next_shift(self, reference_time: datetime) -> ShiftRecord | None:
        """Get the next shift at or after a reference time.

        Args:
            reference_time: Instant to search forward from

        Returns:
            The next shift, or None if the service has no further shift

        Raises:
            ProviderError: If the service returns an error
            httpx.HTTPError: On transport failure
        """
        pass

    @abstractmethod
    def _translate_response(self, response_data: Any) -> ShiftRecord | None:
        """Translate provider-specific response to a ShiftRecord.

        Args:
            response_data: Decoded JSON response from provider

        Returns:
            ShiftRecord, or None if the payload describes no shift
        """
        pass
