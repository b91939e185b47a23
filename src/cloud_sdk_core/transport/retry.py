"""Retrying transport for service requests.

``RetryTransport`` wraps another httpx transport and retries:

| Condition | Methods retried |
|-----------|-----------------|
| 429 Too Many Requests | all methods, honouring ``Retry-After`` |
| 500, 502, 503, 504 | GET, HEAD, PUT, DELETE, OPTIONS, TRACE |
| network errors | GET, HEAD, PUT, DELETE, OPTIONS, TRACE |

Backoff is exponential (``backoff_factor * 2 ** (attempt - 1)``) and capped at
``max_backoff``, which services expose as ``retry_interval``.

```python
import httpx

from cloud_sdk_core.transport.retry import RetryTransport

transport = RetryTransport(
    wrapped_transport=httpx.AsyncHTTPTransport(),
    max_retries=4,
    max_backoff=30,
)

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://api.example.com")
```
"""

import asyncio
import logging
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 4
DEFAULT_RETRY_INTERVAL = 30.0


class RetryTransport(httpx.AsyncHTTPTransport):
    """Retry transport that handles rate limiting and server errors.

    Args:
        wrapped_transport: The underlying transport to wrap
        max_retries: Maximum number of retry attempts (default: 4)
        backoff_factor: Multiplier for exponential backoff (default: 1.0)
        max_backoff: Maximum backoff time in seconds (default: 30)
        retry_status_codes: 5xx codes to retry (default: 500, 502, 503, 504)
    """

    # Idempotent HTTP methods (per RFC 7231) - safe to retry on 5xx
    IDEMPOTENT_METHODS: frozenset[str] = frozenset(["HEAD", "GET", "PUT", "DELETE", "OPTIONS", "TRACE"])

    DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset([500, 502, 503, 504])

    def __init__(
        self,
        *,
        wrapped_transport: httpx.AsyncBaseTransport,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = 1.0,
        max_backoff: float = DEFAULT_RETRY_INTERVAL,
        retry_status_codes: frozenset[int] | None = None,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.max_backoff = max_backoff
        self.retry_status_codes = retry_status_codes or self.DEFAULT_RETRY_STATUS_CODES

    @property
    def wrapped_transport(self) -> httpx.AsyncBaseTransport:
        return self._wrapped_transport

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send request, retrying on rate limiting and server errors.

        Args:
            request: The HTTP request to send

        Returns:
            HTTP response (after retries if needed)
        """
        retries = 0

        while True:
            try:
                response = await self._wrapped_transport.handle_async_request(request)
            except httpx.TransportError as e:
                if retries >= self.max_retries or request.method not in self.IDEMPOTENT_METHODS:
                    raise

                retries += 1
                delay = self._calculate_backoff_delay(retries)
                logger.warning(
                    f"Request {request.method} {request.url} failed with {e!r}, "
                    f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            should_retry, delay = self._should_retry_with_delay(request, response, retries)
            if not should_retry:
                return response

            retries += 1
            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
            )
            await response.aclose()
            await asyncio.sleep(delay)

    def _should_retry_with_delay(
        self, request: httpx.Request, response: httpx.Response, current_retries: int
    ) -> tuple[bool, float]:
        """Determine if request should be retried and calculate delay.

        Returns:
            Tuple of (should_retry, delay_in_seconds)
        """
        if current_retries >= self.max_retries:
            return False, 0.0

        if response.status_code == 429:
            delay = self._parse_retry_after(response)
            if delay is None:
                delay = self._calculate_backoff_delay(current_retries + 1)
            return True, delay

        if response.status_code in self.retry_status_codes and request.method in self.IDEMPOTENT_METHODS:
            return True, self._calculate_backoff_delay(current_retries + 1)

        return False, 0.0

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse Retry-After header from response.

        Supports both formats:
        - Delay-seconds: "120" (integer seconds)
        - HTTP-date: "Wed, 21 Oct 2015 07:28:00 GMT"

        Returns:
            Delay in seconds capped at max_backoff, or None if the header is
            missing, invalid or in the past.
        """
        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None

        try:
            delay = int(retry_after)
            if delay < 0:
                return None
            return float(min(delay, self.max_backoff))
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after)
            delay = (retry_date - datetime.now(UTC)).total_seconds()
            if delay < 0:
                return None
            return float(min(delay, self.max_backoff))
        except (ValueError, TypeError):
            return None

    def _calculate_backoff_delay(self, retry_number: int) -> float:
        """Exponential backoff for a 1-indexed retry number, capped at max_backoff."""
        delay = self.backoff_factor * (2 ** (retry_number - 1))
        return min(delay, self.max_backoff)
