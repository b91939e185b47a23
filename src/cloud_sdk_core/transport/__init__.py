"""Transport layer for service requests.

Modules:
    request_wrapper: httpx-backed client that sends service requests
    retry: Retry transport for rate limiting and server errors

Example:
    ```python
    from cloud_sdk_core.transport import RequestWrapper

    wrapper = RequestWrapper(options)
    wrapper.enable_retries(max_retries=3, retry_interval=10)
    response = await wrapper.send_request(parameters)
    ```
"""

from cloud_sdk_core.transport.request_wrapper import DetailedResponse, RequestWrapper
from cloud_sdk_core.transport.retry import RetryTransport

__all__ = ["DetailedResponse", "RequestWrapper", "RetryTransport"]
