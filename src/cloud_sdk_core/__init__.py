"""Cloud SDK Core - Shared runtime library for generated REST service clients.

This library provides the pieces every generated service needs:
- Option resolution from constructor arguments, credentials files and environment
- Authenticate-then-send request dispatch over httpx
- Parameter validation, parameterized service URLs and multipart file handling

Example:
    ```python
    from cloud_sdk_core import BaseService
    from cloud_sdk_core.auth import BasicAuthenticator


    class MyService(BaseService):
        DEFAULT_SERVICE_URL = "https://api.example.com"


    service = MyService(authenticator=BasicAuthenticator("user", "secret"))
    service.configure_service("my-service")  # reads MY_SERVICE_* settings

    response = await service.create_request(
        {
            "options": {"method": "GET", "url": "/v1/things"},
            "default_options": service.default_request_options(),
        }
    )
    ```
"""

from cloud_sdk_core.config import ServiceOptions
from cloud_sdk_core.service import BaseService
from cloud_sdk_core.transport.request_wrapper import DetailedResponse

__version__ = "0.1.0"

__all__ = ["BaseService", "DetailedResponse", "ServiceOptions", "__version__"]
