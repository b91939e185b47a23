"""URL helpers: trailing slash normalization and parameterized service URLs."""

from collections.abc import Mapping
from urllib.parse import parse_qs, urljoin, urlsplit

from cloud_sdk_core.errors.exceptions import InvalidUrlVariableError


def strip_trailing_slash(url: str) -> str:
    """Remove a single trailing ``/`` from url."""
    if url.endswith("/"):
        return url[:-1]
    return url


def get_query_param(url: str, param: str) -> str | None:
    """Return the first value of a query parameter in url.

    Relative URLs are accepted.

    Args:
        url: Absolute or relative URL, e.g. a ``next`` pagination link.
        param: Name of the query parameter.

    Returns:
        The parameter value, or None if it is not present.
    """
    # A dummy base lets relative URLs parse the same way as absolute ones.
    query = urlsplit(urljoin("https://foo.bar", url)).query
    values = parse_qs(query, keep_blank_values=True).get(param)
    return values[0] if values else None


def construct_service_url(
    parameterized_url: str,
    default_url_variables: Mapping[str, str],
    provided_url_variables: Mapping[str, str] | None,
) -> str:
    """Construct a service URL by formatting a parameterized URL.

    Args:
        parameterized_url: URL with variable placeholders, e.g. ``"{scheme}://ibm.com"``.
        default_url_variables: Variable names mapped to default values. Every
            placeholder in the URL must have a default here.
        provided_url_variables: Variable names mapped to desired values. Names
            left out (or None) use the default value.

    Returns:
        The URL with the placeholders replaced.

    Raises:
        InvalidUrlVariableError: If a provided name has no default.

    Example:
        ```python
        construct_service_url(
            "{scheme}://api.{region}.example.com",
            {"scheme": "https", "region": "us-south"},
            {"region": "eu-de"},
        )
        # 'https://api.eu-de.example.com'
        ```
    """
    if provided_url_variables is None:
        provided_url_variables = {}

    for name in provided_url_variables:
        if name not in default_url_variables:
            raise InvalidUrlVariableError(name, default_url_variables.keys())

    formatted_url = parameterized_url
    for name, default_value in default_url_variables.items():
        provided_value = provided_url_variables.get(name)
        format_value = provided_value if provided_value is not None else default_value
        # first occurrence only
        formatted_url = formatted_url.replace(f"{{{name}}}", str(format_value), 1)

    return formatted_url
