"""Sanity checks for user-supplied configuration values."""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from cloud_sdk_core.auth.exceptions import CredentialValidationError

_BAD_CHARS = re.compile(r'^["{]|["}]$')


def has_bad_first_or_last_char(value: str) -> bool:
    """Return True if value starts or ends with a curly bracket or a quote."""
    return bool(_BAD_CHARS.search(value))


def check_credentials(options: Mapping[str, Any], keys: Iterable[str]) -> CredentialValidationError | None:
    """Check option values for common copy/paste mistakes.

    Values copied from a JSON credentials document often keep their
    surrounding quotes or braces. Non-string and absent values are skipped.

    Args:
        options: The option mapping to inspect.
        keys: Names of the options to check.

    Returns:
        A CredentialValidationError describing every bad value, or None.
    """
    messages = []
    bad_keys = []
    for key in keys:
        value = options.get(key)
        if isinstance(value, str) and has_bad_first_or_last_char(value):
            bad_keys.append(key)
            messages.append(
                f"The {key} shouldn't start or end with curly brackets or quotes. "
                f'Be sure to remove any {{}} and " characters surrounding your {key}.'
            )

    if not messages:
        return None
    return CredentialValidationError("\n".join(messages), keys=bad_keys)
