"""Parameter validation for generated operation methods.

Validation outcomes are returned, never raised, so an operation method can
decide how to reject a call:

```python
result = validate_params(params, ["workspace_id"], ["workspace_id", "page_limit"])
if not result.is_valid:
    raise result.error
```
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from cloud_sdk_core.errors.exceptions import ParameterValidationError


def is_missing(value: Any) -> bool:
    """Return True for None and the empty string. 0, False and empty collections count as present."""
    return value is None or (isinstance(value, str) and value == "")


def get_missing_params(params: Mapping[str, Any] | None, required: Iterable[str] | None) -> list[str] | None:
    """Return the required parameter names that have no value.

    Args:
        params: The operation's parameters.
        required: Names of required parameters, or None to skip the check.

    Returns:
        The missing names in the order given by ``required`` (empty if none are
        missing), or None when ``required`` is None.
    """
    if required is None:
        return None
    if not params:
        return list(required)
    return [name for name in required if is_missing(params.get(name))]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of ``validate_params``."""

    missing: tuple[str, ...] = ()
    invalid: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.missing and not self.invalid

    @property
    def error(self) -> ParameterValidationError | None:
        """A single error describing both lists, or None when the parameters are valid."""
        if self.is_valid:
            return None
        return ParameterValidationError(missing=self.missing, invalid=self.invalid)


def validate_params(
    params: Mapping[str, Any] | None,
    required: Iterable[str] | None,
    allowed: Iterable[str] | None,
) -> ValidationResult:
    """Check that params holds every required name and only allowed names.

    Args:
        params: The operation's parameters.
        required: Names of required parameters. None skips the missing check.
        allowed: Names of all valid parameters. None skips the invalid check.

    Returns:
        ValidationResult listing the missing and the unexpected names.
    """
    missing = get_missing_params(params, required) or []

    invalid = []
    if allowed is not None and params:
        allowed_names = set(allowed)
        invalid = [key for key in params if key not in allowed_names]

    return ValidationResult(missing=tuple(missing), invalid=tuple(invalid))
