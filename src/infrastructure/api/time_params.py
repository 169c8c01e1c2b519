"""Parsing of timestamp query parameters."""

from datetime import datetime

from pydantic import AwareDatetime, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.domain.exceptions import ValidationError

# Same parsing rules as the timestamps of request bodies
_aware_datetime = TypeAdapter(AwareDatetime)


def parse_time_param(name: str, value: str | None) -> datetime:
    """Parse an RFC 3339 timestamp with an explicit offset.

    Args:
        name: Parameter name used in error messages
        value: Raw query parameter value

    Returns:
        Timezone-aware datetime

    Raises:
        ValidationError: If the value is missing, malformed or has no offset
    """
    if not value:
        raise ValidationError(f"could not parse `{name}` time: parameter is required")

    try:
        return _aware_datetime.validate_python(value)
    except PydanticValidationError as e:
        if any(error["type"] == "timezone_aware" for error in e.errors()):
            raise ValidationError(
                f"could not parse `{name}` time: a UTC offset is required, "
                "e.g. 2024-01-01T00:00:00Z"
            ) from e
        raise ValidationError(
            f"could not parse `{name}` time ({e.errors()[0]['msg']})"
        ) from e
