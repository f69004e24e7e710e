"""Helpers for multipart form fields shared by the content routers."""

import uuid

from portfolio_api.core.errors import ValidationError


def parse_id_list(values: list[str] | None, field: str) -> list[uuid.UUID] | None:
    """Parse ids sent as repeated form fields and/or comma-separated strings.

    ``skill_ids=a&skill_ids=b`` and ``skill_ids=a,b`` both yield [a, b].

    Returns:
        Parsed ids, or None if the field was not sent.

    Raises:
        ValidationError: If any entry is not a UUID.
    """
    if values is None:
        return None

    parsed: list[uuid.UUID] = []
    invalid: list[str] = []
    for value in values:
        for item in value.split(","):
            item = item.strip()
            if not item:
                continue
            try:
                parsed.append(uuid.UUID(item))
            except ValueError:
                invalid.append(item)

    if invalid:
        raise ValidationError(
            f"Invalid {field}",
            details=[{"field": field, "invalid": invalid}],
        )
    return parsed


def blank_to_none(value: str | None) -> str | None:
    """Treat an empty or whitespace-only form field as not sent."""
    if value is None:
        return None
    value = value.strip()
    return value or None
