from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseDomainModel(BaseModel):
    """Base config for all domain entities.

    Attributes are snake_case in Python and camelCase on the wire, so the
    same model validates a JSON payload from the store and a keyword call
    from Python code.
    """
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


def coerce_calendar_date(v: Any) -> Any:
    """Reduces any date-like input to its calendar date.

    Timestamps are cut down to their date-only part before parsing, so an
    offset such as ``2024-09-30T23:00:00-05:00`` stays on September 30th.
    Empty strings coming from forms are treated as missing.

    Args:
        v (Any): The raw value (str, date, datetime or None).

    Returns:
        Any: A ``date``, ``None``, or the untouched value for pydantic to reject.
    """
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, str):
        stripped = v.strip()
        if not stripped:
            return None
        if len(stripped) > 10 and stripped[10] in ("T", " "):
            return stripped[:10]
        return stripped
    return v
