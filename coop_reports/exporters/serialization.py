"""Shared serialization utilities for exporters and snapshot files."""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from babel.dates import format_date


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization.

    Uses ``dataclasses.fields()`` + ``getattr`` so nested dataclasses
    (installments inside a loan) are serialized recursively by
    :func:`serialize_value` rather than deep-copied.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value):
        return dataclass_to_dict(value)
    elif isinstance(value, dict):
        return {serialize_value(k): serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def quantize(value: Decimal | int | float, places: int = 2) -> Decimal:
    """Round a number half-up to a fixed number of decimal places."""
    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def format_cell(value: Any, locale: str = "es_EC", decimal_places: int = 2) -> str:
    """Format a single value for a CSV cell.

    Amounts get a fixed number of decimals and dates the locale's long
    form (``15 de junio de 2024`` for ``es_EC``).
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (Decimal, float)):
        return f"{quantize(value, decimal_places):.{decimal_places}f}"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return format_date(value.date(), format="long", locale=locale)
    if isinstance(value, date):
        return format_date(value, format="long", locale=locale)
    return str(value)
