"""Display formatting shared by tabular export and reports."""

from datetime import date
from typing import Dict, Optional

from personbase.models.custom_field import CustomValue, FieldKind


def format_date(value: Optional[date]) -> str:
    """DD/MM/YYYY"""
    return value.strftime("%d/%m/%Y") if value else ""


def format_custom_value(
    value: Optional[CustomValue],
    labels: Dict[str, str],
    empty: str = ""
) -> str:
    """Render a stored value by its tag; ``empty`` stands in for a missing value"""
    if value is None or value.is_empty():
        return empty
    if value.kind is FieldKind.BOOLEAN:
        return labels["yes"] if value.value else labels["no"]
    if value.kind is FieldKind.DATE:
        return format_date(value.value)
    if value.kind is FieldKind.NUMBER:
        return f"{value.value:.2f}"
    return str(value.value)
