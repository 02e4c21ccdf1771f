# diamond_loader/schemas/validators.py
import math
from typing import List, Optional

from pydantic import AnyUrl, TypeAdapter, ValidationError

from diamond_loader.core.catalog import ENUM_VALUES, FieldSchema, get_schema
from diamond_loader.schemas.validation import RawRecord, ValidationIssue

_url_adapter = TypeAdapter(AnyUrl)


def parse_number(raw: str) -> Optional[float]:
    """float(raw) for finite numbers, None for anything else."""
    try:
        value = float(raw.strip())
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def is_valid_url(raw: str) -> bool:
    try:
        _url_adapter.validate_python(raw.strip())
    except ValidationError:
        return False
    return True


def _issue(row: int, schema: FieldSchema, raw: str, message: str, code: str,
           severity: str = "error") -> ValidationIssue:
    return ValidationIssue(
        row=row,
        field=schema.name,
        raw_value=raw,
        message=message,
        severity=severity,
        code=code,
    )


def validate_field(
    field: str,
    raw_value: Optional[str],
    row: int,
    schema: Optional[FieldSchema] = None,
) -> List[ValidationIssue]:
    schema = schema or get_schema(field)
    if schema is None:
        # extra dealer columns are allowed through untouched
        return []

    raw = raw_value or ""
    value = raw.strip()

    if not value:
        if schema.mandatory:
            return [_issue(row, schema, raw, f"{schema.name} is mandatory and cannot be empty",
                           "mandatory_empty")]
        return []

    if schema.kind == "enum":
        if not schema.allows(value):
            allowed = ", ".join(ENUM_VALUES.get(schema.name) or sorted(schema.allowed_values))
            return [_issue(row, schema, raw,
                           f"Invalid {schema.label or schema.name}. Must be one of: {allowed}",
                           "invalid_enum")]

    elif schema.kind == "number":
        number = parse_number(value)
        floor = schema.min if schema.min is not None else 0.0
        if number is None or number <= floor:
            return [_issue(row, schema, raw, f"{schema.name} must be a positive number",
                           "not_positive_number")]

    elif schema.kind == "percent":
        number = parse_number(value)
        low = schema.min if schema.min is not None else 0.0
        high = schema.max if schema.max is not None else 100.0
        if number is None or number < low or number > high:
            return [_issue(row, schema, raw,
                           f"{schema.name} must be a number between {low:g} and {high:g}",
                           "percent_out_of_range")]

    elif schema.kind == "url":
        if not is_valid_url(value):
            label = schema.label or schema.name
            return [_issue(row, schema, raw, f"Invalid {label} URL format. Must be a valid URL.",
                           "invalid_url", severity="warning")]

    return []


def validate_record(record: RawRecord) -> List[ValidationIssue]:
    """Run every catalog rule over the columns this record carries."""
    issues: List[ValidationIssue] = []
    for field, raw in record.values.items():
        issues.extend(validate_field(field, raw, record.row))
    return issues
