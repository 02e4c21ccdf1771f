# diamond_loader/services/engine.py
import logging
from enum import Enum
from typing import Dict, List, Optional

from diamond_loader.core.catalog import mandatory_fields, optional_fields
from diamond_loader.core.exceptions import ParseError
from diamond_loader.schemas.validation import RawRecord, ValidationIssue, ValidationResult
from diamond_loader.schemas.validators import validate_record
from diamond_loader.services.mapping import apply_mapping
from diamond_loader.utils.parser import TAB, parse_records

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    VALIDATING = "validating"
    COMPLETE = "complete"
    FAILED = "failed"


def validate_records(headers: List[str], records: List[RawRecord]) -> ValidationResult:
    """
    Validate already-parsed records against the catalog.

    Pure: every call builds its own lists, so concurrent callers never
    share state.
    """
    header_set = set(headers)
    missing_mandatory = [f for f in mandatory_fields() if f not in header_set]
    missing_optional = [f for f in optional_fields() if f not in header_set]

    issues: List[ValidationIssue] = []
    valid_rows: List[RawRecord] = []
    invalid_rows = 0

    for record in records:
        row_issues = validate_record(record)
        issues.extend(row_issues)
        if any(i.severity == "error" for i in row_issues):
            invalid_rows += 1
        else:
            valid_rows.append(record)

    return ValidationResult(
        total_rows=len(records),
        valid_rows=valid_rows,
        invalid_row_count=invalid_rows,
        issues=issues,
        missing_mandatory_columns=missing_mandatory,
        missing_optional_columns=missing_optional,
    )


class ValidationEngine:
    """Parse → validate → one ValidationResult per file."""

    def __init__(self, delimiter: str = TAB):
        self.delimiter = delimiter
        self.state = EngineState.IDLE

    def run(
        self,
        text: str,
        delimiter: Optional[str] = None,
        mapping: Optional[Dict[str, str]] = None,
    ) -> ValidationResult:
        self.state = EngineState.PARSING
        try:
            headers, records = parse_records(text, delimiter or self.delimiter)
            if mapping:
                headers, records = apply_mapping(headers, records, mapping)
        except (ParseError, ValueError):
            self.state = EngineState.FAILED
            raise
        return self.validate(headers, records)

    def validate(self, headers: List[str], records: List[RawRecord]) -> ValidationResult:
        self.state = EngineState.VALIDATING
        result = validate_records(headers, records)
        self.state = EngineState.COMPLETE

        if result.missing_mandatory_columns:
            logger.warning(
                "Missing mandatory columns: %s", ", ".join(result.missing_mandatory_columns)
            )
        logger.info(
            "Validated %d rows: %d valid, %d invalid, %d errors, %d warnings",
            result.total_rows,
            result.valid_row_count,
            result.invalid_row_count,
            result.error_count,
            result.warning_count,
        )
        return result
