# diamond_loader/services/report.py
import csv
import io
from typing import Iterable, List, Optional

from diamond_loader.schemas.validation import ValidationIssue, ValidationResult

REPORT_HEADER = ["Row", "Column", "Value", "Error", "Severity"]
REPORT_FILENAME = "validation_errors.csv"


def column_issues(result: ValidationResult) -> List[ValidationIssue]:
    """Row-0 issues for mandatory columns missing from the header."""
    return [
        ValidationIssue(
            row=0,
            field=column,
            raw_value="",
            message=f"Mandatory column {column} is missing from the file",
            severity="error",
            code="missing_column",
        )
        for column in result.missing_mandatory_columns
    ]


def export_issues(issues: Iterable[ValidationIssue], delimiter: str = ",") -> str:
    output = io.StringIO()
    writer = csv.writer(output, delimiter=delimiter, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    for issue in issues:
        writer.writerow([issue.row, issue.field, issue.raw_value, issue.message, issue.severity])
    return output.getvalue()


def export_result(result: ValidationResult, delimiter: str = ",") -> Optional[bytes]:
    """CSV report bytes, or None when there is nothing to report."""
    issues = column_issues(result) + list(result.issues)
    if not issues:
        return None
    # BOM so spreadsheet apps pick UTF-8 for non-ASCII dealer values
    return export_issues(issues, delimiter).encode("utf-8-sig")


def report_filename() -> str:
    return REPORT_FILENAME
