# diamond_loader/schemas/validation.py

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field
from typing import Any, Dict, List, Optional, Literal

Severity = Literal["error", "warning"]


class RawRecord(BaseModel):
    """One data line of the dealer export, keyed by header."""
    model_config = ConfigDict(frozen=True)

    row: int = Field(..., ge=1)
    values: Dict[str, str]

    def value(self, field: str) -> str:
        return self.values.get(field, "")

    def has(self, field: str) -> bool:
        return field in self.values


class ValidationIssue(BaseModel):
    row: int
    field: str
    raw_value: str = ""
    message: str
    severity: Severity
    code: str


class ValidationResult(BaseModel):
    total_rows: int
    valid_rows: List[RawRecord] = []
    invalid_row_count: int = 0
    issues: List[ValidationIssue] = []
    missing_mandatory_columns: List[str] = []
    missing_optional_columns: List[str] = []

    @computed_field
    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == "error")

    @computed_field
    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == "warning")

    @computed_field
    @property
    def valid_row_count(self) -> int:
        return len(self.valid_rows)

    @computed_field
    @property
    def is_valid(self) -> bool:
        return not self.missing_mandatory_columns and self.error_count == 0

    def summary(self) -> Dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "valid": self.valid_row_count,
            "invalid": self.invalid_row_count,
            "errors": self.error_count,
            "warnings": self.warning_count,
            "is_valid": self.is_valid,
            "missing_mandatory_columns": self.missing_mandatory_columns,
            "missing_optional_columns": self.missing_optional_columns,
        }


class AutoCorrection(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    row: int
    field: str = Field(..., validation_alias=AliasChoices("field", "column"))
    from_value: str = Field(
        "", validation_alias=AliasChoices("from", "from_value"), serialization_alias="from"
    )
    to_value: str = Field(
        ..., validation_alias=AliasChoices("to", "to_value"), serialization_alias="to"
    )
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class AdvisoryResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data_quality_score: float = Field(0.7, ge=0.0, le=1.0, alias="dataQualityScore")
    suggestions: List[str] = []
    follow_up_questions: List[str] = Field([], alias="followUpQuestions")
    auto_corrections: List[AutoCorrection] = Field([], alias="autoCorrections")
    common_issues: List[str] = Field([], alias="commonIssues")
    is_fallback: bool = False


class IngestionBatch(BaseModel):
    records: List[RawRecord] = []
    excluded: List[ValidationIssue] = []


class IngestionOutcome(BaseModel):
    uploaded: int
    excluded: List[ValidationIssue] = []
    response: Optional[Dict[str, Any]] = None
