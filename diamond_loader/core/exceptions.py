# diamond_loader/core/exceptions.py
from typing import Any, Dict, List, Optional


class DiamondLoaderError(Exception):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}')"


class ParseError(DiamondLoaderError):
    """The file is structurally unreadable; no ValidationResult exists."""


class SchemaError(DiamondLoaderError):
    def __init__(self, missing_columns: List[str]):
        self.missing_columns = list(missing_columns)
        super().__init__(
            f"Missing mandatory columns: {', '.join(self.missing_columns)}",
            details={"missing_columns": self.missing_columns},
        )


class UploadBlockedError(DiamondLoaderError):
    def __init__(self, error_count: int):
        self.error_count = error_count
        super().__init__(
            f"Upload blocked: {error_count} validation error(s) must be fixed first",
            details={"error_count": error_count},
        )


class AdvisoryFailure(DiamondLoaderError):
    """Raised inside the advisor only; never escapes it."""


class UploadFailure(DiamondLoaderError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(
            message,
            details={"status_code": status_code, "body": body},
        )
