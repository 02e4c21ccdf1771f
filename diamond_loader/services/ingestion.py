# diamond_loader/services/ingestion.py
import logging
from typing import Any, Dict, List, Sequence

import httpx

from diamond_loader.core.catalog import UPLOAD_FIELDS
from diamond_loader.core.exceptions import SchemaError, UploadBlockedError, UploadFailure
from diamond_loader.schemas.diamond import DiamondPayload
from diamond_loader.schemas.validation import (
    IngestionBatch,
    IngestionOutcome,
    RawRecord,
    ValidationIssue,
    ValidationResult,
)

logger = logging.getLogger(__name__)

BATCH_PATH = "/api/v1/diamonds/batch"


def missing_upload_fields(record: RawRecord, fields: Sequence[str] = UPLOAD_FIELDS) -> List[str]:
    return [f for f in fields if not record.value(f).strip()]


def plan_batch(result: ValidationResult, fields: Sequence[str] = UPLOAD_FIELDS) -> IngestionBatch:
    """
    Split valid rows into upload-complete ones and the rest.

    Excluded rows get one warning each so the dealer can see why a stone
    that passed validation was not sent.
    """
    records: List[RawRecord] = []
    excluded: List[ValidationIssue] = []
    for record in result.valid_rows:
        missing = missing_upload_fields(record, fields)
        if not missing:
            records.append(record)
            continue
        excluded.append(ValidationIssue(
            row=record.row,
            field=missing[0],
            raw_value="",
            message=f"Incomplete for upload, missing: {', '.join(missing)}",
            severity="warning",
            code="incomplete_for_upload",
        ))
    return IngestionBatch(records=records, excluded=excluded)


class IngestionCoordinator:
    """Send the upload-complete rows of a valid result as one batch."""

    def __init__(self, client: httpx.AsyncClient, user_id: int, path: str = BATCH_PATH):
        self.client = client
        self.user_id = user_id
        self.path = path

    def plan(self, result: ValidationResult) -> IngestionBatch:
        if result.missing_mandatory_columns:
            raise SchemaError(result.missing_mandatory_columns)
        if result.error_count:
            raise UploadBlockedError(result.error_count)

        batch = plan_batch(result)
        if batch.excluded:
            logger.info(
                "Excluding %d row(s) incomplete for upload: %s",
                len(batch.excluded),
                ", ".join(str(i.row) for i in batch.excluded),
            )
        return batch

    async def ingest(self, result: ValidationResult) -> IngestionOutcome:
        batch = self.plan(result)
        if not batch.records:
            logger.info("Nothing to upload for user %s", self.user_id)
            return IngestionOutcome(uploaded=0, excluded=batch.excluded)

        diamonds = [DiamondPayload.from_record(r).to_api_payload() for r in batch.records]
        response = await self._send(diamonds)
        logger.info("Uploaded %d diamonds for user %s", len(diamonds), self.user_id)
        return IngestionOutcome(uploaded=len(diamonds), excluded=batch.excluded, response=response)

    async def _send(self, diamonds: List[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            resp = await self.client.post(
                self.path,
                json={"diamonds": diamonds},
                params={"user_id": self.user_id},
            )
        except httpx.HTTPError as e:
            logger.error("Batch upload request failed: %s", e)
            raise UploadFailure(f"Request failed: {e}") from e

        if not resp.is_success:
            body = resp.text[:500]
            logger.error("Batch upload rejected (%s): %s", resp.status_code, body)
            raise UploadFailure(
                f"Batch failed ({resp.status_code})",
                status_code=resp.status_code,
                body=body,
            )

        try:
            data = resp.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {"data": data}
