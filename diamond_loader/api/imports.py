# diamond_loader/api/imports.py

import json
import logging
from typing import Dict, Optional

import httpx
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from diamond_loader.core.catalog import ENUM_VALUES, FIELD_CATALOG, UPLOAD_FIELDS, mandatory_fields
from diamond_loader.core.clients import get_assistant_client, get_inventory_client
from diamond_loader.core.exceptions import (
    ParseError,
    SchemaError,
    UploadBlockedError,
    UploadFailure,
)
from diamond_loader.services.advisor import EnrichmentAdvisor
from diamond_loader.services.engine import ValidationEngine
from diamond_loader.services.ingestion import IngestionCoordinator, plan_batch
from diamond_loader.services.mapping import apply_mapping, suggest_mapping
from diamond_loader.services.report import export_result, report_filename
from diamond_loader.utils.parser import parse_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/import", tags=["import"])


async def inventory_client():
    client = get_inventory_client()
    try:
        yield client
    finally:
        await client.aclose()


async def assistant_client():
    client = get_assistant_client()
    try:
        yield client
    finally:
        await client.aclose()


def _parse_mapping(mapping: Optional[str]) -> Optional[Dict[str, str]]:
    if not mapping:
        return None
    try:
        data = json.loads(mapping)
    except json.JSONDecodeError:
        raise HTTPException(400, "Mapping must be a JSON object of {header: field}.")
    if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
        raise HTTPException(400, "Mapping must be a JSON object of {header: field}.")
    return data


async def _read_and_validate(file: UploadFile, delimiter: Optional[str], mapping: Optional[str]):
    content = await file.read()
    try:
        headers, records = parse_upload(file.filename, content, delimiter)
        column_map = _parse_mapping(mapping)
        if column_map is None:
            column_map = suggest_mapping(headers)
        headers, records = apply_mapping(headers, records, column_map)
    except ParseError as e:
        raise HTTPException(400, e.message)
    except ValueError as e:
        raise HTTPException(400, str(e))

    result = ValidationEngine().validate(headers, records)
    return headers, records, result


@router.get("/schema")
async def get_schema():
    return {
        "fields": list(FIELD_CATALOG),
        "mandatory": mandatory_fields(),
        "upload_required": UPLOAD_FIELDS,
        "enums": ENUM_VALUES,
        "kinds": {name: s.kind for name, s in FIELD_CATALOG.items()},
    }


@router.post("/validate")
async def validate_file(
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(None),
    mapping: Optional[str] = Form(None),
):
    headers, _, result = await _read_and_validate(file, delimiter, mapping)
    batch = plan_batch(result) if result.is_valid else None

    return {
        "filename": file.filename,
        "headers": headers,
        "summary": result.summary(),
        "issues": [i.model_dump() for i in result.issues],
        "upload_warnings": [i.model_dump() for i in batch.excluded] if batch else [],
        "ready_to_upload": len(batch.records) if batch else 0,
        "report_available": bool(result.issues or result.missing_mandatory_columns),
    }


@router.post("/report")
async def download_report(
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(None),
    mapping: Optional[str] = Form(None),
):
    _, _, result = await _read_and_validate(file, delimiter, mapping)
    report = export_result(result)
    if report is None:
        return {"message": "No errors – all rows valid!"}

    return Response(
        content=report,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={report_filename()}"},
    )


@router.post("/advise")
async def advise_file(
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(None),
    mapping: Optional[str] = Form(None),
    client: httpx.AsyncClient = Depends(assistant_client),
):
    _, records, result = await _read_and_validate(file, delimiter, mapping)
    advice = await EnrichmentAdvisor(client).advise(result, records)
    return {
        "summary": result.summary(),
        "advice": advice.model_dump(by_alias=True),
    }


@router.post("/upload")
async def upload_file(
    user_id: int = Query(...),
    file: UploadFile = File(...),
    delimiter: Optional[str] = Query(None),
    mapping: Optional[str] = Form(None),
    client: httpx.AsyncClient = Depends(inventory_client),
):
    _, _, result = await _read_and_validate(file, delimiter, mapping)
    coordinator = IngestionCoordinator(client, user_id)

    try:
        outcome = await coordinator.ingest(result)
    except (SchemaError, UploadBlockedError) as e:
        raise HTTPException(422, detail={"message": e.message, "summary": result.summary()})
    except UploadFailure as e:
        raise HTTPException(502, detail={"message": e.message, **e.details})

    return {
        "summary": result.summary(),
        "uploaded": outcome.uploaded,
        "excluded": [i.model_dump() for i in outcome.excluded],
        "message": f"{outcome.uploaded} diamonds uploaded successfully",
    }
