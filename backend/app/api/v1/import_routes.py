"""CSV bulk user import endpoints.

The client first calls /imports/preview to learn how many users the file will
create, asks the operator to confirm, then posts the same file to /imports with
that count. A count that does not match is treated as a declined confirmation.
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from app.core.config import settings
from app.core.deps import get_users_client, resolve_profile
from app.core.limiter import limiter
from app.schemas.imports import ImportOutcomeOut, ImportPreview, ImportResult
from app.services.alma import AlmaUsersClient
from app.services.batch import Created
from app.services.csv_reader import CsvParseResult, parse_csv
from app.services.importer import ImportRun, map_rows
from app.services.settings_store import SettingsStore, get_settings_store

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Helpers ───

async def _read_upload(file: UploadFile) -> CsvParseResult:
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes",
        )
    parsed = parse_csv(content)
    if parsed.errors:
        logger.warning("Errors parsing %s: %s", file.filename, [e.message for e in parsed.errors])
    return parsed


# ─── POST /imports/preview ───

@router.post("/preview", response_model=ImportPreview, summary="Map an uploaded CSV without creating users")
async def preview_import(
    store: Annotated[SettingsStore, Depends(get_settings_store)],
    file: UploadFile = File(...),
    profile: str | None = Form(None),
):
    parsed = await _read_upload(file)
    selected = resolve_profile(store.load(), profile)
    mapped = map_rows(parsed.data, selected)
    return ImportPreview(
        profile=selected.name,
        row_count=len(mapped.objects),
        parse_errors=parsed.errors,
        sample=mapped.objects[:settings.PREVIEW_ROWS],
    )


# ─── POST /imports ───

@router.post("", response_model=ImportResult, summary="Create users from an uploaded CSV")
@limiter.limit(settings.RATE_LIMIT_IMPORTS)
async def run_import(
    request: Request,
    store: Annotated[SettingsStore, Depends(get_settings_store)],
    client: Annotated[AlmaUsersClient, Depends(get_users_client)],
    file: UploadFile = File(...),
    confirm_count: int = Form(...),
    profile: str | None = Form(None),
):
    parsed = await _read_upload(file)
    selected = resolve_profile(store.load(), profile)

    pending: list[int] = []

    def confirm(count: int) -> bool:
        pending.append(count)
        return count == confirm_count

    run = ImportRun()
    summary = await run.run(parsed.data, selected, client.create_user, confirm)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Confirmed {confirm_count} users but the file would create {pending[0]}",
        )

    return ImportResult(
        profile=selected.name,
        created=summary.created,
        failed=summary.failed,
        outcomes=[
            ImportOutcomeOut(row=o.index, status="created", primary_id=o.primary_id)
            if isinstance(o, Created)
            else ImportOutcomeOut(row=o.index, status="failed", message=o.message)
            for o in summary.outcomes
        ],
        log=summary.log,
        parse_errors=parsed.errors,
    )
