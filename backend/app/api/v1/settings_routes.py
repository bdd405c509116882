"""Import profile settings API.

Endpoints:
  GET    /settings                  — saved profiles (Default profile when none saved)
  PUT    /settings                  — replace all profiles; 422 with violations if invalid
  POST   /settings/validate         — validate without saving
  POST   /settings/profiles         — add an empty profile (409 if the name exists)
  PATCH  /settings/profiles/{name}  — rename a profile
  DELETE /settings/profiles/{name}  — delete a profile
"""
import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from app.core.errors import ProfileExistsError, ProfileNotFoundError, ProfileValidationError
from app.rules.profile_validation import validate_settings
from app.schemas.profile import Profile, ProfileSettings
from app.services.settings_store import SettingsStore, get_settings_store

logger = logging.getLogger(__name__)

router = APIRouter()

Store = Annotated[SettingsStore, Depends(get_settings_store)]


# ─── Schemas ───

class ProfileName(BaseModel):
    name: str


class ValidationReport(BaseModel):
    valid: bool
    violations: list[dict[str, Any]]


# ─── Helpers ───

def _save(store: SettingsStore, profile_settings: ProfileSettings) -> None:
    try:
        store.save(profile_settings)
    except ProfileValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[v.to_dict() for v in exc.violations],
        )


# ─── Routes ───

@router.get("", response_model=ProfileSettings, summary="Get import profiles")
async def get_profiles(store: Store):
    return store.load()


@router.put("", response_model=ProfileSettings, summary="Replace import profiles")
async def put_profiles(body: ProfileSettings, store: Store):
    _save(store, body)
    logger.info("Settings replaced (%d profiles)", len(body.profiles))
    return body


@router.post("/validate", response_model=ValidationReport, summary="Validate profiles without saving")
async def validate_profiles(body: ProfileSettings):
    violations = validate_settings(body)
    return ValidationReport(valid=not violations, violations=[v.to_dict() for v in violations])


@router.post(
    "/profiles",
    response_model=Profile,
    status_code=status.HTTP_201_CREATED,
    summary="Add an empty profile",
)
async def add_profile(body: ProfileName, store: Store):
    profile_settings = store.load()
    try:
        profile = profile_settings.add_profile(body.name)
    except ProfileExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    _save(store, profile_settings)
    return profile


@router.patch("/profiles/{name}", response_model=Profile, summary="Rename a profile")
async def rename_profile(name: str, body: ProfileName, store: Store):
    profile_settings = store.load()
    try:
        profile = profile_settings.rename_profile(name, body.name)
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ProfileExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    _save(store, profile_settings)
    return profile


@router.delete("/profiles/{name}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a profile")
async def delete_profile(name: str, store: Store):
    profile_settings = store.load()
    try:
        profile_settings.delete_profile(name)
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    _save(store, profile_settings)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
