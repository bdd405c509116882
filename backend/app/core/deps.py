from typing import AsyncIterator

from fastapi import HTTPException, status

from app.core.errors import ProfileNotFoundError
from app.schemas.profile import Profile, ProfileSettings
from app.services.alma import AlmaUsersClient


async def get_users_client() -> AsyncIterator[AlmaUsersClient]:
    """Yield a users API client for the duration of one request."""
    client = AlmaUsersClient.from_settings()
    try:
        yield client
    finally:
        await client.aclose()


def resolve_profile(profile_settings: ProfileSettings, name: str | None) -> Profile:
    """Return the named profile, or the first one when no name is given."""
    try:
        if name:
            return profile_settings.get_profile(name)
        if profile_settings.profiles:
            return profile_settings.profiles[0]
        raise ProfileNotFoundError("")
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
