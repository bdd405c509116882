"""Pydantic schemas for CSV import profiles and the settings that hold them.

Persisted with camelCase keys (``fieldName``, ``accountType``, ``recordType``)
so settings written by the settings editor load unchanged.
"""
import enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.core.errors import ProfileExistsError, ProfileNotFoundError

DEFAULT_ACCOUNT_TYPE = "INTERNAL"
DEFAULT_PROFILE_NAME = "Default"


class RecordType(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Field / Profile ───

class ProfileField(_CamelModel):
    """One CSV column (or literal default) mapped to a dotted path."""

    header: str = ""
    default: str = ""
    field_name: str = ""


class Profile(_CamelModel):
    name: str
    account_type: str = DEFAULT_ACCOUNT_TYPE
    record_type: RecordType = Field(
        default=RecordType.CREATE,
        validation_alias=AliasChoices("recordType", "profileType", "record_type"),
        serialization_alias="recordType",
    )
    fields: list[ProfileField] = Field(default_factory=list)

    @field_validator("record_type", mode="before")
    @classmethod
    def _legacy_record_type(cls, value):
        # Older settings stored profileType=ADD
        if value is None or value == "ADD":
            return RecordType.CREATE
        return value


# ─── Settings ───

class ProfileSettings(_CamelModel):
    profiles: list[Profile] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self):
        seen: set[str] = set()
        for profile in self.profiles:
            key = profile.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate profile name: {profile.name}")
            seen.add(key)
        return self

    @classmethod
    def default(cls) -> "ProfileSettings":
        return cls(profiles=[Profile(name=DEFAULT_PROFILE_NAME)])

    def _name_taken(self, name: str, ignore: Profile | None = None) -> bool:
        return any(
            p.name.lower() == name.lower() for p in self.profiles if p is not ignore
        )

    def get_profile(self, name: str) -> Profile:
        for profile in self.profiles:
            if profile.name == name:
                return profile
        raise ProfileNotFoundError(name)

    def add_profile(self, name: str) -> Profile:
        """Append a new empty profile. Names are unique case-insensitively."""
        if self._name_taken(name):
            raise ProfileExistsError(name)
        profile = Profile(name=name)
        self.profiles.append(profile)
        return profile

    def rename_profile(self, old_name: str, new_name: str) -> Profile:
        profile = self.get_profile(old_name)
        if self._name_taken(new_name, ignore=profile):
            raise ProfileExistsError(new_name)
        profile.name = new_name
        return profile

    def delete_profile(self, name: str) -> None:
        profile = self.get_profile(name)
        self.profiles.remove(profile)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
