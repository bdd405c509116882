"""Profile validation rules.

Pure functions over profiles. Every check runs; violations are collected and
returned together so the settings editor can show all of them at once. Codes
are stable identifiers, translated by the client.
"""
from dataclasses import dataclass, field
from typing import Any, Iterable

from app.schemas.profile import Profile, ProfileField, ProfileSettings, RecordType

# ─── Codes ───

ADDRESS_TYPE_REQUIRED = "AddressTypeRequired"
EMAIL_TYPE_REQUIRED = "EmailTypeRequired"
NOTE_TYPE_REQUIRED = "NoteTypeRequired"
FIELD_NAME_REQUIRED = "FieldNameRequired"
HEADER_REQUIRED = "HeaderRequired"
PRIMARY_ID_REQUIRED = "PrimaryIdRequired"

PRIMARY_ID_FIELD = "primary_id"

# (path prefix, field that must accompany it, code)
FIELD_COMBINATION_RULES: list[tuple[str, str, str]] = [
    ("contact_info.address", "contact_info.address[].address_type.0.value", ADDRESS_TYPE_REQUIRED),
    ("contact_info.email", "contact_info.email[].email_type.0.value", EMAIL_TYPE_REQUIRED),
    ("user_note", "user_note[].note_type.value", NOTE_TYPE_REQUIRED),
]


@dataclass
class Violation:
    code: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "params": self.params}


# ─── Rule set A: field combinations ───

def validate_fields(fields: Iterable[ProfileField], **params: Any) -> list[Violation]:
    """Check that grouped fields carry their required type field.

    Extra keyword arguments are attached to every violation as params.
    """
    names = [f.field_name for f in fields]
    violations: list[Violation] = []
    for prefix, required, code in FIELD_COMBINATION_RULES:
        if any(n.startswith(prefix) for n in names) and required not in names:
            violations.append(Violation(code, dict(params)))
    return violations


# ─── Rule set B: structure ───

def _check_field(profile: Profile, position: int, f: ProfileField) -> list[Violation]:
    found: list[Violation] = []
    params = {"profile": profile.name, "field": position}
    if not f.field_name:
        found.append(Violation(FIELD_NAME_REQUIRED, dict(params)))
    if not f.header and not f.default:
        found.append(Violation(HEADER_REQUIRED, dict(params)))
    return found


def validate_profiles(profiles: Iterable[Profile]) -> list[Violation]:
    profiles = list(profiles)
    violations: list[Violation] = []

    for profile in profiles:
        for position, f in enumerate(profile.fields):
            violations.extend(_check_field(profile, position, f))

    # Update/delete profiles need the record identifier
    for profile in profiles:
        if profile.record_type in (RecordType.UPDATE, RecordType.DELETE):
            if not any(f.field_name == PRIMARY_ID_FIELD for f in profile.fields):
                violations.append(Violation(PRIMARY_ID_REQUIRED, {"profile": profile.name}))

    return violations


# ─── Entry point ───

def validate_settings(settings: ProfileSettings) -> list[Violation]:
    """Run both rule sets over every profile. Empty list means valid."""
    violations: list[Violation] = []
    for profile in settings.profiles:
        violations.extend(validate_fields(profile.fields, profile=profile.name))
    violations.extend(validate_profiles(settings.profiles))
    return violations
