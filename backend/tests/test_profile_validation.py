"""Unit tests for the profile validation rules.

Pure functions, no fixtures needed.
"""
from app.rules.profile_validation import (
    ADDRESS_TYPE_REQUIRED,
    EMAIL_TYPE_REQUIRED,
    FIELD_NAME_REQUIRED,
    HEADER_REQUIRED,
    NOTE_TYPE_REQUIRED,
    PRIMARY_ID_REQUIRED,
    validate_fields,
    validate_profiles,
    validate_settings,
)
from app.schemas.profile import Profile, ProfileField, ProfileSettings, RecordType


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _f(field_name: str, header: str = "Col", default: str = "") -> ProfileField:
    return ProfileField(header=header, default=default, field_name=field_name)


def _codes(violations) -> list[str]:
    return [v.code for v in violations]


# ─── Field combinations ───────────────────────────────────────────────────────

def test_plain_fields_have_no_combination_violations():
    fields = [_f("primary_id"), _f("first_name"), _f("user_group.value")]
    assert validate_fields(fields) == []


def test_address_without_type_yields_exactly_address_violation():
    fields = [_f("primary_id"), _f("contact_info.address[0].street")]
    assert _codes(validate_fields(fields)) == [ADDRESS_TYPE_REQUIRED]


def test_address_with_type_is_valid():
    fields = [
        _f("contact_info.address[].line1"),
        _f("contact_info.address[].address_type.0.value", header="", default="home"),
    ]
    assert validate_fields(fields) == []


def test_email_without_type():
    fields = [_f("contact_info.email[].email_address")]
    assert _codes(validate_fields(fields)) == [EMAIL_TYPE_REQUIRED]


def test_note_without_type():
    fields = [_f("user_note[].note_text")]
    assert _codes(validate_fields(fields)) == [NOTE_TYPE_REQUIRED]


def test_all_combination_violations_reported_together():
    fields = [
        _f("contact_info.address[].line1"),
        _f("contact_info.email[].email_address"),
        _f("user_note[].note_text"),
    ]
    assert _codes(validate_fields(fields)) == [
        ADDRESS_TYPE_REQUIRED, EMAIL_TYPE_REQUIRED, NOTE_TYPE_REQUIRED,
    ]


def test_combination_params_passed_through():
    violations = validate_fields([_f("user_note[].note_text")], profile="Students")
    assert violations[0].params == {"profile": "Students"}


# ─── Structure ────────────────────────────────────────────────────────────────

def test_missing_field_name_and_header_per_field():
    profile = Profile(name="P", fields=[
        _f(""),
        _f("first_name", header="", default=""),
        _f("", header="", default=""),
    ])
    violations = validate_profiles([profile])
    assert [(v.code, v.params) for v in violations] == [
        (FIELD_NAME_REQUIRED, {"profile": "P", "field": 0}),
        (HEADER_REQUIRED, {"profile": "P", "field": 1}),
        (FIELD_NAME_REQUIRED, {"profile": "P", "field": 2}),
        (HEADER_REQUIRED, {"profile": "P", "field": 2}),
    ]


def test_default_alone_satisfies_header_rule():
    profile = Profile(name="P", fields=[_f("status.value", header="", default="ACTIVE")])
    assert validate_profiles([profile]) == []


def test_update_profile_without_primary_id():
    profile = Profile(name="Updates", record_type=RecordType.UPDATE, fields=[_f("first_name")])
    violations = validate_profiles([profile])
    assert _codes(violations) == [PRIMARY_ID_REQUIRED]
    assert violations[0].params["profile"] == "Updates"


def test_delete_profile_without_primary_id():
    profile = Profile(name="Deletes", record_type=RecordType.DELETE)
    assert _codes(validate_profiles([profile])) == [PRIMARY_ID_REQUIRED]


def test_update_profile_with_primary_id_is_valid():
    profile = Profile(name="Updates", record_type=RecordType.UPDATE, fields=[_f("primary_id")])
    assert validate_profiles([profile]) == []


def test_create_profile_does_not_need_primary_id():
    profile = Profile(name="New", fields=[_f("first_name")])
    assert validate_profiles([profile]) == []


# ─── Whole settings ───────────────────────────────────────────────────────────

def test_update_scenario_reports_only_primary_id_for_profile():
    s = ProfileSettings(profiles=[
        Profile(name="Good", fields=[_f("primary_id")]),
        Profile(name="Upd", record_type=RecordType.UPDATE, fields=[_f("first_name")]),
    ])
    violations = validate_settings(s)
    assert [(v.code, v.params.get("profile")) for v in violations] == [(PRIMARY_ID_REQUIRED, "Upd")]


def test_violations_accumulate_across_profiles():
    s = ProfileSettings(profiles=[
        Profile(name="A", fields=[_f("contact_info.address[].line1")]),
        Profile(name="B", record_type=RecordType.DELETE, fields=[_f("")]),
    ])
    violations = validate_settings(s)
    assert [(v.code, v.params["profile"]) for v in violations] == [
        (ADDRESS_TYPE_REQUIRED, "A"),
        (FIELD_NAME_REQUIRED, "B"),
        (PRIMARY_ID_REQUIRED, "B"),
    ]


def test_default_settings_are_valid():
    assert validate_settings(ProfileSettings.default()) == []
