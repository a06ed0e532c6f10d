from datetime import date
from decimal import Decimal

from conftest import TODAY, make_draft
from personbase.models.custom_field import CustomFieldDef, CustomValue, FieldKind
from personbase.models.person import PersonDraft, PersonRecord
from personbase.services.record_validator import RecordValidator, parse_custom_values

SCHEMA = [
    CustomFieldDef(id="weight", name="Weight", kind=FieldKind.NUMBER, required=True, order=0),
    CustomFieldDef(id="joined", name="Joined", kind=FieldKind.DATE, order=1),
    CustomFieldDef(id="member", name="Member", kind=FieldKind.BOOLEAN, required=True, order=2),
]


def existing(dni="00123"):
    return PersonRecord(
        id="p1", dni=dni, given_name="Luis", family_name="Pérez",
        birth_date=date(1980, 1, 1), age=44
    )


def tags(errors):
    return {(e.field, e.code) for e in errors}


def test_valid_draft_has_no_errors():
    draft = make_draft(custom_values={"weight": "70.5", "member": False})
    assert RecordValidator(SCHEMA).validate(draft, today=TODAY) == []


def test_all_violations_are_reported_together():
    draft = PersonDraft(dni="12a", email="not-an-email", custom_values={"weight": "1.234"})
    errors = RecordValidator(SCHEMA).validate(draft, today=TODAY)
    assert tags(errors) == {
        ("dni", "digits_only"),
        ("givenName", "required"),
        ("familyName", "required"),
        ("birthDate", "required"),
        ("email", "invalid"),
        ("custom_weight", "invalid"),
        ("custom_member", "required"),
    }


def test_whitespace_only_names_are_missing():
    draft = make_draft(given_name="   ", family_name="\t", custom_values={"weight": "1", "member": True})
    assert tags(RecordValidator(SCHEMA).validate(draft, today=TODAY)) == {
        ("givenName", "required"),
        ("familyName", "required"),
    }


def test_future_birth_date():
    draft = make_draft(birth_date="2024-06-16", custom_values={"weight": "1", "member": True})
    assert tags(RecordValidator(SCHEMA).validate(draft, today=TODAY)) == {("birthDate", "future")}


def test_birth_date_today_is_allowed():
    draft = make_draft(birth_date="2024-06-15", custom_values={"weight": "1", "member": True})
    assert RecordValidator(SCHEMA).validate(draft, today=TODAY) == []


def test_malformed_birth_date():
    draft = make_draft(birth_date="10/05/1990", custom_values={"weight": "1", "member": True})
    assert tags(RecordValidator(SCHEMA).validate(draft, today=TODAY)) == {("birthDate", "invalid")}


def test_duplicate_dni_keeps_leading_zeros():
    validator = RecordValidator([], [existing("00123")])
    assert tags(validator.validate(make_draft(dni="00123"), today=TODAY)) == {("dni", "duplicate")}
    assert validator.validate(make_draft(dni="123"), today=TODAY) == []


def test_own_dni_is_not_a_duplicate():
    validator = RecordValidator([], [existing("00123")])
    assert validator.validate(make_draft(dni="00123"), exclude_id="p1", today=TODAY) == []


def test_email_is_optional_but_checked():
    validator = RecordValidator([])
    assert validator.validate(make_draft(email=""), today=TODAY) == []
    assert validator.validate(make_draft(email="ana@example.com"), today=TODAY) == []
    assert tags(validator.validate(make_draft(email="ana@example"), today=TODAY)) == {("email", "invalid")}


def test_blank_required_text_is_missing():
    schema = [CustomFieldDef(id="club", name="Club", required=True)]
    draft = make_draft(custom_values={"club": "  "})
    assert tags(RecordValidator(schema).validate(draft, today=TODAY)) == {("custom_club", "required")}


def test_parse_custom_values_types_by_kind():
    values, errors = parse_custom_values(
        {"weight": "70", "joined": "2020-02-29", "member": "true", "blank": ""},
        SCHEMA + [CustomFieldDef(id="blank", name="Blank")]
    )
    assert errors == []
    assert values["weight"] == CustomValue(FieldKind.NUMBER, Decimal("70"))
    assert values["joined"] == CustomValue(FieldKind.DATE, date(2020, 2, 29))
    assert values["member"] == CustomValue(FieldKind.BOOLEAN, True)
    assert "blank" not in values


def test_number_allows_at_most_two_decimals():
    _, errors = parse_custom_values({"weight": "-3.25"}, SCHEMA)
    assert errors == []
    _, errors = parse_custom_values({"weight": "3.255"}, SCHEMA)
    assert [e.field for e in errors] == ["custom_weight"]


def test_values_for_unknown_fields_are_rejected():
    values, errors = parse_custom_values({"weight": "70", "no_such_field": "x"}, SCHEMA)
    assert list(values) == ["weight"]
    assert [(e.field, e.code) for e in errors] == [("custom_no_such_field", "unknown")]


def test_required_boolean_accepts_false():
    draft = make_draft(custom_values={"weight": "1", "member": False})
    assert RecordValidator(SCHEMA).validate(draft, today=TODAY) == []
    draft = make_draft(custom_values={"weight": "1", "member": "false"})
    assert RecordValidator(SCHEMA).validate(draft, today=TODAY) == []


def test_required_boolean_left_out_is_missing():
    draft = make_draft(custom_values={"weight": "1"})
    assert tags(RecordValidator(SCHEMA).validate(draft, today=TODAY)) == {("custom_member", "required")}
    draft = make_draft(custom_values={"weight": "1", "member": ""})
    assert tags(RecordValidator(SCHEMA).validate(draft, today=TODAY)) == {("custom_member", "required")}
