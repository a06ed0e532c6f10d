from datetime import date, timedelta

import pytest

from conftest import TODAY, make_draft
from personbase.models.custom_field import CustomFieldDef, FieldKind
from personbase.models.database import DatabaseContents
from personbase.models.person import PersonRecord, calculate_age
from personbase.services.exceptions import CapacityExceeded, NotFound, ValidationFailed
from personbase.services.record_store import RecordStore
from personbase.services.snapshot_codec import to_table


def seeded_records(count):
    return [
        PersonRecord(
            id=f"p{i}", dni=str(10000000 + i), given_name=f"Name{i}", family_name="Seed",
            birth_date=date(1990, 1, 1), age=34
        )
        for i in range(count)
    ]


def test_calculate_age_on_exact_birthday():
    birth = date(1990, 6, 15)
    assert calculate_age(birth, date(2024, 6, 14)) == 33
    assert calculate_age(birth, date(2024, 6, 15)) == 34


def test_calculate_age_for_leap_day_birth():
    birth = date(2000, 2, 29)
    assert calculate_age(birth, date(2023, 2, 28)) == 22
    assert calculate_age(birth, date(2023, 3, 1)) == 23
    assert calculate_age(birth, date(2024, 2, 29)) == 24


async def test_create_then_get_computes_age(store):
    record = await store.create(make_draft(birth_date="1990-06-15"), today=TODAY)
    assert store.get(record.id).age == 34

    before = await store.create(make_draft(dni="2", birth_date="1990-06-16"), today=TODAY)
    assert store.get(before.id).age == 33


async def test_create_on_leap_year_boundary(store):
    record = await store.create(make_draft(birth_date="2004-02-29"), today=date(2024, 2, 28))
    assert record.age == 19
    again = await store.create(make_draft(dni="2", birth_date="2004-02-29"), today=date(2024, 2, 29))
    assert again.age == 20


async def test_create_persists_contents(store, contents_repository):
    record = await store.create(make_draft(), today=TODAY)
    stored = await contents_repository.load("db1")
    assert [r.id for r in stored.records] == [record.id]
    assert stored.records[0] == record


async def test_duplicate_dni_with_leading_zeros(store):
    await store.create(make_draft(dni="00123"), today=TODAY)
    with pytest.raises(ValidationFailed) as exc_info:
        await store.create(make_draft(dni="00123", given_name="Otra"), today=TODAY)
    assert exc_info.value.fields() == ["dni"]
    assert len(store) == 1

    await store.create(make_draft(dni="123"), today=TODAY)
    assert len(store) == 2


async def test_update_keeping_own_dni(store):
    record = await store.create(make_draft(dni="00123"), today=TODAY)
    updated = await store.update(record.id, make_draft(dni="00123", given_name="Ana María"), today=TODAY)
    assert updated.id == record.id
    assert updated.given_name == "Ana María"
    assert updated.created_at == record.created_at
    assert len(store) == 1


async def test_update_unknown_person(store):
    with pytest.raises(NotFound):
        await store.update("missing", make_draft(), today=TODAY)


async def test_invalid_update_changes_nothing(store):
    record = await store.create(make_draft(), today=TODAY)
    with pytest.raises(ValidationFailed):
        await store.update(record.id, make_draft(given_name=""), today=TODAY)
    assert store.get(record.id) == record


async def test_capacity_limit(contents_repository):
    store = RecordStore("db1", contents_repository, DatabaseContents(records=seeded_records(2000)), max_persons=2000)
    with pytest.raises(CapacityExceeded) as exc_info:
        await store.create(make_draft(dni="1"), today=TODAY)
    assert exc_info.value.limit == 2000
    assert len(store) == 2000
    assert await contents_repository.load_raw("db1") is None


async def test_validation_is_checked_before_capacity(contents_repository):
    store = RecordStore("db1", contents_repository, max_persons=0)
    with pytest.raises(ValidationFailed):
        await store.create(make_draft(dni=""), today=TODAY)
    with pytest.raises(CapacityExceeded):
        await store.create(make_draft(), today=TODAY)


async def test_failed_write_keeps_previous_state(store, contents_repository, monkeypatch):
    record = await store.create(make_draft(), today=TODAY)

    async def broken_save(database_id, contents):
        raise OSError("disk full")

    monkeypatch.setattr(contents_repository, "save", broken_save)
    with pytest.raises(OSError):
        await store.create(make_draft(dni="2"), today=TODAY)
    with pytest.raises(OSError):
        await store.add_field("Club")
    assert [r.id for r in store.list()] == [record.id]
    assert store.schema.fields == []


async def test_delete(store, contents_repository):
    first = await store.create(make_draft(dni="1"), today=TODAY)
    second = await store.create(make_draft(dni="2"), today=TODAY)
    await store.delete(first.id)
    assert [r.id for r in store.list()] == [second.id]
    assert [r.id for r in (await contents_repository.load("db1")).records] == [second.id]
    with pytest.raises(NotFound):
        await store.delete(first.id)


async def test_custom_values_are_typed(store):
    weight = await store.add_field("Weight", FieldKind.NUMBER)
    joined = await store.add_field("Joined", FieldKind.DATE)
    record = await store.create(
        make_draft(custom_values={weight.id: "72.50", joined.id: "2020-01-31"}), today=TODAY
    )
    assert record.to_dict()["customValues"] == {weight.id: "72.50", joined.id: "2020-01-31"}


async def test_removed_field_values_survive(store, contents_repository):
    field = await store.add_field("Club")
    record = await store.create(make_draft(custom_values={field.id: "River"}), today=TODAY)
    await store.remove_field(field.id)

    reopened = await RecordStore.open("db1", contents_repository)
    assert reopened.schema.fields == []
    assert reopened.get(record.id).custom_values[field.id].value == "River"
    assert reopened.get(record.id).custom_values[field.id].kind is None


async def test_required_field_applies_to_new_records(store):
    field = await store.add_field("Club", required=True)
    with pytest.raises(ValidationFailed) as exc_info:
        await store.create(make_draft(), today=TODAY)
    assert exc_info.value.fields() == [f"custom_{field.id}"]


async def test_schema_changes_are_persisted_in_order(store, contents_repository):
    a = await store.add_field("A")
    b = await store.add_field("B")
    await store.reorder_field(a.id, "down")
    await store.update_field(b.id, name="Bee", required=True)

    reopened = await RecordStore.open("db1", contents_repository)
    assert [(f.id, f.name, f.order) for f in reopened.schema.fields] == [(b.id, "Bee", 0), (a.id, "A", 1)]
    assert reopened.schema.get(b.id).required is True


async def test_on_change_receives_recount(contents_repository):
    counts = []

    async def on_change(database_id, count):
        counts.append((database_id, count))

    store = RecordStore("db1", contents_repository, on_change=on_change)
    record = await store.create(make_draft(), today=TODAY)
    await store.delete(record.id)
    assert counts == [("db1", 1), ("db1", 0)]


async def test_open_missing_contents_is_empty(contents_repository):
    store = await RecordStore.open("nothing", contents_repository)
    assert len(store) == 0
    assert store.schema.fields == []


def test_contents_accept_legacy_keys():
    contents = DatabaseContents.from_dict({
        "customFields": [{"id": "f1", "name": "Socio", "type": "boolean", "required": False, "order": 0}],
        "persons": [{
            "id": "p1",
            "dni": "001",
            "nombre": "Ana",
            "apellido": "García",
            "fechaNacimiento": "1990-05-10",
            "edad": 34,
            "customFields": {"f1": True},
            "createdAt": "2024-01-01T10:00:00",
        }]
    })
    assert contents.schema == [CustomFieldDef(id="f1", name="Socio", kind=FieldKind.BOOLEAN)]
    record = contents.records[0]
    assert (record.dni, record.given_name, record.family_name) == ("001", "Ana", "García")
    assert record.custom_values["f1"].value is True
    assert record.updated_at == record.created_at


def test_birth_date_in_the_past_week():
    assert calculate_age(TODAY - timedelta(days=7), TODAY) == 0


async def test_values_for_unknown_fields_are_rejected(store):
    with pytest.raises(ValidationFailed) as exc_info:
        await store.create(make_draft(custom_values={"no_such_field": "x"}), today=TODAY)
    assert exc_info.value.fields() == ["custom_no_such_field"]
    assert len(store) == 0


async def test_update_keeps_values_of_removed_fields(store, contents_repository):
    field = await store.add_field("Club")
    record = await store.create(make_draft(custom_values={field.id: "River"}), today=TODAY)
    await store.remove_field(field.id)

    edited = await store.update(record.id, make_draft(given_name="Eva"), today=TODAY)
    assert edited.custom_values[field.id].value == "River"

    # Sending the kept value back, as an edit form does, is accepted too
    echoed = await store.update(
        record.id, make_draft(given_name="Eva", custom_values={field.id: "River"}), today=TODAY
    )
    assert echoed.custom_values[field.id].value == "River"
    stored = await contents_repository.load_raw("db1")
    assert stored["records"][0]["customValues"] == {field.id: "River"}


async def test_update_rejects_new_unknown_field(store):
    record = await store.create(make_draft(), today=TODAY)
    with pytest.raises(ValidationFailed) as exc_info:
        await store.update(record.id, make_draft(custom_values={"no_such_field": "x"}), today=TODAY)
    assert exc_info.value.fields() == ["custom_no_such_field"]


async def test_search_filters_and_sorts(store):
    await store.create(make_draft(dni="1", given_name="carla"), today=TODAY)
    await store.create(make_draft(dni="2", given_name="Ana"), today=TODAY)
    await store.create(make_draft(dni="3", given_name="Bruno", family_name="Paz"), today=TODAY)

    assert [r.given_name for r in store.search()] == ["Ana", "Bruno", "carla"]
    assert [r.given_name for r in store.search("garcía", "givenName", "desc")] == ["carla", "Ana"]
    with pytest.raises(ValueError):
        store.search("", "customValues")


async def test_kind_change_retypes_values_like_a_reload(store, contents_repository):
    field = await store.add_field("Socio", FieldKind.BOOLEAN)
    await store.create(make_draft(custom_values={field.id: True}), today=TODAY)
    await store.update_field(field.id, kind=FieldKind.TEXT)

    reopened = await RecordStore.open("db1", contents_repository)
    assert store.list()[0].custom_values == reopened.list()[0].custom_values
    assert store.list()[0].custom_values[field.id].kind is None
    assert to_table(store.list(), store.schema.fields, "es") == to_table(reopened.list(), reopened.schema.fields, "es")
