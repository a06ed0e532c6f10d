"""Read-only filtered and sorted views over person records."""

from typing import Any, Iterable, List

from personbase.models.person import PersonRecord

# Wire name -> attribute for every sortable fixed field
SORT_FIELDS = {
    "dni": "dni",
    "givenName": "given_name",
    "familyName": "family_name",
    "birthDate": "birth_date",
    "age": "age",
    "address": "address",
    "phone": "phone",
    "email": "email",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

DIRECTIONS = ("asc", "desc")


def search(records: Iterable[PersonRecord], term: str = "") -> List[PersonRecord]:
    """Case-insensitive substring match on DNI, given name and family name"""
    term = (term or "").strip().lower()
    if not term:
        return list(records)
    return [
        r for r in records
        if term in r.dni.lower() or term in r.given_name.lower() or term in r.family_name.lower()
    ]


def _sort_key(attribute: str):
    def key(record: PersonRecord) -> Any:
        value = getattr(record, attribute)
        if isinstance(value, str):
            return value.lower()
        return value
    return key


def sort(records: Iterable[PersonRecord], field: str = "givenName", direction: str = "asc") -> List[PersonRecord]:
    """Stable sort on a fixed field; strings compare case-insensitively"""
    if field not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by '{field}'")
    if direction not in DIRECTIONS:
        raise ValueError(f"Invalid sort direction: {direction}")
    return sorted(records, key=_sort_key(SORT_FIELDS[field]), reverse=direction == "desc")


def query(
    records: Iterable[PersonRecord],
    term: str = "",
    field: str = "givenName",
    direction: str = "asc"
) -> List[PersonRecord]:
    """Search then sort, as the person list shows them"""
    return sort(search(records, term), field, direction)
