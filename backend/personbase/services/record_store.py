import copy
import uuid
from dataclasses import replace
import logging
from datetime import date, datetime
from typing import Awaitable, Callable, List, Optional

from personbase.core.config import settings
from personbase.db.repositories import ContentsRepository
from personbase.models.custom_field import CustomFieldDef, FieldKind
from personbase.models.database import DatabaseContents
from personbase.models.person import PersonDraft, PersonRecord, calculate_age, decode_custom_values
from .exceptions import CapacityExceeded, NotFound, ValidationFailed
from .record_validator import RecordValidator, parse_birth_date, parse_custom_values
from .schema_registry import SchemaRegistry
from . import query_engine

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, int], Awaitable[None]]


class RecordStore:
    """
    Person records and custom schema of one database.

    Every mutation validates first, writes the complete new state through the
    contents repository and only then replaces the in-memory state, so a
    failure leaves the store exactly as it was.
    """

    def __init__(
        self,
        database_id: str,
        repository: ContentsRepository,
        contents: Optional[DatabaseContents] = None,
        max_persons: Optional[int] = None,
        on_change: Optional[ChangeCallback] = None
    ):
        self.database_id = database_id
        self.repository = repository
        contents = contents or DatabaseContents()
        self.schema = SchemaRegistry(contents.schema)
        self._records: List[PersonRecord] = list(contents.records)
        self.max_persons = max_persons if max_persons is not None else settings.MAX_PERSONS_PER_DATABASE
        self.on_change = on_change

    @classmethod
    async def open(
        cls,
        database_id: str,
        repository: ContentsRepository,
        max_persons: Optional[int] = None,
        on_change: Optional[ChangeCallback] = None
    ) -> "RecordStore":
        """Load a database's stored contents; a missing document opens empty"""
        contents = await repository.load(database_id)
        return cls(database_id, repository, contents, max_persons=max_persons, on_change=on_change)

    # Reads

    def __len__(self) -> int:
        return len(self._records)

    def list(self) -> List[PersonRecord]:
        """Records in insertion order"""
        return list(self._records)

    def get(self, person_id: str) -> Optional[PersonRecord]:
        return next((r for r in self._records if r.id == person_id), None)

    def contents(self) -> DatabaseContents:
        return DatabaseContents(schema=self.schema.fields, records=self.list())

    def search(self, term: str = "", field: str = "givenName", direction: str = "asc") -> List[PersonRecord]:
        """Matching records, sorted; raises ValueError for an unknown sort"""
        return query_engine.query(self._records, term, field, direction)

    # Record mutations

    def _orphans(self, record: Optional[PersonRecord]):
        """Values a record keeps for fields that have since been removed"""
        if record is None:
            return {}
        known = {f.id for f in self.schema.fields}
        return {k: v for k, v in record.custom_values.items() if k not in known}

    def _validate(self, draft: PersonDraft, existing: Optional[PersonRecord], today: date):
        orphans = self._orphans(existing)
        if orphans:
            # An edit form may send the kept values back unchanged
            draft = replace(draft, custom_values={
                k: v for k, v in draft.custom_values.items() if k not in orphans
            })
        errors = RecordValidator(self.schema.fields, self._records).validate(
            draft, exclude_id=existing.id if existing else None, today=today
        )
        if errors:
            raise ValidationFailed(errors)
        values, _ = parse_custom_values(draft.custom_values, self.schema.fields)
        return parse_birth_date(draft.birth_date), {**orphans, **values}

    async def create(self, draft: PersonDraft, today: Optional[date] = None) -> PersonRecord:
        """Validate and append a new person"""
        today = today or date.today()
        birth_date, values = self._validate(draft, None, today)
        if len(self._records) >= self.max_persons:
            logger.warning(f"Database {self.database_id} is full ({self.max_persons} persons)")
            raise CapacityExceeded(self.max_persons)

        now = datetime.now()
        record = PersonRecord(
            id=uuid.uuid4().hex,
            dni=draft.dni,
            given_name=draft.given_name,
            family_name=draft.family_name,
            birth_date=birth_date,
            age=calculate_age(birth_date, today),
            address=draft.address,
            phone=draft.phone,
            email=draft.email,
            custom_values=values,
            created_at=now,
            updated_at=now
        )
        await self._commit(self.schema, self._records + [record])
        return record

    async def update(self, person_id: str, draft: PersonDraft, today: Optional[date] = None) -> PersonRecord:
        """Replace a person's data, keeping its id and creation time"""
        existing = self.get(person_id)
        if existing is None:
            raise NotFound("Person", person_id)
        today = today or date.today()
        birth_date, values = self._validate(draft, existing, today)

        record = PersonRecord(
            id=existing.id,
            dni=draft.dni,
            given_name=draft.given_name,
            family_name=draft.family_name,
            birth_date=birth_date,
            age=calculate_age(birth_date, today),
            address=draft.address,
            phone=draft.phone,
            email=draft.email,
            custom_values=values,
            created_at=existing.created_at,
            updated_at=datetime.now()
        )
        records = [record if r.id == person_id else r for r in self._records]
        await self._commit(self.schema, records)
        return record

    async def delete(self, person_id: str):
        if self.get(person_id) is None:
            raise NotFound("Person", person_id)
        await self._commit(self.schema, [r for r in self._records if r.id != person_id])

    # Schema mutations

    async def add_field(self, name: str, kind: FieldKind = FieldKind.TEXT, required: bool = False) -> CustomFieldDef:
        schema = self._schema_copy()
        field = schema.add(name, kind, required)
        await self._commit(schema, self._retagged(schema))
        return field

    async def update_field(
        self,
        field_id: str,
        name: Optional[str] = None,
        kind: Optional[FieldKind] = None,
        required: Optional[bool] = None
    ) -> CustomFieldDef:
        schema = self._schema_copy()
        field = schema.update(field_id, name=name, kind=kind, required=required)
        await self._commit(schema, self._retagged(schema))
        return field

    async def remove_field(self, field_id: str):
        schema = self._schema_copy()
        schema.remove(field_id)
        await self._commit(schema, self._retagged(schema))

    async def reorder_field(self, field_id: str, direction: str):
        schema = self._schema_copy()
        schema.reorder(field_id, direction)
        await self._commit(schema, self._retagged(schema))

    def _retagged(self, schema: SchemaRegistry) -> List[PersonRecord]:
        """Records with their values typed against ``schema``, as a reload would type them"""
        return [
            replace(r, custom_values=decode_custom_values(
                {k: v.to_json() for k, v in r.custom_values.items()}, schema.fields
            ))
            for r in self._records
        ]

    def _schema_copy(self) -> SchemaRegistry:
        return SchemaRegistry(copy.deepcopy(self.schema.fields))

    async def _commit(self, schema: SchemaRegistry, records: List[PersonRecord]):
        await self.repository.save(self.database_id, DatabaseContents(schema=schema.fields, records=records))
        self.schema = schema
        self._records = records
        if self.on_change is not None:
            await self.on_change(self.database_id, len(self._records))
