"""
Snapshot export and import.

Single-database exports are ``{"database": ..., "data": ...}``; full exports
are ``{"databases": [...], "databaseContents": {id: ...}}``. Import only
ever adds databases whose id is not registered yet.
"""

import csv
import io
import json
import re
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from personbase.core.labels import get_labels
from personbase.models.custom_field import CustomFieldDef, FieldKind
from personbase.models.database import DatabaseContents, DatabaseRecord
from personbase.models.person import PersonRecord
from .database_registry import DatabaseRegistry
from .exceptions import InvalidFormat, NotFound
from .formatting import format_custom_value, format_date

logger = logging.getLogger(__name__)

FIXED_COLUMNS = ("dni", "given_name", "family_name", "birth_date", "age", "address", "phone", "email")


@dataclass(frozen=True)
class ImportResult:
    imported_count: int
    skipped_count: int

    def to_dict(self):
        return {"importedCount": self.imported_count, "skippedCount": self.skipped_count}


def _dump(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def export_database(database: DatabaseRecord, contents: DatabaseContents) -> bytes:
    """Bundle one database's registry entry and contents"""
    return _dump({"database": database.to_dict(), "data": contents.to_dict()})


async def export_all(registry: DatabaseRegistry) -> bytes:
    """Bundle every database with its stored contents"""
    databases = await registry.list()
    contents = {}
    for database in databases:
        data = await registry.contents.load_raw(database.id)
        if data is not None:
            contents[database.id] = data
    return _dump({
        "databases": [db.to_dict() for db in databases],
        "databaseContents": contents
    })


def _parse_blob(blob: bytes) -> Dict[str, Any]:
    try:
        payload = json.loads(blob.decode("utf-8") if isinstance(blob, (bytes, bytearray)) else blob)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidFormat(f"The file is not valid JSON: {e}")
    if not isinstance(payload, dict):
        raise InvalidFormat("The file does not contain an export")

    # A single-database export imports as a one-entry full export
    if "database" in payload and "data" in payload and "databases" not in payload:
        database = payload["database"]
        if not isinstance(database, dict) or "id" not in database:
            raise InvalidFormat("The exported database has no id")
        payload = {"databases": [database], "databaseContents": {str(database["id"]): payload["data"]}}

    if "databases" not in payload or "databaseContents" not in payload:
        raise InvalidFormat("The file lacks the databases and databaseContents sections")
    if not isinstance(payload["databases"], list) or not isinstance(payload["databaseContents"], dict):
        raise InvalidFormat("The databases and databaseContents sections have the wrong shape")
    return payload


async def import_all(registry: DatabaseRegistry, blob: bytes) -> ImportResult:
    """Add every exported database whose id is not registered yet; nothing is merged or overwritten"""
    payload = _parse_blob(blob)

    # Check the whole file before writing anything
    incoming = []
    try:
        for item in payload["databases"]:
            database = DatabaseRecord.from_dict(item)
            data = payload["databaseContents"].get(database.id)
            contents = DatabaseContents.from_dict(data) if data is not None else DatabaseContents()
            incoming.append((database, data, contents))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Rejected import: {e!r}")
        raise InvalidFormat(f"The file contains an invalid database: {e}")

    existing_ids = {db.id for db in await registry.list()}
    to_add = []
    for database, data, contents in incoming:
        if database.id in existing_ids:
            continue
        existing_ids.add(database.id)
        database.person_count = len(contents.records)
        to_add.append((database, data if data is not None else contents.to_dict()))

    written = []
    try:
        for database, data in to_add:
            await registry.contents.save_raw(database.id, data)
            written.append(database.id)
        if to_add:
            await registry.append([database for database, _ in to_add])
    except Exception:
        for database_id in written:
            await registry.contents.remove(database_id)
        raise

    result = ImportResult(imported_count=len(to_add), skipped_count=len(incoming) - len(to_add))
    logger.info(f"Imported {result.imported_count} database(s), skipped {result.skipped_count}")
    return result


def table_header(schema: List[CustomFieldDef], locale: Optional[str] = None) -> List[str]:
    labels = get_labels(locale)
    return [labels[column] for column in FIXED_COLUMNS] + [f.name for f in sorted(schema, key=lambda f: f.order)]


def to_table(records: List[PersonRecord], schema: List[CustomFieldDef], locale: Optional[str] = None) -> List[List[str]]:
    """One row per person: fixed fields then custom fields in schema order"""
    labels = get_labels(locale)
    fields = sorted(schema, key=lambda f: f.order)
    rows = []
    for record in records:
        row = [
            record.dni,
            record.given_name,
            record.family_name,
            format_date(record.birth_date),
            str(record.age),
            record.address,
            record.phone,
            record.email,
        ]
        row.extend(
            format_custom_value(
                record.custom_values.get(f.id), labels,
                empty=labels["no"] if f.kind is FieldKind.BOOLEAN else ""
            )
            for f in fields
        )
        rows.append(row)
    return rows


def to_csv(records: List[PersonRecord], schema: List[CustomFieldDef], locale: Optional[str] = None) -> str:
    """Comma-separated export with a header row"""
    if not records:
        raise NotFound("Persons", message="There are no persons to export")
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(table_header(schema, locale))
    writer.writerows(to_table(records, schema, locale))
    return buffer.getvalue()


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE).lower()


def export_filename(database: DatabaseRecord, extension: str = "json", today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{_slug(database.name)}-{today.isoformat()}.{extension}"


def backup_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"personbase-backup-{today.isoformat()}.json"
