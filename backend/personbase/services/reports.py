"""Data behind the individual and collective printable reports."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from personbase.core.labels import get_labels
from personbase.models.custom_field import CustomFieldDef
from personbase.models.person import PersonRecord
from .formatting import format_custom_value, format_date

MISSING = "-"


@dataclass(frozen=True)
class AgeSummary:
    count: int
    average: float
    minimum: int
    maximum: int

    def to_dict(self):
        return {"count": self.count, "average": self.average, "minimum": self.minimum, "maximum": self.maximum}


@dataclass
class ReportSection:
    title: str
    rows: List[Tuple[str, str]]

    def to_dict(self):
        return {"title": self.title, "rows": [{"label": label, "value": value} for label, value in self.rows]}


def age_summary(records: List[PersonRecord]) -> AgeSummary:
    """Count, average age (one decimal) and age range"""
    if not records:
        return AgeSummary(count=0, average=0.0, minimum=0, maximum=0)
    ages = [r.age for r in records]
    return AgeSummary(
        count=len(ages),
        average=round(sum(ages) / len(ages), 1),
        minimum=min(ages),
        maximum=max(ages)
    )


def person_report(record: PersonRecord, schema: List[CustomFieldDef], locale: Optional[str] = None) -> List[ReportSection]:
    labels = get_labels(locale)
    sections = [
        ReportSection(labels["personal_section"], [
            (labels["full_name"], record.full_name),
            (labels["dni"], record.dni),
            (labels["birth_date"], format_date(record.birth_date)),
            (labels["age"], f"{record.age} {labels['age_suffix']}"),
        ]),
        ReportSection(labels["contact_section"], [
            (labels["address"], record.address or MISSING),
            (labels["phone"], record.phone or MISSING),
            (labels["email"], record.email or MISSING),
        ]),
    ]
    fields = sorted(schema, key=lambda f: f.order)
    if fields:
        sections.append(ReportSection(labels["additional_section"], [
            (f.name, format_custom_value(record.custom_values.get(f.id), labels, empty=MISSING))
            for f in fields
        ]))
    return sections
