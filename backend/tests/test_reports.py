from datetime import date

import pytest

from personbase.core.labels import get_labels
from personbase.models.custom_field import CustomFieldDef, CustomValue, FieldKind
from personbase.models.person import PersonRecord
from personbase.services import reports


def record(age, **extra):
    return PersonRecord(
        id=f"p{age}", dni=str(age), given_name="Ana", family_name="Paz",
        birth_date=date(2024 - age, 1, 1), age=age, **extra
    )


def test_age_summary():
    summary = reports.age_summary([record(20), record(31), record(45)])
    assert summary == reports.AgeSummary(count=3, average=32.0, minimum=20, maximum=45)
    assert reports.age_summary([record(20), record(21), record(21)]).average == 20.7


def test_age_summary_of_nobody():
    assert reports.age_summary([]).to_dict() == {"count": 0, "average": 0.0, "minimum": 0, "maximum": 0}


def test_person_report_sections():
    schema = [
        CustomFieldDef(id="member", name="Socio", kind=FieldKind.BOOLEAN, order=0),
        CustomFieldDef(id="club", name="Club", order=1),
    ]
    person = record(34, email="ana@example.com", custom_values={"member": CustomValue(FieldKind.BOOLEAN, False)})
    sections = reports.person_report(person, schema, "es")

    assert [s.title for s in sections] == ["Información Personal", "Información de Contacto", "Información Adicional"]
    assert sections[0].rows == [
        ("Nombre Completo", "Ana Paz"),
        ("DNI", "34"),
        ("FECHA NACIMIENTO", "01/01/1990"),
        ("EDAD", "34 años"),
    ]
    assert sections[1].rows == [("DOMICILIO", "-"), ("TELÉFONO", "-"), ("EMAIL", "ana@example.com")]
    assert sections[2].rows == [("Socio", "NO"), ("Club", "-")]


def test_person_report_without_custom_fields():
    sections = reports.person_report(record(50), [], "en")
    assert [s.title for s in sections] == ["Personal Information", "Contact Information"]
    assert sections[0].to_dict()["rows"][3] == {"label": "AGE", "value": "50 years"}


def test_unknown_locale():
    with pytest.raises(ValueError):
        get_labels("fr")
