"""Localized labels for tabular export, reports and the default schema."""

from typing import Dict, Optional

from .config import settings


LABELS: Dict[str, Dict[str, str]] = {
    "es": {
        "dni": "DNI",
        "given_name": "NOMBRE",
        "family_name": "APELLIDO",
        "birth_date": "FECHA NACIMIENTO",
        "age": "EDAD",
        "address": "DOMICILIO",
        "phone": "TELÉFONO",
        "email": "EMAIL",
        "yes": "SÍ",
        "no": "NO",
        "full_name": "Nombre Completo",
        "personal_section": "Información Personal",
        "contact_section": "Información de Contacto",
        "additional_section": "Información Adicional",
        "age_suffix": "años",
    },
    "en": {
        "dni": "DNI",
        "given_name": "GIVEN NAME",
        "family_name": "FAMILY NAME",
        "birth_date": "BIRTH DATE",
        "age": "AGE",
        "address": "ADDRESS",
        "phone": "PHONE",
        "email": "EMAIL",
        "yes": "YES",
        "no": "NO",
        "full_name": "Full Name",
        "personal_section": "Personal Information",
        "contact_section": "Contact Information",
        "additional_section": "Additional Information",
        "age_suffix": "years",
    },
}


def get_labels(locale: Optional[str] = None) -> Dict[str, str]:
    """Return the label table for a locale, falling back to the configured one"""
    locale = locale or settings.REPORT_LOCALE
    if locale not in LABELS:
        raise ValueError(f"Unsupported report locale: {locale}")
    return LABELS[locale]
