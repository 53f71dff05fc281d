"""
Validation des champs d'un élève.

Fonctions pures et déterministes, partagées par tous les points d'entrée
(POST /api/students, POST /api/students/validate pour le formulaire).
Les quatre champs sont toujours vérifiés : aucune validation ne s'arrête
à la première erreur.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Union

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
COURSE_MIN_LENGTH = 2
COURSE_MAX_LENGTH = 100
MIN_AGE = 16
MAX_AGE = 100

NAME_REGEX = re.compile(r"[A-Za-z\s]+")
EMAIL_REGEX = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

FORM_FIELDS = ("name", "email", "course", "date_of_birth")

DateInput = Union[str, date, datetime, None]


class FieldErrorCode(str, Enum):
    REQUIRED = "required"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    INVALID_CHARACTERS = "invalid_characters"
    INVALID_FORMAT = "invalid_format"
    INVALID_DATE = "invalid_date"
    NOT_PAST = "not_past"
    OUT_OF_AGE_RANGE = "out_of_age_range"


@dataclass(frozen=True)
class FieldError:
    """Erreur sur un champ : code stable + message affichable."""
    code: FieldErrorCode
    message: str


FormErrors = Dict[str, Optional[FieldError]]


def _trimmed(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _check_length(value: str, label: str, min_length: int, max_length: int) -> Optional[FieldError]:
    if not value:
        return FieldError(FieldErrorCode.REQUIRED, f"{label} is required")
    if len(value) < min_length:
        return FieldError(
            FieldErrorCode.TOO_SHORT,
            f"{label} must be at least {min_length} characters long",
        )
    if len(value) > max_length:
        return FieldError(
            FieldErrorCode.TOO_LONG,
            f"{label} must not exceed {max_length} characters",
        )
    return None


def validate_name(value: Optional[str]) -> Optional[FieldError]:
    """Nom : 2 à 100 caractères après trim, lettres ASCII et espaces uniquement."""
    name = _trimmed(value)
    error = _check_length(name, "Name", NAME_MIN_LENGTH, NAME_MAX_LENGTH)
    if error:
        return error
    if not NAME_REGEX.fullmatch(name):
        return FieldError(
            FieldErrorCode.INVALID_CHARACTERS,
            "Name can only contain letters and spaces",
        )
    return None


def validate_email(value: Optional[str]) -> Optional[FieldError]:
    """Email : forme simple local@domaine.tld, un seul @, aucun espace."""
    email = _trimmed(value)
    if not email:
        return FieldError(FieldErrorCode.REQUIRED, "Email is required")
    if not EMAIL_REGEX.fullmatch(email):
        return FieldError(FieldErrorCode.INVALID_FORMAT, "Please enter a valid email address")
    return None


def validate_course(value: Optional[str]) -> Optional[FieldError]:
    """Cours : 2 à 100 caractères après trim, texte libre."""
    return _check_length(_trimmed(value), "Course", COURSE_MIN_LENGTH, COURSE_MAX_LENGTH)


def parse_date_of_birth(value: DateInput) -> date:
    """
    Convertit l'entrée en date calendaire.
    Accepte une date, un datetime, une chaîne ISO "AAAA-MM-JJ" ou un datetime ISO.
    Lève ValueError si la valeur est illisible.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Date illisible : {value!r}")

    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        # Format datetime ISO (ex. envoyé par un <input type="datetime-local">)
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()


def calculate_age(birth_date: date, today: date) -> int:
    """Âge exact : l'anniversaire de l'année courante doit être atteint."""
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def validate_date_of_birth(value: DateInput, today: Optional[date] = None) -> Optional[FieldError]:
    """Date de naissance : strictement passée, âge entre 16 et 100 ans inclus."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return FieldError(FieldErrorCode.REQUIRED, "Date of birth is required")

    try:
        birth_date = parse_date_of_birth(value)
    except ValueError:
        return FieldError(FieldErrorCode.INVALID_DATE, "Please enter a valid date")

    today = today or date.today()
    if birth_date >= today:
        return FieldError(FieldErrorCode.NOT_PAST, "Date of birth must be in the past")

    age = calculate_age(birth_date, today)
    if age < MIN_AGE or age > MAX_AGE:
        return FieldError(
            FieldErrorCode.OUT_OF_AGE_RANGE,
            f"Student must be between {MIN_AGE} and {MAX_AGE} years old",
        )
    return None


def validate_form(
    name: Optional[str],
    email: Optional[str],
    course: Optional[str],
    date_of_birth: DateInput,
    today: Optional[date] = None,
) -> FormErrors:
    """Valide les quatre champs et retourne {champ: erreur ou None}."""
    return {
        "name": validate_name(name),
        "email": validate_email(email),
        "course": validate_course(course),
        "date_of_birth": validate_date_of_birth(date_of_birth, today=today),
    }


def has_errors(errors: FormErrors) -> bool:
    return any(error is not None for error in errors.values())


def error_list(errors: FormErrors) -> List[Dict[str, str]]:
    """Format de la réponse 400 : [{field, message}] dans l'ordre des champs."""
    return [
        {"field": field, "message": errors[field].message}
        for field in FORM_FIELDS
        if errors.get(field) is not None
    ]
