"""
Schémas Pydantic pour les élèves.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator


class StudentCreate(BaseModel):
    """
    Corps brut de POST /api/students.
    Les règles métier sont appliquées par le validateur, pas par Pydantic,
    pour renvoyer toutes les erreurs de champ dans l'enveloppe 400.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    course: Optional[str] = None
    date_of_birth: Optional[str] = None

    @field_validator("name", "email", "course", "date_of_birth", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> Optional[str]:
        if v is None:
            return v
        return str(v)


class NewStudent(BaseModel):
    """Candidat normalisé transmis au store (champs trimés, email en minuscules)."""
    name: str
    email: str
    course: str
    date_of_birth: date


class StudentRecord(BaseModel):
    """Élève persisté, tel que renvoyé par le store et l'API."""
    id: int
    name: str
    email: str
    course: str
    date_of_birth: date
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StudentEnvelope(BaseModel):
    """Réponse d'un élève unique (GET /students/{id}, POST /students)."""
    success: bool = True
    message: str
    data: StudentRecord


class StudentListEnvelope(BaseModel):
    """Réponse de GET /students."""
    success: bool = True
    message: str
    data: List[StudentRecord]


class FieldErrorDetail(BaseModel):
    field: str
    message: str


class ErrorEnvelope(BaseModel):
    """Réponse d'erreur commune (400, 404, 500)."""
    success: bool = False
    message: str
    errors: Optional[List[FieldErrorDetail]] = None


class FormValidationResult(BaseModel):
    """Réponse de POST /students/validate, utilisée par le formulaire."""
    valid: bool
    errors: Dict[str, Optional[str]]
