"""
Service métier pour l'inscription des élèves.

Flux de création : validation des quatre champs → normalisation →
pré-contrôle de l'email (indicatif) → insertion. La contrainte UNIQUE
de la base reste la seule garantie d'unicité.
"""

import logging
from datetime import date
from typing import List, Optional

from student_registration.exceptions import DuplicateEmailError, StudentValidationError
from student_registration.schemas.student import NewStudent, StudentCreate, StudentRecord
from student_registration.store.base import StudentStore
from student_registration.validators.student_validator import (
    has_errors,
    parse_date_of_birth,
    validate_form,
)

logger = logging.getLogger(__name__)


def normalize_candidate(data: StudentCreate) -> NewStudent:
    """Trim des champs texte, email en minuscules, date parsée. Suppose des données valides."""
    return NewStudent(
        name=data.name.strip(),
        email=data.email.strip().lower(),
        course=data.course.strip(),
        date_of_birth=parse_date_of_birth(data.date_of_birth),
    )


def register_student(
    store: StudentStore, data: StudentCreate, today: Optional[date] = None
) -> StudentRecord:
    """
    Valide puis enregistre un nouvel élève.

    Raises:
        StudentValidationError: au moins un champ invalide (toutes les erreurs sont jointes)
        DuplicateEmailError: email déjà utilisé
    """
    errors = validate_form(data.name, data.email, data.course, data.date_of_birth, today=today)
    if has_errors(errors):
        raise StudentValidationError(errors)

    candidate = normalize_candidate(data)

    if store.get_by_email(candidate.email) is not None:
        raise DuplicateEmailError(candidate.email)

    # Deux requêtes concurrentes peuvent passer le pré-contrôle : la base tranche
    student = store.create(candidate)
    logger.info("Élève %s inscrit (id=%s)", student.email, student.id)
    return student


def list_students(store: StudentStore) -> List[StudentRecord]:
    """Tous les élèves, du plus récent au plus ancien."""
    return store.list_all()


def get_student(store: StudentStore, student_id: int) -> Optional[StudentRecord]:
    return store.get_by_id(student_id)
