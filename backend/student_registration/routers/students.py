"""
Router pour les élèves.
GET  /api/students           — liste (filtre optionnel ?id=)
GET  /api/students/{id}      — détail
POST /api/students           — inscription
POST /api/students/validate  — validation seule, pour le formulaire
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from student_registration.dependencies import get_student_store
from student_registration.exceptions import DuplicateEmailError, StudentValidationError
from student_registration.schemas.student import (
    ErrorEnvelope,
    FormValidationResult,
    StudentCreate,
    StudentEnvelope,
    StudentListEnvelope,
)
from student_registration.services import student_service
from student_registration.store.base import StudentStore
from student_registration.validators.student_validator import error_list, has_errors, validate_form

router = APIRouter(prefix="/api/students", tags=["Students"])


def validation_error_response(errors: list) -> JSONResponse:
    """Enveloppe 400 commune aux erreurs du validateur et du parsing du corps."""
    envelope = ErrorEnvelope(message="Validation errors", errors=errors)
    return JSONResponse(status_code=400, content=envelope.model_dump())


def _single_student(store: StudentStore, student_id: int) -> StudentEnvelope:
    student = student_service.get_student(store, student_id)
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return StudentEnvelope(message="Student fetched successfully", data=student)


@router.get("", response_model=None, summary="Lister les élèves")
def list_students(
    id: Optional[int] = Query(None, description="Filtre sur un élève"),
    store: StudentStore = Depends(get_student_store),
):
    """Retourne tous les élèves, du plus récent au plus ancien, ou un seul si `id` est fourni."""
    if id is not None:
        return _single_student(store, id)
    students = student_service.list_students(store)
    return StudentListEnvelope(message="Students fetched successfully", data=students)


@router.get("/{student_id}", response_model=StudentEnvelope, summary="Détail d'un élève")
def get_student(student_id: int, store: StudentStore = Depends(get_student_store)):
    return _single_student(store, student_id)


@router.post("", response_model=StudentEnvelope, status_code=201, summary="Inscrire un élève")
def create_student(data: StudentCreate, store: StudentStore = Depends(get_student_store)):
    """Valide les quatre champs, vérifie l'unicité de l'email puis enregistre l'élève."""
    try:
        student = student_service.register_student(store, data)
    except StudentValidationError as e:
        return validation_error_response(error_list(e.errors))
    except DuplicateEmailError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return StudentEnvelope(message="Student registered successfully", data=student)


@router.post("/validate", response_model=FormValidationResult, summary="Valider un formulaire")
def validate_student(data: StudentCreate):
    """Mêmes règles que l'inscription, sans écriture : utilisé pour la validation en direct du formulaire."""
    errors = validate_form(data.name, data.email, data.course, data.date_of_birth)
    return FormValidationResult(
        valid=not has_errors(errors),
        errors={field: error.message if error else None for field, error in errors.items()},
    )
