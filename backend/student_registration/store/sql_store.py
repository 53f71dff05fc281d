"""
Implémentation SQLAlchemy partagée par les stores SQLite et PostgreSQL.
Une session courte par opération : aucun curseur n'est partagé entre appelants.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from student_registration.database import Base, build_session_factory
from student_registration.exceptions import DuplicateEmailError, StorageUnavailableError
from student_registration.models.student import Student
from student_registration.schemas.student import NewStudent, StudentRecord
from student_registration.store.base import StudentStore

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class SQLAlchemyStudentStore(StudentStore):
    """Logique commune ; les sous-classes fournissent le moteur et la détection des doublons."""

    def __init__(self):
        self._engine: Optional[Engine] = None
        self._session_factory = None

    def _create_engine(self) -> Engine:
        raise NotImplementedError

    def _is_unique_violation(self, exc: IntegrityError) -> bool:
        raise NotImplementedError

    def _insert_timestamps(self) -> Dict[str, object]:
        """Horodatages fixés à l'insertion ; vide = valeurs par défaut des colonnes."""
        return {}

    @property
    def engine(self) -> Engine:
        # Connexion paresseuse, puis réutilisée
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _get_session_factory(self):
        if self._session_factory is None:
            self._session_factory = build_session_factory(self.engine)
        return self._session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Ouvre une session et traduit les erreurs de connexion en StorageUnavailableError."""
        try:
            with self._get_session_factory()() as session:
                yield session
        except (OperationalError, InterfaceError) as exc:
            logger.error("Base %s injoignable : %s", self.backend_name, exc)
            raise StorageUnavailableError(f"{self.backend_name} database unavailable") from exc

    def initialize(self) -> None:
        try:
            Base.metadata.create_all(self.engine, tables=[Student.__table__], checkfirst=True)
        except (OperationalError, InterfaceError) as exc:
            logger.error("Initialisation %s impossible : %s", self.backend_name, exc)
            raise StorageUnavailableError(f"Unable to initialize {self.backend_name} database") from exc
        logger.info("Table students prête (%s)", self.backend_name)

    def create(self, candidate: NewStudent) -> StudentRecord:
        email = normalize_email(candidate.email)
        student = Student(
            name=candidate.name,
            email=email,
            course=candidate.course,
            date_of_birth=candidate.date_of_birth,
            **self._insert_timestamps(),
        )
        with self._session() as session:
            session.add(student)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if self._is_unique_violation(exc):
                    raise DuplicateEmailError(email) from exc
                raise
            # Recharge les colonnes calculées par la base (id, created_at, updated_at)
            session.refresh(student)
            return StudentRecord.model_validate(student)

    def list_all(self) -> List[StudentRecord]:
        with self._session() as session:
            students = session.execute(
                select(Student).order_by(Student.created_at.desc(), Student.id.desc())
            ).scalars().all()
            return [StudentRecord.model_validate(s) for s in students]

    def get_by_id(self, student_id: int) -> Optional[StudentRecord]:
        with self._session() as session:
            student = session.get(Student, student_id)
            if student is None:
                return None
            return StudentRecord.model_validate(student)

    def get_by_email(self, email: str) -> Optional[StudentRecord]:
        with self._session() as session:
            student = session.execute(
                select(Student).where(Student.email == normalize_email(email))
            ).scalar_one_or_none()
            if student is None:
                return None
            return StudentRecord.model_validate(student)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
