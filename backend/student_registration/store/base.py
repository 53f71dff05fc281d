"""
Contrat commun des stores d'élèves.
Deux implémentations interchangeables : SQLite (embarquée) et PostgreSQL (réseau).
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from student_registration.schemas.student import NewStudent, StudentRecord


class StudentStore(ABC):
    """Interface de persistance des élèves."""

    backend_name = "abstract"

    @abstractmethod
    def initialize(self) -> None:
        """Crée la table students si elle n'existe pas. Idempotent."""

    @abstractmethod
    def create(self, candidate: NewStudent) -> StudentRecord:
        """
        Insère un élève et retourne l'enregistrement avec id et horodatages.

        Raises:
            DuplicateEmailError: la contrainte UNIQUE sur l'email a rejeté l'insertion
            StorageUnavailableError: la base est injoignable
        """

    @abstractmethod
    def list_all(self) -> List[StudentRecord]:
        """Tous les élèves, du plus récent au plus ancien."""

    @abstractmethod
    def get_by_id(self, student_id: int) -> Optional[StudentRecord]:
        """Retourne l'élève ou None."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[StudentRecord]:
        """Retourne l'élève ou None. L'email est normalisé en minuscules."""

    def close(self) -> None:
        """Libère les connexions (appelé à l'arrêt de l'API)."""
