"""
Exceptions métier de l'application.
Les routers les traduisent en réponses JSON {success, message}.
"""


class StudentRegistrationError(Exception):
    """Classe de base des erreurs de l'application."""


class StudentValidationError(StudentRegistrationError):
    """Un ou plusieurs champs ont été rejetés par le validateur."""

    def __init__(self, errors):
        super().__init__("Validation errors")
        self.errors = errors


class DuplicateEmailError(StudentRegistrationError):
    """L'email est déjà utilisé par un autre élève (pré-contrôle ou contrainte UNIQUE)."""

    def __init__(self, email: str = ""):
        super().__init__("Email already exists")
        self.email = email


class StorageUnavailableError(StudentRegistrationError):
    """La base de données est injoignable ou n'a pas pu être initialisée."""
