"""
Sélection du store selon la configuration, avec repli sur SQLite.
"""

import logging

from student_registration.config import Settings
from student_registration.exceptions import StorageUnavailableError
from student_registration.store.base import StudentStore
from student_registration.store.postgres import PostgresStudentStore
from student_registration.store.sqlite import SQLiteStudentStore

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("sqlite", "postgresql")


def create_student_store(settings: Settings) -> StudentStore:
    """
    Construit et initialise le store configuré.

    Si PostgreSQL est demandé mais ne s'initialise pas, l'application
    démarre quand même sur SQLite (dégradation journalisée).

    Raises:
        ValueError: backend inconnu
        StorageUnavailableError: aucun backend n'a pu être initialisé
    """
    backend = settings.DB_BACKEND.strip().lower()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(f"Backend de base de données non supporté : {settings.DB_BACKEND}")

    if backend == "postgresql":
        logger.info("Connexion à PostgreSQL...")
        store = PostgresStudentStore(settings.DATABASE_URL)
        try:
            store.initialize()
            logger.info("Base PostgreSQL utilisée.")
            return store
        except Exception as exc:
            # URL invalide, pilote absent, droits insuffisants, serveur injoignable...
            logger.warning("PostgreSQL indisponible, repli sur SQLite : %s", exc, exc_info=True)
            store.close()

    store = SQLiteStudentStore(settings.SQLITE_PATH)
    try:
        store.initialize()
    except StorageUnavailableError as exc:
        logger.error("Initialisation SQLite impossible : %s", exc)
        raise StorageUnavailableError("Unable to initialize any database") from exc
    logger.info("Base SQLite utilisée (%s).", settings.SQLITE_PATH)
    return store
