"""
Store réseau : PostgreSQL via psycopg2. Opt-in (DB_BACKEND=postgresql).
Une connexion neuve par opération (NullPool), fermée à la fin de la session.
"""

import logging

from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool

from student_registration.database import build_engine
from student_registration.store.sql_store import SQLAlchemyStudentStore

logger = logging.getLogger(__name__)

DRIVERNAME = "postgresql+psycopg2"

# SQLSTATE unique_violation
UNIQUE_VIOLATION = "23505"


def with_psycopg2_driver(url: str) -> URL:
    """Une URL "postgresql://" sans pilote est rattachée à psycopg2, le pilote installé."""
    parsed = make_url(url)
    if parsed.drivername == "postgresql":
        parsed = parsed.set(drivername=DRIVERNAME)
    return parsed


class PostgresStudentStore(SQLAlchemyStudentStore):
    backend_name = "postgresql"

    def __init__(self, url: str):
        super().__init__()
        self.url = url

    def _create_engine(self) -> Engine:
        engine = build_engine(with_psycopg2_driver(self.url), poolclass=NullPool, pool_pre_ping=True)
        logger.info("Moteur PostgreSQL prêt : %s", engine.url.render_as_string(hide_password=True))
        return engine

    def _is_unique_violation(self, exc: IntegrityError) -> bool:
        return getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION
