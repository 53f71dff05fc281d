"""
Store embarqué : un fichier SQLite, aucune dépendance externe. Backend par défaut.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from student_registration.database import build_engine
from student_registration.exceptions import StorageUnavailableError
from student_registration.store.sql_store import SQLAlchemyStudentStore

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


def utc_now() -> datetime:
    # SQLite ne conserve pas le fuseau : UTC naïf
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SQLiteStudentStore(SQLAlchemyStudentStore):
    backend_name = "sqlite"

    def __init__(self, path: str = "database.sqlite", clock: Optional[Callable[[], datetime]] = None):
        super().__init__()
        self.path = path
        self._clock = clock or utc_now

    def _create_engine(self) -> Engine:
        if self.path == MEMORY_PATH:
            # Une seule connexion partagée, sinon chaque connexion voit une base vide
            engine = build_engine(
                "sqlite://",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            db_path = Path(self.path)
            try:
                db_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                logger.error("Dossier de la base SQLite inaccessible (%s) : %s", db_path.parent, exc)
                raise StorageUnavailableError(f"Unable to create SQLite directory {db_path.parent}") from exc
            engine = build_engine(
                f"sqlite:///{db_path}",
                connect_args={"check_same_thread": False},
            )
        logger.info("Base SQLite connectée : %s", self.path)
        return engine

    def _is_unique_violation(self, exc: IntegrityError) -> bool:
        return "UNIQUE constraint failed" in str(exc.orig)

    def _insert_timestamps(self) -> Dict[str, object]:
        now = self._clock()
        return {"created_at": now, "updated_at": now}
