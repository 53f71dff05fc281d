"""
Configuration partagée pour tous les tests.
Remplace le store créé au démarrage par une base SQLite temporaire.
"""

import pytest
from fastapi.testclient import TestClient

from student_registration.main import app
from student_registration.store.sqlite import SQLiteStudentStore


@pytest.fixture
def sqlite_store(tmp_path):
    """Store SQLite initialisé dans un fichier temporaire."""
    store = SQLiteStudentStore(str(tmp_path / "students.sqlite"))
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def client(sqlite_store, monkeypatch):
    """Client HTTP de test branché sur le store SQLite temporaire."""
    monkeypatch.setattr("student_registration.main.create_student_store", lambda _settings: sqlite_store)
    with TestClient(app) as c:
        yield c
