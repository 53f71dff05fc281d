"""
Dépendances FastAPI partagées par les routers.
"""

from fastapi import Request

from student_registration.store.base import StudentStore


def get_student_store(request: Request) -> StudentStore:
    """Store créé au démarrage (lifespan) et porté par app.state."""
    return request.app.state.student_store
