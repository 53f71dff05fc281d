"""
Modèle SQLAlchemy pour la table students.
Même schéma pour SQLite et PostgreSQL ; l'email porte la contrainte UNIQUE.
"""

from sqlalchemy import Column, Date, DateTime, Integer, String, func

from student_registration.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    course = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
