"""
Base déclarative SQLAlchemy et construction des moteurs de base de données.
Chaque StudentStore possède son propre moteur : aucune connexion globale au module.
"""

import logging
from typing import Any, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(url: Union[str, URL], **kwargs: Any) -> Engine:
    """Crée un moteur SQLAlchemy synchrone pour l'URL donnée."""
    engine = create_engine(url, **kwargs)
    logger.debug("Moteur SQLAlchemy créé : %s", engine.url.render_as_string(hide_password=True))
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    """Fabrique de sessions courtes : une session par opération du store."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
