"""
Configuration SQLAlchemy et gestion des sessions
"""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import retry, stop_after_attempt, wait_exponential

from procurement.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

db_url = settings.database_url


def _engine_options(url: str) -> dict:
    """Options du moteur selon le dialecte (PostgreSQL en production, SQLite en test)"""
    if url.startswith("sqlite"):
        options = {
            "connect_args": {"check_same_thread": False},
            "echo": settings.DEBUG,
        }
        # Base en mémoire : une seule connexion partagée
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,       # Vérifie la connexion avant utilisation
        "pool_recycle": 1800,         # Recycle les connexions après 30min
        "connect_args": {
            "connect_timeout": 10,
        },
        "echo": settings.DEBUG,       # Log SQL en mode debug
    }


engine = create_engine(db_url, **_engine_options(db_url))

# Factory de sessions
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base déclarative pour tous les modèles
Base = declarative_base()


def get_db():
    """
    Dépendance FastAPI : fournit une session DB par requête.
    La session est automatiquement fermée après la requête.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context():
    """
    Context manager pour utilisation hors FastAPI (scheduler, scripts).
    Usage:
        with get_db_context() as db:
            db.query(...)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@retry(
    stop=stop_after_attempt(settings.DB_CONNECT_RETRIES),
    wait=wait_exponential(multiplier=3, min=3, max=30),
    reraise=True,
    before_sleep=lambda retry_state: logger.warning(
        f"⏳ Tentative {retry_state.attempt_number}/{settings.DB_CONNECT_RETRIES} échouée, nouvel essai..."
    ),
)
def _check_connection():
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def init_db():
    """
    Crée toutes les tables en base avec retry.
    À appeler au démarrage de l'application.
    """
    # Import tous les modèles pour que SQLAlchemy les enregistre
    from procurement import models  # noqa: F401

    logger.info("🔌 Connexion à la base de données...")
    try:
        _check_connection()
    except Exception as e:
        logger.critical(f"💀 Impossible de se connecter à la DB après {settings.DB_CONNECT_RETRIES} tentatives: {e}")
        raise
    logger.info("✅ Connexion DB réussie")

    Base.metadata.create_all(bind=engine)
    logger.info("✅ Tables créées/vérifiées avec succès")
