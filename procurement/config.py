"""
Configuration centralisée - variables d'environnement
"""

import os
import logging
from functools import lru_cache
from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration de l'application chargée depuis l'environnement ou .env"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # --- Application ---
    APP_NAME: str = "Gestion des Consultations"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # --- Base de données ---
    DATABASE_URL: str = ""

    # Defaults pour dev local
    POSTGRES_USER: str = "procurement_user"
    POSTGRES_PASSWORD: str = "procurement_secret"
    POSTGRES_DB: str = "procurement"
    POSTGRES_HOST: str = "db"
    POSTGRES_PORT: int = 5432
    DB_CONNECT_RETRIES: int = 5

    # --- Pagination ---
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # --- Règles métier ---
    HIGH_VALUE_THRESHOLD: float = 1_000_000.0
    CONSULTATION_MIN_PERIOD_DAYS: int = 15
    CLEARANCE_ALERT_DAYS: int = 30
    DEFAULT_PRINCIPAL: str = "system"

    # --- Fichiers ---
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_SIZE_MB: int = 10

    # --- Scheduler ---
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_TIMEZONE: str = "Africa/Algiers"
    REVIEW_SCHEDULE_HOUR: int = 6

    @property
    def database_url(self) -> str:
        """Priorité absolue à l'URL complète (DATABASE_URL)"""
        _logger = logging.getLogger(__name__)

        if self.DATABASE_URL:
            url = self.DATABASE_URL
            source = "DATABASE_URL"
        else:
            # Fallback sur les composants individuels
            url = (
                f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
            source = f"composants individuels (host={self.POSTGRES_HOST})"

        # Certains hébergeurs exposent encore postgres://
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
            _logger.info("🔧 Correction URL: postgres:// -> postgresql://")

        parsed = urlparse(url)
        _logger.info(f"📊 DB source: {source} | schéma: {parsed.scheme} | hôte: {parsed.hostname} | db: {parsed.path}")

        return url

    @property
    def max_upload_size(self) -> int:
        """Taille maximale d'un fichier téléversé, en octets"""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def upload_path(self) -> str:
        return os.path.abspath(self.UPLOAD_DIR)


@lru_cache()
def get_settings() -> Settings:
    """Singleton des settings - cache en mémoire"""
    return Settings()
