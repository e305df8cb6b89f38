"""
Principal agissant - chaque mutation est attribuée explicitement à un utilisateur
"""

from dataclasses import dataclass
from datetime import datetime

from fastapi import Header

from procurement.config import get_settings


@dataclass(frozen=True)
class Principal:
    """Identité qui effectue une opération d'écriture"""
    username: str


def system_principal() -> Principal:
    """Principal utilisé hors requête HTTP (scheduler, scripts)"""
    return Principal(username=get_settings().DEFAULT_PRINCIPAL)


def get_principal(x_user: str | None = Header(None, description="Utilisateur à l'origine de la requête")) -> Principal:
    """Dépendance FastAPI : principal lu dans l'en-tête X-User"""
    if x_user and x_user.strip():
        return Principal(username=x_user.strip())
    return system_principal()


def stamp_created(entity, principal: Principal) -> None:
    now = datetime.utcnow()
    entity.created_at = now
    entity.created_by = principal.username
    entity.updated_at = now
    entity.updated_by = principal.username


def stamp_updated(entity, principal: Principal) -> None:
    entity.updated_at = datetime.utcnow()
    entity.updated_by = principal.username
