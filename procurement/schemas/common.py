"""
Schemas communs - pagination et réponses utilitaires
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """Page de résultats (numérotation à partir de 1)"""
    items: list[T]
    total: int
    page: int
    size: int
    pages: int

    class Config:
        from_attributes = True


class ExistsResponse(BaseModel):
    id: int
    exists: bool


class CountResponse(BaseModel):
    count: int
