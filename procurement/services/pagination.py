"""
Pagination et tri des requêtes de liste
"""

import math

from sqlalchemy.orm import Query

from procurement.config import get_settings
from procurement.exceptions import BusinessValidationError

settings = get_settings()


class Page:
    """Résultat paginé, sérialisé via PageResponse"""

    def __init__(self, items: list, total: int, page: int, size: int):
        self.items = items
        self.total = total
        self.page = page
        self.size = size
        self.pages = math.ceil(total / size) if size else 0

    def __repr__(self):
        return f"<Page(page={self.page}, size={self.size}, total={self.total})>"


def apply_sort(query: Query, model, sort_by: str | None, sort_dir: str | None, allowed, default: str) -> Query:
    """Tri sur une colonne autorisée (liste blanche), ascendant par défaut"""
    column_name = sort_by or default
    if column_name not in allowed:
        raise BusinessValidationError(
            f"Tri impossible sur '{column_name}'. Colonnes autorisées: {', '.join(allowed)}"
        )
    direction = (sort_dir or "asc").lower()
    if direction not in ("asc", "desc"):
        raise BusinessValidationError(f"Sens de tri invalide: '{sort_dir}' (asc ou desc)")

    column = getattr(model, column_name)
    ordering = column.desc() if direction == "desc" else column.asc()
    # Tri secondaire stable sur l'identifiant
    return query.order_by(ordering, model.id.asc())


def paginate(query: Query, page: int = 1, size: int | None = None) -> Page:
    size = min(size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    page = max(page, 1)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * size).limit(size).all()
    return Page(items=items, total=total, page=page, size=size)
