"""
Utility functions for the application.
"""
from sqlalchemy.orm import Query
from journaloo.core.config import settings


def paginate(query: Query, page: int) -> Query:
    """
    Restrict a query to one fixed-size page (pages start at 0).

    Offset pagination gets slower as the offset grows; the page contract is
    kept so the implementation can move to keyset pagination later.
    """
    if page < 0:
        raise ValueError(f"Page must be non-negative, got {page}")
    return query.offset(page * settings.PAGE_SIZE).limit(settings.PAGE_SIZE)
