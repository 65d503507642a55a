"""
FastAPI dependencies for dependency injection.

Routes depend on LinkService; the service gets its database session and
cache from here, so tests can override either one.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from hashlink_app.cache.factory import CacheFactory, CacheBackend
from hashlink_app.cache.strategies import CacheStrategy
from hashlink_app.database.connection import get_db
from hashlink_app.config import settings


@lru_cache()
def get_cache() -> CacheStrategy:
    """Get the configured cache instance (singleton)."""
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


def get_link_service(
    db: Session = Depends(get_db),
    cache: CacheStrategy = Depends(get_cache)
):
    """Get LinkService with its session and cache injected."""
    from hashlink_app.services.link_service import LinkService
    return LinkService(db=db, cache=cache)
