# Repositories package init
"""
Catalog Backend: Storage Access Layer
======================================

What:  Thin async repositories over SQLAlchemy, one per entity.
How:   Each repository is bound to an AsyncSession and exposes
       find_by_id / list / count / create / update / delete.
       Database failures are translated at this boundary:
         - missing rows              → NotFoundError
         - integrity / FK / unique   → ConstraintViolationError
         - anything else from SQLAlchemy → PersistenceError
Who:   Used by the services; never by routes directly.

Repositories only flush. Committing is the session owner's job
(get_db_session for HTTP requests).
"""

from catalog.repositories.categories import CategoryRepository
from catalog.repositories.products import ProductRepository

__all__ = ["CategoryRepository", "ProductRepository"]
