"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface
for services. Services should use repositories for data access rather
than directly querying SQLAlchemy models.

The Repository pattern separates data access from business logic:
- Repositories: Pure data access (queries, creates, updates)
- Services: Business logic that uses repositories

Dependency direction: Services -> Repositories -> Models
"""

from .exceptions import NotFoundError, RepositoryError, SchemeListError
from .holding_repository import HoldingRepository
from .nav_repository import NavRepository
from .protocols import HolderSchemeSource, NavStore
from .scheme_repository import SchemeRepository

__all__ = [
    "HolderSchemeSource",
    "HoldingRepository",
    "NavRepository",
    "NavStore",
    "NotFoundError",
    "RepositoryError",
    "SchemeListError",
    "SchemeRepository",
]
