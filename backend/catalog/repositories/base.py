"""Shared plumbing for the SQLAlchemy repositories."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.exceptions import ConstraintViolationError, PersistenceError

logger = logging.getLogger(__name__)


class BaseRepository:
    """Holds the session and translates driver errors into catalog errors."""

    # Singular resource name used in error messages ("product", "category")
    resource: str = "resource"

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _flush(self, operation: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Flush pending changes, translating failures.

        IntegrityError becomes ConstraintViolationError (the store rejected
        the write); any other SQLAlchemyError becomes PersistenceError.
        """
        ctx = {"resource": self.resource, "operation": operation, **(context or {})}
        try:
            await self._session.flush()
        except IntegrityError as e:
            logger.warning("Integrity error on %s %s: %s", self.resource, operation, e.orig)
            raise ConstraintViolationError(
                message=f"The {self.resource} could not be saved because it violates a data constraint",
                context=ctx,
            ) from e
        except SQLAlchemyError as e:
            logger.error("Database error on %s %s: %s", self.resource, operation, str(e), exc_info=True)
            raise PersistenceError(context=ctx) from e

    async def _run(self, operation: str, coro):
        """Await a read query, wrapping SQLAlchemy failures in PersistenceError."""
        try:
            return await coro
        except SQLAlchemyError as e:
            logger.error("Database error on %s %s: %s", self.resource, operation, str(e), exc_info=True)
            raise PersistenceError(
                context={"resource": self.resource, "operation": operation},
            ) from e
