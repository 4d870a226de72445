"""Minimal generic repository for SQLAlchemy models.

Provides basic CRUD operations with explicit session passing.
For batch lookups and complex queries, use the session directly.

Example:
    class PostRepository(BaseRepository[Post]):
        async def list_by_author(self, session, author_id): ...

    post_repo = PostRepository(Post)
    post = await post_repo.get(session, post_id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from blog_gateway.core.database.exceptions import ConstraintViolationError, NotFoundError
from blog_gateway.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Minimal generic repository for CRUD operations.

    Provides:
        - get(session, id) -> T | None
        - get_or_raise(session, id) -> T (raises NotFoundError)
        - list(session) -> Sequence[T]
        - create(session, instance) -> T (raises ConstraintViolationError)
        - update(session, instance, values) -> T (raises ConstraintViolationError)
        - delete_by_id(session, id) -> bool

    Session is always explicit. Nothing here commits; the caller owns the
    transaction.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., User, Post)
        """
        self.model = model
        # Standard logger for INFO/WARNING/ERROR
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    def _pk_attr(self) -> Any:
        return self.model.id  # type: ignore[attr-defined]

    async def get(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T | None:
        """Get entity by primary key.

        Always issues a SELECT instead of consulting the identity map, so rows
        removed by an ``ON DELETE CASCADE`` are not returned stale.

        Args:
            session: Database session
            id: Primary key value
            options: SQLAlchemy loader options (e.g., selectinload)

        Returns:
            Entity if found, None otherwise
        """
        stmt = select(self.model).where(self._pk_attr() == id)
        if options:
            stmt = stmt.options(*options)
        result = await session.execute(stmt)
        instance = result.scalar_one_or_none()

        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def get_or_raise(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T:
        """Get entity by primary key or raise NotFoundError.

        Raises:
            NotFoundError: If entity doesn't exist
        """
        instance = await self.get(session, id, options=options)
        if instance is None:
            self._logger.info(
                "Entity not found",
                extra={
                    "entity": self.model.__name__,
                    "id": str(id),
                    "operation": "db.get_or_raise",
                },
            )
            raise NotFoundError(self.model.__name__, {"id": id})
        return instance

    async def list(
        self,
        session: AsyncSession,
        *,
        options: Iterable[Any] | None = None,
    ) -> Sequence[T]:
        """List every entity of this model.

        Args:
            session: Database session
            options: SQLAlchemy loader options

        Returns:
            Sequence of entities
        """
        stmt = select(self.model)
        if options:
            stmt = stmt.options(*options)
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(lambda: f"db.list: {self.model.__name__} -> {len(items)} items")
        return items

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Persist a new entity.

        Adds to session and flushes to surface constraint violations early.

        Args:
            session: Database session
            instance: Entity instance to persist

        Returns:
            Persisted entity

        Raises:
            ConstraintViolationError: If a unique or foreign key constraint fails
        """
        session.add(instance)
        await self._flush(session, "create")

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def update(
        self,
        session: AsyncSession,
        instance: T,
        values: Mapping[str, Any],
    ) -> T:
        """Apply attribute values to a tracked entity and flush.

        Args:
            session: Database session
            instance: Entity already loaded in this session
            values: Attribute name to new value

        Returns:
            Updated entity

        Raises:
            ConstraintViolationError: If a unique or foreign key constraint fails
        """
        for key, value in values.items():
            setattr(instance, key, value)
        await self._flush(session, "update")

        self._lazy.debug(
            lambda: f"db.update: {self.model.__name__}(id={getattr(instance, 'id', None)}) {sorted(values)}"
        )
        return instance

    async def delete_by_id(self, session: AsyncSession, id: Any) -> bool:  # noqa: A002
        """Delete an entity by primary key.

        Dependent rows are removed by the database through ``ON DELETE CASCADE``.

        Args:
            session: Database session
            id: Primary key value

        Returns:
            True if a row was deleted, False if none matched
        """
        result = await session.execute(sql_delete(self.model).where(self._pk_attr() == id))
        deleted = bool(result.rowcount)

        if deleted:
            self._logger.info(
                "Entity deleted",
                extra={"entity": self.model.__name__, "id": str(id), "operation": "db.delete"},
            )
        return deleted

    async def _flush(self, session: AsyncSession, operation: str) -> None:
        try:
            await session.flush()
        except IntegrityError as e:
            raise ConstraintViolationError(
                self.model.__name__, operation, str(e.orig)
            ) from e
