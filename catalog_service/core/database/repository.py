"""Minimal generic repository for SQLAlchemy models.

Provides basic CRUD operations with explicit session passing, plus the two
hooks keyset pagination needs: ``query()`` (the base select) and
``wrap_entity()`` (rows -> immutable entities).
For complex queries, use the session directly - this is a convenience, not a cage.

Example:
    class IconRepository(BaseRepository[Icon]):
        async def find_by_unique_id(self, session: AsyncSession, unique_id: str) -> Icon | None:
            return await self.get_by(session, Icon.unique_id, unique_id)

    repo = IconRepository(Icon, entity_class=IconEntity)
    icon = await repo.get(session, 42)
    entity = repo.wrap_entity(icon)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy import inspect as sa_inspect

from catalog_service.core.database.exceptions import NotFoundError
from catalog_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Minimal generic repository for CRUD operations.

    Provides:
        - query() -> Select
        - get(session, id) -> T | None
        - get_or_raise(session, id) -> T (raises NotFoundError)
        - get_by(session, attr, value) -> T | None
        - list(session, limit, offset) -> Sequence[T]
        - count(session) -> int
        - create(session, instance) -> T
        - create_many(session, instances) -> Sequence[T]
        - wrap_entity(record) -> entity | list[entity]

    Session is always explicit - no hidden state.
    """

    __slots__ = ("_lazy", "_logger", "entity_class", "model")

    def __init__(self, model: type[T], *, entity_class: type[Any] | None = None) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., Icon)
            entity_class: Default class used by wrap_entity; None returns
                records unchanged.
        """
        self.model = model
        self.entity_class = entity_class
        # Standard logger for INFO/WARNING/ERROR
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    def query(self) -> Select[tuple[T]]:
        """Base statement that filters, keyset predicates and ordering build on."""
        return select(self.model)

    async def get(
        self,
        session: AsyncSession,
        id: Any,  # noqa: A002
        *,
        options: Iterable[Any] | None = None,
    ) -> T | None:
        """Get entity by primary key.

        Args:
            session: Database session
            id: Primary key value
            options: SQLAlchemy loader options (e.g., selectinload)

        Returns:
            Entity if found, None otherwise
        """
        if options:
            stmt = self.query().where(self._pk_attr() == id).options(*options)
            result = await session.execute(stmt)
            instance = result.scalar_one_or_none()
        else:
            instance = await session.get(self.model, id)

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
        """Get entity by primary key or raise NotFoundError."""
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

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """Get the first entity whose ``attr`` equals ``value``.

        Example:
            icon = await repo.get_by(session, Icon.unique_id, "home-outline")
        """
        stmt = self.query().where(attr == value).limit(1)
        result = await session.execute(stmt)
        instance = result.scalars().first()

        self._lazy.debug(
            lambda: f"db.get_by: {self.model.__name__}.{attr.key}={value!r} -> {'found' if instance else 'not found'}"
        )
        return instance

    async def list(
        self,
        session: AsyncSession,
        *,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[T]:
        """List entities ordered by primary key, with offset pagination."""
        stmt = self.query().order_by(self._pk_attr()).limit(limit).offset(offset)
        result = await session.execute(stmt)
        items = result.scalars().all()

        self._lazy.debug(
            lambda: f"db.list: {self.model.__name__}(limit={limit}, offset={offset}) -> {len(items)} items"
        )
        return items

    async def count(self, session: AsyncSession, statement: Select[Any] | None = None) -> int:
        """Count rows matched by ``statement`` (defaults to the whole table)."""
        base = statement if statement is not None else self.query()
        count_stmt = select(func.count()).select_from(base.subquery())
        return (await session.execute(count_stmt)).scalar_one()

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Persist a new entity and refresh generated values (like id)."""
        session.add(instance)
        await session.flush()
        await session.refresh(instance)

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def create_many(self, session: AsyncSession, instances: Iterable[T]) -> Sequence[T]:
        """Persist multiple entities."""
        instances_list = list(instances)
        session.add_all(instances_list)
        await session.flush()
        for instance in instances_list:
            await session.refresh(instance)

        self._lazy.debug(
            lambda: f"db.create_many: {self.model.__name__} -> {len(instances_list)} created"
        )
        return instances_list

    def wrap_entity(
        self,
        record: Any,
        entity_class: type[Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> Any:
        """Wrap a record (or a list of records) into entity instances.

        Records that already are instances of the target class pass through
        unchanged, so wrapping is idempotent. Classes exposing ``from_record``
        (see ``BaseEntity``) are built through it; any other class is called
        as ``entity_class(record, **options)``.

        Args:
            record: ORM instance, mapping, entity, or a list of those
            entity_class: Target class; defaults to the repository's
            options: Construction options forwarded to the entity class

        Returns:
            Entity, list of entities, or the record itself when no entity
            class is configured.
        """
        target = entity_class or self.entity_class
        if target is None or record is None:
            return record
        if isinstance(record, (list, tuple)):
            return [self._wrap_one(item, target, options) for item in record]
        return self._wrap_one(record, target, options)

    @staticmethod
    def _wrap_one(record: Any, target: type[Any], options: dict[str, Any] | None) -> Any:
        if record is None or isinstance(record, target):
            return record
        from_record = getattr(target, "from_record", None)
        if callable(from_record):
            return from_record(record, options)
        return target(record, **(options or {}))

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        """Primary key attribute of the model (first PK column)."""
        mapper = sa_inspect(self.model)
        pk_cols = mapper.primary_key
        return cast("InstrumentedAttribute[Any]", getattr(self.model, pk_cols[0].key))


__all__ = ["BaseRepository"]
