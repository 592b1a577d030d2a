"""Keyset (cursor) pagination for repositories.

Instead of OFFSET, each page seeks past the last row of the previous one
using the sort value and the ``id`` tiebreaker:

    WHERE (created_at, id) < (:cursor_created_at, :cursor_id)
    ORDER BY created_at DESC, id DESC
    LIMIT :limit + 1

Two sort modes are supported:

- field: any model column, addressed by its camelCase or snake_case name.
- relevance: rows follow an externally ranked id list (e.g. a search
  engine hit list) passed in ``filters[ranking_filter_key]``; the position
  of each id in that list is computed with a portable ``CASE`` expression.

Example:
    class IconRepository(CursorPaginationMixin, BaseRepository[Icon]):
        ranking_filter_key = "iconIdsOrder"

    page = await repo.cursor_paginate(session, sort_by="createdAt", limit=20)
    page = await repo.cursor_paginate(session, cursor=page.page_info.end_cursor)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, ClassVar, Protocol
from uuid import UUID

from pydantic.alias_generators import to_snake
from sqlalchemy import Select, case, func, select, tuple_
from sqlalchemy import inspect as sa_inspect

from catalog_service.core.database.exceptions import InvalidFilterError
from catalog_service.core.exceptions import InvalidCursorException, ValidationException
from catalog_service.core.pagination.cursor import CursorCodec
from catalog_service.core.pagination.schemas import Page, PageInfo
from catalog_service.infra.logging import get_lazy_logger
from catalog_service.infra.metrics.tracking import track_pagination_query

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import ColumnElement

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

MAX_PAGE_SIZE = 100
RELEVANCE_SORT = "relevance"
DEFAULT_RANKING_FILTER_KEY = "rankedIds"

_COLLECTION_TYPES = (list, tuple, set, frozenset)


class QueryCapable(Protocol):
    """What the pagination mixin needs from the repository it is mixed into."""

    model: Any
    entity_class: type[Any] | None
    ranking_filter_key: str

    def query(self) -> Select[Any]: ...

    def wrap_entity(
        self,
        record: Any,
        entity_class: type[Any] | None = None,
        options: dict[str, Any] | None = None,
    ) -> Any: ...

    def _apply_filters(self, statement: Select[Any], filters: Mapping[str, Any]) -> Select[Any]: ...


class CursorPaginationMixin:
    """Adds ``cursor_paginate`` to a repository.

    Mix in before ``BaseRepository`` so that ``_apply_filters`` overrides in
    the concrete repository can delegate to this generic implementation
    through ``super()``.
    """

    __slots__ = ()

    ranking_filter_key: ClassVar[str] = DEFAULT_RANKING_FILTER_KEY

    async def cursor_paginate(
        self: QueryCapable,
        session: AsyncSession,
        *,
        filters: Mapping[str, Any] | None = None,
        cursor: str | None = None,
        limit: int = 20,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        include_total_count: bool = False,
        entity_class: type[Any] | None = None,
        entity_options: dict[str, Any] | None = None,
    ) -> Page:
        """Fetch one page of rows after ``cursor``.

        Args:
            session: Database session; the count query runs on it too.
            filters: Filter mapping handed to ``_apply_filters``; None values
                are ignored.
            cursor: ``endCursor`` of the previous page.
            limit: Page size, clamped to [1, 100].
            sort_by: camelCase column name, or ``"relevance"``.
            sort_order: ``"asc"`` or ``"desc"``.
            include_total_count: Also count all rows matching ``filters``.
            entity_class: Overrides the repository's entity class.
            entity_options: Forwarded to the entity constructor.

        Returns:
            Page of wrapped entities with cursors for its first and last row.

        Raises:
            InvalidCursorException: The cursor does not decode to a usable
                position for the requested sort.
            ValidationException: Unknown sort field or order, or relevance
                sort without a ranked id list.
            InvalidFilterError: A filter key names no model column.
        """
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        filters = dict(filters or {})
        descending = _parse_sort_order(sort_order)

        decoded: dict[str, Any] | None = None
        if cursor:
            decoded = CursorCodec.decode(cursor)
            if not CursorCodec.is_valid(decoded):
                raise InvalidCursorException()

        ranked_ids = filters.get(self.ranking_filter_key)
        use_relevance = (
            sort_by == RELEVANCE_SORT
            and isinstance(ranked_ids, _COLLECTION_TYPES)
            and len(ranked_ids) > 0
        )
        if sort_by == RELEVANCE_SORT and not use_relevance:
            raise ValidationException(
                detail=f"Sorting by relevance requires a non-empty '{self.ranking_filter_key}' filter",
                type="invalid-sort",
                extra={"sort_by": sort_by},
            )

        filtered = self._apply_filters(self.query(), filters)
        pk = _pk_attribute(self.model)
        statement = filtered

        positions: dict[Any, int] = {}
        if use_relevance:
            positions = _ranking_positions(ranked_ids)
            position = case(positions, value=pk, else_=len(positions) + 1)
            if decoded is not None:
                array_position = decoded.get("arrayPosition")
                if (
                    not isinstance(array_position, int)
                    or isinstance(array_position, bool)
                    or array_position < 1
                ):
                    raise InvalidCursorException("Invalid array position in cursor")
                statement = statement.where(
                    position < array_position if descending else position > array_position
                )
            statement = statement.order_by(
                position.desc() if descending else position.asc(),
                pk.desc() if descending else pk.asc(),
            )
            sort_fields: list[str] = []
        else:
            column_key = _column_key(self.model, sort_by)
            column = getattr(self.model, column_key)
            by_id = column_key == pk.key
            if decoded is not None:
                cursor_id = _coerce_cursor_value(self.model, pk.key, decoded.get("id"))
                if by_id:
                    predicate: ColumnElement[bool] = pk < cursor_id if descending else pk > cursor_id
                else:
                    if sort_by not in decoded:
                        raise InvalidCursorException(
                            "Cursor does not match the requested sort",
                            extra={"sort_by": sort_by},
                        )
                    cursor_value = _coerce_cursor_value(self.model, column_key, decoded[sort_by])
                    keyset = tuple_(column, pk)
                    boundary = tuple_(cursor_value, cursor_id)
                    predicate = keyset < boundary if descending else keyset > boundary
                statement = statement.where(predicate)
            if by_id:
                statement = statement.order_by(pk.desc() if descending else pk.asc())
                sort_fields = ["id"]
            else:
                statement = statement.order_by(
                    column.desc() if descending else column.asc(),
                    pk.desc() if descending else pk.asc(),
                )
                sort_fields = [sort_by, "id"]

        track_pagination_query(
            self.model.__name__, "relevance" if use_relevance else "field"
        )

        result = await session.execute(statement.limit(limit + 1))
        rows = list(result.scalars().all())
        has_next_page = len(rows) > limit
        if has_next_page:
            rows = rows[:limit]

        entities = self.wrap_entity(rows, entity_class, entity_options)

        start_cursor = end_cursor = None
        if rows:
            if use_relevance:
                start_cursor = _relevance_cursor(rows[0], positions)
                end_cursor = _relevance_cursor(rows[-1], positions)
            else:
                start_cursor = CursorCodec.from_row(entities[0], sort_fields)
                end_cursor = CursorCodec.from_row(entities[-1], sort_fields)

        total_count = None
        if include_total_count:
            count_stmt = select(func.count()).select_from(filtered.subquery())
            total_count = (await session.execute(count_stmt)).scalar_one()

        lazy_logger.debug(
            lambda: f"db.cursor_paginate: {self.model.__name__}(sort={sort_by} {sort_order}, "
            f"limit={limit}) -> {len(rows)} items, has_next={has_next_page}"
        )

        return Page(
            results=list(entities),
            page_info=PageInfo(
                has_next_page=has_next_page,
                has_previous_page=bool(cursor),
                start_cursor=start_cursor,
                end_cursor=end_cursor,
                total_count=total_count,
            ),
        )

    def _apply_filters(
        self: QueryCapable,
        statement: Select[Any],
        filters: Mapping[str, Any],
    ) -> Select[Any]:
        """Translate a filter mapping into WHERE clauses.

        camelCase keys map to snake_case columns; collections become
        ``IN``, scalars ``==``. ``None`` values are skipped. The ranking key
        restricts rows to the ranked ids.

        Override in concrete repositories for domain filters and delegate
        the rest with ``super()._apply_filters(statement, remaining)``.
        """
        columns = sa_inspect(self.model).columns
        for key, value in filters.items():
            if value is None:
                continue
            if key == self.ranking_filter_key:
                ids = list(value) if isinstance(value, _COLLECTION_TYPES) else [value]
                statement = statement.where(_pk_attribute(self.model).in_(ids))
                continue
            column_key = to_snake(key)
            if column_key not in columns:
                raise InvalidFilterError(
                    f"Unknown filter field for {self.model.__name__}", filter_name=key
                )
            column = getattr(self.model, column_key)
            if isinstance(value, _COLLECTION_TYPES):
                statement = statement.where(column.in_(list(value)))
            else:
                statement = statement.where(column == value)
        return statement


def _parse_sort_order(sort_order: str) -> bool:
    """Return True for descending order."""
    normalized = (sort_order or "").lower()
    if normalized not in ("asc", "desc"):
        raise ValidationException(
            detail=f"Invalid sort order '{sort_order}'",
            type="invalid-sort",
            extra={"sort_order": sort_order},
        )
    return normalized == "desc"


def _pk_attribute(model: Any) -> Any:
    mapper = sa_inspect(model)
    return getattr(model, mapper.get_property_by_column(mapper.primary_key[0]).key)


def _column_key(model: Any, sort_by: str) -> str:
    column_key = to_snake(sort_by)
    if column_key not in sa_inspect(model).columns:
        raise ValidationException(
            detail=f"Cannot sort by '{sort_by}'",
            type="invalid-sort",
            extra={"sort_by": sort_by},
        )
    return column_key


def _ranking_positions(ranked_ids: Sequence[Any]) -> dict[Any, int]:
    """1-based positions of ids in the ranking; the first occurrence wins."""
    positions: dict[Any, int] = {}
    for index, ranked_id in enumerate(ranked_ids, start=1):
        positions.setdefault(ranked_id, index)
    return positions


def _relevance_cursor(row: Any, positions: dict[Any, int]) -> str | None:
    row_id = row.id
    return CursorCodec.encode(
        {
            "arrayPosition": positions.get(row_id),
            "id": row_id,
            "sortType": "arrayPosition",
            "direction": "next",
        }
    )


def _coerce_cursor_value(model: Any, column_key: str, value: Any) -> Any:
    """Convert a JSON cursor value back to the column's Python type."""
    if value is None:
        raise InvalidCursorException(
            "Cursor is missing a sort value", extra={"field": column_key}
        )
    column_type = sa_inspect(model).columns[column_key].type
    try:
        python_type = column_type.python_type
    except NotImplementedError:
        return value

    try:
        if python_type is bool or isinstance(value, bool):
            if isinstance(value, bool) and python_type is bool:
                return value
            raise TypeError("boolean cursor value")
        if isinstance(value, python_type):
            return value
        if python_type is datetime:
            return datetime.fromisoformat(value)
        if python_type is date:
            return date.fromisoformat(value)
        if python_type is UUID:
            return UUID(str(value))
        return python_type(value)
    except (TypeError, ValueError) as e:
        logger.warning(
            "Cursor value does not match column type",
            extra={"field": column_key, "column_type": str(column_type), "error": str(e)},
        )
        raise InvalidCursorException(
            "Cursor value does not match the sort field", extra={"field": column_key}
        ) from e


__all__ = [
    "DEFAULT_RANKING_FILTER_KEY",
    "MAX_PAGE_SIZE",
    "RELEVANCE_SORT",
    "CursorPaginationMixin",
    "QueryCapable",
]
