"""Translate task listing options into a bounded query plan.

The builder never trusts its input: unknown sort fields, sort orders and
out-of-range pagination fall back to defaults, so nothing outside the
allow-list can reach the store. Pass ``strict=True`` to get
InvalidSortField / InvalidPagination instead of the fallbacks.
"""

import math
from typing import Any, Optional

from src.models.query import (
    SORTABLE_FIELDS,
    Condition,
    CountPlan,
    OrderBy,
    Pagination,
    QueryPlan,
    TaskQueryOptions,
)
from src.utils.config import AppConfig
from src.utils.errors import InvalidPagination, InvalidSortField

DEFAULT_SORT_FIELD = "created_at"
SORT_ORDERS = ("ASC", "DESC")
DEFAULT_SORT_ORDER = "DESC"
SEARCH_FIELDS = ("title", "description")


def resolve_sort_field(sort_by: Any, strict: bool = False) -> str:
    if sort_by in SORTABLE_FIELDS:
        return sort_by
    if strict and sort_by is not None:
        raise InvalidSortField(f"Cannot sort by {sort_by!r}")
    return DEFAULT_SORT_FIELD


def resolve_sort_order(sort_order: Any, strict: bool = False) -> str:
    normalized = sort_order.upper() if isinstance(sort_order, str) else None
    if normalized in SORT_ORDERS:
        return normalized
    if strict and sort_order is not None:
        raise InvalidSortField(f"Sort order must be ASC or DESC, got {sort_order!r}")
    return DEFAULT_SORT_ORDER


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def resolve_pagination(page: Any, limit: Any, strict: bool = False) -> tuple[int, int]:
    """Return ``(page, limit)`` with page >= 1 and 1 <= limit <= MAX_PAGE_SIZE."""
    max_limit = AppConfig.MAX_PAGE_SIZE
    page_value = _as_int(page) if page is not None else 1
    limit_value = _as_int(limit) if limit is not None else AppConfig.DEFAULT_PAGE_SIZE

    if strict:
        if page_value is None or page_value < 1:
            raise InvalidPagination("Page must be a positive integer")
        if limit_value is None or not 1 <= limit_value <= max_limit:
            raise InvalidPagination(f"Limit must be between 1 and {max_limit}")

    if page_value is None or page_value < 1:
        page_value = 1
    if limit_value is None:
        limit_value = AppConfig.DEFAULT_PAGE_SIZE
    limit_value = max(1, min(limit_value, max_limit))
    return page_value, limit_value


def _enum_text(value: Any) -> Any:
    return getattr(value, "value", value)


def build_conditions(options: TaskQueryOptions) -> list[Condition]:
    """WHERE conditions for the options; the owner filter is always first."""
    conditions = [Condition(fields=("user_id",), op="eq", value=options.user_id)]

    if options.status:
        conditions.append(Condition(fields=("status",), op="eq", value=_enum_text(options.status)))
    if options.priority:
        conditions.append(Condition(fields=("priority",), op="eq", value=_enum_text(options.priority)))
    if options.is_urgent is not None:
        conditions.append(Condition(fields=("is_urgent",), op="eq", value=bool(options.is_urgent)))
    if options.search:
        conditions.append(Condition(fields=SEARCH_FIELDS, op="ilike", value=options.search))

    return conditions


def build_query(options: TaskQueryOptions, strict: bool = False) -> QueryPlan:
    """Build the page query for ``options``."""
    sort_by = resolve_sort_field(options.sort_by, strict=strict)
    sort_order = resolve_sort_order(options.sort_order, strict=strict)
    page, limit = resolve_pagination(options.page, options.limit, strict=strict)

    return QueryPlan(
        conditions=build_conditions(options),
        order=OrderBy(field=sort_by, direction=sort_order),
        page=page,
        limit=limit,
        offset=(page - 1) * limit,
        filters={
            "status": _enum_text(options.status) or None,
            "priority": _enum_text(options.priority) or None,
            "is_urgent": options.is_urgent,
            "search": options.search or None,
        },
        sorting={"sort_by": sort_by, "sort_order": sort_order},
    )


def build_count_query(options: TaskQueryOptions) -> CountPlan:
    """Build the total-count query paired with build_query."""
    return CountPlan(conditions=build_conditions(options))


def paginate(total: int, plan: QueryPlan) -> Pagination:
    return Pagination(
        page=plan.page,
        limit=plan.limit,
        total=total,
        pages=math.ceil(total / plan.limit) if total else 0,
    )


def like_pattern(term: str) -> str:
    """Substring pattern with LIKE wildcards in ``term`` escaped."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _postgrest_quote(value: str) -> str:
    # Quoted values may contain the commas and parentheses used by or=()
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _postgrest_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def apply_conditions(query: Any, conditions: list[Condition]) -> Any:
    """Apply conditions to a Supabase (PostgREST) filter builder."""
    for condition in conditions:
        if condition.op == "eq":
            query = query.eq(condition.fields[0], _postgrest_value(condition.value))
        elif condition.op == "ilike":
            pattern = like_pattern(str(condition.value))
            if len(condition.fields) == 1:
                query = query.ilike(condition.fields[0], pattern)
            else:
                quoted = _postgrest_quote(pattern)
                query = query.or_(",".join(f"{field}.ilike.{quoted}" for field in condition.fields))
    return query


def apply_plan(query: Any, plan: QueryPlan) -> Any:
    """Apply conditions, ordering and the page range to a Supabase builder."""
    query = apply_conditions(query, plan.conditions)
    query = query.order(plan.order.field, desc=plan.order.descending)
    return query.range(plan.offset, plan.offset + plan.limit - 1)
