"""
List query options: pagination and sorting parsed from query parameters.

    ?page=2&limit=10&sort=createdAt:desc  ->  skip=10, take=10, order by created_at desc
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from fastapi import Query


@dataclass(frozen=True)
class ListOptions:
    skip: Optional[int] = None
    take: Optional[int] = None
    sort_field: Optional[str] = None
    sort_desc: bool = False


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


# PUBLIC_INTERFACE
def parse_list_options(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
) -> ListOptions:
    """
    Build ListOptions from raw values.

    Pagination applies only when both page and limit are given. Sort must be
    'field:asc' or 'field:desc'; anything else is ignored.
    """
    skip = take = None
    if page and limit:
        skip = (page - 1) * limit
        take = limit

    sort_field = None
    sort_desc = False
    if sort:
        field, _, order = sort.partition(":")
        field = field.strip()
        order = order.strip().lower()
        if field and order in ("asc", "desc"):
            sort_field = _to_snake(field)
            sort_desc = order == "desc"

    return ListOptions(skip=skip, take=take, sort_field=sort_field, sort_desc=sort_desc)


# PUBLIC_INTERFACE
async def list_options(
    page: Optional[int] = Query(default=None, ge=1, description="1-based page number"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000, description="Page size"),
    sort: Optional[str] = Query(default=None, description="Sort as field:asc or field:desc"),
) -> ListOptions:
    """FastAPI dependency wrapping parse_list_options."""
    return parse_list_options(page=page, limit=limit, sort=sort)
