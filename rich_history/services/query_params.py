"""Query string encoding for ``GET /api/query-history``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import urlencode

from ..config import Settings
from ..models.rich_history_query import RichHistorySearchFilters, SortOrder
from .datasource_registry import DatasourceRegistry

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_FIRST_PAGE = 1

SORT_PARAMS = {
    SortOrder.Descending: "time-desc",
    SortOrder.Ascending: "time-asc",
}


@dataclass(frozen=True)
class QueryParamsConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    first_page: int = DEFAULT_FIRST_PAGE

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryParamsConfig":
        return cls(page_size=settings.page_size, first_page=settings.first_page)


def sort_param(sort_order: SortOrder) -> str:
    try:
        return SORT_PARAMS[sort_order]
    except KeyError:
        raise ValueError(f"Sort order {sort_order.value!r} is not supported by the query history API") from None


def resolve_datasource_uids(names: List[str], registry: DatasourceRegistry) -> List[str]:
    """Map datasource display names to uids, keeping input order.

    An unknown name is passed through unchanged so the read stays restricted
    to it instead of silently widening to every datasource.
    """
    uids = []
    for name in names:
        uid = registry.resolve_by_name(name)
        if uid is None:
            LOGGER.warning("Datasource %r not found in registry; filtering on the raw name", name)
            uid = name
        uids.append(uid)
    return uids


def build_query_params(
    filters: RichHistorySearchFilters,
    registry: DatasourceRegistry,
    config: Optional[QueryParamsConfig] = None,
) -> str:
    config = config or QueryParamsConfig()
    params: List[Tuple[str, str]] = [
        ("datasourceUid", uid) for uid in resolve_datasource_uids(filters.datasource_filters, registry)
    ]
    page = filters.page if filters.page is not None else config.first_page
    # The API names the window edges from "now": the filter's from_ is the
    # newer edge, so it goes into ``to`` and vice versa.
    params.extend(
        [
            ("searchString", filters.search),
            ("sort", sort_param(filters.sort_order)),
            ("to", f"now-{filters.from_}d"),
            ("from", f"now-{filters.to}d"),
            ("limit", str(config.page_size)),
            ("page", str(page)),
            ("onlyStarred", "true" if filters.starred else "false"),
        ]
    )
    return urlencode(params)
