"""
Domain models for query history.

``RichHistoryQuery`` is the in-memory shape of a saved query. Timestamps are
milliseconds since the epoch and ``datasource_name`` is filled in from the
datasource registry whenever an entry is read back from the backend.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SortOrder(str, Enum):
    """Sort orders offered by the history UI."""

    Descending = "Descending"
    Ascending = "Ascending"
    DatasourceAZ = "Datasource A-Z"
    DatasourceZA = "Datasource Z-A"


class RichHistoryQuery(BaseModel):
    """A saved query-history entry in its domain representation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Entry identifier assigned by the backend")
    created_at: int = Field(..., alias="createdAt", ge=0, description="Creation time in ms since epoch")
    datasource_uid: str = Field(..., alias="datasourceUid")
    datasource_name: str = Field("", alias="datasourceName")
    starred: bool = False
    comment: str = ""
    queries: List[Dict[str, Any]] = Field(default_factory=list)


class RichHistorySearchFilters(BaseModel):
    """Criteria for reading a page of history from the backend.

    ``from_`` and ``to`` are relative day counts: ``from_=0, to=7`` covers the
    last week.
    """

    model_config = ConfigDict(populate_by_name=True)

    search: str = ""
    datasource_filters: List[str] = Field(default_factory=list, alias="datasourceFilters")
    sort_order: SortOrder = Field(SortOrder.Descending, alias="sortOrder")
    starred: bool = False
    from_: int = Field(0, alias="from", ge=0)
    to: int = Field(7, ge=0)
    page: Optional[int] = Field(None, ge=1)

    @field_validator("search", mode="before")
    @classmethod
    def _none_search(cls, v):
        return "" if v is None else v
