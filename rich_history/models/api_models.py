"""
Pydantic models for the query history backend API.

Defines the wire DTO and the request/response envelopes of the
``/api/query-history`` endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RichHistoryRemoteStorageDTO(BaseModel):
    """Wire representation of a query-history entry (createdAt in seconds)."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str = Field(..., description="Entry identifier")
    created_at: int = Field(..., alias="createdAt", description="Creation time in seconds since epoch")
    datasource_uid: str = Field(..., alias="datasourceUid")
    starred: bool = False
    comment: str = ""
    queries: List[Dict[str, Any]] = Field(default_factory=list)


class QueryHistorySearchResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query_history: List[RichHistoryRemoteStorageDTO] = Field(..., alias="queryHistory")
    total_count: Optional[int] = Field(None, alias="totalCount")
    page: Optional[int] = None
    per_page: Optional[int] = Field(None, alias="perPage")


class QueryHistorySearchResponse(BaseModel):
    """Envelope returned by ``GET /api/query-history``."""

    result: QueryHistorySearchResult


class QueryHistoryResponse(BaseModel):
    """Envelope returned by single-entry writes."""

    result: RichHistoryRemoteStorageDTO


class QueryHistoryAddRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    datasource_uid: str = Field(..., alias="dataSourceUid")
    queries: List[Dict[str, Any]]


class QueryHistoryCommentRequest(BaseModel):
    comment: str


class QueryHistoryMigrationRequest(BaseModel):
    """Body of ``POST /api/query-history/migrate``."""

    queries: List[RichHistoryRemoteStorageDTO]


class QueryHistoryMigrationResponse(BaseModel):
    """Acknowledgement of a migration; every field is optional."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    message: Optional[str] = None
    total_count: Optional[int] = Field(None, alias="totalCount")
    starred_count: Optional[int] = Field(None, alias="starredCount")
