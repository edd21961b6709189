"""Query history storage backed by the remote ``/api/query-history`` API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..models.api_models import (
    QueryHistoryAddRequest,
    QueryHistoryCommentRequest,
    QueryHistoryMigrationRequest,
    QueryHistoryMigrationResponse,
    QueryHistoryResponse,
    QueryHistorySearchResponse,
)
from ..models.rich_history_query import RichHistoryQuery, RichHistorySearchFilters
from .datasource_registry import DatasourceRegistry
from .errors import RemoteError
from .mapper import from_dto, to_dto
from .query_params import QueryParamsConfig, build_query_params
from .transport import BackendTransport

LOGGER = logging.getLogger(__name__)

API_PATH = "/api/query-history"
MIGRATE_PATH = f"{API_PATH}/migrate"
STAR_PATH = f"{API_PATH}/star"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: Type[ModelT], payload: Any, url: str) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RemoteError(f"Malformed response from {url}: {exc.error_count()} validation error(s)", url=url) from exc


class RichHistoryRemoteStorage:
    """Read and write query history through the backend API.

    Every call performs exactly one request; nothing is cached between calls.
    """

    def __init__(
        self,
        transport: BackendTransport,
        registry: DatasourceRegistry,
        config: Optional[QueryParamsConfig] = None,
    ) -> None:
        self.transport = transport
        self.registry = registry
        self.config = config or QueryParamsConfig()

    async def get_rich_history(self, filters: RichHistorySearchFilters) -> List[RichHistoryQuery]:
        """Return one page of history matching ``filters`` in server order."""
        url = f"{API_PATH}?{build_query_params(filters, self.registry, self.config)}"
        payload = await self.transport.get(url)
        response = _parse(QueryHistorySearchResponse, payload, url)
        return [from_dto(dto, self.registry) for dto in response.result.query_history]

    async def migrate(self, queries: Sequence[RichHistoryQuery]) -> QueryHistoryMigrationResponse:
        """Copy locally kept history into the backend in a single request.

        The backend may not deduplicate, so calling this twice for the same
        entries can create duplicates.
        """
        body = QueryHistoryMigrationRequest(queries=[to_dto(query) for query in queries])
        LOGGER.info("Migrating %d query history entries", len(body.queries))
        payload = await self.transport.post(MIGRATE_PATH, body.model_dump(by_alias=True))
        # Entries are stored once the POST succeeds; the body is informational.
        if not isinstance(payload, dict):
            LOGGER.debug("Migration acknowledged with non-object body: %r", payload)
            return QueryHistoryMigrationResponse()
        try:
            return QueryHistoryMigrationResponse.model_validate(payload)
        except ValidationError:
            LOGGER.debug("Migration acknowledged with unexpected body: %r", payload)
            return QueryHistoryMigrationResponse()

    async def add_to_rich_history(self, datasource_uid: str, queries: List[Dict[str, Any]]) -> RichHistoryQuery:
        """Record a new entry with `POST /api/query-history`."""
        body = QueryHistoryAddRequest(datasource_uid=datasource_uid, queries=queries)
        payload = await self.transport.post(API_PATH, body.model_dump(by_alias=True))
        return from_dto(_parse(QueryHistoryResponse, payload, API_PATH).result, self.registry)

    async def delete_rich_history(self, query_id: str) -> None:
        """Remove an entry with `DELETE /api/query-history/<id>`."""
        await self.transport.delete(f"{API_PATH}/{query_id}")

    async def delete_all(self) -> None:
        """Not offered by the backend."""
        raise NotImplementedError("The query history API does not support deleting all entries")

    async def update_starred(self, query_id: str, starred: bool) -> RichHistoryQuery:
        """Star with `POST /api/query-history/star/<id>`, unstar with `DELETE` on the same path."""
        url = f"{STAR_PATH}/{query_id}"
        if starred:
            payload = await self.transport.post(url)
        else:
            payload = await self.transport.delete(url)
        return from_dto(_parse(QueryHistoryResponse, payload, url).result, self.registry)

    async def update_comment(self, query_id: str, comment: str) -> RichHistoryQuery:
        """Replace the comment with `PATCH /api/query-history/<id>`."""
        url = f"{API_PATH}/{query_id}"
        payload = await self.transport.patch(url, QueryHistoryCommentRequest(comment=comment).model_dump())
        return from_dto(_parse(QueryHistoryResponse, payload, url).result, self.registry)
