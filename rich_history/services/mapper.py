"""Conversion between domain history entries and backend DTOs."""

from __future__ import annotations

import logging

from ..models.api_models import RichHistoryRemoteStorageDTO
from ..models.rich_history_query import RichHistoryQuery
from .datasource_registry import DatasourceRegistry

LOGGER = logging.getLogger(__name__)

# Placeholder name for entries whose datasource is no longer registered.
UNKNOWN_DATASOURCE_NAME = ""


def to_dto(query: RichHistoryQuery) -> RichHistoryRemoteStorageDTO:
    """Return the wire form of ``query``.

    The backend stores seconds; any sub-second part of ``created_at`` is
    dropped. ``datasource_name`` is never sent.
    """
    return RichHistoryRemoteStorageDTO(
        uid=query.id,
        created_at=query.created_at // 1000,
        datasource_uid=query.datasource_uid,
        starred=query.starred,
        comment=query.comment,
        queries=query.queries,
    )


def from_dto(dto: RichHistoryRemoteStorageDTO, registry: DatasourceRegistry) -> RichHistoryQuery:
    """Rebuild a domain entry, resolving its datasource name from ``registry``."""
    name = registry.resolve_by_uid(dto.datasource_uid)
    if name is None:
        LOGGER.warning("Datasource %s not found for history entry %s", dto.datasource_uid, dto.uid)
        name = UNKNOWN_DATASOURCE_NAME
    return RichHistoryQuery(
        id=dto.uid,
        created_at=dto.created_at * 1000,
        datasource_uid=dto.datasource_uid,
        datasource_name=name,
        starred=dto.starred,
        comment=dto.comment,
        queries=dto.queries,
    )
