import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.getcwd()))

from rich_history.models.rich_history_query import RichHistoryQuery
from rich_history.services.datasource_registry import InMemoryDatasourceRegistry


@pytest.fixture(autouse=True)
def ensure_test_env(monkeypatch):
    # Keep settings independent of the developer's environment
    for name in (
        "RICH_HISTORY_BASE_URL",
        "RICH_HISTORY_API_TOKEN",
        "RICH_HISTORY_TIMEOUT_SECONDS",
        "RICH_HISTORY_PAGE_SIZE",
        "RICH_HISTORY_FIRST_PAGE",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    return True


@pytest.fixture
def registry():
    return InMemoryDatasourceRegistry({"name-of-ds1": "ds1", "name-of-ds2": "ds2"})


@pytest.fixture
def rich_history_query():
    return RichHistoryQuery(
        id="123",
        created_at=200 * 1000,
        datasource_uid="ds1",
        datasource_name="name-of-ds1",
        starred=True,
        comment="comment",
        queries=[{"foo": "bar "}],
    )


@pytest.fixture
def dto_payload(rich_history_query):
    return {
        "uid": rich_history_query.id,
        "createdAt": rich_history_query.created_at // 1000,
        "datasourceUid": rich_history_query.datasource_uid,
        "starred": rich_history_query.starred,
        "comment": rich_history_query.comment,
        "queries": rich_history_query.queries,
    }
