import asyncio

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from rich_history.config import Settings
from rich_history.services.errors import RemoteError
from rich_history.services.transport import AiohttpBackendTransport


class RecordingApp:
    def __init__(self):
        self.requests = []
        self.app = web.Application()
        self.app.router.add_route("*", "/{tail:.*}", self.handle)

    async def handle(self, request):
        body = await request.json() if request.can_read_body else None
        self.requests.append((request.method, request.path_qs, body, request.headers.get("Authorization")))
        if request.path == "/broken":
            return web.Response(status=500, text="internal error")
        if request.path == "/not-json":
            return web.Response(text="<html>")
        if request.path == "/bad-bytes":
            return web.Response(body=b'{"result": "\xff\xfe"}', content_type="application/json")
        if request.path == "/empty":
            return web.Response(status=204)
        if request.path == "/slow":
            await asyncio.sleep(1)
        return web.json_response({"method": request.method, "body": body})


@pytest_asyncio.fixture
async def backend():
    recorder = RecordingApp()
    server = test_utils.TestServer(recorder.app)
    await server.start_server()
    recorder.base_url = str(server.make_url(""))
    yield recorder
    await server.close()


@pytest.mark.asyncio
async def test_get_sends_query_string_verbatim(backend):
    transport = AiohttpBackendTransport(backend.base_url)
    url = "/api/query-history?datasourceUid=ds1&searchString=&sort=time-desc&to=now-0d&from=now-7d"
    payload = await transport.get(url)
    assert payload == {"method": "GET", "body": None}
    assert backend.requests[0][1] == url


@pytest.mark.asyncio
async def test_post_patch_delete_send_json(backend):
    transport = AiohttpBackendTransport(backend.base_url, api_token="secret")
    assert (await transport.post("/a", {"queries": []}))["body"] == {"queries": []}
    assert (await transport.patch("/a", {"comment": "x"}))["method"] == "PATCH"
    assert (await transport.delete("/a"))["method"] == "DELETE"
    assert [r[0] for r in backend.requests] == ["POST", "PATCH", "DELETE"]
    assert all(r[3] == "Bearer secret" for r in backend.requests)


@pytest.mark.asyncio
async def test_shared_session_is_used(backend):
    async with aiohttp.ClientSession() as session:
        transport = AiohttpBackendTransport(backend.base_url, session=session)
        await transport.get("/one")
        await transport.get("/two")
        assert not session.closed
    assert [r[1] for r in backend.requests] == ["/one", "/two"]


@pytest.mark.asyncio
async def test_error_status_raises_remote_error(backend):
    transport = AiohttpBackendTransport(backend.base_url)
    with pytest.raises(RemoteError) as exc_info:
        await transport.get("/broken")
    assert exc_info.value.status == 500
    assert exc_info.value.url == "/broken"


@pytest.mark.asyncio
async def test_invalid_json_raises_remote_error(backend):
    with pytest.raises(RemoteError):
        await AiohttpBackendTransport(backend.base_url).get("/not-json")


@pytest.mark.asyncio
async def test_non_utf8_body_raises_remote_error(backend):
    with pytest.raises(RemoteError) as exc_info:
        await AiohttpBackendTransport(backend.base_url).get("/bad-bytes")
    assert exc_info.value.status == 200
    assert exc_info.value.url == "/bad-bytes"


@pytest.mark.asyncio
async def test_empty_body_returns_none(backend):
    assert await AiohttpBackendTransport(backend.base_url).delete("/empty") is None


@pytest.mark.asyncio
async def test_timeout_raises_remote_error(backend):
    transport = AiohttpBackendTransport(backend.base_url, timeout_seconds=0.05)
    with pytest.raises(RemoteError):
        await transport.get("/slow")


@pytest.mark.asyncio
async def test_connection_failure_raises_remote_error():
    transport = AiohttpBackendTransport("http://127.0.0.1:1", timeout_seconds=2)
    with pytest.raises(RemoteError):
        await transport.get("/api/query-history")


def test_from_settings():
    settings = Settings(base_url="http://grafana.local/", api_token="t", timeout_seconds=3)
    transport = AiohttpBackendTransport.from_settings(settings)
    assert transport.base_url == "http://grafana.local"
    assert transport.api_token == "t"
    assert transport.timeout.total == 3
