import asyncio

import httpx
import pytest

from src.sources.base_source import AuthenticationError, DataSourceError
from src.sources.file_source import FileSource
from src.sources.http_source import HttpSource
from src.sources.loader import build_source, load_records

CSV_TEXT = "Season,League,HomeTeam,AwayTeam,Trade,FTHG,FTAG\n2020,L,A,B,t1,1,2\n"


def _http_source(handler, **kwargs) -> HttpSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpSource(
        "https://data.example.com/matches.csv", client=client, backoff=0, **kwargs
    )


def test_build_source_picks_by_scheme(tmp_path):
    assert isinstance(build_source(str(tmp_path / "data.csv")), FileSource)
    source = build_source("https://data.example.com/matches.csv", token="secret")
    assert isinstance(source, HttpSource)
    assert source.client.headers["Authorization"] == "Bearer secret"
    asyncio.run(source.close())


def test_file_source_reads_text(tmp_path):
    path = tmp_path / "matches.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    assert asyncio.run(FileSource(path).fetch_text()) == CSV_TEXT


def test_file_source_missing_file(tmp_path):
    with pytest.raises(DataSourceError):
        asyncio.run(FileSource(tmp_path / "missing.csv").fetch_text())


def test_http_source_retries_transient_errors():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503)
        return httpx.Response(200, text=CSV_TEXT)

    source = _http_source(handler)
    assert asyncio.run(source.fetch_text()) == CSV_TEXT
    assert len(calls) == 3


def test_http_source_gives_up_after_max_attempts():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(502)

    with pytest.raises(DataSourceError):
        asyncio.run(_http_source(handler, max_attempts=2).fetch_text())
    assert len(calls) == 2


def test_http_source_does_not_retry_missing_resource():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404)

    with pytest.raises(DataSourceError):
        asyncio.run(_http_source(handler).fetch_text())
    assert len(calls) == 1


def test_http_source_authentication_failure():
    source = _http_source(lambda request: httpx.Response(401))
    with pytest.raises(AuthenticationError):
        asyncio.run(source.fetch_text())


def test_http_source_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DataSourceError):
        asyncio.run(_http_source(handler, max_attempts=2).fetch_text())


def test_load_records_normalizes_and_closes(tmp_path):
    path = tmp_path / "matches.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    records = asyncio.run(load_records(FileSource(path)))
    assert len(records) == 1
    assert records[0].total_goals == 3
    assert records[0].trade_number == 1
