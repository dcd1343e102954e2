from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from apiconsole.adapters.catalog_loader import builtin_catalog
from apiconsole.adapters.http_client import build_async_client
from apiconsole.adapters.resource_fetcher import LocatorResourceFetcher
from apiconsole.core.config import AppSettings
from apiconsole.core.domain.catalog import OperationCatalog
from apiconsole.core.parser import CommandParser
from apiconsole.core.processor import CommandProcessor
from apiconsole.core.session import Session
from sample_clients import AccountsClient, api_handler


class RecordingHost:
    """ConsoleHost that keeps every written line and replays scripted input."""

    def __init__(self, inputs: list[str] | None = None, *, print_max_chars: int = 1200) -> None:
        self.lines: list[str] = []
        self._inputs = list(inputs or [])
        self.print_max_chars = print_max_chars

    def write(self, text: str) -> None:
        self.lines.append(text)

    def write_line(self, line: str = "") -> None:
        self.lines.append(line)

    def read_line(self, prompt: str) -> str:
        if not self._inputs:
            raise EOFError
        return self._inputs.pop(0)

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


@pytest.fixture
def settings(tmp_path, monkeypatch) -> AppSettings:
    monkeypatch.setenv("APICONSOLE_DOWNLOAD_DIR", str(tmp_path / "downloads"))
    return AppSettings(_env_file=None)


@pytest.fixture
def session(settings) -> Session:
    return Session.from_settings(settings)


@pytest.fixture
def catalog() -> OperationCatalog:
    return builtin_catalog().merge(OperationCatalog.from_clients(AccountsClient))


@pytest_asyncio.fixture
async def http_client(settings):
    async with build_async_client(
        settings,
        base_url="https://api.test",
        transport=httpx.MockTransport(api_handler),
    ) as client:
        yield client


@pytest.fixture
def parser() -> CommandParser:
    return CommandParser()


@pytest.fixture
def processor(parser, session, catalog, http_client, settings) -> CommandProcessor:
    return CommandProcessor(parser, session.variables, catalog, http_client, LocatorResourceFetcher(settings))


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def make_host():
    return RecordingHost
