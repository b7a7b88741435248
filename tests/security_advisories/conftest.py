"""tests/security_advisories/conftest.py

Common fixtures for the entire test suite.
"""

import json
from pathlib import Path

import httpx
import pytest
import yaml
from typer.testing import CliRunner

from security_advisories.core.domain.enums import LookupStatus
from security_advisories.core.domain.errors import TimestampUnavailableError
from security_advisories.core.domain.models import PackageVersions, RegistryLookup
from security_advisories.core.ports.registry_port import RegistryPort
from security_advisories.core.ports.timestamp_port import CommitTimestampPort


PACKAGIST_P2 = "https://repo.packagist.org/p2/{name}.json"


@pytest.fixture(scope="session")
def runner() -> CliRunner:
    """Provides a Typer CliRunner instance."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path: Path, monkeypatch):
    """Redirect the disk cache into the test's temporary directory."""
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    monkeypatch.setenv("SECURITY_ADVISORIES_CACHE_DIR", str(cache_dir))
    yield cache_dir


@pytest.fixture
def mock_httpx_client(monkeypatch):
    """
    Replaces httpx.Client with a mock that uses a MockTransport.

    Returns a handler function that tests can use to register mock responses.
    Unregistered URLs answer 404.
    """
    responses = {}
    calls_log: list[tuple[str, str]] = []
    original_client = httpx.Client

    def add_response(
        url: str,
        method: str = "GET",
        status_code: int = 200,
        json_payload: dict | None = None,
        content: bytes | None = None,
    ):
        if json_payload is not None:
            body = json.dumps(json_payload).encode("utf-8")
        else:
            body = content if content is not None else b""
        responses[(method.upper(), url)] = (status_code, body)

    def mock_transport(request: httpx.Request) -> httpx.Response:
        key = (request.method, str(request.url))
        calls_log.append(key)
        if key in responses:
            status, body = responses[key]
            headers = {"Content-Length": str(len(body))}
            return httpx.Response(status, content=body, headers=headers)
        return httpx.Response(404, text=f"Mock URL not found: {request.method} {request.url}")

    def patched_client(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(mock_transport)
        return original_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "Client", patched_client)
    add_response.calls = calls_log  # type: ignore[attr-defined]
    return add_response


def packagist_payload(name: str, versions: list[str]) -> dict:
    return {
        "minified": "composer/2.0",
        "packages": {name: [{"name": name, "version": v} for v in versions]},
    }


@pytest.fixture
def register_package(mock_httpx_client):
    """Register a Packagist p2 response for ``name`` listing ``versions`` (newest first)."""

    def _register(name: str, versions: list[str]) -> str:
        url = PACKAGIST_P2.format(name=name)
        mock_httpx_client(url, json_payload=packagist_payload(name, versions))
        return url

    _register.calls = mock_httpx_client.calls  # type: ignore[attr-defined]
    return _register


@pytest.fixture
def advisory_tree(tmp_path: Path):
    """Factory writing advisory files below ``tmp_path / 'db'``.

    ``write("acme/widget/CVE-2024-0001.yaml", {...})`` dumps a mapping as YAML;
    passing a ``str`` writes it verbatim.
    """
    root = tmp_path / "db"
    root.mkdir()

    def write(rel: str, content: dict | str) -> Path:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(content, sort_keys=False), encoding="utf-8")
        return path

    write.root = root  # type: ignore[attr-defined]
    return write


def make_advisory(package: str, *, cve: str | None = None, branches: dict | None = None, **extra) -> dict:
    data = {
        "title": "Remote code execution",
        "link": f"https://example.com/advisories/{package}",
        "reference": f"composer://{package}",
    }
    if cve is not None:
        data["cve"] = cve
    data["branches"] = branches if branches is not None else {
        "1.x": {"time": "2024-01-02 10:00:00", "versions": [">=1.0.0", "<1.4.2"]},
    }
    data.update(extra)
    return data


class FakeRegistry(RegistryPort):
    def __init__(self, packages: dict[str, list[str]] | None = None, unavailable: set[str] | None = None) -> None:
        self._packages = packages or {}
        self._unavailable = unavailable or set()
        self.calls: list[str] = []

    def lookup(self, name: str) -> RegistryLookup:
        self.calls.append(name)
        if name in self._unavailable:
            return RegistryLookup(name=name, status=LookupStatus.UNAVAILABLE, detail="ConnectTimeout")
        if name not in self._packages:
            return RegistryLookup(name=name, status=LookupStatus.NOT_FOUND)
        return RegistryLookup(
            name=name,
            status=LookupStatus.FOUND,
            package=PackageVersions(name=name, versions=tuple(self._packages[name])),
        )


class FakeTimestamps(CommitTimestampPort):
    def __init__(self, first: int = 1_600_000_000, last: int = 1_700_000_000, missing: set[str] | None = None) -> None:
        self._first = first
        self._last = last
        self._missing = missing or set()

    def _check(self, path: Path) -> None:
        if Path(path).name in self._missing:
            raise TimestampUnavailableError(f"{path} has no commit history")

    def first_commit_time(self, path: Path) -> int:
        self._check(path)
        return self._first

    def last_commit_time(self, path: Path) -> int:
        self._check(path)
        return self._last


@pytest.fixture
def advisory_data():
    """Factory for advisory mappings: ``advisory_data("acme/widget", cve=..., branches=...)``."""
    return make_advisory


@pytest.fixture
def fake_registry():
    """Factory for an in-memory registry: ``fake_registry({"acme/widget": ["1.0.0"]})``."""
    return FakeRegistry


@pytest.fixture
def fake_timestamps():
    return FakeTimestamps
