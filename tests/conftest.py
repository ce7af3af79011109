import io
import urllib.request

import pytest


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point Path.home() at a temp dir so ~/.aicommits lives there."""
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path)
    return tmp_path


@pytest.fixture
def config_file(home):
    return home / ".aicommits"


class FakeResponse:
    """Stands in for the object returned by OpenerDirector.open()."""

    def __init__(self, body: str, status: int = 200, reason: str = "OK"):
        self.status = status
        self.reason = reason
        self._body = io.BytesIO(body.encode("utf-8"))

    def read(self):
        return self._body.read()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class FakeOpener:
    """Records requests and returns (or raises) a canned result."""

    def __init__(self, result):
        self.result = result
        self.handlers = ()
        self.requests = []

    def open(self, req, timeout=None):
        self.requests.append((req, timeout))
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result

    @property
    def proxies(self):
        return self.handlers[0].proxies


@pytest.fixture
def fake_opener(monkeypatch):
    """Return an installer: fake_opener(result) -> FakeOpener used by the client."""
    def _install(result):
        opener = FakeOpener(result)

        def _build_opener(*handlers):
            opener.handlers = handlers
            return opener

        monkeypatch.setattr(urllib.request, "build_opener", _build_opener)
        return opener
    return _install
