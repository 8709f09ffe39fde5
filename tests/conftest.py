import httpx
import pytest

from restclient.config import Config
from restclient.request import Request


@pytest.fixture
def config(tmp_path, monkeypatch):
    for name in ("RESTCLIENT_USER_AGENT", "RESTCLIENT_LOG_LEVEL", "RESTCLIENT_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("client:\n  user_agent: restclient-tests/1.0\nlogging:\n  level: DEBUG\n  format: json\n")
    return Config(path, env_file=tmp_path / ".env")


@pytest.fixture
def make_request(config):
    """Build Requests whose calls are answered by handler instead of the network."""
    created = []

    def factory(url, handler):
        request = Request(url, transport=httpx.MockTransport(handler), config=config)
        created.append(request)
        return request

    yield factory

    for request in created:
        request.close()
