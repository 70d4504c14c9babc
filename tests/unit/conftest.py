import pytest

from gemini_chat.core.configs.params.remote_params import GEMINI_API_KEY_ENV_VARNAME
from tests.fakes import FakeAsyncTransport, FakeBlockingTransport

_API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def unset_api_key_env_var(monkeypatch):
    """Unit tests never read a real credential from the environment."""
    monkeypatch.delenv(GEMINI_API_KEY_ENV_VARNAME, raising=False)


@pytest.fixture
def api_key() -> str:
    return _API_KEY


@pytest.fixture
def fake_async_transport() -> FakeAsyncTransport:
    return FakeAsyncTransport()


@pytest.fixture
def fake_blocking_transport() -> FakeBlockingTransport:
    return FakeBlockingTransport()


@pytest.fixture
def mock_asyncio_sleep():
    from unittest.mock import patch

    async def mock_sleep(delay):
        pass

    with patch("asyncio.sleep", side_effect=mock_sleep) as asyncio_sleep:
        yield asyncio_sleep
