import pytest
from loguru import logger

import mpdterm.config


@pytest.fixture
def home(tmp_path):
    """A fresh home directory for each test."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def environ(home):
    """Minimal environment: only HOME is set."""
    return {"HOME": str(home)}


@pytest.fixture(autouse=True)
def reset_config():
    """Make sure no test sees a configuration published by another."""
    mpdterm.config.CONFIG = None
    yield
    mpdterm.config.CONFIG = None


@pytest.fixture(autouse=True)
def clean_process_env(monkeypatch):
    """Keep the real environment from leaking into main() tests."""
    for name in ("XDG_CONFIG_HOME", "MPD_HOST", "MPD_PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
