"""Shared fixtures for the MailerSend CLI test suite.

HTTP is faked at the ``requests`` adapter level: ``HTTPAdapter.send`` is
patched, so ``CLITransport`` runs its real retry, tracing and body capture
logic on top of canned responses.
"""

import pytest
from requests.adapters import HTTPAdapter
from typer.testing import CliRunner
from unittest.mock import patch

from mailersend_cli.app import register_commands
from mailersend_cli.transport import DEFAULT_USER_AGENT, set_user_agent

from tests.helpers import FakeAPI


@pytest.fixture(autouse=True)
def reset_user_agent():
    yield
    set_user_agent(DEFAULT_USER_AGENT)


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point the credential store at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("MAILERSEND_API_TOKEN", raising=False)
    monkeypatch.delenv("MAILERSEND_API_BASE_URL", raising=False)
    return tmp_path / "mailersend"


@pytest.fixture
def api_token(config_home, monkeypatch):
    """Authenticate through the environment variable."""
    monkeypatch.setenv("MAILERSEND_API_TOKEN", "env-token")
    return "env-token"


@pytest.fixture
def fake_api():
    """Fake MailerSend API behind the real transport."""
    api = FakeAPI()
    with patch.object(HTTPAdapter, "send", side_effect=api):
        yield api


@pytest.fixture
def no_sleep():
    """Record backoff sleeps instead of waiting."""
    with patch("time.sleep") as sleep:
        yield sleep


@pytest.fixture
def runner():
    """CLI runner with every command group registered."""
    register_commands()
    return CliRunner()
