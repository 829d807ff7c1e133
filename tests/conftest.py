"""Shared pytest fixtures for all tests."""

import json
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Tuple

import jwt
import pytest

from exchange.config import ExchangeConfig
from exchange.reporting import ReportingSink


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end exchange tests")


class RecordingReporter(ReportingSink):
    """Reporter capturing every call in order."""

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple[str, Any]] = []

    def info(self, message: str) -> None:
        self.calls.append(("info", message))

    def error(self, message: str) -> None:
        self.calls.append(("error", message))

    def set_secret(self, secret: str) -> None:
        self.calls.append(("set_secret", secret))

    def set_output(self, name: str, value: Any) -> None:
        self.calls.append(("set_output", (name, value)))

    def set_failed(self, message: str) -> None:
        self.calls.append(("set_failed", message))
        super().set_failed(message)

    def of(self, kind: str) -> List[Any]:
        return [value for call, value in self.calls if call == kind]

    @property
    def infos(self) -> List[str]:
        return self.of("info")

    @property
    def errors(self) -> List[str]:
        return self.of("error")

    @property
    def secrets(self) -> List[str]:
        return self.of("set_secret")

    @property
    def outputs(self) -> Dict[str, Any]:
        return dict(self.of("set_output"))

    @property
    def failures(self) -> List[str]:
        return self.of("set_failed")


@pytest.fixture
def reporter():
    """Reporter recording all calls."""
    return RecordingReporter()


@pytest.fixture
def mock_oidc_token():
    """Generate a mock GitHub Actions OIDC JWT token."""
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=5)

    payload = {
        "iss": "https://token.actions.githubusercontent.com",
        "sub": "repo:owner/repo:ref:refs/heads/main",
        "aud": "test-audience",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
        "repository": "owner/repo",
        "repository_owner": "owner",
        "workflow": ".github/workflows/deploy.yml",
        "ref": "refs/heads/main",
        "sha": "abc123def456789",
        "run_id": "987654321",
        "actor": "bot-user",
    }

    # Signed with a throwaway HMAC key, the exchange never verifies it locally
    token = jwt.encode(payload, "secret", algorithm="HS256")
    return token, payload


@pytest.fixture
def mock_github_env(monkeypatch, mock_oidc_token):
    """Set up GitHub Actions OIDC request environment variables."""
    token, _ = mock_oidc_token

    monkeypatch.setenv(
        "ACTIONS_ID_TOKEN_REQUEST_URL",
        "https://pipelines.example.com/idtoken?api-version=2.0",
    )
    monkeypatch.setenv("ACTIONS_ID_TOKEN_REQUEST_TOKEN", "request-token-123")

    return token


@pytest.fixture
def exchange_config():
    """Configuration with only required inputs."""
    return ExchangeConfig(
        github_audience="test-audience",
        token_url="https://token.example.com/oauth/token",
        client_id="client-123",
    )


@pytest.fixture
def full_exchange_config():
    """Configuration with optional audience and scope."""
    return ExchangeConfig(
        github_audience="test-audience",
        token_url="https://token.example.com/oauth/token",
        client_id="client-123",
        audience="api-audience",
        scope="read write",
    )


@pytest.fixture
def token_response_body():
    """Successful token endpoint response body."""
    return json.dumps(
        {
            "access_token": "mock-access-token",
            "token_type": "Bearer",
            "expires_in": 3600,
        }
    )


@pytest.fixture
def github_output(tmp_path, monkeypatch):
    """Point GITHUB_OUTPUT at a temporary file and return its path."""
    output_file = tmp_path / "github_output"
    output_file.write_text("")
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
    return output_file


@pytest.fixture
def read_outputs():
    """Parse a GITHUB_OUTPUT file into a dictionary."""

    def _read(path) -> Dict[str, str]:
        outputs = {}
        lines = path.read_text(encoding="utf-8").splitlines()
        idx = 0
        while idx < len(lines):
            name, delimiter = lines[idx].split("<<", 1)
            end = lines.index(delimiter, idx + 1)
            outputs[name] = "\n".join(lines[idx + 1:end])
            idx = end + 1
        return outputs

    return _read


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables before each test."""
    for name in list(os.environ):
        if name.startswith("INPUT_") or name.startswith("ACTIONS_ID_TOKEN_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    monkeypatch.delenv("TOKEN_EXCHANGE_ID_TOKEN", raising=False)

    original_env = dict(os.environ)

    yield

    os.environ.clear()
    os.environ.update(original_env)
