from typing import Any, Dict, List, Mapping

import pytest

from connect_rest_api.service import ConnectRestApiService

CREDENTIAL_ENV_VARS = (
    "CONNECT_REST_API_USERNAME",
    "CONNECT_REST_API_PASSWORD",
    "CONNECT_REST_API_CONFIG",
    "CONNECT_REST_API_GENERAL_LOG_LEVEL",
    "CONNECT_REST_API_GENERAL_LOG_FILE",
)


class StaticConfig:
    def __init__(self, values: Dict[str, Any]):
        self.values = values

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


class RecordingClient:
    def __init__(self):
        self.calls: List[tuple] = []
        self.response = object()

    def request(self, method: str, url: str, options: Mapping[str, Any]) -> Any:
        self.calls.append((method, url, options))
        return self.response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def username() -> str:
    return "u"


@pytest.fixture
def password() -> str:
    return "p"


@pytest.fixture
def static_config(username: str, password: str) -> StaticConfig:
    return StaticConfig(
        {
            "connect_rest_api.username": username,
            "connect_rest_api.password": password,
        }
    )


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def service(recording_client: RecordingClient, static_config: StaticConfig) -> ConnectRestApiService:
    return ConnectRestApiService(client=recording_client, config=static_config)
