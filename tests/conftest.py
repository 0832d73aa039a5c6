import httpx
import pytest

from appcenter import AppCenterClient, ApiConfig, UploadWorkflow


API_URL = "https://api.appcenter.test"


class FakeAppCenter:
    """
    App Center falso sobre httpx.MockTransport.

    Registra respuestas por (método, path) y guarda todas las requests.
    """

    def __init__(self):
        self.routes = {}
        self.requests: list[httpx.Request] = []

    def add(self, method, path, status=200, json=None, content=None, headers=None, exc=None):
        self.routes[(method, path)] = (status, json, content, headers, exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(599, text=f"unexpected {key}")

        status, json, content, headers, exc = self.routes[key]
        if exc is not None:
            raise exc(f"fake error on {request.url}", request=request)
        if json is not None:
            return httpx.Response(status, json=json, headers=headers)
        return httpx.Response(status, content=content or b"", headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method, path) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def api_config():
    """Config con token válido y URL de pruebas."""
    return ApiConfig(api_token="test-token", base_url=API_URL)


@pytest.fixture
def fake_api():
    return FakeAppCenter()


@pytest.fixture
def client(api_config, fake_api):
    """AppCenterClient conectado al App Center falso."""
    return AppCenterClient(config=api_config, transport=fake_api.transport)


@pytest.fixture
def workflow(client):
    return UploadWorkflow(client, timeout=5)


@pytest.fixture
def sample_release():
    """Release de ejemplo tal como la devuelve App Center."""
    return {
        "id": 12,
        "app_name": "app",
        "version": "42",
        "short_version": "1.2.0",
        "download_url": "https://download.appcenter.test/app-42.ipa",
        "metadata": {},
    }


@pytest.fixture
def sample_apps():
    """Lista de apps visible para el token."""
    return [
        {"name": "other-app", "owner": {"name": "someone"}},
        {"name": "app", "owner": {"name": "owner"}},
        {"name": "app", "owner": {"name": "second-owner"}},
        {"name": "App", "owner": {"name": "case-owner"}},
    ]
