"""
Tests unitarios para AppCenterClient.

Valida:
- Headers de autenticación en cada request
- Política de respuesta común (2xx, 401, 404, 5xx, otros)
- Releer la release después de actualizarla o distribuirla
- Existencia y creación de apps
- Grupos de distribución y lista de dispositivos

python -m pytest tests/test_appcenter/test_api.py
"""

import json
import logging

import httpx
import pytest

from appcenter import AppCenterClient, ApiConfig, ApiError, AuthenticationError, Release, ServiceError


APP = "/v0.1/apps/owner/app"


class TestAppCenterClientInit:
    """Tests de inicialización."""

    def test_init_uses_given_config(self, api_config):
        client = AppCenterClient(config=api_config)

        assert client.config is api_config

    def test_auth_headers(self, client):
        """Debe enviar token e identificación del cliente."""
        assert client.auth_headers == {
            "X-API-Token": "test-token",
            "internal-request-source": "fastlane",
        }

    def test_requests_carry_auth_headers(self, client, fake_api):
        fake_api.add("GET", f"{APP}/distribution_groups", json=[])

        client.fetch_distribution_groups("owner", "app")

        request = fake_api.requests[0]
        assert request.headers["X-API-Token"] == "test-token"
        assert request.headers["internal-request-source"] == "fastlane"
        assert str(request.url).startswith("https://api.appcenter.test/v0.1/")


class TestResponsePolicy:
    """Tests de la política de respuesta común."""

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success_returns_body_unmodified(self, client, fake_api, status):
        body = {"upload_id": "u-1", "upload_url": "https://upload", "nested": {"a": [1, 2]}}
        fake_api.add("POST", f"{APP}/release_uploads", status=status, json=body)

        assert client.create_release_upload("owner", "app") == body

    @pytest.mark.parametrize("call", [
        lambda c: c.create_release_upload("owner", "app"),
        lambda c: c.create_dsym_upload("owner", "app"),
        lambda c: c.create_mapping_upload("owner", "app", "mapping.txt", "3", "1.0"),
        lambda c: c.update_symbol_upload("owner", "app", "s-1", "committed"),
        lambda c: c.update_release_upload("owner", "app", "u-1", "committed"),
        lambda c: c.get_release("owner", "app", 1),
        lambda c: c.fetch_releases("owner", "app"),
        lambda c: c.get_destination("owner", "app", "group", "testers"),
        lambda c: c.update_release("owner", "app", 1, "notes"),
        lambda c: c.update_release_metadata("owner", "app", 1, "sig"),
        lambda c: c.add_to_destination("owner", "app", 1, "store", "s-1"),
        lambda c: c.get_app("owner", "app"),
        lambda c: c.create_app("user", "owner", "app", "App", "iOS", "Objective-C-Swift"),
        lambda c: c.fetch_distribution_groups("owner", "app"),
        lambda c: c.fetch_devices("owner", "app", "testers"),
        lambda c: c.get_apps(),
    ])
    def test_401_is_fatal_for_every_operation(self, api_config, call):
        """401 debe abortar sin importar el endpoint."""
        transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "unauthorized"}))
        client = AppCenterClient(config=api_config, transport=transport)

        with pytest.raises(AuthenticationError) as exc_info:
            call(client)

        assert exc_info.value.error_code == "INVALID_TOKEN"

    def test_404_returns_none(self, client, fake_api, caplog):
        fake_api.add("GET", f"{APP}/releases/7", status=404, json={"code": "NotFound"})

        with caplog.at_level(logging.ERROR):
            assert client.get_release("owner", "app", 7) is None

        assert "Not found, invalid release url" in caplog.text

    def test_other_status_returns_none_and_logs_body(self, client, fake_api, caplog):
        fake_api.add("GET", f"{APP}/releases/7", status=409, content=b"conflict!")

        with caplog.at_level(logging.ERROR):
            assert client.get_release("owner", "app", 7) is None

        assert "409" in caplog.text
        assert "conflict!" in caplog.text

    def test_server_error_fatal_on_release_upload_creation(self, client, fake_api):
        fake_api.add("POST", f"{APP}/release_uploads", status=503)

        with pytest.raises(ServiceError) as exc_info:
            client.create_release_upload("owner", "app")

        assert exc_info.value.status_code == 503
        assert "try again later" in exc_info.value.message

    def test_server_error_fatal_on_release_upload_update(self, client, fake_api):
        fake_api.add("PATCH", f"{APP}/release_uploads/u-1", status=500)

        with pytest.raises(ServiceError):
            client.update_release_upload("owner", "app", "u-1", "committed")

    def test_server_error_recoverable_on_reads(self, client, fake_api):
        fake_api.add("GET", f"{APP}/releases/7", status=500)

        assert client.get_release("owner", "app", 7) is None

    def test_debug_logs_pretty_body(self, fake_api, caplog):
        config = ApiConfig(api_token="test-token", base_url="https://api.appcenter.test", debug=True)
        client = AppCenterClient(config=config, transport=fake_api.transport)
        fake_api.add("GET", f"{APP}/distribution_groups", json=[{"name": "Collaborators"}])

        with caplog.at_level(logging.DEBUG, logger="appcenter.api"):
            groups = client.fetch_distribution_groups("owner", "app")

        assert groups == [{"name": "Collaborators"}]
        assert '"name": "Collaborators"' in caplog.text

    def test_no_debug_output_without_flag(self, client, fake_api, caplog):
        fake_api.add("GET", f"{APP}/distribution_groups", json=[{"name": "Collaborators"}])

        with caplog.at_level(logging.DEBUG, logger="appcenter.api"):
            client.fetch_distribution_groups("owner", "app")

        assert "DEBUG:" not in caplog.text


class TestUploadSessions:
    """Tests de creación y actualización de sesiones."""

    def test_create_release_upload_sends_empty_body(self, client, fake_api):
        fake_api.add("POST", f"{APP}/release_uploads", json={"upload_id": "u-1", "upload_url": "x"})

        client.create_release_upload("owner", "app")

        assert fake_api.requests[0].content == b"{}"

    def test_create_dsym_upload_payload(self, client, fake_api):
        fake_api.add("POST", f"{APP}/symbol_uploads", json={"symbol_upload_id": "s-1", "upload_url": "x"})

        client.create_dsym_upload("owner", "app")

        assert json.loads(fake_api.requests[0].content) == {"symbol_type": "Apple"}

    def test_create_mapping_upload_payload(self, client, fake_api):
        fake_api.add("POST", f"{APP}/symbol_uploads", json={"symbol_upload_id": "s-1", "upload_url": "x"})

        client.create_mapping_upload("owner", "app", "mapping.txt", "3", "1.0.0")

        assert json.loads(fake_api.requests[0].content) == {
            "symbol_type": "AndroidProguard",
            "file_name": "mapping.txt",
            "build": "3",
            "version": "1.0.0",
        }

    def test_update_symbol_upload_status(self, client, fake_api):
        fake_api.add("PATCH", f"{APP}/symbol_uploads/s-1", json={"status": "committed"})

        assert client.update_symbol_upload("owner", "app", "s-1", "committed") == {"status": "committed"}
        assert json.loads(fake_api.requests[0].content) == {"status": "committed"}


class TestReleases:
    """Tests de actualización de releases."""

    def test_update_release_refetches(self, client, fake_api, sample_release):
        fake_api.add("PUT", f"{APP}/releases/12", json={"release_notes": "notes"})
        fake_api.add("GET", f"{APP}/releases/12", json=sample_release)

        release = client.update_release("owner", "app", 12, "notes")

        assert isinstance(release, Release)
        assert release.download_url == sample_release["download_url"]
        assert release.raw == sample_release
        assert len(fake_api.calls("GET", f"{APP}/releases/12")) == 1

    def test_refetched_release_logged_once_in_debug(self, fake_api, sample_release, caplog):
        """En modo debug la release releída aparece una sola vez en el log."""
        config = ApiConfig(api_token="test-token", base_url="https://api.appcenter.test", debug=True)
        client = AppCenterClient(config=config, transport=fake_api.transport)
        fake_api.add("PUT", f"{APP}/releases/12", json={"release_notes": "notes"})
        fake_api.add("GET", f"{APP}/releases/12", json=sample_release)

        with caplog.at_level(logging.DEBUG, logger="appcenter.api"):
            client.update_release("owner", "app", 12, "notes")

        assert caplog.text.count('"short_version": "1.2.0"') == 1

    def test_update_release_fails_when_refetch_fails(self, client, fake_api):
        fake_api.add("PUT", f"{APP}/releases/12", json={})
        fake_api.add("GET", f"{APP}/releases/12", status=404)

        assert client.update_release("owner", "app", 12, "notes") is None

    def test_update_release_not_found(self, client, fake_api):
        fake_api.add("PUT", f"{APP}/releases/12", status=404)

        assert client.update_release("owner", "app", 12) is None
        assert fake_api.calls("GET", f"{APP}/releases/12") == []

    def test_update_release_metadata_empty_signature_makes_no_call(self, client, fake_api):
        assert client.update_release_metadata("owner", "app", 12, "") is None
        assert client.update_release_metadata("owner", "app", 12, None) is None
        assert fake_api.requests == []

    def test_update_release_metadata_payload(self, client, fake_api):
        fake_api.add("PATCH", f"{APP}/releases/12", json={})

        assert client.update_release_metadata("owner", "app", 12, "MC0CFQ==") is True
        assert json.loads(fake_api.requests[0].content) == {"metadata": {"dsa_signature": "MC0CFQ=="}}


class TestDistribution:
    """Tests de destinos de distribución."""

    def test_get_destination_encodes_name(self, client, fake_api):
        fake_api.add("GET", f"{APP}/distribution_groups/test group 2", json={"id": "g-2", "name": "test group 2"})

        destination = client.get_destination("owner", "app", "group", "test group 2")

        assert destination == {"id": "g-2", "name": "test group 2"}
        assert fake_api.requests[0].url.raw_path == b"/v0.1/apps/owner/app/distribution_groups/test%20group%202"

    def test_get_destination_store(self, client, fake_api):
        fake_api.add("GET", f"{APP}/distribution_stores/Production", json={"id": "s-1"})

        assert client.get_destination("owner", "app", "store", "Production") == {"id": "s-1"}

    def test_add_to_group_sends_group_fields(self, client, fake_api, sample_release):
        fake_api.add("POST", f"{APP}/releases/12/groups", json={"id": "g-1"})
        fake_api.add("GET", f"{APP}/releases/12", json=sample_release)

        release = client.add_to_destination("owner", "app", 12, "group", "g-1", mandatory_update=True, notify_testers=True)

        assert release.short_version == "1.2.0"
        assert json.loads(fake_api.requests[0].content) == {
            "id": "g-1",
            "mandatory_update": True,
            "notify_testers": True,
        }

    def test_add_to_store_omits_group_fields(self, client, fake_api, sample_release):
        fake_api.add("POST", f"{APP}/releases/12/stores", json={"id": "s-1"})
        fake_api.add("GET", f"{APP}/releases/12", json=sample_release)

        client.add_to_destination("owner", "app", 12, "store", "s-1", mandatory_update=True)

        assert json.loads(fake_api.requests[0].content) == {"id": "s-1"}

    def test_add_to_destination_refetches_once(self, client, fake_api, sample_release):
        fake_api.add("POST", f"{APP}/releases/12/groups", json={})
        fake_api.add("GET", f"{APP}/releases/12", json=sample_release)

        client.add_to_destination("owner", "app", 12, "group", "g-1")

        assert len(fake_api.calls("GET", f"{APP}/releases/12")) == 1

    def test_add_to_destination_fails_when_refetch_fails(self, client, fake_api):
        fake_api.add("POST", f"{APP}/releases/12/groups", json={})
        fake_api.add("GET", f"{APP}/releases/12", status=500)

        assert client.add_to_destination("owner", "app", 12, "group", "g-1") is None

    def test_fetch_distribution_groups(self, client, fake_api):
        groups = [{"name": "Collaborators"}, {"name": "test-group-1"}, {"name": "test group 2"}]
        fake_api.add("GET", f"{APP}/distribution_groups", json=groups)

        assert client.fetch_distribution_groups("owner", "app") == groups

    def test_fetch_devices_returns_raw_csv(self, client, fake_api):
        csv = b"Device ID\tDevice Name\n1234567890abcdef\tDevice 1 - iPhone X\n"
        fake_api.add(
            "GET",
            f"{APP}/distribution_groups/test group/devices/download_devices_list",
            content=csv,
            headers={"Content-Type": "text/csv; charset=utf-8"},
        )

        devices = client.fetch_devices("owner", "app", "test group")

        assert devices == csv
        assert fake_api.requests[0].headers["Accept"] == "text/csv"

    def test_fetch_devices_not_found(self, client, fake_api):
        fake_api.add("GET", f"{APP}/distribution_groups/missing/devices/download_devices_list", status=404)

        assert client.fetch_devices("owner", "app", "missing") is None


class TestApps:
    """Tests de apps."""

    def test_get_app_exists(self, client, fake_api):
        fake_api.add("GET", APP, json={"name": "app"})

        assert client.get_app("owner", "app") is True

    def test_get_app_missing(self, client, fake_api):
        fake_api.add("GET", APP, status=404, json={"code": "NotFound"})

        assert client.get_app("owner", "app") is False

    def test_get_app_other_status_raises(self, client, fake_api):
        fake_api.add("GET", APP, status=500, content=b"boom")

        with pytest.raises(ApiError) as exc_info:
            client.get_app("owner", "app")

        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "boom"

    def test_create_app_for_user(self, client, fake_api):
        created = {"name": "app", "display_name": "App", "os": "Android", "platform": "Java", "app_secret": "s"}
        fake_api.add("POST", "/v0.1/apps", json=created)

        assert client.create_app("user", "owner", "app", "App", "Android", "Java") == created
        assert json.loads(fake_api.requests[0].content) == {
            "display_name": "App",
            "name": "app",
            "os": "Android",
            "platform": "Java",
        }

    def test_create_app_for_organization(self, client, fake_api):
        fake_api.add("POST", "/v0.1/orgs/acme/apps", json={"name": "app", "display_name": "App"})

        assert client.create_app("organization", "acme", "app", "App", "iOS", "Objective-C-Swift")
        assert fake_api.requests[0].url.path == "/v0.1/orgs/acme/apps"

    def test_create_app_failure(self, client, fake_api):
        fake_api.add("POST", "/v0.1/apps", status=400, json={"message": "bad"})

        assert client.create_app("user", "owner", "app", "App", "Android", "Java") is None

    def test_get_apps_failure_returns_empty_list(self, client, fake_api):
        fake_api.add("GET", "/v0.1/apps", status=403)

        assert client.get_apps() == []
