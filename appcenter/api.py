"""
App Center Client - Cliente HTTP para la API REST de App Center.

Una operación por endpoint, todas con la misma política de respuesta:
- 2xx: retorna el cuerpo decodificado
- 401: AuthenticationError (aborta la ejecución)
- 404: loguea y retorna None
- 5xx: ServiceError en creación/commit de uploads de release
- Otro: loguea status y cuerpo, retorna None
"""

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from config.constants import (
    API_TOKEN_HEADER,
    CLIENT_SOURCE_HEADER,
    ERROR_MESSAGES,
    DestinationType,
    ErrorCode,
    OwnerType,
    SymbolType,
)
from config.settings import settings
from appcenter.error_classifier import ErrorClassifier, Outcome
from appcenter.errors import ApiError, AuthenticationError, ServiceError
from appcenter.http.client import ClientMode, build_client, decode_body, pretty
from appcenter.models import ApiConfig, Release

logger = logging.getLogger(__name__)


class AppCenterClient:
    """Cliente síncrono para la API de App Center."""

    # Endpoints
    APPS_ENDPOINT = "/v0.1/apps"
    ORG_APPS_ENDPOINT = "/v0.1/orgs/{owner_name}/apps"
    APP_ENDPOINT = "/v0.1/apps/{owner_name}/{app_name}"
    RELEASE_UPLOADS_ENDPOINT = APP_ENDPOINT + "/release_uploads"
    SYMBOL_UPLOADS_ENDPOINT = APP_ENDPOINT + "/symbol_uploads"
    RELEASES_ENDPOINT = APP_ENDPOINT + "/releases"
    DISTRIBUTION_GROUPS_ENDPOINT = APP_ENDPOINT + "/distribution_groups"

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Inicializar cliente.

        Args:
            config: Credencial y base URL (default: desde settings)
            transport: Transport httpx alternativo (tests)
        """
        self.config = config or ApiConfig.from_settings(settings)
        self.transport = transport
        self.classifier = ErrorClassifier()

    # ------------------------------------------------------------------
    # Infraestructura
    # ------------------------------------------------------------------

    @property
    def auth_headers(self) -> dict[str, str]:
        return {
            API_TOKEN_HEADER: self.config.api_token,
            CLIENT_SOURCE_HEADER: self.config.client_source,
        }

    def client(self, mode: ClientMode = ClientMode.PLAIN, timeout: Optional[float] = None) -> httpx.Client:
        """Cliente httpx configurado para este App Center."""
        return build_client(self.config, mode, timeout=timeout, transport=self.transport)

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        mode: ClientMode = ClientMode.PLAIN
    ) -> httpx.Response:
        with self.client(mode) as client:
            return client.request(method, path, json=json, headers=self.auth_headers)

    def _debug(self, label: str, body: Any) -> None:
        if self.config.debug:
            logger.debug(f"DEBUG: {label}{pretty(body)}")

    def _handle(
        self,
        response: httpx.Response,
        error_label: str = "Error",
        not_found_message: Optional[str] = None,
        server_errors_fatal: bool = False,
        mode: ClientMode = ClientMode.PLAIN,
        debug_label: str = "",
    ) -> Any:
        """
        Aplicar la política de respuesta común.

        Args:
            response: Respuesta httpx
            error_label: Prefijo del log para status inesperados
            not_found_message: Mensaje para 404 (None = se trata como status inesperado)
            server_errors_fatal: Si 5xx aborta la ejecución
            mode: Modo de decodificación
            debug_label: Prefijo del log de debug

        Returns:
            Cuerpo decodificado o None si falló

        Raises:
            AuthenticationError: 401
            ServiceError: 5xx cuando server_errors_fatal
        """
        outcome = self.classifier.classify(response.status_code, server_errors_fatal)

        if outcome == Outcome.SUCCESS:
            body = decode_body(response, mode)
            self._debug(debug_label, body)
            return body

        if outcome == Outcome.AUTH_ERROR:
            raise AuthenticationError(
                ERROR_MESSAGES[ErrorCode.INVALID_TOKEN],
                error_code=ErrorCode.INVALID_TOKEN.value
            )

        if outcome == Outcome.SERVER_ERROR:
            raise ServiceError(
                ERROR_MESSAGES[ErrorCode.SERVICE_UNAVAILABLE],
                status_code=response.status_code,
                error_code=ErrorCode.SERVICE_UNAVAILABLE.value
            )

        if outcome == Outcome.NOT_FOUND and not_found_message:
            logger.error(not_found_message)
            return None

        logger.error(f"{error_label} {response.status_code}: {response.text}")
        return None

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    def create_release_upload(self, owner_name: str, app_name: str, body: Optional[dict] = None) -> Optional[dict]:
        """
        Crear una sesión de upload de release.

        Endpoint: POST /v0.1/apps/{owner}/{app}/release_uploads

        Returns:
            dict con upload_id y upload_url, o None
        """
        path = self.RELEASE_UPLOADS_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("POST", path, json=body or {})
        return self._handle(
            response,
            not_found_message=ERROR_MESSAGES[ErrorCode.NOT_FOUND],
            server_errors_fatal=True,
        )

    def create_dsym_upload(self, owner_name: str, app_name: str) -> Optional[dict]:
        """
        Crear una sesión de upload de dSYM.

        Returns:
            dict con symbol_upload_id, upload_url y expiration_date, o None
        """
        path = self.SYMBOL_UPLOADS_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("POST", path, json={"symbol_type": SymbolType.APPLE.value})
        return self._handle(response, not_found_message=ERROR_MESSAGES[ErrorCode.NOT_FOUND])

    def create_mapping_upload(
        self,
        owner_name: str,
        app_name: str,
        file_name: str,
        build_number: str,
        version: str
    ) -> Optional[dict]:
        """
        Crear una sesión de upload de mapping de Proguard.

        Returns:
            dict con symbol_upload_id, upload_url y expiration_date, o None
        """
        path = self.SYMBOL_UPLOADS_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        payload = {
            "symbol_type": SymbolType.ANDROID_PROGUARD.value,
            "file_name": file_name,
            "build": build_number,
            "version": version,
        }
        response = self._request("POST", path, json=payload)
        return self._handle(response, not_found_message=ERROR_MESSAGES[ErrorCode.NOT_FOUND])

    def update_symbol_upload(self, owner_name: str, app_name: str, symbol_upload_id: str, status: str) -> Optional[dict]:
        """Commit o abort de una sesión de upload de símbolos."""
        path = self.SYMBOL_UPLOADS_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("PATCH", f"{path}/{symbol_upload_id}", json={"status": status})
        return self._handle(response)

    def update_release_upload(self, owner_name: str, app_name: str, upload_id: str, status: str) -> Optional[dict]:
        """Commit o abort de una sesión de upload de release."""
        path = self.RELEASE_UPLOADS_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("PATCH", f"{path}/{upload_id}", json={"status": status})
        return self._handle(response, server_errors_fatal=True)

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    def get_release(self, owner_name: str, app_name: str, release_id) -> Optional[dict]:
        """Obtener una release por id."""
        path = self.RELEASES_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("GET", f"{path}/{release_id}")
        return self._handle(
            response,
            error_label="Error fetching information about release",
            not_found_message="Not found, invalid release url",
        )

    def fetch_releases(self, owner_name: str, app_name: str) -> Optional[list]:
        """Listar todas las releases de una app."""
        path = self.RELEASES_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("GET", path)
        return self._handle(
            response,
            error_label="Error fetching releases",
            not_found_message=ERROR_MESSAGES[ErrorCode.NOT_FOUND],
        )

    def _refetch_release(self, owner_name: str, app_name: str, release_id) -> Optional[Release]:
        """Releer la release para obtener la download_url definitiva."""
        release = self.get_release(owner_name, app_name, release_id)
        if not release:
            return None
        return Release.from_dict(release)

    def update_release(self, owner_name: str, app_name: str, release_id, release_notes: str = "") -> Optional[Release]:
        """
        Actualizar las notas de una release.

        Endpoint: PUT /v0.1/apps/{owner}/{app}/releases/{id}

        Returns:
            Release releída (con download_url), o None si falla la actualización o la relectura
        """
        path = self.RELEASES_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("PUT", f"{path}/{release_id}", json={"release_notes": release_notes})
        if self._handle(
            response,
            error_label="Error updating release",
            not_found_message="Not found, invalid release id",
        ) is None:
            return None

        release = self._refetch_release(owner_name, app_name, release_id)
        if release:
            logger.info(f"Release '{release_id}' ({release.short_version}) was successfully updated")
        return release

    def update_release_metadata(self, owner_name: str, app_name: str, release_id, dsa_signature: Optional[str]) -> Optional[bool]:
        """
        Actualizar la firma DSA de una release.

        No hace ninguna llamada si la firma está vacía.

        Returns:
            True si se actualizó, None si no hubo llamada o falló
        """
        if not dsa_signature:
            return None

        path = self.RELEASES_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        payload = {"metadata": {"dsa_signature": dsa_signature}}
        response = self._request("PATCH", f"{path}/{release_id}", json=payload)
        if self._handle(
            response,
            error_label="Error updating release metadata",
            not_found_message="Not found, invalid release id",
        ) is None:
            return None

        logger.info(f"Release Metadata was successfully updated for release '{release_id}'")
        return True

    # ------------------------------------------------------------------
    # Distribución
    # ------------------------------------------------------------------

    def get_destination(self, owner_name: str, app_name: str, destination_type: str, destination_name: str) -> Optional[dict]:
        """
        Obtener un grupo de distribución o store por nombre.

        Endpoint: GET /v0.1/apps/{owner}/{app}/distribution_{type}s/{name}
        """
        destination_type = DestinationType(destination_type).value
        path = self.APP_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("GET", f"{path}/distribution_{destination_type}s/{quote(destination_name, safe='')}")
        return self._handle(
            response,
            error_label=f"Error getting {destination_type}",
            not_found_message=f"Not found, invalid distribution {destination_type} name",
            debug_label=f"received {destination_type} ",
        )

    def add_to_destination(
        self,
        owner_name: str,
        app_name: str,
        release_id,
        destination_type: str,
        destination_id: str,
        mandatory_update: bool = False,
        notify_testers: bool = False
    ) -> Optional[Release]:
        """
        Agregar una release a un grupo o store.

        Endpoint: POST /v0.1/apps/{owner}/{app}/releases/{id}/{type}s

        Args:
            mandatory_update: Solo grupos
            notify_testers: Solo grupos

        Returns:
            Release releída (con download_url), o None si falla el alta o la relectura
        """
        destination_type = DestinationType(destination_type).value
        payload: dict[str, Any] = {"id": destination_id}
        if destination_type == DestinationType.GROUP.value:
            payload["mandatory_update"] = mandatory_update
            payload["notify_testers"] = notify_testers

        path = self.RELEASES_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("POST", f"{path}/{release_id}/{destination_type}s", json=payload)
        if self._handle(
            response,
            error_label=f"Error adding to {destination_type}",
            not_found_message=f"Not found, invalid distribution {destination_type} name",
        ) is None:
            return None

        release = self._refetch_release(owner_name, app_name, release_id)
        if release:
            logger.info(f"Release '{release_id}' ({release.short_version}) was successfully distributed")
        return release

    def fetch_distribution_groups(self, owner_name: str, app_name: str) -> Optional[list]:
        """Listar grupos de distribución de una app."""
        path = self.DISTRIBUTION_GROUPS_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("GET", path)
        return self._handle(response, not_found_message=ERROR_MESSAGES[ErrorCode.NOT_FOUND])

    def fetch_devices(self, owner_name: str, app_name: str, distribution_group: str) -> Optional[bytes]:
        """
        Descargar la lista de dispositivos de un grupo como CSV.

        Returns:
            bytes sin parsear, o None
        """
        path = self.DISTRIBUTION_GROUPS_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request(
            "GET",
            f"{path}/{quote(distribution_group, safe='')}/devices/download_devices_list",
            mode=ClientMode.CSV,
        )
        return self._handle(
            response,
            not_found_message="Not found, invalid owner, application or distribution group name",
            mode=ClientMode.CSV,
        )

    # ------------------------------------------------------------------
    # Apps
    # ------------------------------------------------------------------

    def get_app(self, owner_name: str, app_name: str) -> bool:
        """
        Verificar si una app existe.

        Returns:
            True si existe, False si 404

        Raises:
            AuthenticationError: 401
            ApiError: cualquier otro status
        """
        path = self.APP_ENDPOINT.format(owner_name=owner_name, app_name=app_name)
        response = self._request("GET", path)
        outcome = self.classifier.classify(response.status_code)

        if outcome == Outcome.SUCCESS:
            self._debug("", decode_body(response))
            return True
        if outcome == Outcome.NOT_FOUND:
            self._debug("", decode_body(response))
            return False
        if outcome == Outcome.AUTH_ERROR:
            raise AuthenticationError(
                ERROR_MESSAGES[ErrorCode.INVALID_TOKEN],
                error_code=ErrorCode.INVALID_TOKEN.value
            )

        logger.error(f"Error getting app {owner_name}/{app_name}, {response.status_code}: {response.text}")
        raise ApiError(
            f"Error getting app {owner_name}/{app_name}",
            status_code=response.status_code,
            body=response.text,
            error_code=ErrorCode.API_ERROR.value
        )

    def create_app(
        self,
        owner_type: str,
        owner_name: str,
        app_name: str,
        app_display_name: str,
        os: str,
        platform: str
    ) -> Optional[dict]:
        """
        Crear una app para un usuario u organización.

        Endpoint: POST /v0.1/apps (usuario) o /v0.1/orgs/{owner}/apps (organización)

        Returns:
            App creada, o None
        """
        if OwnerType(owner_type) == OwnerType.USER:
            path = self.APPS_ENDPOINT
        else:
            path = self.ORG_APPS_ENDPOINT.format(owner_name=owner_name)

        payload = {
            "display_name": app_display_name,
            "name": app_name,
            "os": os,
            "platform": platform,
        }
        response = self._request("POST", path, json=payload)
        created = self._handle(response, error_label="Error creating app")
        if created is None:
            return None
        if not isinstance(created, dict):
            created = {}

        logger.info(
            f"Created {os}/{platform} app with name \"{created.get('name')}\" and display name "
            f"\"{created.get('display_name')}\" for {owner_type} \"{owner_name}\""
        )
        return created

    def get_apps(self) -> list:
        """
        Listar todas las apps visibles para el token.

        Returns:
            Lista de apps (vacía si la llamada falla)
        """
        response = self._request("GET", self.APPS_ENDPOINT)
        apps = self._handle(response, error_label="Error listing apps")
        return apps if isinstance(apps, list) else []
