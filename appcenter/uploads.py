"""
Upload Workflow - Subida de binarios y símbolos con commit/abort.

Cada subida sigue la misma secuencia:
1. Crear sesión de upload (release o símbolos) → upload_id + upload_url
2. Transferir el archivo a upload_url con timeout
3. Commit si la transferencia respondió 2xx, abort en cualquier otro caso

Un 401 durante la transferencia aborta la ejecución sin actualizar la sesión.

Uso:
    from appcenter import AppCenterClient, UploadWorkflow

    workflow = UploadWorkflow(AppCenterClient())
    result = workflow.release_build("owner", "app", Path("app.ipa"), timeout=240)
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

import httpx

from config.constants import (
    BINARY_EXTENSIONS,
    BLOB_TYPE,
    BLOB_TYPE_HEADER,
    CLIENT_SOURCE_HEADER,
    ERROR_MESSAGES,
    ErrorCode,
    SymbolType,
    UploadStatus,
)
from config.settings import settings
from appcenter.api import AppCenterClient
from appcenter.error_classifier import Outcome
from appcenter.errors import AuthenticationError
from appcenter.http.client import ClientMode
from appcenter.models import DistributionDestination, Release, UploadResult, UploadSession
from appcenter.urls import file_extname_full

logger = logging.getLogger(__name__)

BINARY = "binary"

PathLike = Union[str, Path]


class UploadWorkflow:
    """Secuencia create → transfer → commit/abort sobre un AppCenterClient."""

    # Campo del formulario usado para .apk, .aab e .ipa
    BINARY_FIELD = "ipa"

    def __init__(self, client: AppCenterClient, timeout: Optional[float] = None):
        """
        Args:
            client: Cliente de la API
            timeout: Timeout de transferencia por defecto (default: settings)
        """
        self.client = client
        self.timeout = timeout if timeout is not None else settings.appcenter.APPCENTER_UPLOAD_TIMEOUT

    # ------------------------------------------------------------------
    # Transferencia
    # ------------------------------------------------------------------

    def _transfer(
        self,
        method: str,
        upload_url: str,
        mode: ClientMode,
        timeout: Optional[float],
        headers: Optional[dict] = None,
        **request_kwargs
    ) -> Optional[httpx.Response]:
        """
        Enviar bytes a upload_url.

        Returns:
            Respuesta, o None si hubo timeout o cualquier otro error de la request
        """
        if timeout is None:
            timeout = self.timeout
        request_headers = {CLIENT_SOURCE_HEADER: self.client.config.client_source}
        request_headers.update(headers or {})
        try:
            with self.client.client(mode, timeout=timeout) as http:
                return http.request(method, upload_url, headers=request_headers, **request_kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout transfiriendo a App Center ({timeout}s): {e}")
        except httpx.RequestError as e:
            # Incluye TooManyRedirects y DecodingError
            logger.error(f"Error transfiriendo a App Center ({type(e).__name__}): {e}")
        return None

    def _outcome(self, response: Optional[httpx.Response]) -> Outcome:
        if response is None:
            return Outcome.FAILURE
        return self.client.classifier.classify(response.status_code)

    @staticmethod
    def _describe(response: Optional[httpx.Response]) -> tuple[int, str]:
        if response is None:
            return 0, "no response"
        return response.status_code, response.text

    # ------------------------------------------------------------------
    # Binarios
    # ------------------------------------------------------------------

    def upload_build(
        self,
        owner_name: str,
        app_name: str,
        file: PathLike,
        upload_id: str,
        upload_url: str,
        timeout: Optional[float] = None
    ) -> UploadResult:
        """
        Subir un binario a upload_url y hacer commit o abort de la release.

        Content-Type: multipart/form-data (campos ipa y upload_id)

        Raises:
            AuthenticationError: 401 en la transferencia (no se actualiza la sesión)
        """
        file = Path(file)
        response = None
        if file_extname_full(file) not in BINARY_EXTENSIONS:
            logger.error(f"Tipo de archivo no soportado: {file.name} (esperado: {', '.join(BINARY_EXTENSIONS)})")
        elif file.is_file():
            with file.open("rb") as fh:
                response = self._transfer(
                    "POST",
                    upload_url,
                    ClientMode.MULTIPART,
                    timeout,
                    data={"upload_id": upload_id},
                    files={self.BINARY_FIELD: (file.name, fh, "application/octet-stream")},
                )
        else:
            logger.error(f"Archivo no encontrado: {file}")

        outcome = self._outcome(response)

        if outcome == Outcome.SUCCESS:
            logger.info("Binary uploaded")
            committed = self.client.update_release_upload(owner_name, app_name, upload_id, UploadStatus.COMMITTED.value)
            return UploadResult(
                success=committed is not None,
                artifact=BINARY,
                status=UploadStatus.COMMITTED.value,
                status_code=response.status_code,
                data=committed,
            )

        if outcome == Outcome.AUTH_ERROR:
            raise AuthenticationError(
                ERROR_MESSAGES[ErrorCode.INVALID_TOKEN],
                error_code=ErrorCode.INVALID_TOKEN.value
            )

        status_code, body = self._describe(response)
        logger.error(f"Error uploading binary {status_code}: {body}")
        self.client.update_release_upload(owner_name, app_name, upload_id, UploadStatus.ABORTED.value)
        logger.error("Release aborted")
        return UploadResult(
            success=False,
            artifact=BINARY,
            status=UploadStatus.ABORTED.value,
            status_code=status_code,
            message=body,
        )

    # ------------------------------------------------------------------
    # Símbolos
    # ------------------------------------------------------------------

    def upload_symbol(
        self,
        owner_name: str,
        app_name: str,
        symbol: PathLike,
        symbol_type: str,
        symbol_upload_id: str,
        upload_url: str,
        timeout: Optional[float] = None
    ) -> UploadResult:
        """
        Subir un archivo de símbolos (dSYM o mapping) y hacer commit o abort.

        Cuerpo binario crudo con header x-ms-blob-type: BlockBlob.

        Raises:
            AuthenticationError: 401 en la transferencia (no se actualiza la sesión)
        """
        label = SymbolType(symbol_type).label
        symbol = Path(symbol)
        response = None
        if symbol.is_file():
            response = self._transfer(
                "PUT",
                upload_url,
                ClientMode.BLOB,
                timeout,
                headers={BLOB_TYPE_HEADER: BLOB_TYPE},
                content=symbol.read_bytes(),
            )
        else:
            logger.error(f"Archivo no encontrado: {symbol}")

        outcome = self._outcome(response)

        if outcome == Outcome.SUCCESS:
            committed = self.client.update_symbol_upload(
                owner_name, app_name, symbol_upload_id, UploadStatus.COMMITTED.value
            )
            logger.info(f"{label} uploaded")
            return UploadResult(
                success=committed is not None,
                artifact=label,
                status=UploadStatus.COMMITTED.value,
                status_code=response.status_code,
                data=committed,
            )

        if outcome == Outcome.AUTH_ERROR:
            raise AuthenticationError(
                ERROR_MESSAGES[ErrorCode.INVALID_TOKEN],
                error_code=ErrorCode.INVALID_TOKEN.value
            )

        status_code, body = self._describe(response)
        logger.error(f"Error uploading {label} {status_code}: {body}")
        self.client.update_symbol_upload(owner_name, app_name, symbol_upload_id, UploadStatus.ABORTED.value)
        logger.error(f"{label} upload aborted")
        return UploadResult(
            success=False,
            artifact=label,
            status=UploadStatus.ABORTED.value,
            status_code=status_code,
            message=body,
        )

    # ------------------------------------------------------------------
    # Secuencias completas
    # ------------------------------------------------------------------

    def release_build(
        self,
        owner_name: str,
        app_name: str,
        file: PathLike,
        timeout: Optional[float] = None,
        body: Optional[dict] = None
    ) -> UploadResult:
        """
        Crear sesión de release, subir el binario y hacer commit/abort.

        Tras el commit se lee la release creada para devolver su
        download_url junto con el resultado.
        """
        created = self.client.create_release_upload(owner_name, app_name, body)
        if not created:
            return UploadResult(success=False, artifact=BINARY, message="Release upload could not be created")

        session = UploadSession.from_release_upload(created)
        logger.info(f"Subiendo binario {Path(file).name} (upload {session.upload_id})")
        result = self.upload_build(owner_name, app_name, file, session.upload_id, session.upload_url, timeout)
        if not result.success:
            return result

        committed = result.data if isinstance(result.data, dict) else {}
        release_id = committed.get("release_id") or committed.get("id")
        if release_id is None:
            result.success = False
            result.message = "Commit response has no release_id"
            logger.error(result.message)
            return result

        found = self.client.get_release(owner_name, app_name, release_id)
        if not found:
            result.success = False
            result.message = f"Release {release_id} could not be fetched"
            logger.error(result.message)
            return result

        result.release = Release.from_dict(found)
        result.download_url = result.release.download_url
        logger.info(f"Release {result.release.short_version} ({result.release.version}) lista: {result.download_url}")
        return result

    def release_dsym(
        self,
        owner_name: str,
        app_name: str,
        dsym: PathLike,
        timeout: Optional[float] = None
    ) -> UploadResult:
        """Crear sesión de símbolos Apple, subir el dSYM y hacer commit/abort."""
        label = SymbolType.APPLE.label
        created = self.client.create_dsym_upload(owner_name, app_name)
        if not created:
            return UploadResult(success=False, artifact=label, message="dSYM upload could not be created")

        session = UploadSession.from_symbol_upload(created)
        logger.info(f"Subiendo {label} {Path(dsym).name} (upload {session.upload_id})")
        return self.upload_symbol(
            owner_name, app_name, dsym, SymbolType.APPLE.value, session.upload_id, session.upload_url, timeout
        )

    def release_mapping(
        self,
        owner_name: str,
        app_name: str,
        mapping: PathLike,
        build_number: str,
        version: str,
        timeout: Optional[float] = None
    ) -> UploadResult:
        """Crear sesión de mapping de Proguard, subir el archivo y hacer commit/abort."""
        label = SymbolType.ANDROID.label
        mapping = Path(mapping)
        created = self.client.create_mapping_upload(owner_name, app_name, mapping.name, build_number, version)
        if not created:
            return UploadResult(success=False, artifact=label, message="Mapping upload could not be created")

        session = UploadSession.from_symbol_upload(created)
        logger.info(f"Subiendo {label} {mapping.name} (upload {session.upload_id})")
        return self.upload_symbol(
            owner_name, app_name, mapping, SymbolType.ANDROID.value, session.upload_id, session.upload_url, timeout
        )

    # ------------------------------------------------------------------
    # Distribución
    # ------------------------------------------------------------------

    def distribute(
        self,
        owner_name: str,
        app_name: str,
        release_id,
        destination_type: str,
        destination_names: Iterable[str],
        mandatory_update: bool = False,
        notify_testers: bool = False
    ) -> Optional[Release]:
        """
        Agregar una release a uno o varios destinos por nombre.

        Returns:
            Última Release releída, o None si algún destino falló
        """
        release = None
        for name in destination_names:
            found = self.client.get_destination(owner_name, app_name, destination_type, name)
            if not found:
                return None

            destination = DistributionDestination.from_dict(destination_type, found)
            release = self.client.add_to_destination(
                owner_name,
                app_name,
                release_id,
                destination.type,
                destination.id,
                mandatory_update=mandatory_update,
                notify_testers=notify_testers,
            )
            if release is None:
                return None
        return release
