"""
App Center - Cliente para la API REST de App Center.

Componentes:
- api: Una operación por endpoint (apps, releases, uploads, distribución)
- uploads: Secuencia create → transfer → commit/abort
- resolution: Resolución de dueño y consulta de última versión
- urls: URLs del portal y de instalación
- http/: Adaptador httpx
"""

from appcenter.api import AppCenterClient
from appcenter.errors import (
    ApiError,
    AppCenterError,
    AuthenticationError,
    FatalError,
    RecoverableError,
    ServiceError,
    UserError,
    ValidationError,
)
from appcenter.models import ApiConfig, AppIdentity, Release, UploadResult, UploadSession
from appcenter.resolution import fetch_version_number, get_owner_name
from appcenter.uploads import UploadWorkflow
from appcenter.urls import get_install_url, get_release_url

__all__ = [
    # Cliente
    "AppCenterClient",
    "UploadWorkflow",
    "ApiConfig",
    # Modelos
    "AppIdentity",
    "Release",
    "UploadResult",
    "UploadSession",
    # Resolución
    "fetch_version_number",
    "get_owner_name",
    # URLs
    "get_install_url",
    "get_release_url",
    # Errores
    "AppCenterError",
    "FatalError",
    "RecoverableError",
    "AuthenticationError",
    "ServiceError",
    "UserError",
    "ValidationError",
    "ApiError",
]
