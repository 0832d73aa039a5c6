"""
Resolución de dueño/app y consulta de la última versión publicada.

Cuando falta el dueño se listan todas las apps visibles para el token
y se toma la primera cuyo nombre coincide exactamente.
"""

import logging
from typing import Optional

from config.constants import ErrorCode
from appcenter.api import AppCenterClient
from appcenter.errors import UserError
from appcenter.models import AppIdentity

logger = logging.getLogger(__name__)


def get_owner_name(client: AppCenterClient, app_name: Optional[str]) -> Optional[str]:
    """Dueño de la primera app cuyo nombre coincide (sensible a mayúsculas)."""
    apps = client.get_apps()
    matches = [app for app in apps if app.get("name") == app_name]
    if not matches:
        return None
    return str(matches[0]["owner"]["name"])


def get_owner_and_app_name(client: AppCenterClient) -> tuple[Optional[str], Optional[str]]:
    """
    Tomar la primera app visible para el token.

    Returns:
        (app_name, owner_name), (None, None) si no hay apps
    """
    apps = client.get_apps()
    if not apps:
        return None, None
    selected = apps[0]
    return str(selected["name"]), str(selected["owner"]["name"])


def resolve_identity(
    client: AppCenterClient,
    app_name: Optional[str] = None,
    owner_name: Optional[str] = None
) -> AppIdentity:
    """
    Completar (owner, app) consultando la lista de apps si hace falta.

    Raises:
        UserError: si no se pudo resolver
    """
    if app_name is None and owner_name is None:
        app_name, owner_name = get_owner_and_app_name(client)
    elif owner_name is None:
        owner_name = get_owner_name(client, app_name)

    identity = AppIdentity(app_name=app_name, owner_name=owner_name).require_resolved()
    logger.info(f"App resuelta: {identity.owner_name}/{identity.app_name}")
    return identity


def fetch_latest_release(
    client: AppCenterClient,
    app_name: Optional[str] = None,
    owner_name: Optional[str] = None
) -> dict:
    """
    Release más reciente (mayor id numérico) de una app.

    Raises:
        UserError: si no hay app/dueño o la app no tiene versiones
    """
    identity = resolve_identity(client, app_name, owner_name)

    releases = client.fetch_releases(identity.owner_name, identity.app_name)
    if releases is None:
        raise UserError(
            f"No versions found for '{identity.app_name}' owned by {identity.owner_name}",
            error_code=ErrorCode.NO_VERSIONS.value
        )

    sorted_releases = sorted(releases, key=lambda release: int(release["id"]), reverse=True)
    if not sorted_releases:
        raise UserError("The app has no versions yet", error_code=ErrorCode.NO_VERSIONS.value)

    return sorted_releases[0]


def fetch_version_number(
    client: AppCenterClient,
    app_name: Optional[str] = None,
    owner_name: Optional[str] = None
) -> str:
    """Versión de la release más reciente de una app."""
    latest = fetch_latest_release(client, app_name, owner_name)
    return latest["version"]
