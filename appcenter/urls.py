"""URLs de la web de App Center y utilidades de archivos (sin llamadas de red)."""

from pathlib import Path
from typing import Union

from config.constants import INSTALL_URL, PORTAL_URL, OwnerType


def _owner_path(owner_type: str, owner_name: str) -> str:
    if OwnerType(owner_type) == OwnerType.USER:
        return f"users/{owner_name}"
    return f"orgs/{owner_name}"


def get_release_url(owner_type: str, owner_name: str, app_name: str, release_id) -> str:
    """URL de la página de la release en el portal."""
    return f"{PORTAL_URL}/{_owner_path(owner_type, owner_name)}/apps/{app_name}/distribute/releases/{release_id}"


def get_install_url(owner_type: str, owner_name: str, app_name: str) -> str:
    """URL pública de instalación de la app."""
    return f"{INSTALL_URL}/{_owner_path(owner_type, owner_name)}/apps/{app_name}"


def file_extname_full(path: Union[str, Path]) -> str:
    """
    Extensión de un artefacto teniendo en cuenta el zip externo.

    app.ipa -> .ipa, app.ipa.zip -> .ipa.zip, app.dSYM.zip -> .dSYM.zip
    """
    path = Path(path)
    if path.suffix != ".zip":
        return path.suffix
    return Path(path.stem).suffix + ".zip"
