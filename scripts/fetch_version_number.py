"""
Script para consultar la última versión de una app en App Center.

Lee token, dueño y app de las variables de entorno (o .env):
    APPCENTER_API_TOKEN, APPCENTER_OWNER_NAME, APPCENTER_APP_NAME

Uso:
    python -m scripts.fetch_version_number
"""

import sys
import os

# Agregar raíz del proyecto al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

from config.logging_config import setup_logging
from config.settings import settings
from appcenter import AppCenterClient, AppCenterError, fetch_version_number
from appcenter.error_classifier import ErrorClassifier

logger = logging.getLogger("scripts.fetch_version_number")


def main() -> int:
    """Imprimir la versión más reciente y retornar el exit code."""
    setup_logging("fetch_version")

    try:
        client = AppCenterClient()
        version = fetch_version_number(
            client,
            app_name=settings.appcenter.APPCENTER_APP_NAME,
            owner_name=settings.appcenter.APPCENTER_OWNER_NAME,
        )
    except AppCenterError as e:
        error_type = ErrorClassifier().error_type(e)
        logger.error(f"[{error_type.value}] [{e.error_code}] {e.message}")
        return 1

    print(version)
    return 0


if __name__ == "__main__":
    sys.exit(main())
