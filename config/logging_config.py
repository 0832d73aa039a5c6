"""
Configuración centralizada de logging con rotación diaria.

Cada proceso escribe a su propio archivo en logs/:
- logs/appcenter.log      → Operaciones contra la API de App Center
- logs/fetch_version.log  → Script de consulta de versión

Los archivos rotan a medianoche y se eliminan después de N días.
En modo DEBUG se loguean además los cuerpos completos de las respuestas.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import TimedRotatingFileHandler

from config.settings import settings

# Directorio raíz del proyecto
PROJECT_ROOT = Path(__file__).resolve().parent.parent

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logs_directory() -> Path:
    """Retorna el directorio de logs configurado."""
    logs_dir = Path(settings.logging.LOG_DIR)
    if not logs_dir.is_absolute():
        logs_dir = PROJECT_ROOT / logs_dir
    return logs_dir


def get_log_file_path(service_name: str = "appcenter") -> Path:
    """Retorna la ruta al archivo de log de un servicio."""
    return get_logs_directory() / f"{service_name}.log"


def setup_logging(service_name: str = "appcenter", to_file: bool = True) -> logging.Logger:
    """
    Configura logging con rotación diaria para un servicio específico.

    Args:
        service_name: Nombre del servicio. Define el archivo de log:
                     - "appcenter"     → logs/appcenter.log
                     - "fetch_version" → logs/fetch_version.log
        to_file: Si False solo se loguea a consola

    Returns:
        Logger raíz configurado
    """
    # DEBUG fuerza el nivel para que se vean los cuerpos de respuesta
    level_name = "DEBUG" if settings.general.DEBUG else settings.general.LOG_LEVEL
    log_level = getattr(logging, level_name.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Limpiar handlers existentes (evita duplicados en reloads)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Handler 1: Consola (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not to_file:
        return root_logger

    # Handler 2: Archivo con rotación diaria
    log_file = get_log_file_path(service_name)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=settings.logging.LOG_RETENTION_DAYS,
        encoding="utf-8",
        utc=False
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)

    # Sufijo para archivos rotados: appcenter.log.2026-01-23
    file_handler.suffix = "%Y-%m-%d"

    root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging iniciado [{service_name}] → {log_file}")

    return root_logger
