from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class GeneralSettings(BaseSettings):
    """Configuracion general"""

    DEBUG: bool = Field(
        default=False,
        description="Modo debug (loguea respuestas completas de la API)"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Nivel de logging: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    class Config:
        env_file = ".env"
        case_sensitive = True


class AppCenterSettings(BaseSettings):
    """Configuracion de acceso a la API de App Center"""

    APPCENTER_API_TOKEN: str = Field(
        default="",
        description="API Token para App Center (header X-API-Token)"
    )
    APPCENTER_OWNER_NAME: Optional[str] = Field(
        default=None,
        description="Usuario u organizacion duena de la app (opcional, se resuelve si falta)"
    )
    APPCENTER_APP_NAME: Optional[str] = Field(
        default=None,
        description="Nombre de la app en App Center"
    )
    APPCENTER_UPLOAD_URL: str = Field(
        default="https://api.appcenter.ms",
        description="URL base de la API de App Center"
    )
    APPCENTER_UPLOAD_TIMEOUT: int = Field(
        default=240,
        description="Timeout en segundos para la transferencia de binarios y simbolos"
    )
    APPCENTER_CLIENT_SOURCE: str = Field(
        default="fastlane",
        description="Valor del header internal-request-source"
    )

    @validator("APPCENTER_UPLOAD_URL")
    def validate_upload_url(cls, v):
        """Remover trailing slash de la URL"""
        if v.endswith("/"):
            return v.rstrip("/")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


class LoggingSettings(BaseSettings):
    """Configuracion de logging"""

    LOG_DIR: str = Field(
        default="logs",
        description="Directorio de logs (relativo a la raiz del proyecto)"
    )
    LOG_RETENTION_DAYS: int = Field(
        default=1,
        description="Dias de logs rotados a mantener"
    )

    class Config:
        env_file = ".env"
        case_sensitive = True


class Settings(BaseSettings):
    """
    Clase principal que agrupa todas las configuraciones
    Uso: from config.settings import settings
         settings.appcenter.APPCENTER_API_TOKEN, settings.general.DEBUG, etc
    """

    # Subconfigurations
    general: GeneralSettings = GeneralSettings()
    appcenter: AppCenterSettings = AppCenterSettings()
    logging: LoggingSettings = LoggingSettings()

    class Config:
        env_file = ".env"
        case_sensitive = True


# Singleton instance
@lru_cache()
def get_settings() -> Settings:
    """
    Obtener instancia singleton de Settings
    Uso: from config.settings import get_settings
         settings = get_settings()
    """
    return Settings()


# Instancia global (para imports directos)
settings = get_settings()
