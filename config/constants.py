from enum import Enum


# Endpoints y headers

DEFAULT_API_URL = "https://api.appcenter.ms"
PORTAL_URL = "https://appcenter.ms"
INSTALL_URL = "https://install.appcenter.ms"

API_TOKEN_HEADER = "X-API-Token"
CLIENT_SOURCE_HEADER = "internal-request-source"
BLOB_TYPE_HEADER = "x-ms-blob-type"
BLOB_TYPE = "BlockBlob"

# Extensiones aceptadas en el campo ipa del upload de release
BINARY_EXTENSIONS = (".ipa", ".apk", ".aab", ".ipa.zip", ".apk.zip", ".aab.zip")


class UploadStatus(str, Enum):
    """Estados terminales de una sesión de upload"""

    COMMITTED = "committed"
    ABORTED = "aborted"


class SymbolType(str, Enum):
    """Tipos de archivo de símbolos soportados por App Center"""

    APPLE = "Apple"                        # dSYM
    ANDROID = "Android"                    # mapping (nombre usado en logs)
    ANDROID_PROGUARD = "AndroidProguard"   # symbol_type enviado a la API

    @property
    def label(self) -> str:
        """Nombre legible del artefacto para logs"""
        return "dSYM" if self is SymbolType.APPLE else "mapping"


class DestinationType(str, Enum):
    """Tipos de destino de distribución"""

    GROUP = "group"
    STORE = "store"


class OwnerType(str, Enum):
    """Tipos de dueño de una app"""

    USER = "user"
    ORGANIZATION = "organization"


# Codigos de error

class ErrorCode(str, Enum):
    """Codigos de error estandarizados"""

    INVALID_TOKEN = "INVALID_TOKEN"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    NOT_FOUND = "NOT_FOUND"
    API_ERROR = "API_ERROR"
    MISSING_IDENTIFIER = "MISSING_IDENTIFIER"
    NO_VERSIONS = "NO_VERSIONS"
    INVALID_CONFIG = "INVALID_CONFIG"


# Mensajes de error

ERROR_MESSAGES = {
    ErrorCode.INVALID_TOKEN: "Auth Error, provided invalid token",
    ErrorCode.SERVICE_UNAVAILABLE: "Internal Service Error, please try again later",
    ErrorCode.NOT_FOUND: "Not found, invalid owner or application name",
    ErrorCode.API_ERROR: "Unexpected response from App Center",
    ErrorCode.MISSING_IDENTIFIER: "Missing owner or application name",
    ErrorCode.NO_VERSIONS: "No versions found",
    ErrorCode.INVALID_CONFIG: "Invalid configuration",
}
