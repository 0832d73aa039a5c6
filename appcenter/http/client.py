"""
HTTP client adapter - Construcción de clientes httpx para App Center.

Centraliza base URL, headers, redirects y decodificación de respuestas
para que todas las operaciones se comporten igual:
- PLAIN: cuerpos JSON, respuesta JSON decodificada
- MULTIPART: subida de binarios (multipart/form-data)
- BLOB: subida de símbolos (cuerpo binario crudo)
- CSV: respuesta sin decodificar (lista de dispositivos)
"""

import json
import logging
from enum import Enum
from typing import Any, Optional

import httpx

from appcenter.models import ApiConfig

logger = logging.getLogger(__name__)


class ClientMode(str, Enum):
    """Modo de codificación del cliente"""

    PLAIN = "plain"
    MULTIPART = "multipart"
    BLOB = "blob"
    CSV = "csv"


# Headers por modo (Content-Type de multipart y JSON los pone httpx)
MODE_HEADERS = {
    ClientMode.PLAIN: {"Accept": "application/json"},
    ClientMode.MULTIPART: {"Accept": "application/json"},
    ClientMode.BLOB: {"Content-Type": "application/octet-stream"},
    ClientMode.CSV: {"Accept": "text/csv"},
}


def build_client(
    config: ApiConfig,
    mode: ClientMode = ClientMode.PLAIN,
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
    extra_headers: Optional[dict[str, str]] = None,
) -> httpx.Client:
    """
    Crea un `httpx.Client` ligado a la base URL de App Center.

    Las URLs absolutas (upload_url devuelta por la API) ignoran la base URL.

    Args:
        config: Credencial y base URL
        mode: Modo de codificación
        timeout: Timeout en segundos (None = default de httpx)
        transport: Transport alternativo (tests)
        extra_headers: Headers adicionales

    Returns:
        Cliente configurado, usar con `with`
    """
    headers: dict[str, str] = dict(MODE_HEADERS[mode])
    if extra_headers:
        headers.update(extra_headers)

    kwargs: dict[str, Any] = {
        "base_url": config.base_url,
        "headers": headers,
        "follow_redirects": True,
    }
    if timeout is not None:
        kwargs["timeout"] = httpx.Timeout(timeout)
    if transport is not None:
        kwargs["transport"] = transport

    return httpx.Client(**kwargs)


def is_json_response(response: httpx.Response) -> bool:
    """True si el Content-Type de la respuesta termina en json."""
    content_type = response.headers.get("content-type", "")
    mime_type = content_type.split(";")[0].strip().lower()
    return mime_type.endswith("json")


def decode_body(response: httpx.Response, mode: ClientMode = ClientMode.PLAIN) -> Any:
    """
    Decodificar el cuerpo de una respuesta según el modo.

    Returns:
        dict/list si es JSON, bytes en modo CSV, texto en otro caso
    """
    if mode == ClientMode.CSV:
        return response.content

    if is_json_response(response) and response.content:
        try:
            return response.json()
        except json.JSONDecodeError:
            logger.warning("Respuesta JSON inválida, se retorna como texto")

    return response.text


def pretty(body: Any) -> str:
    """Representación legible de un cuerpo para logs de debug."""
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2, ensure_ascii=False)
    return repr(body)
