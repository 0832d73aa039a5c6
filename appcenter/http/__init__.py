"""
Subpaquete HTTP - Adaptador httpx para la API de App Center.

Uso:
    from appcenter.http import build_client, ClientMode, decode_body

    with build_client(config, ClientMode.PLAIN) as client:
        response = client.get("/v0.1/apps")
        apps = decode_body(response)
"""

from appcenter.http.client import ClientMode, build_client, decode_body, is_json_response, pretty

__all__ = [
    "ClientMode",
    "build_client",
    "decode_body",
    "is_json_response",
    "pretty",
]
