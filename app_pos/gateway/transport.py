# ==============================================================================
# TRANSPORTE HTTP
# ==============================================================================
# Interfaz mínima que el gateway necesita para hablar con la API.
# UrllibTransport es la implementación real; los tests usan un
# transporte sobre el test client de Flask.
# ==============================================================================

import json
import logging
import socket
from dataclasses import dataclass
from http.client import HTTPException
from typing import Any, Optional, Protocol, runtime_checkable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from app_pos.errors import TransportError
from app_pos.models import decimal_to_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Respuesta HTTP cruda: status y cuerpo en bytes."""
    status: int
    body: bytes = b''

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class Transport(Protocol):
    """
    Contrato de transporte.

    request() devuelve la respuesta para cualquier status HTTP (incluidos
    4xx/5xx) y lanza TransportError solo si no hubo respuesta (red caída,
    timeout, DNS...).
    """

    def request(self, method: str, path: str, payload: Optional[Any] = None) -> TransportResponse:
        ...


def _json_default(value: Any) -> Any:
    # Decimal y similares
    try:
        return decimal_to_json(value)
    except AttributeError:
        raise TypeError(f"Tipo no serializable: {type(value).__name__}")


def encode_json(payload: Any) -> bytes:
    """Serializa el payload a JSON UTF-8 (los Decimal se convierten a número)."""
    return json.dumps(payload, default=_json_default, ensure_ascii=False).encode('utf-8')


class UrllibTransport:
    """
    Transporte JSON sobre urllib.

    Args:
        base_url: URL base de la API (sin barra final)
        timeout: Timeout por request en segundos
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def request(self, method: str, path: str, payload: Optional[Any] = None) -> TransportResponse:
        url = f"{self.base_url}{path}"
        data = encode_json(payload) if payload is not None else None
        headers = {'Accept': 'application/json'}
        if data is not None:
            headers['Content-Type'] = 'application/json'

        req = Request(url, data=data, method=method, headers=headers)
        try:
            with urlopen(req, timeout=self.timeout) as resp:
                return TransportResponse(resp.status, resp.read())
        except HTTPError as e:
            # 4xx/5xx: hay respuesta, la interpreta el gateway
            try:
                body = e.read()
            finally:
                e.close()
            return TransportResponse(e.code, body or b'')
        except (URLError, HTTPException, socket.timeout, ConnectionError) as e:
            # HTTPException: respuesta malformada (BadStatusLine, IncompleteRead...)
            logger.warning("%s %s falló sin respuesta: %s", method, url, e)
            raise TransportError(f"No se pudo conectar con el servidor: {e}") from e
