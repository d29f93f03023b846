# ==============================================================================
# CUERPO DE ERROR DE LA API
# ==============================================================================
# La API responde errores como {"error": "..."} o {"mensaje": "..."},
# o a veces sin cuerpo JSON. Toda la lógica de "qué mensaje mostrar"
# vive aquí, con una sola regla de precedencia:
#   1. error
#   2. mensaje
#   3. texto genérico con el status HTTP
# ==============================================================================

import json
from dataclasses import dataclass
from typing import Optional

from werkzeug.http import HTTP_STATUS_CODES


@dataclass(frozen=True)
class GatewayErrorPayload:
    """
    Error devuelto por un endpoint.

    Attributes:
        status: Código HTTP (None si no hubo respuesta)
        error: Campo 'error' del cuerpo, si venía
        mensaje: Campo 'mensaje' del cuerpo, si venía
    """
    status: Optional[int]
    error: Optional[str] = None
    mensaje: Optional[str] = None

    @classmethod
    def from_body(cls, status: Optional[int], body: bytes) -> 'GatewayErrorPayload':
        """Decodifica el cuerpo si es JSON; si no, queda sin campos."""
        error = mensaje = None
        if body:
            try:
                data = json.loads(body.decode('utf-8'))
            except (UnicodeDecodeError, ValueError):
                data = None
            if isinstance(data, dict):
                error = _clean(data.get('error'))
                mensaje = _clean(data.get('mensaje'))
        return cls(status=status, error=error, mensaje=mensaje)

    @property
    def has_details(self) -> bool:
        return bool(self.error or self.mensaje)

    def message(self, fallback: Optional[str] = None) -> str:
        """
        Mensaje a mostrar al usuario.

        Args:
            fallback: Prefijo del mensaje genérico (ej: 'Error al crear el producto')
        """
        if self.error:
            return self.error
        if self.mensaje:
            return self.mensaje
        return generic_message(self.status, fallback)


def generic_message(status: Optional[int], fallback: Optional[str] = None) -> str:
    """Texto genérico que incluye el status numérico."""
    base = fallback or 'Error en la respuesta del servidor'
    if status is None:
        return base
    reason = HTTP_STATUS_CODES.get(status, 'Unknown')
    return f"{base} ({status} {reason})"


def _clean(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
