# ==============================================================================
# GATEWAY - Acceso a la API remota
# ==============================================================================
# ├── transport.py      → Transport (contrato) y UrllibTransport
# ├── error_payload.py  → GatewayErrorPayload: precedencia error > mensaje > genérico
# └── client.py         → RemoteGateway: un método por endpoint
# ==============================================================================

from .transport import Transport, TransportResponse, UrllibTransport, encode_json
from .error_payload import GatewayErrorPayload, generic_message
from .client import DEFAULT_ROUTES, RemoteGateway

__all__ = [
    'Transport',
    'TransportResponse',
    'UrllibTransport',
    'encode_json',
    'GatewayErrorPayload',
    'generic_message',
    'DEFAULT_ROUTES',
    'RemoteGateway',
]
