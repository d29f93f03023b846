# ==============================================================================
# GATEWAY REMOTO - Cliente de la API REST
# ==============================================================================
# Un método por endpoint. Devuelve el JSON decodificado (dict/list) y
# convierte cualquier fallo en una excepción del dominio:
#
#   404            → NotFoundError
#   409            → ConflictError
#   otro no-2xx    → GatewayError
#   sin respuesta  → GatewayError (status None)
#
# El mensaje siempre sale de GatewayErrorPayload.message().
# No hace reintentos: cada llamada es un único request/response.
# ==============================================================================

import json
import logging
import time
from typing import Any, Dict, List, Mapping, Optional

from app_pos import profiling
from app_pos.errors import ConflictError, GatewayError, NotFoundError, TransportError
from app_pos.gateway.error_payload import GatewayErrorPayload, generic_message
from app_pos.gateway.transport import Transport

logger = logging.getLogger(__name__)


# Rutas de la API original (relativas a POS_API_URL)
DEFAULT_ROUTES: Dict[str, str] = {
    'products': '/api/productos',
    'product': '/api/productos/{id}',
    'providers': '/api/proveedores',
    'provider': '/api/proveedores/{id}',
    'users': '/api/usuarios',
    'user': '/api/usuarios/{id}',
    'sales': '/api/ventas',
    'sale': '/api/ventas/{id}',
    'sale_details': '/api/detalle_venta/{id}',
}


class RemoteGateway:
    """
    Cliente de la API remota.

    Uso:
        gateway = RemoteGateway(UrllibTransport('http://localhost:3000'))
        productos = gateway.list_products()
    """

    def __init__(self, transport: Transport, routes: Optional[Mapping[str, str]] = None):
        """
        Args:
            transport: Transporte HTTP (UrllibTransport en producción)
            routes: Rutas a sobrescribir sobre DEFAULT_ROUTES
        """
        self.transport = transport
        self.routes = dict(DEFAULT_ROUTES)
        if routes:
            self.routes.update(routes)

    # =========================================================================
    # NÚCLEO
    # =========================================================================

    def _path(self, route: str, key: Any = None) -> str:
        template = self.routes[route]
        if key is None:
            return template
        return template.format(id=key)

    def _request(
        self,
        method: str,
        route: str,
        key: Any = None,
        payload: Any = None,
        error_text: Optional[str] = None
    ) -> Any:
        """
        Ejecuta un request y devuelve el JSON decodificado.

        Args:
            method: GET, POST, PUT, DELETE
            route: Nombre lógico de la ruta (clave de routes)
            key: ID a interpolar en la ruta
            payload: Cuerpo JSON
            error_text: Prefijo del mensaje genérico si la API no explica el error

        Returns:
            JSON decodificado, o None si el cuerpo venía vacío

        Raises:
            NotFoundError, ConflictError, GatewayError
        """
        path = self._path(route, key)
        label = f"{method} {self.routes[route]}"

        start = time.perf_counter()
        try:
            response = self.transport.request(method, path, payload)
        except TransportError as e:
            raise GatewayError(e.message or generic_message(None, error_text)) from e
        finally:
            if profiling.is_enabled():
                profiling.record_call(label, (time.perf_counter() - start) * 1000)

        if not response.ok:
            error = GatewayErrorPayload.from_body(response.status, response.body)
            message = error.message(error_text)
            logger.info("%s %s → %s: %s", method, path, response.status, message)
            if response.status == 404:
                raise NotFoundError(message, status=response.status)
            if response.status == 409:
                raise ConflictError(message, status=response.status)
            raise GatewayError(message, status=response.status, payload=error)

        if not response.body or not response.body.strip():
            return None
        try:
            return json.loads(response.body.decode('utf-8'))
        except (UnicodeDecodeError, ValueError) as e:
            raise GatewayError(
                f"{error_text or 'Error en la respuesta del servidor'} "
                f"({response.status}). La respuesta no es un JSON válido.",
                status=response.status,
            ) from e

    def _request_list(self, route: str, error_text: str) -> List[Dict[str, Any]]:
        data = self._request('GET', route, error_text=error_text)
        if data is None:
            return []
        if not isinstance(data, list):
            raise GatewayError(f"{error_text}: se esperaba una lista")
        return data

    # =========================================================================
    # PRODUCTOS
    # =========================================================================

    def list_products(self) -> List[Dict[str, Any]]:
        return self._request_list('products', 'Error al cargar los productos')

    def create_product(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._request('POST', 'products', payload=data,
                             error_text='Error al crear el producto')

    def update_product(self, product_id: Any, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._request('PUT', 'product', key=product_id, payload=data,
                             error_text='Error al actualizar el producto')

    def delete_product(self, product_id: Any) -> None:
        self._request('DELETE', 'product', key=product_id,
                      error_text='Error al eliminar el producto')

    # =========================================================================
    # PROVEEDORES
    # =========================================================================

    def list_providers(self) -> List[Dict[str, Any]]:
        return self._request_list('providers', 'Error al cargar los proveedores')

    def create_provider(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """POST /proveedores → {id} (el registro no se devuelve completo)."""
        return self._request('POST', 'providers', payload=data,
                             error_text='Error al crear el proveedor')

    def update_provider(self, provider_id: Any, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """PUT /proveedores/{id}; la respuesta puede venir vacía."""
        return self._request('PUT', 'provider', key=provider_id, payload=data,
                             error_text='Error al actualizar el proveedor')

    def delete_provider(self, provider_id: Any) -> None:
        self._request('DELETE', 'provider', key=provider_id,
                      error_text='Error al eliminar el proveedor')

    # =========================================================================
    # USUARIOS
    # =========================================================================

    def list_users(self) -> List[Dict[str, Any]]:
        return self._request_list('users', 'Error al cargar los usuarios')

    def get_user(self, documento: Any) -> Optional[Dict[str, Any]]:
        """
        Sonda de existencia por documento.

        Raises:
            NotFoundError: Si el usuario no existe
        """
        return self._request('GET', 'user', key=documento,
                             error_text='Error al buscar el usuario')

    def create_user(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._request('POST', 'users', payload=data,
                             error_text='Error al crear el usuario')

    def update_user(self, documento: Any, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._request('PUT', 'user', key=documento, payload=data,
                             error_text='Error al actualizar el usuario')

    def delete_user(self, documento: Any) -> None:
        self._request('DELETE', 'user', key=documento,
                      error_text='Error al eliminar el usuario')

    # =========================================================================
    # VENTAS
    # =========================================================================

    def list_sales(self) -> List[Dict[str, Any]]:
        return self._request_list('sales', 'Error al obtener las ventas')

    def get_sale(self, sale_id: Any) -> Optional[Dict[str, Any]]:
        return self._request('GET', 'sale', key=sale_id,
                             error_text='Error al cargar los datos de la venta')

    def get_sale_details(self, sale_id: Any) -> List[Dict[str, Any]]:
        data = self._request('GET', 'sale_details', key=sale_id,
                             error_text='Error al cargar el detalle de la venta')
        return data if isinstance(data, list) else []

    def create_sale(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """POST /ventas → {id_venta, fecha, total} como mínimo."""
        return self._request('POST', 'sales', payload=payload,
                             error_text='Error al procesar la venta')
