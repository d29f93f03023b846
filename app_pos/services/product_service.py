# ==============================================================================
# SERVICIO DE PRODUCTOS
# ==============================================================================
# Carga, alta, edición y baja de productos contra la API.
# El store solo se modifica con la respuesta confirmada del servidor.
# ==============================================================================

from typing import Any, Dict, List

from app_pos.models import EntityKind, Product
from app_pos.services.sync import EntitySyncService
from app_pos.services.validation import validate_product


class ProductService(EntitySyncService[Product]):
    """
    Servicio para gestión de productos.

    Responsabilidades:
    - Cargar el catálogo (GET /productos)
    - Crear productos (POST, la API devuelve el registro creado)
    - Editar y eliminar productos
    """

    kind = EntityKind.PRODUCTS
    key_field = 'id_producto'

    def _fetch_all(self) -> List[Dict[str, Any]]:
        return self.gateway.list_products()

    def _parse(self, data: Dict[str, Any]) -> Product:
        return Product.from_dict(data)

    def create(self, nombre: Any, precio: Any, descripcion: Any = '') -> Product:
        """
        Crea un producto.

        Args:
            nombre: Nombre del producto (requerido)
            precio: Precio unitario (> 0)
            descripcion: Descripción opcional

        Returns:
            Producto tal como lo devolvió la API

        Raises:
            ValidationError: Datos inválidos (no se llama a la API)
            GatewayError: La API rechazó la creación
        """
        data = validate_product(nombre, precio, descripcion)
        response = self.gateway.create_product(data)
        return self._store(self._reconcile(response, data))

    def update(self, product_id: Any, nombre: Any, precio: Any, descripcion: Any = '') -> Product:
        """Edita un producto existente (el ID no cambia)."""
        data = validate_product(nombre, precio, descripcion)
        response = self.gateway.update_product(product_id, data)
        return self._store(self._reconcile(response, data, key=product_id))

    def delete(self, product_id: Any) -> None:
        """
        Elimina un producto.

        Las ventas existentes no se tocan: guardan snapshots, no
        referencias al producto.
        """
        self.gateway.delete_product(product_id)
        self._remove(product_id)
