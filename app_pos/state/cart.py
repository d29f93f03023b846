# ==============================================================================
# CARRITO
# ==============================================================================
# Líneas de carrito ordenadas, una por producto. Los totales se calculan
# en cada lectura. Los mutadores son síncronos y no tocan ni la red ni
# el EntityStore.
# ==============================================================================

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app_pos.errors import ValidationError
from app_pos.models import ZERO, CartItem, Product, decimal_to_json
from app_pos.state.observable import Observable

logger = logging.getLogger(__name__)


class Cart(Observable):
    """
    Carrito de compras.

    Responsabilidades:
    - Agregar/eliminar líneas
    - Mantener cantidad >= 1 (una cantidad menor elimina la línea)
    - Calcular totales (nunca cacheados)
    - Vaciar el carrito

    El precio y el nombre de cada línea son snapshots del momento en
    que el producto se agregó por primera vez. Volver a agregarlo suma
    cantidad pero no refresca el precio.

    Los observadores reciben la lista de ítems después de cada cambio.
    """

    def __init__(self):
        super().__init__()
        self._lines: Dict[Any, CartItem] = {}

    # =========================================================================
    # MUTADORES
    # =========================================================================

    def add_item(self, product: Product, cantidad: int = 1) -> CartItem:
        """
        Agrega un producto al carrito.

        Args:
            product: Producto a agregar
            cantidad: Cantidad a sumar (>= 1)

        Returns:
            Copia de la línea resultante

        Raises:
            ValidationError: Si la cantidad es menor a 1
        """
        if cantidad is None or cantidad < 1:
            raise ValidationError({'cantidad': 'La cantidad debe ser mayor a 0'})

        with self._lock:
            existing = self._lines.get(product.id)
            if existing:
                existing.cantidad += cantidad
                line = existing
            else:
                line = CartItem(
                    producto_id=product.id,
                    nombre=product.nombre,
                    cantidad=cantidad,
                    precio_unitario=product.precio,
                )
                self._lines[product.id] = line
            logger.debug("Carrito: +%d de %r (ahora %d)", cantidad, product.id, line.cantidad)
            self._changed()
            return replace(line)

    def set_quantity(self, producto_id: Any, nueva_cantidad: int) -> None:
        """
        Fija la cantidad exacta de una línea.

        Una cantidad menor a 1 elimina la línea. Si la línea no existe
        no hace nada.
        """
        if nueva_cantidad < 1:
            self.remove_item(producto_id)
            return

        with self._lock:
            line = self._lines.get(producto_id)
            if line is None or line.cantidad == nueva_cantidad:
                return
            line.cantidad = nueva_cantidad
            self._changed()

    def remove_item(self, producto_id: Any) -> None:
        """Elimina la línea si existe."""
        with self._lock:
            if self._lines.pop(producto_id, None) is not None:
                self._changed()

    def clear(self) -> None:
        """Vacía el carrito completamente."""
        with self._lock:
            if not self._lines:
                return
            self._lines = {}
            self._changed()

    def _changed(self) -> None:
        self._notify(self.items())

    # =========================================================================
    # LECTURA
    # =========================================================================

    def items(self) -> List[CartItem]:
        """Copias de las líneas en orden de inserción."""
        with self._lock:
            return [replace(line) for line in self._lines.values()]

    def get_item(self, producto_id: Any) -> Optional[CartItem]:
        with self._lock:
            line = self._lines.get(producto_id)
            return replace(line) if line else None

    def total(self) -> Decimal:
        """Σ(cantidad × precio_unitario) sobre las líneas actuales."""
        with self._lock:
            return sum((line.subtotal for line in self._lines.values()), ZERO)

    def item_count(self) -> int:
        """Σ(cantidad); distinto de la cantidad de líneas."""
        with self._lock:
            return sum(line.cantidad for line in self._lines.values())

    def line_count(self) -> int:
        with self._lock:
            return len(self._lines)

    def is_empty(self) -> bool:
        return self.line_count() == 0

    def summary(self) -> Dict[str, Any]:
        """
        Obtiene el carrito con totales calculados.

        Returns:
            Dict con items, total_items, total_monto, items_count
        """
        with self._lock:
            return {
                'items': [line.to_dict() for line in self._lines.values()],
                'total_items': self.item_count(),
                'total_monto': decimal_to_json(self.total()),
                'items_count': len(self._lines),
            }
