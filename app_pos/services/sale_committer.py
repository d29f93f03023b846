# ==============================================================================
# CONFIRMACIÓN DE VENTAS - Carrito → Venta persistida
# ==============================================================================
# Esta es la ÚNICA función que crea ventas. Secuencia:
#
#   1. Carrito vacío → EmptyCartError (sin llamada de red)
#   2. Snapshot síncrono de las líneas + payload
#   3. POST a la API
#   4. Fallo → SaleSubmissionError; carrito y store intactos (reintentable)
#   5. Éxito → store.sales.upsert_one(venta) y DESPUÉS cart.clear()
#
# Si upsert_one falla, clear() no se ejecuta.
# Lo que se agregue al carrito mientras la API responde no entra en
# esta venta, pero sí se descarta con el clear() final.
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

from app_pos.errors import EmptyCartError, PosError, SaleSubmissionError
from app_pos.gateway import RemoteGateway
from app_pos.models import ZERO, CartItem, Sale, decimal_to_json, to_decimal, utc_now_iso
from app_pos.profiling import profile_function
from app_pos.state import Cart, EntityStore

logger = logging.getLogger(__name__)


class SaleCommitter:
    """
    Orquesta la transición Carrito → Venta.

    Uso:
        committer = SaleCommitter(gateway, store, cart)
        venta = committer.commit()
    """

    def __init__(self, gateway: RemoteGateway, store: EntityStore, cart: Cart):
        """
        Args:
            gateway: Cliente de la API remota
            store: Contenedor de estado (recibe la venta nueva)
            cart: Carrito a confirmar
        """
        self.gateway = gateway
        self.store = store
        self.cart = cart

    # =========================================================================
    # PAYLOAD
    # =========================================================================

    def _snapshot(self) -> List[CartItem]:
        lines = self.cart.items()
        if not lines:
            raise EmptyCartError('El carrito está vacío. Agrega productos antes de procesar la venta.')
        return lines

    @staticmethod
    def _payload(lines: List[CartItem], fecha: str) -> Dict[str, Any]:
        total = sum((line.subtotal for line in lines), ZERO)
        return {
            'fecha': fecha,
            'total': decimal_to_json(total),
            'detalles': [
                {
                    'id_producto': line.producto_id,
                    'cantidad': line.cantidad,
                    'precio_unitario': decimal_to_json(line.precio_unitario),
                    'subtotal': decimal_to_json(line.subtotal),
                }
                for line in lines
            ],
        }

    def build_payload(self, fecha: Optional[str] = None) -> Dict[str, Any]:
        """
        Payload de la venta para el carrito actual, sin enviarlo.

        Raises:
            EmptyCartError: Si el carrito no tiene líneas
        """
        return self._payload(self._snapshot(), fecha or utc_now_iso())

    # =========================================================================
    # CONFIRMACIÓN
    # =========================================================================

    @profile_function(name='Confirmar venta')
    def commit(self, fecha: Optional[str] = None) -> Sale:
        """
        Confirma el carrito como venta.

        Args:
            fecha: Timestamp ISO-8601 (por defecto, ahora en UTC)

        Returns:
            La venta registrada en el store

        Raises:
            EmptyCartError: Carrito vacío (no se llamó a la API)
            SaleSubmissionError: La API rechazó la venta o no respondió;
                el carrito queda exactamente igual
        """
        lines = self._snapshot()
        payload = self._payload(lines, fecha or utc_now_iso())
        total = sum((line.subtotal for line in lines), ZERO)

        try:
            response = self.gateway.create_sale(payload)
        except PosError as e:
            logger.warning("Venta rechazada (%d líneas, total %s): %s", len(lines), total, e)
            raise SaleSubmissionError(
                e.message or 'Error al procesar la venta',
                status=getattr(e, 'status', None),
                payload=getattr(e, 'payload', None),
            ) from e

        sale = self._build_sale(response, lines, payload['fecha'], total)

        # Orden obligatorio: registrar la venta y recién entonces vaciar
        self.store.sales.upsert_one(sale)
        self.cart.clear()

        logger.info("Venta #%s registrada: %d líneas, total %s", sale.id, len(sale.items), sale.total)
        return sale

    def _build_sale(self, response: Any, lines: List[CartItem], fecha: str, total) -> Sale:
        if not isinstance(response, dict):
            raise SaleSubmissionError('Error al procesar la venta: respuesta sin datos')
        sale_id = response.get('id_venta', response.get('id'))
        if sale_id is None:
            raise SaleSubmissionError('Error al procesar la venta: la respuesta no incluye el ID')

        remote_total = response.get('total')
        if remote_total is not None and to_decimal(remote_total, default=None) != total:
            logger.warning(
                "Venta #%s: total del servidor %s difiere del carrito %s; se conserva el del carrito",
                sale_id, remote_total, total,
            )

        return Sale(
            id=sale_id,
            fecha=str(response.get('fecha') or fecha),
            total=total,
            items=[line.to_sale_item() for line in lines],
        )
