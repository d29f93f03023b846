# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Lectura de ventas: listado, detalle y estadísticas.
# Las ventas se CREAN solo en SaleCommitter y nunca se editan aquí.
# ==============================================================================

import logging
from decimal import Decimal
from typing import Any, Dict, List

from app_pos.errors import GatewayError, NotFoundError
from app_pos.models import ZERO, EntityKind, Sale, SaleItem, decimal_to_json
from app_pos.services.sync import EntitySyncService

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


class SalesService(EntitySyncService[Sale]):
    """
    Servicio de consulta de ventas.

    Responsabilidades:
    - Cargar el historial (GET /ventas con detalles embebidos)
    - Obtener el detalle de una venta
    - Estadísticas para el panel de ventas
    """

    kind = EntityKind.SALES
    key_field = 'id_venta'

    def _fetch_all(self) -> List[Dict[str, Any]]:
        return self.gateway.list_sales()

    def _parse(self, data: Dict[str, Any]) -> Sale:
        return Sale.from_dict(data)

    def get_detail(self, sale_id: Any) -> Sale:
        """
        Obtiene una venta con sus líneas.

        Pide la venta y su detalle. Si falla la venta se propaga el
        error; si solo falla el detalle, se usan las líneas que traiga
        la venta (posiblemente ninguna). No modifica el store.

        Raises:
            NotFoundError: La venta no existe
            GatewayError: Fallo al obtener la venta
        """
        data = self.gateway.get_sale(sale_id)
        if not isinstance(data, dict):
            raise GatewayError('Error al cargar los datos de la venta')
        sale = Sale.from_dict(data)
        if sale.id is None:
            sale = Sale.from_dict(dict(data, id_venta=sale_id))

        try:
            details = self.gateway.get_sale_details(sale_id)
        except (GatewayError, NotFoundError) as e:
            logger.warning("Detalle de venta %r no disponible: %s", sale_id, e)
            return sale
        return sale.with_items([SaleItem.from_dict(d) for d in details])

    def statistics(self) -> Dict[str, Any]:
        """
        Estadísticas sobre las ventas cargadas en el store.

        Returns:
            Dict con cantidad, total, promedio y maximo
        """
        sales = self.collection.list()
        totals = [s.total for s in sales]
        total = sum(totals, ZERO)
        promedio = total / len(totals) if totals else ZERO
        return {
            'cantidad': len(sales),
            'total': decimal_to_json(total),
            'promedio': decimal_to_json(promedio.quantize(CENTS)),
            'maximo': decimal_to_json(max(totals) if totals else ZERO),
        }
