# ==============================================================================
# SERVICIO DE PROVEEDORES
# ==============================================================================
# La API de proveedores no devuelve el registro completo:
#   POST → {id}
#   PUT  → cuerpo vacío o parcial
# El registro local se reconstruye con los datos enviados + el ID.
# ==============================================================================

from typing import Any, Dict, List

from app_pos.models import EntityKind, Provider
from app_pos.services.sync import EntitySyncService
from app_pos.services.validation import validate_provider


class ProviderService(EntitySyncService[Provider]):
    """Servicio para gestión de proveedores."""

    kind = EntityKind.PROVIDERS
    key_field = 'id_proveedor'

    def _fetch_all(self) -> List[Dict[str, Any]]:
        return self.gateway.list_providers()

    def _parse(self, data: Dict[str, Any]) -> Provider:
        return Provider.from_dict(data)

    def create(self, nombre: Any, id_producto: Any) -> Provider:
        """
        Crea un proveedor asociado a un producto.

        Raises:
            ValidationError: Falta el nombre o el producto
            GatewayError: La API rechazó la creación o no devolvió el ID
        """
        data = validate_provider(nombre, id_producto)
        response = self.gateway.create_provider(data)
        return self._store(self._reconcile(response, data))

    def update(self, provider_id: Any, nombre: Any, id_producto: Any) -> Provider:
        data = validate_provider(nombre, id_producto)
        response = self.gateway.update_provider(provider_id, data)
        return self._store(self._reconcile(response, data, key=provider_id))

    def delete(self, provider_id: Any) -> None:
        self.gateway.delete_provider(provider_id)
        self._remove(provider_id)
