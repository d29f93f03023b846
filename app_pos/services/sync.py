# ==============================================================================
# SINCRONIZACIÓN DE ENTIDADES - Patrón común
# ==============================================================================
# Productos, proveedores, usuarios y ventas comparten la misma máquina
# de estados de carga:
#
#   IDLE → LOADING → READY    (fetch exitoso: replace_all)
#   IDLE → LOADING → FAILED   (fetch fallido: colección vacía + error)
#
# Crear/editar/eliminar: validar → API → mutador del store con la
# respuesta del servidor. Si la API falla el store no se toca.
# Nada se aplica de forma optimista.
# ==============================================================================

import logging
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from app_pos.errors import GatewayError, PosError
from app_pos.gateway import RemoteGateway
from app_pos.models import EntityKind
from app_pos.state import EntityCollection, EntityStore

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SyncState(str, Enum):
    """Estado de carga de una colección."""
    IDLE = 'idle'
    LOADING = 'loading'
    READY = 'ready'
    FAILED = 'failed'


class EntitySyncService(Generic[T]):
    """
    Base de los servicios de sincronización.

    Las subclases definen:
        kind: Colección del store que sincronizan
        key_field: Nombre del campo clave en el JSON de la API
        _fetch_all(): Llamada de listado al gateway
        _parse(data): dict de la API → entidad
    """

    kind: EntityKind
    key_field: str = 'id'

    def __init__(self, gateway: RemoteGateway, store: EntityStore):
        """
        Args:
            gateway: Cliente de la API remota
            store: Contenedor de estado compartido
        """
        self.gateway = gateway
        self.store = store
        self.state = SyncState.IDLE
        self.last_error: Optional[PosError] = None

    @property
    def collection(self) -> EntityCollection:
        return self.store.collection(self.kind)

    def _fetch_all(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def _parse(self, data: Dict[str, Any]) -> T:
        raise NotImplementedError

    # =========================================================================
    # CARGA
    # =========================================================================

    def load(self) -> List[T]:
        """
        Trae la colección completa de la API y la vuelca en el store.

        Idempotente; se puede llamar de nuevo para refrescar. No hay
        reintento automático.

        Returns:
            Snapshot de la colección cargada

        Raises:
            GatewayError: Si el fetch falló (la colección queda vacía)
        """
        self.state = SyncState.LOADING
        self.last_error = None
        try:
            raw = self._fetch_all()
            entities = [self._parse(item) for item in raw]
            # Un registro sin clave hace fallar replace_all sin tocar la colección
            self.collection.replace_all(entities)
        except (PosError, ValueError, TypeError, AttributeError) as e:
            error = e if isinstance(e, GatewayError) else GatewayError(
                f"Error al cargar {self.kind.value}: {e}"
            )
            self.collection.clear()
            self.state = SyncState.FAILED
            self.last_error = error
            logger.error("Carga de %s fallida: %s", self.kind.value, error)
            if error is e:
                raise
            raise error from e

        self.state = SyncState.READY
        logger.info("%s cargados: %d", self.kind.value, len(entities))
        return self.collection.list()

    # =========================================================================
    # RECONCILIACIÓN
    # =========================================================================

    def _reconcile(
        self,
        response: Any,
        local: Dict[str, Any],
        key: Any = None
    ) -> T:
        """
        Construye la entidad canónica después de un create/update.

        - Si la API devolvió el registro (trae key_field), sus valores
          mandan sobre los locales
        - Si solo devolvió {id}, se usan los datos locales + ese id
        - Si no devolvió nada, datos locales + la clave conocida

        Args:
            response: JSON devuelto por la API (puede ser None)
            local: Datos enviados
            key: Clave existente (updates). Las claves son inmutables:
                 si se pasa, gana sobre lo que diga la respuesta.

        Raises:
            GatewayError: Si no hay forma de saber la clave
        """
        record = dict(local)
        if isinstance(response, dict):
            if self.key_field in response:
                record.update(response)
            elif response.get('id') is not None:
                record[self.key_field] = response['id']
        if key is not None:
            record[self.key_field] = key
        if record.get(self.key_field) is None:
            raise GatewayError(
                f"La respuesta del servidor no incluye el identificador ({self.key_field})"
            )
        return self._parse(record)

    def _remove(self, key: Any) -> None:
        self.collection.remove_one(key)
        logger.info("%s: eliminado %r", self.kind.value, key)

    def _store(self, entity: T) -> T:
        self.collection.upsert_one(entity)
        logger.info("%s: guardado %r", self.kind.value, entity.key)
        return entity
