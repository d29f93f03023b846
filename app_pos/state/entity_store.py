# ==============================================================================
# ENTITY STORE - Espejo en memoria de las entidades del servidor
# ==============================================================================
# Cuatro colecciones (productos, proveedores, usuarios, ventas) indexadas
# por su clave natural. CRUD puro sobre memoria: ninguna operación de
# este módulo hace llamadas de red. Los servicios de sincronización
# llaman a la API y luego a estos mutadores con la respuesta del servidor.
# ==============================================================================

import logging
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, TypeVar

from app_pos.errors import NotFoundError
from app_pos.models import EntityKind, Product, Provider, Sale, User
from app_pos.state.observable import Observable

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _default_key(entity: Any) -> Any:
    return entity.key


class EntityCollection(Observable, Generic[T]):
    """
    Colección de entidades de un solo tipo, indexada por clave.

    - list() devuelve un snapshot ordenado (orden de inserción; un
      reemplazo conserva la posición original)
    - upsert_one() es idempotente
    - remove_one() sobre una clave ausente no hace nada
    - replace_all() hidrata la colección completa después de un fetch

    Los observadores reciben (kind, snapshot) después de cada
    mutación que cambió el contenido.
    """

    def __init__(
        self,
        kind: EntityKind,
        key_func: Callable[[T], Any] = _default_key
    ):
        """
        Inicializa una colección vacía.

        Args:
            kind: Tipo de entidad que guarda
            key_func: Función que extrae la clave natural de una entidad
        """
        super().__init__()
        self.kind = kind
        self._key_func = key_func
        self._items: Dict[Any, T] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: Any) -> bool:
        return key in self._items

    # =========================================================================
    # LECTURA
    # =========================================================================

    def list(self) -> List[T]:
        """Snapshot ordenado de la colección."""
        with self._lock:
            return list(self._items.values())

    def get(self, key: Any) -> Optional[T]:
        """Entidad con esa clave o None."""
        with self._lock:
            return self._items.get(key)

    def require(self, key: Any) -> T:
        """
        Entidad con esa clave.

        Raises:
            NotFoundError: Si la clave no está en la colección
        """
        entity = self.get(key)
        if entity is None:
            raise NotFoundError(f"No existe {self.kind.value} con clave {key!r}")
        return entity

    def keys(self) -> List[Any]:
        with self._lock:
            return list(self._items.keys())

    # =========================================================================
    # MUTADORES
    # =========================================================================

    def upsert_one(self, entity: T) -> None:
        """
        Inserta si la clave no existe, reemplaza si existe.

        Aplicar el mismo valor dos veces deja la colección igual y la
        segunda llamada no notifica a los observadores.
        """
        key = self._key_func(entity)
        if key is None:
            raise ValueError(f"{self.kind.value}: la entidad no tiene clave")
        with self._lock:
            if self._items.get(key) == entity:
                return
            self._items[key] = entity
            logger.debug("%s: upsert %r", self.kind.value, key)
            self._notify(self.kind, list(self._items.values()))

    def remove_one(self, key: Any) -> None:
        """Elimina la entidad si existe; clave ausente = no-op."""
        with self._lock:
            if key not in self._items:
                return
            del self._items[key]
            logger.debug("%s: remove %r", self.kind.value, key)
            self._notify(self.kind, list(self._items.values()))

    def replace_all(self, entities: Iterable[T]) -> None:
        """
        Reemplaza la colección completa.

        Si la entrada trae claves repetidas gana la última ocurrencia
        (manteniendo la posición de la primera).
        """
        items: Dict[Any, T] = {}
        for entity in entities:
            key = self._key_func(entity)
            if key is None:
                raise ValueError(f"{self.kind.value}: la entidad no tiene clave")
            items[key] = entity
        with self._lock:
            self._items = items
            logger.debug("%s: replace_all (%d)", self.kind.value, len(items))
            self._notify(self.kind, list(self._items.values()))

    def clear(self) -> None:
        """Deja la colección vacía (siempre notifica)."""
        self.replace_all([])


class EntityStore:
    """
    Contenedor de estado con las cuatro colecciones del sistema.

    Se construye una sola vez al iniciar el proceso y se pasa por
    referencia a todos los consumidores (ver AppContainer).

    Uso:
        store = EntityStore()
        store.products.upsert_one(producto)
        unsubscribe = store.subscribe(lambda kind, snapshot: ...)
    """

    def __init__(self):
        self.products: EntityCollection[Product] = EntityCollection(EntityKind.PRODUCTS)
        self.providers: EntityCollection[Provider] = EntityCollection(EntityKind.PROVIDERS)
        self.users: EntityCollection[User] = EntityCollection(EntityKind.USERS)
        self.sales: EntityCollection[Sale] = EntityCollection(EntityKind.SALES)

        self._collections: Dict[EntityKind, EntityCollection] = {
            EntityKind.PRODUCTS: self.products,
            EntityKind.PROVIDERS: self.providers,
            EntityKind.USERS: self.users,
            EntityKind.SALES: self.sales,
        }

    def collection(self, kind: Any) -> EntityCollection:
        """Colección por tipo (acepta EntityKind o su valor en texto)."""
        return self._collections[EntityKind(kind)]

    def subscribe(self, callback: Callable[[EntityKind, List[Any]], Any]) -> Callable[[], None]:
        """
        Suscribe un observador a las cuatro colecciones.

        Returns:
            Función que cancela todas las suscripciones
        """
        unsubscribers = [c.subscribe(callback) for c in self._collections.values()]

        def unsubscribe() -> None:
            for unsub in unsubscribers:
                unsub()

        return unsubscribe

    def snapshot(self) -> Dict[str, List[Any]]:
        """Snapshot de todas las colecciones {kind: [entidades]}."""
        return {kind.value: c.list() for kind, c in self._collections.items()}
