# ==============================================================================
# CAPA DE ESTADO - Modelo único en memoria
# ==============================================================================
# ├── observable.py    → Suscripción y notificación ordenada
# ├── entity_store.py  → Productos, proveedores, usuarios y ventas
# └── cart.py          → Carrito de compras
#
# Nada en esta capa hace llamadas de red.
# ==============================================================================

from .observable import Observable
from .entity_store import EntityCollection, EntityStore
from .cart import Cart

__all__ = [
    'Observable',
    'EntityCollection',
    'EntityStore',
    'Cart',
]
