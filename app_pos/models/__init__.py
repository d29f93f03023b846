# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses, con conversión al formato JSON
# de la API remota. No conocen el store, el carrito ni la red.
# ==============================================================================

from .entities import (
    # Inventario
    Product,
    Provider,

    # Usuarios
    User,

    # Ventas
    Sale,
    SaleItem,

    # Carrito
    CartItem,

    # Colecciones y helpers
    EntityKind,
    ZERO,
    to_decimal,
    decimal_to_json,
    utc_now_iso,
)

__all__ = [
    'Product',
    'Provider',
    'User',
    'Sale',
    'SaleItem',
    'CartItem',
    'EntityKind',
    'ZERO',
    'to_decimal',
    'decimal_to_json',
    'utc_now_iso',
]
