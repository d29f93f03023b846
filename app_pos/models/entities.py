# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio y sabe convertirse
# desde/hacia el formato JSON de la API remota (nombres en español).
# Los montos se manejan como Decimal para que los subtotales sean exactos.
# ==============================================================================

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Iterable, Tuple


ZERO = Decimal('0')


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Convierte un valor del JSON (int, float, str) a Decimal.

    Los float se pasan por str() para no arrastrar errores binarios
    (1000.1 -> Decimal('1000.1') y no Decimal('1000.0999...')).
    Los valores no finitos (NaN, Infinity) se reemplazan por default.
    """
    if isinstance(value, Decimal):
        result = value
    elif value is None or value == '' or isinstance(value, bool):
        return default
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return default
    # NaN / Infinity no son montos
    if not result.is_finite():
        return default
    return result


def decimal_to_json(value: Decimal) -> Any:
    """Decimal -> int si es entero, float en otro caso."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def utc_now_iso() -> str:
    """Timestamp actual en ISO-8601 UTC."""
    return datetime.now(timezone.utc).isoformat()


class EntityKind(str, Enum):
    """Colecciones que mantiene el EntityStore."""
    PRODUCTS = 'products'
    PROVIDERS = 'providers'
    USERS = 'users'
    SALES = 'sales'


# ==============================================================================
# ENTIDADES DE INVENTARIO
# ==============================================================================

@dataclass(frozen=True)
class Product:
    """
    Producto del inventario.

    Attributes:
        id: Identificador del producto (inmutable una vez creado)
        nombre: Nombre visible
        descripcion: Descripción libre
        precio: Precio unitario (Decimal no negativo)
    """
    id: Any
    nombre: str
    descripcion: str = ''
    precio: Decimal = ZERO

    def __post_init__(self):
        object.__setattr__(self, 'precio', to_decimal(self.precio))

    @property
    def key(self) -> Any:
        return self.id

    def to_dict(self) -> Dict[str, Any]:
        """Convierte al formato JSON de la API."""
        return {
            'id_producto': self.id,
            'nombre': self.nombre,
            'descripcion': self.descripcion,
            'precio': decimal_to_json(self.precio),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        """Crea instancia desde la respuesta de la API."""
        return cls(
            id=data.get('id_producto', data.get('id')),
            nombre=data.get('nombre', '') or '',
            descripcion=data.get('descripcion', '') or '',
            precio=to_decimal(data.get('precio')),
        )


@dataclass(frozen=True)
class Provider:
    """
    Proveedor. Cada proveedor referencia exactamente un producto.

    Attributes:
        id: Identificador del proveedor
        nombre: Nombre del proveedor
        id_producto: Producto asociado (clave foránea)
    """
    id: Any
    nombre: str
    id_producto: Any = None

    @property
    def key(self) -> Any:
        return self.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id_proveedor': self.id,
            'nombre_proveedor': self.nombre,
            'id_producto': self.id_producto,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Provider':
        return cls(
            id=data.get('id_proveedor', data.get('id')),
            nombre=data.get('nombre_proveedor', data.get('nombre', '')) or '',
            id_producto=data.get('id_producto'),
        )


# ==============================================================================
# ENTIDADES DE USUARIO
# ==============================================================================

@dataclass(frozen=True)
class User:
    """
    Usuario del sistema.

    La credencial nunca forma parte de la entidad: se envía al crear o
    actualizar y no se vuelve a mostrar ni a guardar en memoria.

    Attributes:
        documento: Número de documento (clave, inmutable)
        email: Correo electrónico (único)
    """
    documento: str
    email: str

    @property
    def key(self) -> str:
        return self.documento

    def to_dict(self) -> Dict[str, Any]:
        return {
            'documento': self.documento,
            'email': self.email,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        # Cualquier campo de contraseña que devuelva la API se descarta
        return cls(
            documento=str(data.get('documento', '')),
            email=data.get('email', '') or '',
        )


# ==============================================================================
# ENTIDADES DE VENTA
# ==============================================================================

@dataclass(frozen=True)
class SaleItem:
    """
    Línea de una venta confirmada.

    El subtotal siempre es cantidad * precio_unitario; no se acepta
    el valor que venga en el JSON.

    Attributes:
        producto_id: ID del producto vendido
        nombre: Nombre del producto al momento de la venta
        cantidad: Cantidad vendida
        precio_unitario: Precio congelado al momento de la venta
    """
    producto_id: Any
    nombre: str
    cantidad: int
    precio_unitario: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'precio_unitario', to_decimal(self.precio_unitario))

    @property
    def subtotal(self) -> Decimal:
        """Subtotal de la línea."""
        return self.precio_unitario * self.cantidad

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id_producto': self.producto_id,
            'nombre': self.nombre,
            'cantidad': self.cantidad,
            'precio_unitario': decimal_to_json(self.precio_unitario),
            'subtotal': decimal_to_json(self.subtotal),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SaleItem':
        producto_id = data.get('id_producto')
        nombre = data.get('nombre_producto') or data.get('nombre') or f'Producto {producto_id}'
        return cls(
            producto_id=producto_id,
            nombre=nombre,
            cantidad=int(data.get('cantidad', 0) or 0),
            precio_unitario=to_decimal(data.get('precio_unitario')),
        )


@dataclass(frozen=True)
class Sale:
    """
    Venta persistida. Inmutable una vez creada.

    Attributes:
        id: ID asignado por la API
        fecha: Timestamp ISO-8601
        total: Total congelado al momento de la venta
        items: Líneas de la venta (snapshots, no referencias vivas)
    """
    id: Any
    fecha: str
    total: Decimal
    items: Tuple[SaleItem, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'total', to_decimal(self.total))
        object.__setattr__(self, 'items', tuple(self.items))

    @property
    def key(self) -> Any:
        return self.id

    @property
    def items_total(self) -> Decimal:
        """Suma de subtotales de las líneas."""
        return sum((item.subtotal for item in self.items), ZERO)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id_venta': self.id,
            'fecha': self.fecha,
            'total': decimal_to_json(self.total),
            'detalles': [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sale':
        """
        Crea instancia desde la API.

        Los detalles pueden venir como 'detalles_venta' (listado),
        'detalles' o 'productos'.
        """
        raw_items = (
            data.get('detalles_venta')
            or data.get('detalles')
            or data.get('productos')
            or []
        )
        items = tuple(SaleItem.from_dict(d) for d in raw_items)
        return cls(
            id=data.get('id_venta', data.get('id')),
            fecha=str(data.get('fecha', '') or ''),
            total=to_decimal(data.get('total')),
            items=items,
        )

    def with_items(self, items: Iterable[SaleItem]) -> 'Sale':
        """Copia de la venta con otras líneas (detalle cargado aparte)."""
        return replace(self, items=tuple(items))


# ==============================================================================
# ENTIDADES DE CARRITO
# ==============================================================================

@dataclass
class CartItem:
    """
    Ítem en el carrito de compras.

    precio_unitario y nombre son snapshots tomados al agregar el
    producto por primera vez; no se refrescan si el producto cambia.

    Attributes:
        producto_id: ID del producto (único dentro del carrito)
        nombre: Nombre del producto
        cantidad: Cantidad en carrito (>= 1)
        precio_unitario: Precio unitario
    """
    producto_id: Any
    nombre: str
    cantidad: int
    precio_unitario: Decimal

    @property
    def subtotal(self) -> Decimal:
        """Subtotal de este ítem."""
        return self.precio_unitario * self.cantidad

    def to_sale_item(self) -> SaleItem:
        return SaleItem(
            producto_id=self.producto_id,
            nombre=self.nombre,
            cantidad=self.cantidad,
            precio_unitario=self.precio_unitario,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario para las vistas."""
        return {
            'producto_id': self.producto_id,
            'nombre': self.nombre,
            'cantidad': self.cantidad,
            'precio_unitario': decimal_to_json(self.precio_unitario),
            'subtotal': decimal_to_json(self.subtotal),
        }
