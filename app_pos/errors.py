# ==============================================================================
# ERRORES DEL DOMINIO
# ==============================================================================
# Todas las excepciones que el núcleo puede lanzar hacia las vistas.
# ValidationError se resuelve en la capa de formularios y nunca llega
# al gateway; el resto se propaga al llamador como resultado fallido.
# ==============================================================================

from typing import Any, Dict, Optional


class PosError(Exception):
    """Excepción base del núcleo de punto de venta."""

    def __init__(self, message: str = ''):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(PosError):
    """
    Error de validación local (campos requeridos, rangos, formatos).

    Attributes:
        errors: Diccionario {campo: mensaje} para mostrar en el formulario
    """

    def __init__(self, errors: Dict[str, str], message: str = ''):
        self.errors = dict(errors)
        super().__init__(message or '; '.join(self.errors.values()))


class NotFoundError(PosError):
    """La entidad buscada por clave no existe."""

    def __init__(self, message: str = '', status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ConflictError(PosError):
    """Clave o campo único duplicado (documento, email, etc.)."""

    def __init__(
        self,
        message: str = '',
        field: Optional[str] = None,
        status: Optional[int] = None
    ):
        super().__init__(message)
        self.field = field
        self.status = status


class EmptyCartError(PosError):
    """Se intentó confirmar una venta con el carrito vacío."""

    def __init__(self, message: str = 'El carrito está vacío'):
        super().__init__(message)


class GatewayError(PosError):
    """
    Fallo genérico de un endpoint de la API remota.

    Attributes:
        status: Código HTTP (None si fue un fallo de red)
        payload: Cuerpo de error decodificado, si lo hubo
    """

    def __init__(
        self,
        message: str = '',
        status: Optional[int] = None,
        payload: Optional[Any] = None
    ):
        super().__init__(message)
        self.status = status
        self.payload = payload


class SaleSubmissionError(GatewayError):
    """Cualquier fallo del gateway durante la creación de una venta."""
    pass


class TransportError(PosError):
    """Fallo de red o timeout antes de obtener una respuesta HTTP."""
    pass
