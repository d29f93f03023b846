# ==============================================================================
# VALIDACIONES LOCALES DE FORMULARIO
# ==============================================================================
# Reglas de campo que se verifican ANTES de llamar a la API.
# Cada función devuelve los datos normalizados listos para enviar, o
# lanza ValidationError con {campo: mensaje}. Un ValidationError nunca
# genera una llamada de red.
# ==============================================================================

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from app_pos.errors import ValidationError

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
DOCUMENT_RE = re.compile(r'^\d+$')

MIN_DOCUMENT_LENGTH = 7
MIN_PASSWORD_LENGTH = 6


def _text(value: Any) -> str:
    return '' if value is None else str(value).strip()


def _parse_price(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        price = Decimal(_text(value))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite():
        return None
    return price


def validate_product(nombre: Any, precio: Any, descripcion: Any = '') -> Dict[str, Any]:
    """
    Valida los datos de un producto.

    Returns:
        {'nombre', 'descripcion', 'precio'} normalizados (precio como Decimal)
    """
    errors = {}
    nombre = _text(nombre)
    if not nombre:
        errors['nombre'] = 'El nombre es requerido'

    price = None
    if _text(precio) == '':
        errors['precio'] = 'El precio es requerido'
    else:
        price = _parse_price(precio)
        if price is None or price <= 0:
            errors['precio'] = 'El precio debe ser un número mayor a 0'

    if errors:
        raise ValidationError(errors)
    return {
        'nombre': nombre,
        'descripcion': _text(descripcion),
        'precio': price,
    }


def validate_provider(nombre: Any, id_producto: Any) -> Dict[str, Any]:
    """Valida un proveedor: nombre y producto asociado son obligatorios."""
    errors = {}
    nombre = _text(nombre)
    if not nombre:
        errors['nombre_proveedor'] = 'El nombre del proveedor es requerido'
    if id_producto is None or _text(id_producto) == '':
        errors['id_producto'] = 'Debe seleccionar un producto'

    if errors:
        raise ValidationError(errors)
    return {
        'nombre_proveedor': nombre,
        'id_producto': id_producto,
    }


def validate_user(
    documento: Any,
    email: Any,
    contrasena: Any = None,
    is_new: bool = True
) -> Dict[str, Any]:
    """
    Valida los datos de un usuario.

    Args:
        documento: Solo dígitos, al menos 7
        email: Formato usuario@dominio.tld
        contrasena: Requerida al crear; si se envía, mínimo 6 caracteres
        is_new: True al crear, False al editar

    Returns:
        {'documento', 'email'} y 'contraseña' solo si se proporcionó
    """
    errors = {}
    documento = _text(documento)
    if not documento:
        errors['documento'] = 'El documento es requerido'
    elif not DOCUMENT_RE.match(documento) or len(documento) < MIN_DOCUMENT_LENGTH:
        errors['documento'] = (
            f'El documento debe ser un número válido de al menos {MIN_DOCUMENT_LENGTH} dígitos'
        )

    email = _text(email).lower()
    if not email:
        errors['email'] = 'El email es requerido'
    elif not EMAIL_RE.match(email):
        errors['email'] = 'El email no tiene un formato válido'

    password = '' if contrasena is None else str(contrasena)
    if is_new and not password:
        errors['contraseña'] = 'La contraseña es requerida'
    elif password and len(password) < MIN_PASSWORD_LENGTH:
        errors['contraseña'] = (
            f'La contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres'
        )

    if errors:
        raise ValidationError(errors)

    data = {'documento': documento, 'email': email}
    if password:
        data['contraseña'] = password
    return data


def validate_registration(
    documento: Any,
    email: Any,
    contrasena: Any,
    confirmacion: Any
) -> Dict[str, Any]:
    """Validación del formulario de registro (incluye confirmación)."""
    if not _text(documento) or not _text(email) or not contrasena:
        raise ValidationError({'form': 'Por favor, completa todos los campos'})
    if contrasena != confirmacion:
        raise ValidationError({'confirmacion': 'Las contraseñas no coinciden'})
    return validate_user(documento, email, contrasena, is_new=True)
