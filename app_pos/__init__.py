# ==============================================================================
# APP POS - Núcleo de estado del cliente de punto de venta
# ==============================================================================
# Productos, proveedores, usuarios, ventas y carrito sincronizados contra
# la API remota. Punto de entrada: AppContainer.
# ==============================================================================

__version__ = '1.0.0'
