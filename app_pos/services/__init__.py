# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# PRINCIPIOS:
# 1. Los servicios orquestan llamadas al gateway y mutaciones del store
# 2. Validan localmente antes de cualquier llamada de red
# 3. Las vistas solo llaman a servicios, al store y al carrito
# 4. El store solo cambia con respuestas confirmadas por el servidor
#
# ESTRUCTURA:
# ├── validation.py        → Reglas de formulario (ValidationError)
# ├── sync.py              → Máquina de estados de carga común
# ├── product_service.py   → Productos
# ├── provider_service.py  → Proveedores
# ├── user_service.py      → Usuarios y registro
# ├── sales_service.py     → Historial, detalle y estadísticas de ventas
# └── sale_committer.py    → Carrito → Venta (única creación de ventas)
# ==============================================================================

from app_pos.services.sync import EntitySyncService, SyncState
from app_pos.services.product_service import ProductService
from app_pos.services.provider_service import ProviderService
from app_pos.services.user_service import UserService
from app_pos.services.sales_service import SalesService
from app_pos.services.sale_committer import SaleCommitter

__all__ = [
    'EntitySyncService',
    'SyncState',
    'ProductService',
    'ProviderService',
    'UserService',
    'SalesService',
    'SaleCommitter',
]
