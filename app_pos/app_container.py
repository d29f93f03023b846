# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único donde se construyen el gateway, el estado compartido
# (EntityStore + Cart) y los servicios. Se crea UNA vez al iniciar el
# proceso y se pasa por referencia a las vistas: no hay singleton ni
# instancia global escondida.
#
# Testing: pasar un transporte propio (o un gateway falso) al construir.
# ==============================================================================

from typing import Optional

from app_pos import profiling
from app_pos.config import Settings, configure_logging
from app_pos.gateway import RemoteGateway, Transport, UrllibTransport
from app_pos.services import (
    ProductService,
    ProviderService,
    SaleCommitter,
    SalesService,
    UserService,
)
from app_pos.state import Cart, EntityStore


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Uso:
        container = AppContainer.from_env()
        container.product_service.load()
        container.cart.add_item(producto)
        venta = container.sale_committer.commit()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None,
        gateway: Optional[RemoteGateway] = None
    ):
        """
        Inicializa el contenedor.

        Args:
            settings: Configuración (por defecto, Settings.from_env())
            transport: Transporte HTTP a usar en lugar de UrllibTransport
            gateway: Gateway ya construido (tiene prioridad sobre transport)
        """
        self.settings = settings or Settings.from_env()
        profiling.configure_profiling(self.settings)

        self._transport = transport
        self._gateway = gateway

        # Inicializar (lazy loading)
        self._store: Optional[EntityStore] = None
        self._cart: Optional[Cart] = None
        self._product_service: Optional[ProductService] = None
        self._provider_service: Optional[ProviderService] = None
        self._user_service: Optional[UserService] = None
        self._sales_service: Optional[SalesService] = None
        self._sale_committer: Optional[SaleCommitter] = None

    @classmethod
    def from_env(cls, environ=None, transport: Optional[Transport] = None) -> 'AppContainer':
        """
        Punto de arranque del proceso: lee POS_*, configura el logging
        y construye el contenedor.

        Args:
            environ: Mapeo a usar en lugar de os.environ
            transport: Transporte a usar en lugar de UrllibTransport
        """
        settings = Settings.from_env(environ)
        configure_logging(settings)
        return cls(settings, transport=transport)

    # =========================================================================
    # INFRAESTRUCTURA
    # =========================================================================

    @property
    def gateway(self) -> RemoteGateway:
        """Cliente de la API remota."""
        if self._gateway is None:
            transport = self._transport or UrllibTransport(
                self.settings.api_url, timeout=self.settings.api_timeout
            )
            self._gateway = RemoteGateway(transport)
        return self._gateway

    # =========================================================================
    # ESTADO COMPARTIDO
    # =========================================================================

    @property
    def store(self) -> EntityStore:
        """Estado de entidades compartido por todas las vistas."""
        if self._store is None:
            self._store = EntityStore()
        return self._store

    @property
    def cart(self) -> Cart:
        """Carrito compartido por todas las vistas."""
        if self._cart is None:
            self._cart = Cart()
        return self._cart

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def product_service(self) -> ProductService:
        if self._product_service is None:
            self._product_service = ProductService(self.gateway, self.store)
        return self._product_service

    @property
    def provider_service(self) -> ProviderService:
        if self._provider_service is None:
            self._provider_service = ProviderService(self.gateway, self.store)
        return self._provider_service

    @property
    def user_service(self) -> UserService:
        if self._user_service is None:
            self._user_service = UserService(self.gateway, self.store)
        return self._user_service

    @property
    def sales_service(self) -> SalesService:
        if self._sales_service is None:
            self._sales_service = SalesService(self.gateway, self.store)
        return self._sales_service

    @property
    def sale_committer(self) -> SaleCommitter:
        if self._sale_committer is None:
            self._sale_committer = SaleCommitter(self.gateway, self.store, self.cart)
        return self._sale_committer

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def shutdown(self) -> None:
        """Cierre del proceso: deja en el log el resumen de tiempos."""
        if profiling.is_enabled():
            profiling.log_function_stats_report()

    def reset(self) -> None:
        """
        Descarta el estado y los servicios construidos.
        Las vistas deben volver a pedir store/cart después de esto.
        """
        self._store = None
        self._cart = None
        self._product_service = None
        self._provider_service = None
        self._user_service = None
        self._sales_service = None
        self._sale_committer = None
