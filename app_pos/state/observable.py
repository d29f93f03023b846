# ==============================================================================
# OBSERVADORES - Suscripción a cambios de estado
# ==============================================================================
# Base compartida por EntityCollection y Cart. Las vistas se suscriben
# y reciben el snapshot nuevo después de cada mutación efectiva.
# ==============================================================================

import logging
import threading
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class Observable:
    """
    Mantiene la lista de suscriptores y serializa las mutaciones.

    Las notificaciones se entregan de forma síncrona, en orden de
    suscripción, mientras se mantiene el lock de la mutación: así cada
    observador ve los snapshots en el mismo orden en que ocurrieron.
    Un observador que falla se registra en el log y no deshace la
    mutación ni impide que los demás sean notificados.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._subscribers: List[Callable[..., Any]] = []

    def subscribe(self, callback: Callable[..., Any]) -> Callable[[], None]:
        """
        Registra un observador.

        Returns:
            Función sin argumentos que cancela la suscripción
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, *args: Any) -> None:
        with self._lock:
            for callback in list(self._subscribers):
                try:
                    callback(*args)
                except Exception:
                    logger.exception(
                        "Observador %r falló al procesar una notificación", callback
                    )
