# ==============================================================================
# CONFIGURACIÓN
# ==============================================================================
# Todo se lee de variables de entorno al iniciar el proceso:
#
#   POS_API_URL               URL base de la API remota
#   POS_API_TIMEOUT           Timeout de cada request (segundos)
#   POS_ENABLE_PROFILING      1/0 - mide tiempos de las llamadas a la API
#   POS_SLOW_CALL_WARNING_MS  Umbral de advertencia (ms)
#   POS_SLOW_CALL_CRITICAL_MS Umbral crítico (ms)
#   POS_LOG_LEVEL             DEBUG, INFO, WARNING...
# ==============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'http://localhost:3000'
DEFAULT_TIMEOUT = 10.0
DEFAULT_WARNING_MS = 300
DEFAULT_CRITICAL_MS = 700

_TRUE_VALUES = ('1', 'true', 'yes', 'si', 'sí', 'on')


def _read_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("%s=%r no es un número, usando %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    """Configuración del cliente."""
    api_url: str = DEFAULT_API_URL
    api_timeout: float = DEFAULT_TIMEOUT
    enable_profiling: bool = True
    slow_call_warning_ms: float = DEFAULT_WARNING_MS
    slow_call_critical_ms: float = DEFAULT_CRITICAL_MS
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """
        Construye la configuración desde variables de entorno.

        Args:
            environ: Mapeo a usar en lugar de os.environ (útil para tests)
        """
        env = os.environ if environ is None else environ
        profiling = env.get('POS_ENABLE_PROFILING', '1').strip().lower() in _TRUE_VALUES
        return cls(
            api_url=(env.get('POS_API_URL') or DEFAULT_API_URL).rstrip('/'),
            api_timeout=_read_float(env, 'POS_API_TIMEOUT', DEFAULT_TIMEOUT),
            enable_profiling=profiling,
            slow_call_warning_ms=_read_float(env, 'POS_SLOW_CALL_WARNING_MS', DEFAULT_WARNING_MS),
            slow_call_critical_ms=_read_float(env, 'POS_SLOW_CALL_CRITICAL_MS', DEFAULT_CRITICAL_MS),
            log_level=(env.get('POS_LOG_LEVEL') or 'INFO').upper(),
        )


def configure_logging(settings: Settings) -> None:
    """Configura el logging raíz una sola vez, al iniciar la app."""
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
