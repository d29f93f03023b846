# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide el tiempo de las llamadas a la API remota sin afectar al usuario.
# Las llamadas lentas se registran en el log (WARNING / ERROR) y se
# acumulan estadísticas en memoria por nombre de función.
#
# ACTIVAR/DESACTIVAR: configure_profiling(settings) o POS_ENABLE_PROFILING
# ==============================================================================

import logging
import threading
import time
from collections import defaultdict
from functools import wraps

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

_config = {
    'enabled': True,
    'warning_ms': 300.0,   # Advertencia si supera 300ms
    'critical_ms': 700.0,  # Crítico si supera 700ms
}

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()


def configure_profiling(settings):
    """Aplica los umbrales y el flag de activación de Settings."""
    _config['enabled'] = settings.enable_profiling
    _config['warning_ms'] = float(settings.slow_call_warning_ms)
    _config['critical_ms'] = float(settings.slow_call_critical_ms)


def is_enabled():
    return _config['enabled']


# ═══════════════════════════════════════════════════════════════════════════
# DECORADOR
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de funciones críticas.

    Uso:
        @profile_function
        def mi_funcion():
            ...

        @profile_function(name="POST /api/ventas")
        def create_sale():
            ...

    Registra cantidad de llamadas, tiempo promedio y tiempo máximo.
    El flag se consulta en cada llamada, así configure_profiling()
    tiene efecto sobre funciones ya decoradas.
    """
    def decorator(fn):
        func_name = name or fn.__qualname__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not _config['enabled']:
                return fn(*args, **kwargs)
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                record_call(func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def record_call(func_name, elapsed_ms):
    """Acumula una medición y loguea si supera los umbrales."""
    with _stats_lock:
        stats = _function_stats[func_name]
        stats['calls'] += 1
        stats['total_time'] += elapsed_ms
        if elapsed_ms > stats['max_time']:
            stats['max_time'] = elapsed_ms

    if elapsed_ms >= _config['critical_ms']:
        logger.error("[CRÍTICO] %s tardó %.0f ms (umbral %.0f ms)",
                     func_name, elapsed_ms, _config['critical_ms'])
    elif elapsed_ms >= _config['warning_ms']:
        logger.warning("[LENTO] %s tardó %.0f ms (umbral %.0f ms)",
                       func_name, elapsed_ms, _config['warning_ms'])
    else:
        logger.debug("%s: %.0f ms", func_name, elapsed_ms)


# ═══════════════════════════════════════════════════════════════════════════
# REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def log_function_stats_report():
    """Escribe en el log un resumen ordenado por tiempo promedio."""
    stats = get_function_stats()
    for func_name, data in sorted(stats.items(), key=lambda x: x[1]['avg_time'], reverse=True):
        logger.info("%s: %d llamadas, promedio %.0f ms, máximo %.0f ms",
                    func_name, data['calls'], data['avg_time'], data['max_time'])


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'configure_profiling',
    'is_enabled',
    'profile_function',
    'record_call',
    'get_function_stats',
    'log_function_stats_report',
    'reset_stats',
]
