"""
Configuración global del simulador de colas por nodo.

Este módulo contiene las constantes y parámetros de configuración
utilizados en el proyecto.
"""

import logging
from pathlib import Path

# Rutas del proyecto
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
NETWORKS_DIR = DATA_DIR / "networks"

# Archivos de datos
SAMPLE_NETWORK_FILE = NETWORKS_DIR / "pocitos_corridor.json"


# Parámetros del simulador
class SimulatorConfig:
    """Configuración del simulador por ticks."""

    DEFAULT_NODE_DELAY = 1  # ticks que un vehículo pasa en un nodo
    DEFAULT_MAX_TICKS = 1000  # tope de seguridad para run()
    RECORD_HISTORY = True  # guardar métricas por tick


# Parámetros de agentes
class AgentConfig:
    """Configuración por defecto de los agentes incluidos."""

    PARAM_SEPARATOR = ";"
    KEY_VALUE_SEPARATOR = "="

    # TrafficSourceAgent
    DEFAULT_SPAWN_RATE = 0.5  # vehículos por tick (media de Poisson)
    DEFAULT_SEED = 42

    # TickLimitAgent
    DEFAULT_TICK_LIMIT = 100


# Logging
class LoggingConfig:
    """Configuración de logging."""

    LOG_LEVEL = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE = PROJECT_ROOT / "simulation.log"


def setup_logging(level: str = LoggingConfig.LOG_LEVEL, log_to_file: bool = False):
    """
    Configura el logging raíz según LoggingConfig.

    Args:
        level: Nivel de logging ("DEBUG", "INFO", ...)
        log_to_file: Si True, además escribe en LoggingConfig.LOG_FILE
    """
    handlers = [logging.StreamHandler()]
    if log_to_file:
        handlers.append(logging.FileHandler(LoggingConfig.LOG_FILE, encoding='utf-8'))

    logging.basicConfig(level=level, format=LoggingConfig.LOG_FORMAT,
                        handlers=handlers, force=True)

