"""
Abstracción de agentes de simulación.

Un agente es una unidad de comportamiento que el simulador ejecuta una vez
por tick, sin conocer su tipo concreto. `SimulationAgent` define la
capacidad completa; `AgentDefaults` aporta los comportamientos por defecto
de todo agente salvo `step`, que cada agente concreto debe implementar.

Uso típico:

    class MyAgent(AgentDefaults, SimulationAgent):
        def step(self, context) -> bool:
            ...
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict

from src.utils.config import AgentConfig

logger = logging.getLogger(__name__)


class AgentConfigurationError(ValueError):
    """El string de parámetros de un agente es inválido."""


class AgentBindingError(RuntimeError):
    """Se intentó asociar un agente a una segunda simulación."""


def parse_parameters(params: str) -> Dict[str, str]:
    """
    Interpreta un string de parámetros "clave=valor;clave=valor".

    Args:
        params: String de parámetros (puede ser vacío o None)

    Returns:
        dict: {clave: valor} con espacios recortados

    Raises:
        AgentConfigurationError: Si alguna entrada no tiene la forma clave=valor
    """
    result = {}
    if not params:
        return result

    for entry in params.split(AgentConfig.PARAM_SEPARATOR):
        entry = entry.strip()
        if not entry:
            continue
        key, sep, value = entry.partition(AgentConfig.KEY_VALUE_SEPARATOR)
        if not sep or not key.strip():
            raise AgentConfigurationError(f"Parámetro mal formado: '{entry}'")
        result[key.strip()] = value.strip()

    return result


class SimulationAgent(ABC):
    """
    Capacidad de un agente enchufable al simulador.

    Ciclo de vida: sin asociar -> asociado (bind_to_simulation) ->
    ejecutando step() mientras is_finished() sea False -> terminado.
    """

    @abstractmethod
    def configure(self, params: str):
        """Recibe el string de parámetros específico del agente."""

    @abstractmethod
    def bind_to_simulation(self, context):
        """Asocia el agente a la simulación que lo ejecuta."""

    @abstractmethod
    def step(self, context) -> bool:
        """
        Ejecuta un paso de simulación.

        Args:
            context: Simulación en curso (el mismo objeto pasado a bind)

        Returns:
            bool: True si el agente necesita que la simulación continúe
        """

    @abstractmethod
    def is_finished(self) -> bool:
        """True si el agente ya no necesita más pasos."""


class AgentDefaults:
    """
    Implementaciones por defecto para SimulationAgent.

    No implementa step(): todo agente concreto debe proveerlo.
    """

    simulation = None

    def configure(self, params: str):
        """No hace nada (ignora el parámetro)."""

    def bind_to_simulation(self, context):
        """
        Guarda la simulación en `self.simulation`.

        La asociación es única: volver a asociar a otra simulación falla.

        Raises:
            AgentBindingError: Si ya estaba asociado a otro contexto
        """
        if self.simulation is not None and self.simulation is not context:
            raise AgentBindingError(f"{self} ya está asociado a otra simulación")
        self.simulation = context

    def is_bound(self) -> bool:
        return self.simulation is not None

    def is_finished(self) -> bool:
        """Siempre retorna True."""
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bound={self.is_bound()})"
